# frame_fea - Linear static analysis of 3D beam frames
"""
FRAME-FEA: Linear-Elastic 3D Frame Analysis
===========================================

This package provides:
- 3D Euler-Bernoulli beam elements (12x12 stiffness, 6 DOF/node)
- Global assembly, boundary condition reduction and direct solve
- Stress/strain recovery per element and support reactions
- Model validation, preset models and analytic verification cases

ARCHITECTURE:
-------------
    kernel/         DOF indexing, assembly, reduction and solve
    vector.py       3D vector arithmetic for local frames
    model.py        Node, Material, BeamSection, BeamElement, Load, Model
    elements.py     BeamElementAnalysis (per-element stiffness and recovery)
    engine.py       FEAEngine (solve_static pipeline and cached result)
    results.py      AnalysisResult and per-element result records
    validation.py   Caller-side model validation and statistics
    builder.py      ModelBuilder and preset models
    verification.py Closed-form verification cases
"""

from .errors import (
    FEAError,
    ContractViolationError,
    DegenerateGeometryError,
    MissingReferenceError,
    SingularMatrixError,
    ZeroLengthElementError,
)
from .model import (
    Vector3D,
    FixedDOF,
    Node,
    Material,
    BeamSection,
    BeamElement,
    Load,
    Model,
    AnalysisSettings,
)
from .elements import BeamElementAnalysis
from .engine import FEAEngine
from .results import AnalysisResult, ElementResult, BendingMoments

__version__ = "0.1.0"

__all__ = [
    'FEAError', 'ContractViolationError', 'DegenerateGeometryError', 'MissingReferenceError',
    'SingularMatrixError', 'ZeroLengthElementError',
    'Vector3D', 'FixedDOF', 'Node', 'Material', 'BeamSection', 'BeamElement',
    'Load', 'Model', 'AnalysisSettings',
    'BeamElementAnalysis', 'FEAEngine',
    'AnalysisResult', 'ElementResult', 'BendingMoments',
]
