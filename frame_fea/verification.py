# frame_fea/verification.py
"""
VERIFICATION CASES: FEA vs Closed-Form Beam Theory
==================================================

Three textbook problems with known answers, each buildable at any mesh
density:

1. SIMPLE TENSION
   L = 2.0 m, A = 0.01 m^2, E = 200 GPa, P = 10 kN axial at the free end
       sigma = P/A = 1.0 MPa
       eps   = sigma/E = 5.0e-6
       delta = eps*L = 1.0e-5 m

2. CANTILEVER BENDING
   L = 3.0 m, 200x400 mm rectangle (Iz = 2.667e-4 m^4, c = 0.2 m),
   P = 5 kN in -y at the tip
       M_max = P*L = 15 kN*m           (fixed end)
       sigma = M_max*c/Iz = 11.25 MPa
       delta = P*L^3/(3*E*Iz) = 8.44e-4 m

3. THREE-POINT BENDING
   L = 4.0 m, H-200x100x5.5x8 (Iz = 1.7e-6 m^4, c = 0.1 m),
   P = 10 kN in -y at midspan, pin + roller
       M_max = P*L/4 = 10 kN*m
       sigma = M_max*c/Iz
       delta = P*L^3/(48*E*Iz)

Cubic beam elements reproduce nodal displacements and end moments of
point-loaded beams exactly, so all three cases should agree to round-off
at any mesh density.
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd

from .builder import ModelBuilder
from .config import CONFIG
from .engine import FEAEngine
from .model import Model

E_STEEL = 200e9

TENSION_L = 2.0
TENSION_A = 0.01
TENSION_P = 10000.0

CANTILEVER_L = 3.0
CANTILEVER_P = 5000.0
CANTILEVER_IZ = 2.667e-4
CANTILEVER_C = 0.4 / 2

THREE_POINT_L = 4.0
THREE_POINT_P = 10000.0
THREE_POINT_IZ = 1.7e-6
THREE_POINT_C = 0.2 / 2


def _steel(b: ModelBuilder):
    return b.add_material("Structural steel SS400", E_STEEL, 0.3, 7850, 235e6)


def _line_of_nodes(b: ModelBuilder, length: float, divisions: int):
    if divisions < 1:
        raise ValueError(f"divisions must be >= 1, got {divisions}")
    seg = length / divisions
    return [b.add_node(i * seg, 0, 0) for i in range(divisions + 1)]


def simple_tension_case(divisions: int = 1) -> Model:
    """Bar fixed at x=0, axial load P at x=L."""
    b = ModelBuilder()
    steel = _steel(b)
    sec = b.add_section("Square 100x100", A=TENSION_A, Iy=8.33e-6, Iz=8.33e-6, J=1.67e-5)

    nodes = _line_of_nodes(b, TENSION_L, divisions)
    b.set_node_fixity(nodes[0].id)
    for a, c in zip(nodes[:-1], nodes[1:]):
        b.add_element(a.id, c.id, steel.id, sec.id)

    b.add_load(nodes[-1].id, fx=TENSION_P)
    return b.build()


def cantilever_case(divisions: int = 1) -> Model:
    """Cantilever fixed at x=0, tip load P in -y."""
    b = ModelBuilder()
    steel = _steel(b)
    sec = b.add_section("Rectangle 200x400", A=0.08, Iy=1.067e-3, Iz=CANTILEVER_IZ, J=5.33e-4)

    nodes = _line_of_nodes(b, CANTILEVER_L, divisions)
    b.set_node_fixity(nodes[0].id)
    for a, c in zip(nodes[:-1], nodes[1:]):
        b.add_element(a.id, c.id, steel.id, sec.id)

    b.add_load(nodes[-1].id, fy=-CANTILEVER_P)
    return b.build()


def three_point_bending_case(divisions: int = 4) -> Model:
    """
    Simply supported beam with a midspan point load.

    Left support is a pin (translations and torsion held). The right
    support is a roller in x: it holds y and z translation, otherwise the
    beam could swing about the pin in the x-z plane.

    Raises:
    -------
    ValueError
        If divisions is not a positive even number (no midspan node)
    """
    if divisions < 2 or divisions % 2:
        raise ValueError(f"divisions must be a positive even number, got {divisions}")

    b = ModelBuilder()
    steel = _steel(b)
    sec = b.add_section(
        "H-200x100x5.5x8", A=2.28e-3, Iy=1.8e-5, Iz=THREE_POINT_IZ, J=4.7e-7,
        c_y=THREE_POINT_C, c_z=0.1 / 2,
    )

    nodes = _line_of_nodes(b, THREE_POINT_L, divisions)
    b.set_node_fixity(nodes[0].id, dx=True, dy=True, dz=True, rx=True, ry=False, rz=False)
    b.set_node_fixity(nodes[-1].id, dx=False, dy=True, dz=True, rx=False, ry=False, rz=False)
    for a, c in zip(nodes[:-1], nodes[1:]):
        b.add_element(a.id, c.id, steel.id, sec.id)

    b.add_load(nodes[divisions // 2].id, fy=-THREE_POINT_P)
    return b.build()


def theoretical_values() -> Dict[str, Dict[str, float]]:
    """Closed-form answers for the three cases (mesh independent)."""
    tension_stress = TENSION_P / TENSION_A
    cantilever_moment = CANTILEVER_P * CANTILEVER_L
    three_point_moment = THREE_POINT_P * THREE_POINT_L / 4
    return {
        'simple_tension': {
            'stress': tension_stress,
            'strain': tension_stress / E_STEEL,
            'displacement': tension_stress / E_STEEL * TENSION_L,
        },
        'cantilever': {
            'max_moment': cantilever_moment,
            'stress': cantilever_moment * CANTILEVER_C / CANTILEVER_IZ,
            'displacement': CANTILEVER_P * CANTILEVER_L**3 / (3 * E_STEEL * CANTILEVER_IZ),
        },
        'three_point_bending': {
            'max_moment': three_point_moment,
            'stress': three_point_moment * THREE_POINT_C / THREE_POINT_IZ,
            'displacement': THREE_POINT_P * THREE_POINT_L**3 / (48 * E_STEEL * THREE_POINT_IZ),
        },
    }


def computed_values(divisions: int = 2) -> Dict[str, Dict[str, float]]:
    """
    Solve each case and extract the quantities listed in theoretical_values().

    Displacements are reported as magnitudes at the tip (tension,
    cantilever) or at midspan (three-point bending).
    """
    out = {}

    model = simple_tension_case(divisions)
    res = FEAEngine(model).solve_static()
    out['simple_tension'] = {
        'stress': float(res.stresses.max()),
        'strain': float(res.strains.max()),
        'displacement': float(abs(res.displacement(model.nodes[-1].id)[0])),
    }

    model = cantilever_case(divisions)
    res = FEAEngine(model).solve_static()
    out['cantilever'] = {
        'max_moment': float(max(m.my for m in res.moments)),
        'stress': float(res.stresses.max()),
        'displacement': float(abs(res.displacement(model.nodes[-1].id)[1])),
    }

    n3 = divisions if divisions % 2 == 0 else divisions + 1
    model = three_point_bending_case(n3)
    res = FEAEngine(model).solve_static()
    out['three_point_bending'] = {
        'max_moment': float(max(m.my for m in res.moments)),
        'stress': float(res.stresses.max()),
        'displacement': float(abs(res.displacement(model.nodes[n3 // 2].id)[1])),
    }
    return out


def run_verification(divisions: int = 2, tolerance: Optional[float] = None) -> pd.DataFrame:
    """
    Compare FEA against theory for every case and quantity.

    Returns:
    --------
    pd.DataFrame
        Columns: case, quantity, computed, theoretical, relative_error, passed
    """
    if tolerance is None:
        tolerance = CONFIG.stress_tolerance

    theory = theoretical_values()
    fea = computed_values(divisions)

    rows = []
    for case, quantities in theory.items():
        for quantity, expected in quantities.items():
            got = fea[case][quantity]
            rel = abs(got - expected) / abs(expected)
            rows.append({
                'case': case,
                'quantity': quantity,
                'computed': got,
                'theoretical': expected,
                'relative_error': rel,
                'passed': bool(rel <= tolerance),
            })
    df = pd.DataFrame(rows)
    df['relative_error'] = df['relative_error'].astype(np.float64)
    return df
