# frame_fea/results.py
"""
ANALYSIS RESULTS
================

Result containers produced by FEAEngine.solve_static():

- BendingMoments: the governing end moments of one element
- ElementResult: stress/strain recovery output for one element
- AnalysisResult: everything from one solve (immutable)

MOMENT NAMING:
--------------
The two bending fields are named after the load direction that produces
them, not after the axis the moment vector points along:

    my  = max(|Mz_i|, |Mz_j|)   bending in the local x-y plane, governed by Iz
    mz  = max(|My_i|, |My_j|)   bending in the local x-z plane, governed by Iy

So a horizontal beam loaded in global -y reports its bending moment in
`my`, and that moment is checked against Iz.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class BendingMoments:
    """Larger-magnitude end moments of an element (see module docstring)."""
    my: float
    mz: float


@dataclass(frozen=True)
class ElementResult:
    """
    Recovered internal state of one element.

    stress : float
        |axial stress| + combined bending stress (Pa), always >= 0
    strain : float
        Axial strain (positive = elongation)
    axial_force : float
        N, positive = tension
    moments : BendingMoments
        Governing end moments (N*m), magnitudes
    """
    stress: float
    strain: float
    axial_force: float
    moments: BendingMoments
    axial_stress: float = 0.0
    bending_stress: float = 0.0


def _frozen(a) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.flags.writeable = False
    return a


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """
    Output of one linear static solve.

    Attributes:
    -----------
    node_ids : Tuple[int, ...]
        Node ids in model order (row order of the nodal arrays)
    element_ids : Tuple[int, ...]
        Element ids in model order
    displacements : np.ndarray
        Shape (n_nodes, 3): translational displacements ux, uy, uz (m)
    elements : Tuple[ElementResult, ...]
        Per-element recovery, in model order
    reactions : np.ndarray
        Shape (n_nodes, 3): support forces; zero rows for free nodes
    reaction_moments : np.ndarray
        Shape (n_nodes, 3): support moments; zero rows for free nodes
    dof_displacements : np.ndarray
        Shape (6 * n_nodes,): full solution vector including rotations
    """
    node_ids: Tuple[int, ...]
    element_ids: Tuple[int, ...]
    displacements: np.ndarray
    elements: Tuple[ElementResult, ...]
    reactions: np.ndarray
    reaction_moments: np.ndarray
    dof_displacements: np.ndarray

    def __post_init__(self):
        for name in ('displacements', 'reactions', 'reaction_moments', 'dof_displacements'):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @property
    def stresses(self) -> np.ndarray:
        return np.array([e.stress for e in self.elements], dtype=float)

    @property
    def strains(self) -> np.ndarray:
        return np.array([e.strain for e in self.elements], dtype=float)

    @property
    def axial_forces(self) -> np.ndarray:
        return np.array([e.axial_force for e in self.elements], dtype=float)

    @property
    def moments(self) -> List[BendingMoments]:
        return [e.moments for e in self.elements]

    def displacement(self, node_id: int) -> np.ndarray:
        """Translational displacement [ux, uy, uz] of a node."""
        return self.displacements[self.node_ids.index(node_id)]

    def reaction(self, node_id: int) -> np.ndarray:
        return self.reactions[self.node_ids.index(node_id)]

    def element(self, element_id: int) -> ElementResult:
        return self.elements[self.element_ids.index(element_id)]

    def max_displacement(self) -> float:
        """Largest translational displacement magnitude over all nodes (m)."""
        if len(self.node_ids) == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.displacements, axis=1)))

    def stress_range(self) -> Dict[str, float]:
        if not self.elements:
            return {'min': 0.0, 'max': 0.0}
        s = self.stresses
        return {'min': float(s.min()), 'max': float(s.max())}

    def element_table(self) -> pd.DataFrame:
        """One row per element: forces, moments, stress and strain."""
        rows = []
        for eid, r in zip(self.element_ids, self.elements):
            rows.append({
                'element_id': eid,
                'axial_force': r.axial_force,
                'my': r.moments.my,
                'mz': r.moments.mz,
                'axial_stress': r.axial_stress,
                'bending_stress': r.bending_stress,
                'stress': r.stress,
                'strain': r.strain,
            })
        return pd.DataFrame(rows, columns=[
            'element_id', 'axial_force', 'my', 'mz',
            'axial_stress', 'bending_stress', 'stress', 'strain',
        ])

    def node_table(self) -> pd.DataFrame:
        """One row per node: displacements and reactions."""
        d = self.displacements.reshape(-1, 3)
        R = self.reactions.reshape(-1, 3)
        return pd.DataFrame({
            'node_id': list(self.node_ids),
            'ux': d[:, 0],
            'uy': d[:, 1],
            'uz': d[:, 2],
            'Rx': R[:, 0],
            'Ry': R[:, 1],
            'Rz': R[:, 2],
        })
