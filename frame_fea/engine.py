# frame_fea/engine.py
"""
FEA ENGINE: Linear Static Analysis of a 3D Frame
================================================

PIPELINE:
---------
    assemble K  ->  assemble F  ->  reduce by fixed DOFs  ->  LU solve
        ->  expand to all DOFs  ->  element recovery  ->  reactions

Each phase returns its value rather than storing it on the engine. The
only state kept between calls is the result of the last successful
solve, which backs get_element_stress_data() and get_stress_range().

A single FEAEngine must not be used from several threads at once.
Concurrent callers should each build their own engine.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .config import CONFIG, SolverConfig
from .elements import BeamElementAnalysis
from .kernel.assemble import assemble_global_K, assemble_global_F
from .kernel.dof import DOFManager
from .kernel.solve import reduce_system, solve_reduced, expand_displacements
from .model import AnalysisSettings, Model
from .results import AnalysisResult

logger = logging.getLogger(__name__)


@dataclass
class ReducedSystem:
    """Stiffness and load restricted to the free DOFs."""
    K: np.ndarray
    F: np.ndarray
    free_dofs: np.ndarray
    fixed_dofs: List[int]


class FEAEngine:
    """
    Linear static solver for a frame Model.

    Parameters:
    -----------
    model : Model
        Populated model. Referential integrity is checked lazily: a
        dangling id raises MissingReferenceError during the solve.
    settings : AnalysisSettings, optional
        Only static analysis is performed; other options are ignored.
    config : SolverConfig, optional
        Numerical thresholds (axis tolerance, singularity limit, ...)

    Example:
    --------
    >>> engine = FEAEngine(model, AnalysisSettings())
    >>> result = engine.solve_static()
    >>> result.displacement(tip_id)
    array([ 0.0e+00, -8.4e-04,  0.0e+00])
    >>> engine.get_stress_range()
    {'min': 0.0, 'max': 11250000.0}
    """

    def __init__(
        self,
        model: Model,
        settings: Optional[AnalysisSettings] = None,
        config: SolverConfig = CONFIG,
    ):
        self.model = model
        self.settings = settings if settings is not None else AnalysisSettings()
        self.config = config
        self.dof = DOFManager.from_nodes(model.nodes, config.dof_per_node)
        self.result: Optional[AnalysisResult] = None

        if self.settings.analysis_type != 'static':
            logger.warning(
                "Analysis type '%s' is not supported; running linear static analysis",
                self.settings.analysis_type,
            )
        if self.settings.include_geometric_nonlinearity or self.settings.include_material_nonlinearity:
            logger.warning("Nonlinearity flags are ignored; running linear static analysis")

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def element_analyses(self) -> List[BeamElementAnalysis]:
        """One BeamElementAnalysis per element, in model order."""
        index = self.model.index()
        analyses = []
        for element in self.model.elements:
            node_i, node_j, material, section = index.element_parts(element)
            analyses.append(
                BeamElementAnalysis(element, node_i, node_j, material, section, self.config)
            )
        return analyses

    def assemble_global_stiffness_matrix(
        self, analyses: Optional[List[BeamElementAnalysis]] = None
    ) -> np.ndarray:
        """Global (6N x 6N) stiffness matrix, element quadrants accumulated."""
        if analyses is None:
            analyses = self.element_analyses()
        contributions = []
        for bea in analyses:
            dof_map = self.dof.element_dof_map(list(bea.element.node_ids))
            contributions.append((dof_map, bea.global_stiffness_matrix()))
        return assemble_global_K(self.dof.ndof(), contributions)

    def assemble_global_force_vector(self) -> np.ndarray:
        """Global (6N) load vector: forces at offsets 0-2, moments at 3-5."""
        index = self.model.index()
        nodal_loads = []
        for load in self.model.loads:
            node = index.node(load.node_id, owner=f"load {load.id}")
            vec = np.concatenate([load.force.as_array(), load.moment.as_array()])
            nodal_loads.append((self.dof.idx(node.id, 0), vec))
        return assemble_global_F(self.dof.ndof(), nodal_loads)

    def apply_boundary_conditions(
        self, K: Optional[np.ndarray], F: Optional[np.ndarray]
    ) -> ReducedSystem:
        """
        Restrict K and F to the free DOFs.

        Raises:
        -------
        ContractViolationError
            If K or F is None (not yet assembled)
        """
        fixed = self.dof.fixed_dofs(self.model.nodes)
        Kff, Ff, free = reduce_system(K, F, fixed)
        return ReducedSystem(K=Kff, F=Ff, free_dofs=free, fixed_dofs=fixed)

    # ------------------------------------------------------------------
    # Solve
    # ------------------------------------------------------------------

    def solve_static(self) -> AnalysisResult:
        """
        Run the full linear static analysis and cache the result.

        Raises:
        -------
        MissingReferenceError
            Element or load refers to a nonexistent node/material/section
        ZeroLengthElementError
            An element connects coincident nodes
        DegenerateGeometryError
            Non-finite node coordinates, or a member too short for its
            local axes to be defined
        SingularMatrixError
            Supports do not prevent rigid-body motion, or the model has
            disconnected parts
        """
        self.result = None
        logger.debug(
            "Static solve: %d nodes, %d elements, %d loads",
            len(self.model.nodes), len(self.model.elements), len(self.model.loads),
        )

        analyses = self.element_analyses()
        K = self.assemble_global_stiffness_matrix(analyses)
        F = self.assemble_global_force_vector()

        reduced = self.apply_boundary_conditions(K, F)
        logger.debug(
            "Reduced system: %d free DOFs, %d fixed DOFs",
            len(reduced.free_dofs), len(reduced.fixed_dofs),
        )

        df = solve_reduced(reduced.K, reduced.F, self.config.cond_limit)
        d = expand_displacements(self.dof.ndof(), reduced.free_dofs, df)

        result = AnalysisResult(
            node_ids=tuple(n.id for n in self.model.nodes),
            element_ids=tuple(e.id for e in self.model.elements),
            displacements=self._nodal_translations(d),
            elements=tuple(self._element_results(analyses, d)),
            reactions=self._reactions(K, d, offset=0),
            reaction_moments=self._reactions(K, d, offset=3),
            dof_displacements=d,
        )
        self.result = result
        logger.debug("Static solve finished: max |u| = %.3e m", result.max_displacement())
        return result

    def _nodal_translations(self, d: np.ndarray) -> np.ndarray:
        n = self.dof.dof_per_node
        return d.reshape(-1, n)[:, 0:3].copy()

    def _element_results(self, analyses: List[BeamElementAnalysis], d: np.ndarray):
        results = []
        for bea in analyses:
            dof_map = self.dof.element_dof_map(list(bea.element.node_ids))
            results.append(bea.calculate_stress_strain(d[dof_map]))
        return results

    def _reactions(self, K: np.ndarray, d: np.ndarray, offset: int) -> np.ndarray:
        """Rows of K @ d at fixed nodes (3 components from `offset`); zero elsewhere."""
        R = np.zeros((self.dof.n_nodes, 3), dtype=float)
        for node in self.model.nodes:
            if not node.is_fixed:
                continue
            first = self.dof.idx(node.id, offset)
            R[self.dof.position(node.id)] = K[first:first + 3, :] @ d
        return R

    # ------------------------------------------------------------------
    # Queries on the last result
    # ------------------------------------------------------------------

    def get_element_stress_data(self) -> List[Dict[str, float]]:
        """[{'element_id', 'stress'}] per element; empty before any solve."""
        if self.result is None:
            return []
        return [
            {'element_id': eid, 'stress': r.stress}
            for eid, r in zip(self.result.element_ids, self.result.elements)
        ]

    def get_stress_range(self) -> Dict[str, float]:
        """{'min', 'max'} stress; zeros before any solve or without elements."""
        if self.result is None:
            return {'min': 0.0, 'max': 0.0}
        return self.result.stress_range()
