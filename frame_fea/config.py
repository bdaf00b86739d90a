# frame_fea/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass


@dataclass
class SolverConfig:
    """Numerical settings shared by the element and engine code."""

    # Node layout: ux, uy, uz, rx, ry, rz
    dof_per_node: int = 6

    # Local axis construction: vertical / parallel detection threshold
    axis_tolerance: float = 1e-6

    # Elements shorter than this are rejected as degenerate (m)
    min_length: float = 1e-12

    # Reduced stiffness matrices above this condition number are singular
    cond_limit: float = 1e12

    # Relative error accepted by the verification cases
    stress_tolerance: float = 0.05


# Global config instance
CONFIG = SolverConfig()
