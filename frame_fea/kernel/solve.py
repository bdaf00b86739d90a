# frame_fea/kernel/solve.py
"""Boundary-condition reduction, direct solve, and expansion back to all DOFs."""

from typing import List, Optional, Tuple

import numpy as np
import scipy.linalg

from ..config import CONFIG
from ..errors import ContractViolationError, SingularMatrixError


def reduce_system(
    K: Optional[np.ndarray],
    F: Optional[np.ndarray],
    fixed_dofs: List[int],
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Remove fixed DOFs from K and F by partitioning.

    Args:
        K: Global stiffness matrix (ndof x ndof)
        F: Global load vector (ndof,)
        fixed_dofs: Constrained DOF indices (displacement = 0)

    Returns:
        Kff: Reduced stiffness matrix (nfree x nfree)
        Ff: Reduced load vector (nfree,)
        free: Array of free DOF indices, ascending

    Raises:
        ContractViolationError: If K or F has not been assembled
    """
    if K is None or F is None:
        raise ContractViolationError(
            "Global stiffness matrix and load vector must be assembled "
            "before boundary conditions are applied"
        )
    ndof = K.shape[0]
    if K.shape != (ndof, ndof) or F.shape != (ndof,):
        raise ContractViolationError(
            f"Incompatible system: K has shape {K.shape}, F has shape {F.shape}"
        )

    fixed = set(fixed_dofs)
    free = np.array([i for i in range(ndof) if i not in fixed], dtype=int)

    Kff = K[np.ix_(free, free)]
    Ff = F[free]
    return Kff, Ff, free


def solve_reduced(
    Kff: np.ndarray,
    Ff: np.ndarray,
    cond_limit: float = CONFIG.cond_limit,
) -> np.ndarray:
    """
    Solve Kff * df = Ff by LU decomposition.

    Args:
        Kff: Reduced stiffness matrix
        Ff: Reduced load vector
        cond_limit: Max condition number before the matrix counts as singular

    Returns:
        df: Free-DOF displacements

    Raises:
        SingularMatrixError: If Kff is singular or ill-conditioned
            (unsupported rigid-body motion, disconnected members)
    """
    if Kff.shape[0] == 0:
        return np.zeros(0, dtype=float)

    try:
        cond = np.linalg.cond(Kff)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            f"Stiffness matrix is singular. Check boundary conditions. ({e})"
        ) from e
    if not np.isfinite(cond) or cond > cond_limit:
        raise SingularMatrixError(
            f"Stiffness matrix is singular (cond={cond:.2e}). Check boundary conditions."
        )

    try:
        lu, piv = scipy.linalg.lu_factor(Kff, check_finite=True)
        df = scipy.linalg.lu_solve((lu, piv), Ff)
    except (np.linalg.LinAlgError, ValueError) as e:
        raise SingularMatrixError(
            f"Stiffness matrix is singular. Check boundary conditions. ({e})"
        ) from e

    if not np.all(np.isfinite(df)):
        raise SingularMatrixError(
            "Stiffness matrix is singular (non-finite displacements). Check boundary conditions."
        )
    return df


def expand_displacements(ndof: int, free: np.ndarray, df: np.ndarray) -> np.ndarray:
    """Full displacement vector with zeros at every fixed DOF."""
    d = np.zeros(ndof, dtype=float)
    d[free] = df
    return d
