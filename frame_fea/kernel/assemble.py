# frame_fea/kernel/assemble.py
"""
ASSEMBLY: Global Matrix and Load Vector
=======================================

PURPOSE:
--------
Scatter-add element contributions into the global stiffness matrix and
nodal loads into the global load vector.

Assembly doesn't care about element type. It needs:
- Total number of DOFs
- For each element: its DOF map and its stiffness matrix in global coords

For a 2-node beam the DOF map has 12 entries, so the element matrix splits
into four 6x6 quadrants (i-i, i-j, j-i, j-j). Entries are ADDED, never
overwritten, so elements sharing a node combine correctly.

USAGE:
------
    contributions = []
    for element in elements:
        dof_map = dof.element_dof_map([element.node_i, element.node_j])
        ke = BeamElementAnalysis(...).global_stiffness_matrix()
        contributions.append((dof_map, ke))

    K = assemble_global_K(dof.ndof(), contributions)
"""

from typing import List, Tuple

import numpy as np


def assemble_global_K(
    ndof: int,
    contributions: List[Tuple[List[int], np.ndarray]]
) -> np.ndarray:
    """
    Assemble global stiffness matrix from element contributions.

    ALGORITHM:
    ----------
    K = zeros(ndof x ndof)
    for each element:
        K[dof_map, dof_map] += ke

    Parameters:
    -----------
    ndof : int
        Total number of DOFs in the system (6 x n_nodes)
    contributions : List[Tuple[List[int], np.ndarray]]
        (dof_map, ke) per element; ke must be len(dof_map) square

    Returns:
    --------
    np.ndarray
        Global stiffness matrix K, shape (ndof, ndof). Symmetric positive
        semi-definite (becomes PD after sufficient supports are applied).
    """
    K = np.zeros((ndof, ndof), dtype=float)

    for dof_map, ke in contributions:
        n_element_dofs = len(dof_map)

        assert ke.shape == (n_element_dofs, n_element_dofs), \
            f"Element ke shape {ke.shape} doesn't match dof_map length {n_element_dofs}"

        idx = np.asarray(dof_map, dtype=int)
        # np.add.at accumulates correctly even if an index repeats
        np.add.at(K, np.ix_(idx, idx), ke)

    return K


def add_nodal_load(
    F: np.ndarray,
    first_dof: int,
    load_vector: np.ndarray,
) -> None:
    """
    Add a nodal load to the global load vector (in-place).

    Parameters:
    -----------
    F : np.ndarray
        Global load vector (modified in-place)
    first_dof : int
        Global index of the node's first DOF (ux)
    load_vector : np.ndarray
        [Fx, Fy, Fz, Mx, My, Mz]

    Example:
    --------
    >>> F = np.zeros(12)
    >>> add_nodal_load(F, 6, np.array([1000.0, 0, 0, 0, 0, 0]))
    >>> F[6]
    1000.0
    """
    for i, val in enumerate(load_vector):
        F[first_dof + i] += val


def assemble_global_F(
    ndof: int,
    nodal_loads: List[Tuple[int, np.ndarray]]
) -> np.ndarray:
    """
    Assemble the global load vector from (first_dof, load_vector) pairs.

    Several loads on the same node simply add up.
    """
    F = np.zeros(ndof, dtype=float)
    for first_dof, load_vector in nodal_loads:
        add_nodal_load(F, first_dof, load_vector)
    return F
