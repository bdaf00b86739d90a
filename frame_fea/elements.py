# frame_fea/elements.py
"""
3D BEAM ELEMENT: Stiffness, Transformation and Stress Recovery
==============================================================

PURPOSE:
--------
This module computes everything that is local to one 2-node 3D frame
element:
- Length and local axis triad (x along the member)
- 12x12 local stiffness matrix (Euler-Bernoulli)
- 12x12 rotation matrix between global and local DOFs
- 12x12 global stiffness matrix, ke = T^T k T
- Axial force, end moments, stress and strain from solved displacements

DOF ORDER (per node, local):
----------------------------
    0  axial       (u along local x)
    1  shear-y     (v along local y)
    2  shear-z     (w along local z)
    3  torsion     (rotation about local x)
    4  bend-y      (rotation about local y)
    5  bend-z      (rotation about local z)

Node i uses element DOFs 0-5, node j uses 6-11.

ENGINEERING DERIVATION:
-----------------------
Axial and torsion are two-node springs:

    EA/L * [ 1 -1 ]        GJ/L * [ 1 -1 ]
           [-1  1 ]               [-1  1 ]

Bending uses the Hermite cubic beam, once per bending plane. Lateral
displacement v (local y) pairs with rotation about z and is governed by
Iz; lateral displacement w (local z) pairs with rotation about y and is
governed by Iy:

    EI * [ 12/L^3   6/L^2  -12/L^3   6/L^2 ]
         [  6/L^2   4/L     -6/L^2   2/L   ]
         [-12/L^3  -6/L^2   12/L^3  -6/L^2 ]
         [  6/L^2   2/L     -6/L^2   4/L   ]

The x-z plane block has the 6/L^2 coupling terms negated because a
positive rotation about y lowers w.

LOCAL AXES:
-----------
    x = unit vector node_i -> node_j
    z = "up-ish" reference: built from x and global Z, falling back to
        global X for members running along global Y or global Z
    y = z cross x   (right-handed: x cross y = z)
"""

from typing import Sequence, Tuple

import numpy as np

from .config import CONFIG, SolverConfig
from .errors import ContractViolationError, DegenerateGeometryError, ZeroLengthElementError
from .model import BeamElement, BeamSection, Material, Node
from .results import BendingMoments, ElementResult
from .vector import UNIT_X, UNIT_Z, Vector3D


# Element DOF indices of the two bending families
_BEND_XY = (1, 5, 7, 11)   # v_i, rz_i, v_j, rz_j  -> Iz
_BEND_XZ = (2, 4, 8, 10)   # w_i, ry_i, w_j, ry_j  -> Iy


def local_axes(
    node_i: Node,
    node_j: Node,
    axis_tolerance: float = CONFIG.axis_tolerance,
) -> Tuple[Vector3D, Vector3D, Vector3D]:
    """
    Build the orthonormal local triad (ex, ey, ez) of a member.

    The member is treated as running along global Y when both the x and
    z components of node_j - node_i are below `axis_tolerance`; its local
    z then defaults to global X. Otherwise ez is obtained from
    ey0 = normalize(ex cross Z), ez = ey0 cross ex, again falling back to
    global X when ex is parallel to global Z.

    Parameters:
    -----------
    node_i, node_j : Node
        End nodes (must not coincide)
    axis_tolerance : float
        Threshold for the vertical / parallel tests

    Returns:
    --------
    Tuple[Vector3D, Vector3D, Vector3D]
        (ex, ey, ez), unit vectors with ex cross ey = ez

    Raises:
    -------
    DegenerateGeometryError
        If the chosen reference is parallel to ex (a very short member
        along global X passes the global-Y test)

    Example:
    --------
    >>> ex, ey, ez = local_axes(Node(1, 0, 0, 0), Node(2, 3, 0, 0))
    >>> # member along global X: ex = +X, ey = +Y, ez = +Z
    >>> ex, ey, ez = local_axes(Node(1, 0, 0, 0), Node(2, 0, 0, 3))
    >>> # column along global Z: ex = +Z, ey = -Y, ez = +X
    """
    d = node_j.position - node_i.position
    ex = d.normalized()

    if abs(d.x) < axis_tolerance and abs(d.z) < axis_tolerance:
        ez = UNIT_X
    else:
        c = ex.cross(UNIT_Z)
        if c.norm() > axis_tolerance:
            ey0 = c.normalized()
            ez = ey0.cross(ex)
        else:
            ez = UNIT_X

    # Remove any component along ex left by the fallback reference
    ez = ez - ex * ez.dot(ex)
    if ez.norm() <= axis_tolerance:
        raise DegenerateGeometryError(
            f"Member direction ({d.x}, {d.y}, {d.z}) is parallel to its local z "
            f"reference; no local axes can be built"
        )
    ez = ez.normalized()
    ey = ez.cross(ex)
    return ex, ey, ez


def beam3d_local_stiffness(
    E: float, G: float, A: float, Iy: float, Iz: float, J: float, L: float
) -> np.ndarray:
    """
    Local 12x12 stiffness matrix of a 3D Euler-Bernoulli beam.

    DOF order: [u, v, w, rx, ry, rz]_i + [u, v, w, rx, ry, rz]_j

    Returns:
    --------
    np.ndarray
        Symmetric 12x12 matrix. Rank 6: the six rigid-body modes of a free
        member produce no force.
    """
    k = np.zeros((12, 12), dtype=float)

    EA_L = E * A / L
    GJ_L = G * J / L

    # Axial
    k[0, 0] = k[6, 6] = EA_L
    k[0, 6] = k[6, 0] = -EA_L

    # Torsion
    k[3, 3] = k[9, 9] = GJ_L
    k[3, 9] = k[9, 3] = -GJ_L

    # Bending in the x-y plane (v, rz) - governed by Iz
    k[np.ix_(_BEND_XY, _BEND_XY)] = _hermite_block(E * Iz, L, sign=1.0)

    # Bending in the x-z plane (w, ry) - governed by Iy
    k[np.ix_(_BEND_XZ, _BEND_XZ)] = _hermite_block(E * Iy, L, sign=-1.0)

    return k


def _hermite_block(EI: float, L: float, sign: float) -> np.ndarray:
    """4x4 bending block ordered [lateral_i, rot_i, lateral_j, rot_j]."""
    L2 = L * L
    L3 = L2 * L
    a = 12 * EI / L3
    b = sign * 6 * EI / L2
    c = 4 * EI / L
    e = 2 * EI / L
    return np.array([
        [ a,  b, -a,  b],
        [ b,  c, -b,  e],
        [-a, -b,  a, -b],
        [ b,  e, -b,  c],
    ], dtype=float)


def beam3d_transform(ex: Vector3D, ey: Vector3D, ez: Vector3D) -> np.ndarray:
    """
    12x12 transform from global DOFs to local DOFs.

    Block diagonal with four copies of R, whose rows are the local axes:

        R = [ ex ]      d_local = T @ d_global
            [ ey ]      k_global = T.T @ k_local @ T
            [ ez ]
    """
    R = np.vstack([ex.as_array(), ey.as_array(), ez.as_array()])
    return np.kron(np.eye(4), R)


def section_half_depths(section: BeamSection) -> Tuple[float, float]:
    """
    Extreme-fiber distances (c_y, c_z) for bending stress.

    Uses the section's explicit values when present. Missing values are
    estimated from an equivalent rectangle with the same A, Iy and Iz:

        aspect = sqrt(Iy / Iz)
        width  = sqrt(A / aspect)
        height = A / width
        c_y = height / 2,  c_z = width / 2

    The estimate is exact only for solid rectangles.
    """
    c_y, c_z = section.c_y, section.c_z
    if c_y is None or c_z is None:
        aspect = np.sqrt(section.Iy / section.Iz)
        width = np.sqrt(section.A / aspect)
        height = section.A / width
        if c_y is None:
            c_y = height / 2.0
        if c_z is None:
            c_z = width / 2.0
    return float(c_y), float(c_z)


class BeamElementAnalysis:
    """
    Per-element analysis for one BeamElement.

    Construction resolves the geometry immediately: `length` and
    `local_axis` (ex, ey, ez) are available as attributes afterwards.

    Parameters:
    -----------
    element : BeamElement
    node_i, node_j : Node
        The element's end nodes (node_i -> node_j is local +x)
    material : Material
    section : BeamSection
    config : SolverConfig, optional

    Raises:
    -------
    ZeroLengthElementError
        If the two nodes coincide
    DegenerateGeometryError
        If a coordinate is not finite or no local axes can be built

    Example:
    --------
    >>> bea = BeamElementAnalysis(element, n1, n2, steel, rect)
    >>> ke = bea.global_stiffness_matrix()
    >>> res = bea.calculate_stress_strain(d_element)
    >>> res.stress, res.axial_force
    """

    def __init__(
        self,
        element: BeamElement,
        node_i: Node,
        node_j: Node,
        material: Material,
        section: BeamSection,
        config: SolverConfig = CONFIG,
    ):
        self.element = element
        self.node_i = node_i
        self.node_j = node_j
        self.material = material
        self.section = section
        self.config = config

        self.length = (node_j.position - node_i.position).norm()
        if not np.isfinite(self.length):
            raise DegenerateGeometryError(
                f"Element {element.id} has non-finite node coordinates "
                f"(node {node_i.id}: ({node_i.x}, {node_i.y}, {node_i.z}), "
                f"node {node_j.id}: ({node_j.x}, {node_j.y}, {node_j.z}))"
            )
        if self.length <= config.min_length:
            raise ZeroLengthElementError(
                f"Element {element.id} has zero length (nodes {node_i.id} and {node_j.id} "
                f"at same location: ({node_i.x}, {node_i.y}, {node_i.z}))"
            )
        try:
            self.local_axis = local_axes(node_i, node_j, config.axis_tolerance)
        except DegenerateGeometryError as e:
            raise DegenerateGeometryError(f"Element {element.id}: {e}") from e

    def local_stiffness_matrix(self) -> np.ndarray:
        m, s = self.material, self.section
        return beam3d_local_stiffness(m.E, m.G, s.A, s.Iy, s.Iz, s.J, self.length)

    def transformation_matrix(self) -> np.ndarray:
        return beam3d_transform(*self.local_axis)

    def global_stiffness_matrix(self) -> np.ndarray:
        T = self.transformation_matrix()
        return T.T @ self.local_stiffness_matrix() @ T

    def calculate_stress_strain(self, global_displacements: Sequence[float]) -> ElementResult:
        """
        Recover axial force, bending moments, stress and strain.

        Parameters:
        -----------
        global_displacements : sequence of 12 floats
            Global DOF displacements of node_i then node_j,
            [ux, uy, uz, rx, ry, rz]_i + [ux, uy, uz, rx, ry, rz]_j

        Returns:
        --------
        ElementResult
            stress = |axial stress| + sqrt(sigma_y^2 + sigma_z^2)

        Raises:
        -------
        ContractViolationError
            If the input does not hold exactly 12 values
        """
        d_global = self._check_displacements(global_displacements)
        T = self.transformation_matrix()
        d_local = T @ d_global

        L = self.length
        E = self.material.E
        s = self.section

        axial_strain = (d_local[6] - d_local[0]) / L
        axial_stress = E * axial_strain
        axial_force = axial_stress * s.A

        f_local = self.local_stiffness_matrix() @ d_local

        # Governing end moments per bending plane
        m_xy = max(abs(f_local[5]), abs(f_local[11]))   # about local z
        m_xz = max(abs(f_local[4]), abs(f_local[10]))   # about local y
        moments = BendingMoments(my=float(m_xy), mz=float(m_xz))

        c_y, c_z = section_half_depths(s)
        sigma_y = moments.my * c_y / s.Iz
        sigma_z = moments.mz * c_z / s.Iy
        bending_stress = float(np.hypot(sigma_y, sigma_z))

        return ElementResult(
            stress=float(abs(axial_stress) + bending_stress),
            strain=float(axial_strain),
            axial_force=float(axial_force),
            moments=moments,
            axial_stress=float(axial_stress),
            bending_stress=bending_stress,
        )

    def _check_displacements(self, values: Sequence[float]) -> np.ndarray:
        d = np.asarray(values, dtype=float)
        if d.shape != (12,):
            raise ContractViolationError(
                f"Element {self.element.id} expects 12 global displacements "
                f"(node {self.node_i.id} then node {self.node_j.id}), got shape {d.shape}"
            )
        return d
