# frame_fea/model.py
"""
3D FRAME MODEL DEFINITIONS
==========================

PURPOSE:
--------
This module defines the data structures for 3D frame analysis:
- Node: A point in 3D space with 6 independently restrainable DOFs
- Material: Isotropic linear-elastic material
- BeamSection: Cross-section properties (A, Iy, Iz, J)
- BeamElement: A 2-node beam connecting two nodes
- Load: Concentrated force and moment at a node
- Model: The aggregate root holding flat lists of all of the above

All cross references are by integer id. ModelIndex resolves them through
precomputed dictionaries so a dangling id surfaces as exactly one kind of
error (MissingReferenceError) at the point of lookup.

ENGINEERING CONTEXT:
--------------------
A 3D FRAME differs from a 3D truss in that its members carry bending,
shear and torsion as well as axial force. Each node therefore has 6 DOFs:

    ux, uy, uz   translations
    rx, ry, rz   rotations

Units are SI throughout: m, N, Pa, N*m.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Tuple

from .errors import MissingReferenceError
from .vector import Vector3D

DOF_NAMES = ('dx', 'dy', 'dz', 'rx', 'ry', 'rz')

ANALYSIS_TYPES = ('static', 'dynamic', 'modal')


@dataclass
class FixedDOF:
    """
    Restraint flags for the 6 DOFs of a node (True = held at zero).

    Examples:
    ---------
    >>> FixedDOF.all().any()
    True
    >>> pin = FixedDOF(dx=True, dy=True, dz=True)
    >>> pin.as_tuple()
    (True, True, True, False, False, False)
    """
    dx: bool = False
    dy: bool = False
    dz: bool = False
    rx: bool = False
    ry: bool = False
    rz: bool = False

    @classmethod
    def all(cls) -> "FixedDOF":
        return cls(True, True, True, True, True, True)

    @classmethod
    def free(cls) -> "FixedDOF":
        return cls()

    def as_tuple(self) -> Tuple[bool, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))

    def any(self) -> bool:
        return any(self.as_tuple())


@dataclass
class Node:
    """
    A node (joint) of the frame.

    Parameters:
    -----------
    id : int
        Unique identifier
    x, y, z : float
        Global coordinates (m)
    fixed : FixedDOF
        Restraint flags; may be changed at any time before solving

    Examples:
    ---------
    >>> base = Node(1, 0.0, 0.0, 0.0, FixedDOF.all())
    >>> tip = Node(2, 3.0, 0.0, 0.0)
    >>> base.is_fixed, tip.is_fixed
    (True, False)
    """
    id: int
    x: float
    y: float
    z: float
    fixed: FixedDOF = field(default_factory=FixedDOF)

    @property
    def position(self) -> Vector3D:
        return Vector3D(self.x, self.y, self.z)

    @property
    def is_fixed(self) -> bool:
        return self.fixed.any()

    def set_fixity(self, **flags: bool) -> None:
        """Update individual restraint flags, e.g. ``node.set_fixity(dy=True)``."""
        for name, value in flags.items():
            if name not in DOF_NAMES:
                raise ValueError(f"Unknown DOF '{name}'. Expected one of {DOF_NAMES}")
            setattr(self.fixed, name, bool(value))


@dataclass(frozen=True)
class Material:
    """
    Isotropic linear-elastic material.

    E : float
        Young's modulus (Pa). Steel: ~200-210 GPa
    poisson_ratio : float
        Poisson ratio, used for the shear modulus G = E / (2(1 + nu))
    density : float
        kg/m^3
    yield_strength : float
        Pa
    """
    id: int
    name: str
    E: float
    poisson_ratio: float = 0.3
    density: float = 7850.0
    yield_strength: float = 235e6

    @property
    def G(self) -> float:
        return self.E / (2.0 * (1.0 + self.poisson_ratio))


@dataclass(frozen=True)
class BeamSection:
    """
    Beam cross-section properties.

    A : float
        Area (m^2)
    Iy, Iz : float
        Second moments of area about the local y and z axes (m^4)
    J : float
        Torsional constant (m^4)
    c_y, c_z : float, optional
        Extreme-fiber distances used for bending stress. c_y pairs with
        bending governed by Iz, c_z with bending governed by Iy. When
        omitted they are estimated from an equivalent rectangle.

    Examples:
    ---------
    >>> rect = BeamSection(1, "200x400", A=0.08, Iy=1.067e-3, Iz=2.667e-4, J=5.33e-4)
    >>> h200 = BeamSection(2, "H-200x100", A=2.28e-3, Iy=1.8e-5, Iz=1.7e-6,
    ...                    J=4.7e-7, c_y=0.1, c_z=0.05)
    """
    id: int
    name: str
    A: float
    Iy: float
    Iz: float
    J: float
    c_y: Optional[float] = None
    c_z: Optional[float] = None


@dataclass(frozen=True)
class BeamElement:
    """
    A 3D beam element between node_i and node_j.

    The direction node_i -> node_j defines the local x axis. Length and
    the local axis triad are derived by BeamElementAnalysis for each solve.
    """
    id: int
    node_i: int
    node_j: int
    material_id: int
    section_id: int

    @property
    def node_ids(self) -> Tuple[int, int]:
        return (self.node_i, self.node_j)


@dataclass(frozen=True)
class Load:
    """Concentrated nodal load. Several loads on one node add up."""
    id: int
    node_id: int
    force: Vector3D = Vector3D()
    moment: Vector3D = Vector3D()


@dataclass
class AnalysisSettings:
    """
    Analysis options.

    Only linear static analysis is carried out. The remaining fields are
    accepted so that settings produced by other tools round-trip, but the
    engine ignores them.
    """
    analysis_type: str = 'static'
    tolerance: float = 1e-6
    max_iterations: int = 100
    include_geometric_nonlinearity: bool = False
    include_material_nonlinearity: bool = False

    def __post_init__(self):
        if self.analysis_type not in ANALYSIS_TYPES:
            raise ValueError(
                f"Unknown analysis_type '{self.analysis_type}'. Expected one of {ANALYSIS_TYPES}"
            )


@dataclass
class Model:
    """
    Aggregate root: flat lists of model entities.

    No entity owns another; elements and loads refer to nodes, materials
    and sections by id.
    """
    nodes: List[Node] = field(default_factory=list)
    elements: List[BeamElement] = field(default_factory=list)
    materials: List[Material] = field(default_factory=list)
    sections: List[BeamSection] = field(default_factory=list)
    loads: List[Load] = field(default_factory=list)

    def index(self) -> "ModelIndex":
        return ModelIndex(self)


class ModelIndex:
    """
    Id lookups over a Model, built once per analysis.

    Examples:
    ---------
    >>> idx = model.index()
    >>> idx.node(3)
    Node(id=3, ...)
    >>> idx.material(99, owner="element 4")
    MissingReferenceError: material 99 does not exist in the model (referenced by element 4)
    """

    def __init__(self, model: Model):
        self.nodes: Dict[int, Node] = {n.id: n for n in model.nodes}
        self.materials: Dict[int, Material] = {m.id: m for m in model.materials}
        self.sections: Dict[int, BeamSection] = {s.id: s for s in model.sections}

    def node(self, node_id: int, owner: str = "") -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise MissingReferenceError("node", node_id, owner) from None

    def material(self, material_id: int, owner: str = "") -> Material:
        try:
            return self.materials[material_id]
        except KeyError:
            raise MissingReferenceError("material", material_id, owner) from None

    def section(self, section_id: int, owner: str = "") -> BeamSection:
        try:
            return self.sections[section_id]
        except KeyError:
            raise MissingReferenceError("section", section_id, owner) from None

    def element_parts(self, element: BeamElement) -> Tuple[Node, Node, Material, BeamSection]:
        """Resolve everything BeamElementAnalysis needs for one element."""
        owner = f"element {element.id}"
        return (
            self.node(element.node_i, owner),
            self.node(element.node_j, owner),
            self.material(element.material_id, owner),
            self.section(element.section_id, owner),
        )
