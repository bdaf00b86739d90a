# frame_fea/builder.py
"""
MODEL BUILDER AND PRESET MODELS
===============================

ModelBuilder hands out sequential ids (starting at 1) for every entity
kind and checks references as elements and loads are added.

Presets:
- simple_beam_model(): 5 m cantilever, 10 elements, 1000 N tip load
- truss_model():       3-node triangle, 5000 N apex load
- frame_model():       portal frame, 2 x 2000 N at the knees

Presets lie in the global x-y plane with gravity along -y.
"""

from typing import List, Optional

from .errors import MissingReferenceError
from .model import (
    BeamElement,
    BeamSection,
    FixedDOF,
    Load,
    Material,
    Model,
    Node,
)
from .vector import Vector3D


class ModelBuilder:
    """
    Incremental Model construction.

    Example:
    --------
    >>> b = ModelBuilder()
    >>> steel = b.add_material("Steel", 210e9)
    >>> sec = b.add_section("Rect", A=0.02, Iy=6.67e-6, Iz=1.67e-6, J=1.0e-6)
    >>> n1 = b.add_node(0, 0, 0, fixed=True)
    >>> n2 = b.add_node(2, 0, 0)
    >>> b.add_element(n1.id, n2.id, steel.id, sec.id)
    >>> b.add_load(n2.id, fy=-1000)
    >>> model = b.build()
    """

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        self.model = Model()
        self._next = {'node': 1, 'element': 1, 'material': 1, 'section': 1, 'load': 1}

    def _take_id(self, kind: str) -> int:
        i = self._next[kind]
        self._next[kind] += 1
        return i

    def _node(self, node_id: int) -> Node:
        for n in self.model.nodes:
            if n.id == node_id:
                return n
        raise MissingReferenceError("node", node_id)

    def add_node(self, x: float, y: float, z: float, fixed: bool = False) -> Node:
        """Add a node, fully fixed (all 6 DOFs) when `fixed` is True."""
        node = Node(
            self._take_id('node'), float(x), float(y), float(z),
            FixedDOF.all() if fixed else FixedDOF.free(),
        )
        self.model.nodes.append(node)
        return node

    def add_material(
        self,
        name: str,
        E: float,
        poisson_ratio: float = 0.3,
        density: float = 7850.0,
        yield_strength: float = 235e6,
    ) -> Material:
        material = Material(self._take_id('material'), name, E, poisson_ratio, density, yield_strength)
        self.model.materials.append(material)
        return material

    def add_section(
        self,
        name: str,
        A: float,
        Iy: float,
        Iz: float,
        J: float,
        c_y: Optional[float] = None,
        c_z: Optional[float] = None,
    ) -> BeamSection:
        section = BeamSection(self._take_id('section'), name, A, Iy, Iz, J, c_y, c_z)
        self.model.sections.append(section)
        return section

    def add_element(self, node_i: int, node_j: int, material_id: int, section_id: int) -> BeamElement:
        """
        Add a beam node_i -> node_j.

        Raises:
        -------
        MissingReferenceError
            Unknown node, material or section id
        ValueError
            node_i == node_j
        """
        self._node(node_i)
        self._node(node_j)
        if node_i == node_j:
            raise ValueError(f"An element cannot connect node {node_i} to itself")
        if not any(m.id == material_id for m in self.model.materials):
            raise MissingReferenceError("material", material_id)
        if not any(s.id == section_id for s in self.model.sections):
            raise MissingReferenceError("section", section_id)

        element = BeamElement(self._take_id('element'), node_i, node_j, material_id, section_id)
        self.model.elements.append(element)
        return element

    def add_load(
        self,
        node_id: int,
        fx: float = 0.0, fy: float = 0.0, fz: float = 0.0,
        mx: float = 0.0, my: float = 0.0, mz: float = 0.0,
    ) -> Load:
        self._node(node_id)
        load = Load(
            self._take_id('load'), node_id,
            force=Vector3D(fx, fy, fz),
            moment=Vector3D(mx, my, mz),
        )
        self.model.loads.append(load)
        return load

    def set_node_fixity(
        self,
        node_id: int,
        dx: bool = True, dy: bool = True, dz: bool = True,
        rx: bool = True, ry: bool = True, rz: bool = True,
    ) -> None:
        self._node(node_id).fixed = FixedDOF(dx, dy, dz, rx, ry, rz)

    def build(self) -> Model:
        return self.model


def simple_beam_model() -> Model:
    """5 m steel cantilever in 10 elements, 1000 N downward at the tip."""
    b = ModelBuilder()
    steel = b.add_material("Steel", 210e9, 0.3, 7850, 250e6)
    section = b.add_section("Rect100x200", A=0.02, Iy=6.67e-6, Iz=1.67e-6, J=1.0e-6)

    nodes: List[Node] = [b.add_node(i * 0.5, 0, 0, fixed=(i == 0)) for i in range(11)]
    for a, c in zip(nodes[:-1], nodes[1:]):
        b.add_element(a.id, c.id, steel.id, section.id)

    b.add_load(nodes[-1].id, fy=-1000.0)
    return b.build()


def truss_model() -> Model:
    """Triangle of rigidly connected members, fixed at both base nodes."""
    b = ModelBuilder()
    steel = b.add_material("Steel", 210e9, 0.3, 7850, 250e6)
    pipe = b.add_section("Pipe50x5", A=7.54e-4, Iy=2.9e-7, Iz=2.9e-7, J=5.8e-7)

    n1 = b.add_node(0, 0, 0, fixed=True)
    n2 = b.add_node(2, 0, 0, fixed=True)
    n3 = b.add_node(1, 2, 0)

    b.add_element(n1.id, n3.id, steel.id, pipe.id)
    b.add_element(n2.id, n3.id, steel.id, pipe.id)
    b.add_element(n1.id, n2.id, steel.id, pipe.id)

    b.add_load(n3.id, fy=-5000.0)
    return b.build()


def frame_model() -> Model:
    """Portal frame: 4 m span, 3 m columns, fixed bases."""
    b = ModelBuilder()
    steel = b.add_material("Steel", 210e9, 0.3, 7850, 250e6)
    h200 = b.add_section("H200x100", A=2.55e-3, Iy=1.69e-5, Iz=2.09e-6, J=7.4e-8)

    n1 = b.add_node(0, 0, 0, fixed=True)
    n2 = b.add_node(4, 0, 0, fixed=True)
    n3 = b.add_node(0, 3, 0)
    n4 = b.add_node(4, 3, 0)

    b.add_element(n1.id, n3.id, steel.id, h200.id)
    b.add_element(n2.id, n4.id, steel.id, h200.id)
    b.add_element(n3.id, n4.id, steel.id, h200.id)

    b.add_load(n3.id, fy=-2000.0)
    b.add_load(n4.id, fy=-2000.0)
    return b.build()
