# frame_fea/kernel/dof.py
"""
DOF MANAGER: Node Id to Global DOF Indexing
===========================================

PURPOSE:
--------
This module maps (node_id, local_dof) to global DOF indices for a frame
with 6 DOF per node:

    0=ux, 1=uy, 2=uz, 3=rx, 4=ry, 5=rz

Node ids are arbitrary integers chosen by whoever built the model. The
manager compacts them into positions 0..N-1 in model order, so

    global_idx = 6 * position(node_id) + local_dof

USAGE:
------
    dof = DOFManager.from_nodes(model.nodes)

    dof.idx(node_id=7, local_dof=1)     # uy of node 7
    dof.node_dofs(7)                    # all six DOFs of node 7
    dof.element_dof_map([7, 9])         # 12 DOFs for a beam 7 -> 9
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from ..config import CONFIG
from ..errors import ContractViolationError, MissingReferenceError


@dataclass
class DOFManager:
    """
    Manages degree-of-freedom indexing for a set of nodes.

    Attributes:
    -----------
    node_ids : List[int]
        Node ids in model order; position in this list is the node index
    dof_per_node : int
        Number of DOFs per node (6 for a 3D frame)

    Examples:
    ---------
    >>> dof = DOFManager([10, 20, 30])
    >>> dof.idx(20, 0)
    6
    >>> dof.ndof()
    18
    >>> dof.node_dofs(30)
    [12, 13, 14, 15, 16, 17]
    """
    node_ids: List[int]
    dof_per_node: int = CONFIG.dof_per_node
    _position: Dict[int, int] = field(init=False, repr=False)

    def __post_init__(self):
        self.node_ids = list(self.node_ids)
        self._position = {}
        for i, node_id in enumerate(self.node_ids):
            if node_id in self._position:
                raise ContractViolationError(f"Duplicate node id {node_id}")
            self._position[node_id] = i

    @classmethod
    def from_nodes(cls, nodes: Iterable, dof_per_node: int = CONFIG.dof_per_node) -> "DOFManager":
        return cls([n.id for n in nodes], dof_per_node)

    @property
    def n_nodes(self) -> int:
        return len(self.node_ids)

    def position(self, node_id: int) -> int:
        """Index of a node in model order."""
        try:
            return self._position[node_id]
        except KeyError:
            raise MissingReferenceError("node", node_id) from None

    def idx(self, node_id: int, local_dof: int) -> int:
        """
        Get the global DOF index for a node's local DOF.

        Parameters:
        -----------
        node_id : int
            The node identifier (as stored on the Node)
        local_dof : int
            0=ux, 1=uy, 2=uz, 3=rx, 4=ry, 5=rz

        Returns:
        --------
        int
            Global DOF index in the system matrices
        """
        return self.dof_per_node * self.position(node_id) + local_dof

    def ndof(self) -> int:
        """Total number of DOFs (size of K)."""
        return self.dof_per_node * self.n_nodes

    def node_dofs(self, node_id: int) -> List[int]:
        base = self.dof_per_node * self.position(node_id)
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: List[int]) -> List[int]:
        """
        Flattened global DOF indices for an element's nodes.

        >>> DOFManager([1, 2, 3]).element_dof_map([1, 3])
        [0, 1, 2, 3, 4, 5, 12, 13, 14, 15, 16, 17]
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result

    def fixed_dofs(self, nodes: Iterable) -> List[int]:
        """
        Global indices of all restrained DOFs, in ascending order.

        Parameters:
        -----------
        nodes : iterable of Node
            Nodes whose `fixed` flags are read
        """
        fixed = []
        for node in nodes:
            for local_dof, is_fixed in enumerate(node.fixed.as_tuple()):
                if is_fixed:
                    fixed.append(self.idx(node.id, local_dof))
        return sorted(fixed)
