# frame_fea/kernel - DOF indexing, assembly and linear solve
"""
KERNEL: THE ASSEMBLY AND SOLVE PIPELINE
=======================================

Element-agnostic plumbing shared by every analysis:
- A way to map (node_id, local_dof) -> global DOF index   (dof.py)
- Scatter-add of element matrices and nodal loads          (assemble.py)
- Reduction by fixed DOFs, direct solve, expansion         (solve.py)

The beam element itself lives in frame_fea.elements; the kernel only sees
DOF maps and dense matrices.
"""

from .dof import DOFManager
from .assemble import assemble_global_K, assemble_global_F, add_nodal_load
from .solve import reduce_system, solve_reduced, expand_displacements

__all__ = [
    'DOFManager',
    'assemble_global_K', 'assemble_global_F', 'add_nodal_load',
    'reduce_system', 'solve_reduced', 'expand_displacements',
]
