# frame_fea/validation.py
"""
Caller-side model validation.

The engine only checks what it trips over while solving. Run
validate_model() first to collect every problem in one report, e.g.
before handing a model from an editor or an HTTP request to FEAEngine.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import List

from .model import Model


@dataclass
class ValidationReport:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ModelStats:
    node_count: int
    element_count: int
    material_count: int
    section_count: int
    load_count: int
    fixed_node_count: int
    total_dof: int
    free_dof: int


def _duplicates(ids) -> List[int]:
    return sorted(i for i, n in Counter(ids).items() if n > 1)


def validate_model(model: Model) -> ValidationReport:
    """
    Check a model for everything that would make the solve meaningless.

    Checks:
    - at least 2 nodes, 1 element, 1 material, 1 section, 1 fixed node
    - ids unique per entity kind
    - elements reference existing nodes, material and section, and
      connect two different nodes
    - loads reference existing nodes
    - E > 0 and A, Iy, Iz, J > 0

    Returns:
    --------
    ValidationReport
        is_valid is True only if `errors` is empty
    """
    errors = []

    if len(model.nodes) < 2:
        errors.append("At least 2 nodes are required")
    if len(model.elements) < 1:
        errors.append("At least 1 element is required")
    if len(model.materials) < 1:
        errors.append("At least 1 material is required")
    if len(model.sections) < 1:
        errors.append("At least 1 section is required")
    if not any(node.is_fixed for node in model.nodes):
        errors.append("At least 1 fixed node is required")

    for kind, items in (
        ("node", model.nodes),
        ("element", model.elements),
        ("material", model.materials),
        ("section", model.sections),
        ("load", model.loads),
    ):
        for dup in _duplicates(item.id for item in items):
            errors.append(f"Duplicate {kind} id {dup}")

    node_ids = {n.id for n in model.nodes}
    material_ids = {m.id for m in model.materials}
    section_ids = {s.id for s in model.sections}

    for e in model.elements:
        for nid in e.node_ids:
            if nid not in node_ids:
                errors.append(f"Element {e.id} references missing node {nid}")
        if e.node_i == e.node_j:
            errors.append(f"Element {e.id} connects node {e.node_i} to itself")
        if e.material_id not in material_ids:
            errors.append(f"Element {e.id} references missing material {e.material_id}")
        if e.section_id not in section_ids:
            errors.append(f"Element {e.id} references missing section {e.section_id}")

    for load in model.loads:
        if load.node_id not in node_ids:
            errors.append(f"Load {load.id} references missing node {load.node_id}")

    for m in model.materials:
        if not m.E > 0:
            errors.append(f"Material {m.id} must have E > 0 (got {m.E})")

    for s in model.sections:
        for prop in ('A', 'Iy', 'Iz', 'J'):
            value = getattr(s, prop)
            if not value > 0:
                errors.append(f"Section {s.id} must have {prop} > 0 (got {value})")

    return ValidationReport(is_valid=not errors, errors=errors)


def model_stats(model: Model) -> ModelStats:
    """Entity counts and DOF totals (6 DOF per node)."""
    total_dof = 6 * len(model.nodes)
    fixed_dof = sum(sum(node.fixed.as_tuple()) for node in model.nodes)
    return ModelStats(
        node_count=len(model.nodes),
        element_count=len(model.elements),
        material_count=len(model.materials),
        section_count=len(model.sections),
        load_count=len(model.loads),
        fixed_node_count=sum(1 for node in model.nodes if node.is_fixed),
        total_dof=total_dof,
        free_dof=total_dof - fixed_dof,
    )
