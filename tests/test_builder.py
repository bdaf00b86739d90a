"""
Tests for ModelBuilder and the preset models.
"""

import numpy as np
import pytest

from frame_fea import FixedDOF, MissingReferenceError
from frame_fea.builder import ModelBuilder, frame_model, simple_beam_model, truss_model


def make_builder_with_props():
    b = ModelBuilder()
    steel = b.add_material("Steel", 210e9)
    sec = b.add_section("Rect", A=0.02, Iy=6.67e-6, Iz=1.67e-6, J=1.0e-6)
    return b, steel, sec


class TestModelBuilder:

    def test_sequential_ids_per_kind(self):
        b, steel, sec = make_builder_with_props()
        n1 = b.add_node(0, 0, 0)
        n2 = b.add_node(1, 0, 0)
        n3 = b.add_node(2, 0, 0)
        e1 = b.add_element(n1.id, n2.id, steel.id, sec.id)
        e2 = b.add_element(n2.id, n3.id, steel.id, sec.id)

        assert (steel.id, sec.id) == (1, 1)
        assert [n1.id, n2.id, n3.id] == [1, 2, 3]
        assert [e1.id, e2.id] == [1, 2]

    def test_fixed_flag(self):
        b, _, _ = make_builder_with_props()
        base = b.add_node(0, 0, 0, fixed=True)
        tip = b.add_node(1, 0, 0)
        assert base.fixed == FixedDOF.all()
        assert not tip.is_fixed

    def test_element_with_unknown_node(self):
        b, steel, sec = make_builder_with_props()
        n1 = b.add_node(0, 0, 0)
        with pytest.raises(MissingReferenceError):
            b.add_element(n1.id, 42, steel.id, sec.id)
        assert b.build().elements == []

    def test_element_with_unknown_material_or_section(self):
        b, steel, sec = make_builder_with_props()
        n1 = b.add_node(0, 0, 0)
        n2 = b.add_node(1, 0, 0)
        with pytest.raises(MissingReferenceError):
            b.add_element(n1.id, n2.id, 9, sec.id)
        with pytest.raises(MissingReferenceError):
            b.add_element(n1.id, n2.id, steel.id, 9)

    def test_element_to_itself(self):
        b, steel, sec = make_builder_with_props()
        n1 = b.add_node(0, 0, 0)
        with pytest.raises(ValueError):
            b.add_element(n1.id, n1.id, steel.id, sec.id)

    def test_load_components(self):
        b, _, _ = make_builder_with_props()
        n1 = b.add_node(0, 0, 0)
        load = b.add_load(n1.id, fx=1.0, fy=-2.0, mz=3.0)
        np.testing.assert_allclose(load.force.as_array(), [1.0, -2.0, 0.0])
        np.testing.assert_allclose(load.moment.as_array(), [0.0, 0.0, 3.0])

    def test_load_on_unknown_node(self):
        b, _, _ = make_builder_with_props()
        with pytest.raises(MissingReferenceError):
            b.add_load(3, fy=-1.0)

    def test_set_node_fixity(self):
        b, _, _ = make_builder_with_props()
        n1 = b.add_node(0, 0, 0)
        b.set_node_fixity(n1.id, rx=False, ry=False, rz=False)
        assert n1.fixed.as_tuple() == (True, True, True, False, False, False)

    def test_clear_resets_ids(self):
        b, _, _ = make_builder_with_props()
        b.add_node(0, 0, 0)
        b.clear()
        assert b.build().nodes == []
        assert b.add_node(0, 0, 0).id == 1


class TestPresets:

    def test_simple_beam(self):
        model = simple_beam_model()
        assert len(model.nodes) == 11
        assert len(model.elements) == 10
        assert model.nodes[0].is_fixed
        assert not any(n.is_fixed for n in model.nodes[1:])
        assert model.nodes[-1].x == pytest.approx(5.0)
        assert model.loads[0].node_id == model.nodes[-1].id
        assert model.loads[0].force.y == -1000.0

    def test_truss(self):
        model = truss_model()
        assert len(model.nodes) == 3
        assert len(model.elements) == 3
        assert sum(n.is_fixed for n in model.nodes) == 2

    def test_frame(self):
        model = frame_model()
        assert len(model.nodes) == 4
        assert len(model.elements) == 3
        assert sum(load.force.y for load in model.loads) == -4000.0

    def test_presets_are_independent(self):
        a = frame_model()
        a.nodes[0].fixed = FixedDOF.free()
        b = frame_model()
        assert b.nodes[0].is_fixed
