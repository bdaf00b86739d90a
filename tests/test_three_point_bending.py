"""
TEST: Simply Supported Beam, Midspan Point Load
===============================================

    M_max   = P L / 4
    delta   = P L^3 / (48 E Iz)
    R_left  = R_right = P / 2
"""

import numpy as np
import pytest

from frame_fea import FEAEngine
from frame_fea.verification import (
    E_STEEL,
    THREE_POINT_C,
    THREE_POINT_IZ,
    THREE_POINT_L,
    THREE_POINT_P,
    three_point_bending_case,
)


@pytest.mark.parametrize("divisions", [2, 4, 8])
def test_midspan_deflection_and_moment(divisions):
    model = three_point_bending_case(divisions)
    result = FEAEngine(model).solve_static()

    mid = model.nodes[divisions // 2].id
    delta_expected = THREE_POINT_P * THREE_POINT_L**3 / (48 * E_STEEL * THREE_POINT_IZ)
    assert np.isclose(result.displacement(mid)[1], -delta_expected, rtol=1e-6)

    M_expected = THREE_POINT_P * THREE_POINT_L / 4
    M_max = max(m.my for m in result.moments)
    assert np.isclose(M_max, M_expected, rtol=1e-6), \
        f"M_max = {M_max:.1f}, expected {M_expected:.1f}"

    sigma_expected = M_expected * THREE_POINT_C / THREE_POINT_IZ
    assert np.isclose(result.stresses.max(), sigma_expected, rtol=1e-6)


def test_support_reactions_split_evenly():
    model = three_point_bending_case(4)
    result = FEAEngine(model).solve_static()

    left = result.reaction(model.nodes[0].id)
    right = result.reaction(model.nodes[-1].id)

    assert np.isclose(left[1], THREE_POINT_P / 2, rtol=1e-9)
    assert np.isclose(right[1], THREE_POINT_P / 2, rtol=1e-9)
    assert np.isclose(left[1] + right[1], THREE_POINT_P, rtol=1e-9)


def test_symmetric_deflection():
    model = three_point_bending_case(8)
    result = FEAEngine(model).solve_static()
    uy = result.displacements[:, 1]
    np.testing.assert_allclose(uy, uy[::-1], rtol=1e-9, atol=1e-15)


@pytest.mark.parametrize("divisions", [0, 1, 3])
def test_needs_midspan_node(divisions):
    with pytest.raises(ValueError):
        three_point_bending_case(divisions)
