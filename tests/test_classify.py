"""Tests for drape/classify.py — region labels and the visibility threshold."""

import dataclasses

import numpy as np
import numpy.testing as npt
import pytest

from drape import (
    DrapeConfig,
    Region,
    ShapeConfig,
    ShapeKind,
    VISIBLE_EPSILON,
    classify,
    classify_grid,
    displacement,
    has_visible_displacement,
    is_inside,
    is_on_shell,
)

CUBE = ShapeConfig(
    kind=ShapeKind.CUBE, size=5, center_x=10, center_y=10,
    max_displacement=200.0, falloff_extent=12.0,
)
SPHERE = dataclasses.replace(CUBE, kind=ShapeKind.SPHERE)


class TestClassifyCube:
    def test_centre_is_interior(self):
        assert classify(10, 10, CUBE) is Region.INTERIOR

    def test_shell(self):
        assert classify(14, 10, CUBE) is Region.SHELL
        assert classify(14, 14, CUBE) is Region.SHELL

    def test_falloff_node_is_cloth(self):
        assert classify(16, 10, CUBE) is Region.CLOTH

    def test_far_node_is_cloth_without_visible_displacement(self):
        assert classify(30, 10, CUBE) is Region.CLOTH
        assert not has_visible_displacement(30, 10, CUBE)

    def test_accepts_drape_config(self):
        assert classify(14, 10, DrapeConfig(shape=CUBE)) is Region.SHELL


class TestClassifySphere:
    def test_centre_is_interior(self):
        assert classify(10, 10, SPHERE) is Region.INTERIOR

    def test_radius_node_is_shell(self):
        assert classify(14, 10, SPHERE) is Region.SHELL

    def test_band_node_just_outside_radius_is_shell(self):
        # distance sqrt(17) = 4.12, inside the 0.7 band but outside the solid
        assert classify(14, 11, SPHERE) is Region.SHELL

    def test_outside_band_is_cloth(self):
        assert classify(15, 10, SPHERE) is Region.CLOTH


class TestSizeOneClassification:
    @pytest.mark.parametrize("kind", list(ShapeKind))
    def test_centre_is_shell(self, kind):
        config = dataclasses.replace(CUBE, kind=kind, size=1)
        assert classify(10, 10, config) is Region.SHELL
        codes = classify_grid(config, 20)
        assert (codes == Region.INTERIOR).sum() == 0
        assert (codes == Region.SHELL).sum() == 1


class TestClassifyGrid:
    @pytest.mark.parametrize("config", [CUBE, SPHERE], ids=["cube", "sphere"])
    def test_matches_pointwise(self, config):
        codes = classify_grid(config, 20)
        assert codes.shape == (21, 21)
        for i in range(0, 21, 3):
            for j in range(0, 21, 2):
                assert codes[i, j] == classify(i, j, config)

    @pytest.mark.parametrize("config", [CUBE, SPHERE], ids=["cube", "sphere"])
    def test_shell_and_interior_disjoint(self, config):
        r = np.arange(21)
        I, J = np.meshgrid(r, r, indexing="ij")
        shell = is_on_shell(I, J, config.kind, config.size, 10, 10)
        codes = classify_grid(config, 20)
        # shell wins over inside
        assert (codes[shell] == Region.SHELL).all()
        assert not (codes[~shell] == Region.SHELL).any()
        inside = is_inside(I, J, config.kind, config.size, 10, 10)
        npt.assert_array_equal(codes == Region.INTERIOR, inside & ~shell)

    def test_cube_interior_is_strict(self):
        codes = classify_grid(CUBE, 20)
        # 7x7 block strictly inside the 9x9 solid
        assert (codes == Region.INTERIOR).sum() == 49

    def test_dtype(self):
        assert classify_grid(CUBE, 10).dtype == np.int8


class TestVisibleDisplacement:
    def test_threshold_is_strict(self):
        config = dataclasses.replace(CUBE, max_displacement=VISIBLE_EPSILON)
        assert not has_visible_displacement(10, 10, config)

    def test_just_above_threshold(self):
        config = dataclasses.replace(CUBE, max_displacement=VISIBLE_EPSILON * 1.01)
        assert has_visible_displacement(10, 10, config)

    def test_uses_magnitude(self):
        config = dataclasses.replace(CUBE, max_displacement=-200.0)
        assert has_visible_displacement(16, 10, config)

    def test_zero_displacement_not_visible(self):
        assert displacement(35, 35, CUBE) == 0.0
        assert not has_visible_displacement(35, 35, CUBE)

    def test_array_input(self):
        i = np.array([10, 16, 30])
        npt.assert_array_equal(has_visible_displacement(i, 10, CUBE), [True, True, False])
