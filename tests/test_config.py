"""Tests for drape/config.py and drape/logging_config.py."""

import dataclasses
import json
import logging

import pytest

from drape import (
    DEFAULT_SETTINGS,
    ConfigError,
    DrapeConfig,
    FalloffKind,
    Opacities,
    ShapeConfig,
    ShapeKind,
    clamp_settings,
    load_config,
    store_config,
)
from drape.config import shape_of
from drape.logging_config import setup_logging


class TestDefaults:
    def test_drape_config(self):
        config = DrapeConfig()
        assert config.density == 20
        assert config.spacing == 35.0
        assert config.back_z == -400.0
        assert config.shape.kind is ShapeKind.CUBE
        assert config.shape.falloff is FalloffKind.COSINE

    def test_defaults_match_settings(self):
        config = DrapeConfig.from_settings({})
        assert config.shape.size == 5
        assert (config.shape.center_x, config.shape.center_y) == (10, 10)
        assert config.shape.max_displacement == 200.0
        # 60 % of density 20
        assert config.shape.falloff_extent == 12.0
        assert config.opacities == Opacities(shell=0.8, cloth=0.5, interior=0.6, background=0.5)

    def test_frozen(self):
        config = DrapeConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.density = 30

    def test_replace(self):
        config = DrapeConfig()
        changed = dataclasses.replace(config, density=40)
        assert changed.spacing == 17.5
        assert config.density == 20

    def test_kind_strings_are_parsed(self):
        shape = ShapeConfig(kind="Sphere", falloff="stiffness")
        assert shape.kind is ShapeKind.SPHERE
        assert shape.falloff is FalloffKind.STIFFNESS

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            ShapeConfig(kind="pyramid")

    def test_shape_of(self):
        config = DrapeConfig()
        assert shape_of(config) is config.shape
        assert shape_of(config.shape) is config.shape

    def test_footprint(self):
        fp = ShapeConfig(kind=ShapeKind.SPHERE, size=3).footprint
        assert fp.kind is ShapeKind.SPHERE
        assert fp.radius == 2


class TestSettings:
    def test_influence_is_percent_of_density(self):
        config = DrapeConfig.from_settings({"gridDensity": 30, "influenceRadius": 50})
        assert config.shape.falloff_extent == 15.0

    def test_zero_influence_is_sharp(self):
        config = DrapeConfig.from_settings({"influenceRadius": 0})
        assert config.shape.falloff_extent == 0.0

    def test_round_trip(self):
        settings = {
            **DEFAULT_SETTINGS,
            "gridDensity": 25,
            "shapeType": "sphere",
            "zSeparation": -120.0,
            "influenceRadius": 40.0,
            "clothAlpha": 0.3,
        }
        config = DrapeConfig.from_settings(settings)
        again = DrapeConfig.from_settings(config.to_settings())
        assert again == config
        assert config.to_settings()["shapeType"] == "sphere"

    def test_bad_shape_name(self):
        with pytest.raises(ConfigError):
            DrapeConfig.from_settings({"shapeType": "torus"})

    def test_bad_number(self):
        with pytest.raises(ConfigError):
            DrapeConfig.from_settings({"zSeparation": "high"})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestClamp:
    def test_in_range_unchanged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="drape"):
            out = clamp_settings(DEFAULT_SETTINGS)
        assert out == DEFAULT_SETTINGS
        assert not caplog.records

    def test_density_range(self):
        assert clamp_settings({"gridDensity": 5})["gridDensity"] == 10
        assert clamp_settings({"gridDensity": 100})["gridDensity"] == 40

    def test_centre_kept_on_grid(self):
        out = clamp_settings({"gridDensity": 10, "selectedPointX": 15, "selectedPointY": -2})
        assert out["selectedPointX"] == 10
        assert out["selectedPointY"] == 0

    def test_size_at_least_one(self):
        assert clamp_settings({"cubeSize": 0})["cubeSize"] == 1

    def test_alphas(self):
        out = clamp_settings({"clothAlpha": 1.5, "backGridAlpha": -0.2})
        assert out["clothAlpha"] == 1.0
        assert out["backGridAlpha"] == 0.0

    def test_clamped_values_are_plain_python(self):
        out = clamp_settings({"gridDensity": 100, "clothAlpha": 2.0})
        assert type(out["gridDensity"]) is int
        assert type(out["clothAlpha"]) is float

    def test_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="drape"):
            clamp_settings({"gridDensity": 100})
        assert any("gridDensity" in r.getMessage() for r in caplog.records)
        assert all(r.levelno == logging.WARNING for r in caplog.records)

    def test_zero_density_clamped(self):
        fixed = DrapeConfig(density=0).clamped()
        assert fixed.density == 10
        assert fixed.shape.falloff_extent == 0.0

    @pytest.mark.parametrize("value", [[1, 2], {"a": 1}, True, None])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(ConfigError):
            clamp_settings({"cubeSize": value})

    def test_clamped_config(self):
        config = DrapeConfig(shape=ShapeConfig(size=0), density=80)
        fixed = config.clamped()
        assert fixed.density == 40
        assert fixed.shape.size == 1


class TestPersistence:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "nope.json")
        assert config == DrapeConfig.from_settings(DEFAULT_SETTINGS)

    def test_store_then_load(self, tmp_path):
        path = tmp_path / "nested" / "drape.json"
        config = DrapeConfig.from_settings({"shapeType": "sphere", "gridDensity": 30})
        store_config(config, path)
        assert path.exists()
        assert load_config(path) == config

    def test_partial_file_filled_from_defaults(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"cubeSize": 3}), encoding="utf-8")
        config = load_config(path)
        assert config.shape.size == 3
        assert config.density == 20

    def test_load_clamps(self, tmp_path):
        path = tmp_path / "wild.json"
        path.write_text(json.dumps({"gridDensity": 500}), encoding="utf-8")
        assert load_config(path).density == 40

    def test_bad_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_bad_value_in_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"shapeType": "torus"}), encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    @pytest.mark.parametrize("value", [[1, 2], "5", {"w": 5}])
    def test_non_scalar_value_in_file(self, tmp_path, value):
        path = tmp_path / "shape.json"
        path.write_text(json.dumps({"cubeSize": value}), encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestSetupLogging:
    def test_configures_package_logger(self, tmp_path):
        log_file = tmp_path / "drape.log"
        logger = logging.getLogger("drape")
        try:
            setup_logging(logging.DEBUG, str(log_file))
            assert logger.level == logging.DEBUG
            assert len(logger.handlers) == 2
            setup_logging(logging.INFO)
            assert len(logger.handlers) == 1
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)

    def test_replaced_file_handler_is_closed(self, tmp_path):
        logger = logging.getLogger("drape")
        try:
            returned = setup_logging(logging.INFO, str(tmp_path / "first.log"))
            assert returned is logger
            file_handler = next(
                h for h in logger.handlers if isinstance(h, logging.FileHandler)
            )
            assert file_handler.stream is not None
            setup_logging(logging.INFO)
            assert file_handler not in logger.handlers
            assert file_handler.stream is None
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
