"""Unit tests for configuration schema, loader, adapter and validator.

These tests verify:
- Valid configurations are loaded correctly
- Unknown fields are rejected (extra="forbid")
- Schema version handling
- Loader error handling (file not found, JSON parse errors)
- Conversion to domain objects
- Feature fit errors and planning advisories
"""

from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from foilplan.application.config import (
    SUPPORTED_VERSIONS,
    ConfigError,
    PlanConfiguration,
    PlannerSettingsSchema,
    ValidationResult,
    VesselSchema,
    config_to_geometry,
    config_to_membrane,
    config_to_settings,
    load_config,
    load_config_from_dict,
    validate_config,
)
from foilplan.application.config.loader import _format_json_path
from foilplan.domain import (
    MembraneSubtype,
    OptimizationPriority,
    PlannerSettings,
    WallLayout,
)

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "configs"


def _config(**vessel: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"length": 8.0, "width": 4.0, "depth": 1.5}
    data.update(vessel)
    return {"schema_version": "1.0", "vessel": data}


class TestSchema:
    """Tests for the Pydantic schema models."""

    def test_minimal_config_defaults(self) -> None:
        config = PlanConfiguration.model_validate(_config())
        assert config.membrane.subtype == MembraneSubtype.SINGLE_COLOR
        assert config.membrane.priority == OptimizationPriority.MINIMIZE_WASTE
        assert config.membrane.wall_layout == WallLayout.PERIMETER
        assert config.planner is None

    def test_unknown_field_rejected(self) -> None:
        data = _config()
        data["vessel"]["colour"] = "blue"
        with pytest.raises(PydanticValidationError):
            PlanConfiguration.model_validate(data)

    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            PlanConfiguration.model_validate(_config(depth=-1.0))

    def test_missing_vessel_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            PlanConfiguration.model_validate({"schema_version": "1.0"})

    @pytest.mark.parametrize("version", sorted(SUPPORTED_VERSIONS))
    def test_supported_versions(self, version: str) -> None:
        data = _config()
        data["schema_version"] = version
        assert PlanConfiguration.model_validate(data).schema_version == version

    def test_newer_minor_version_accepted(self) -> None:
        data = _config()
        data["schema_version"] = "1.7"
        assert PlanConfiguration.model_validate(data).schema_version == "1.7"

    def test_unsupported_major_version_rejected(self) -> None:
        data = _config()
        data["schema_version"] = "2.0"
        with pytest.raises(PydanticValidationError, match="Unsupported schema version"):
            PlanConfiguration.model_validate(data)

    def test_malformed_version_rejected(self) -> None:
        data = _config()
        data["schema_version"] = "one"
        with pytest.raises(PydanticValidationError):
            PlanConfiguration.model_validate(data)

    def test_membrane_enum_values(self) -> None:
        data = _config()
        data["membrane"] = {
            "subtype": "textured",
            "priority": "minimize-total-material",
            "wall_layout": "separate",
        }
        config = PlanConfiguration.model_validate(data)
        assert config.membrane.subtype == MembraneSubtype.TEXTURED
        assert config.membrane.wall_layout == WallLayout.SEPARATE

    def test_two_vertices_rejected(self) -> None:
        with pytest.raises(PydanticValidationError, match="at least 3"):
            VesselSchema(length=4.0, width=3.0, depth=1.5, vertices=[(0, 0), (4, 0)])

    def test_planner_widths_ordered(self) -> None:
        with pytest.raises(PydanticValidationError, match="narrow_width"):
            PlannerSettingsSchema(narrow_width=2.1, wide_width=2.05)

    def test_planner_join_overlaps_ordered(self) -> None:
        with pytest.raises(PydanticValidationError, match="join overlaps"):
            PlannerSettingsSchema(join_overlap_min=0.12, join_overlap_default=0.10)

    def test_planner_floor_overlap_narrower_than_strip(self) -> None:
        with pytest.raises(PydanticValidationError, match="floor_min_overlap"):
            PlannerSettingsSchema(narrow_width=0.4, floor_min_overlap=0.45)


class TestPlannerSettings:
    """Tests for PlannerSettings validation."""

    def test_floor_overlap_must_be_narrower_than_strip(self) -> None:
        with pytest.raises(ValueError, match="floor_min_overlap"):
            PlannerSettings(narrow_width=0.4, floor_min_overlap=0.45)

    def test_wall_overlap_must_be_narrower_than_strip(self) -> None:
        with pytest.raises(ValueError, match="wall_min_overlap"):
            PlannerSettings(narrow_width=0.4, wall_min_overlap=0.4)

    def test_join_overlaps_ordered(self) -> None:
        with pytest.raises(ValueError, match="Join overlaps"):
            PlannerSettings(join_overlap_default=0.2)


class TestFormatJsonPath:
    def test_nested_fields(self) -> None:
        assert _format_json_path(("vessel", "stairs", "width")) == "vessel.stairs.width"

    def test_list_index(self) -> None:
        assert _format_json_path(("vessel", "vertices", 2, 0)) == "vessel.vertices[2][0]"


class TestLoader:
    """Tests for load_config and load_config_from_dict."""

    def test_load_valid_file(self) -> None:
        config = load_config(FIXTURES_PATH / "family_pool.json")
        assert config.vessel.length == 10.0
        assert config.vessel.width == 5.0

    def test_load_features(self) -> None:
        config = load_config(FIXTURES_PATH / "pool_with_features.json")
        assert config.vessel.stairs is not None
        assert config.vessel.stairs.width == 1.5
        assert config.vessel.basin is not None
        assert config.vessel.basin.has_partition_wall

    def test_file_not_found(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "nonexistent.json")
        assert exc_info.value.error_type == "file_not_found"
        assert "not found" in str(exc_info.value)

    def test_malformed_json(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "malformed.json")
        error = exc_info.value
        assert error.error_type == "json_parse"
        assert "line" in error.details[0]

    def test_validation_error_paths(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "invalid_depth.json")
        error = exc_info.value
        assert error.error_type == "validation"
        assert [d["path"] for d in error.details] == ["vessel.depth"]
        assert "vessel.depth" in error.message

    def test_unsupported_version_is_validation_error(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "unsupported_version.json")
        error = exc_info.value
        assert error.error_type == "validation"
        assert error.details[0]["path"] == "schema_version"

    def test_load_from_dict(self) -> None:
        config = load_config_from_dict(_config())
        assert config.vessel.depth == 1.5

    def test_load_from_dict_error(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict({"schema_version": "1.0", "vessel": {}})
        assert exc_info.value.path is None
        assert len(exc_info.value.details) == 3


class TestAdapter:
    """Tests for conversion to domain objects."""

    def test_geometry(self) -> None:
        config = load_config(FIXTURES_PATH / "pool_with_features.json")
        geometry = config_to_geometry(config)
        assert geometry.length == 10.0
        assert geometry.stairs is not None
        assert geometry.stairs.width == 1.5
        assert geometry.basin is not None
        assert geometry.basin.depth == 0.4

    def test_vertices_become_tuples(self) -> None:
        config = load_config_from_dict(
            _config(vertices=[[0, 0], [6, 0], [6, 4], [0, 4]])
        )
        geometry = config_to_geometry(config)
        assert geometry.vertices == ((0.0, 0.0), (6.0, 0.0), (6.0, 4.0), (0.0, 4.0))

    def test_default_settings(self) -> None:
        config = load_config_from_dict(_config())
        assert config_to_settings(config) == PlannerSettings()

    def test_settings_overrides(self) -> None:
        data = _config()
        data["planner"] = {"roll_length": 30.0, "min_reusable_offcut": 3.0}
        settings = config_to_settings(load_config_from_dict(data))
        assert settings.roll_length == 30.0
        assert settings.min_reusable_offcut == 3.0
        assert settings.narrow_width == 1.65

    def test_membrane(self) -> None:
        config = load_config(FIXTURES_PATH / "pool_with_features.json")
        subtype, priority, layout = config_to_membrane(config)
        assert subtype == MembraneSubtype.SINGLE_COLOR
        assert priority == OptimizationPriority.MINIMIZE_TOTAL_MATERIAL
        assert layout == WallLayout.PERIMETER


class TestValidationResult:
    def test_exit_codes(self) -> None:
        assert ValidationResult().exit_code == 0
        assert ValidationResult().add_warning("vessel", "deep").exit_code == 2
        result = ValidationResult().add_warning("vessel", "deep").add_error("vessel", "bad")
        assert result.exit_code == 1
        assert not result.is_valid

    def test_merge(self) -> None:
        result = ValidationResult().add_error("a", "one")
        result.merge(ValidationResult().add_warning("b", "two"))
        assert len(result.errors) == 1
        assert result.has_warnings


class TestValidateConfig:
    """Tests for checks beyond the schema."""

    def test_plain_pool_is_clean(self) -> None:
        result = validate_config(load_config(FIXTURES_PATH / "small_pool.json"))
        assert result.errors == []
        assert result.warnings == []

    def test_deep_pool_warns_about_stacked_strips(self) -> None:
        result = validate_config(load_config(FIXTURES_PATH / "deep_pool.json"))
        assert result.is_valid
        assert [w.path for w in result.warnings] == ["vessel.depth"]
        assert result.warnings[0].suggestion is not None

    def test_narrow_only_subtype_on_tall_walls(self) -> None:
        data = _config(depth=1.6)
        data["membrane"] = {"subtype": "printed"}
        result = validate_config(load_config_from_dict(data))
        assert any("narrow-only" in w.message for w in result.warnings)

    def test_stairs_wider_than_pool(self) -> None:
        result = validate_config(load_config_from_dict(_config(stairs={"width": 4.5})))
        assert [e.path for e in result.errors] == ["vessel.stairs.width"]

    def test_basin_deeper_than_pool(self) -> None:
        result = validate_config(
            load_config_from_dict(_config(basin={"depth": 2.0}))
        )
        assert "vessel.basin.depth" in [e.path for e in result.errors]

    def test_long_pool_warns_about_joined_strips(self) -> None:
        result = validate_config(load_config_from_dict(_config(length=30.0)))
        paths = [w.path for w in result.warnings]
        assert "vessel.length" in paths
        assert any("A-B" in w.message for w in result.warnings)

    def test_no_floor_area(self) -> None:
        result = validate_config(load_config_from_dict(_config(width=0.0)))
        assert any(w.path == "vessel" for w in result.warnings)

    def test_inconsistent_planner_overrides(self) -> None:
        data = _config()
        data["planner"] = {"single_width_depth": 2.0, "wide_width_depth": 1.95}
        with pytest.raises(ConfigError):
            load_config_from_dict(data)
