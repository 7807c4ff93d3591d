"""Configuration schema and loading system for planning input files.

This package provides JSON-based configuration loading and validation for
vessel planning. It includes Pydantic models for schema validation, a
configuration loader with comprehensive error handling, adapters to the
domain types, and planning advisory checks.

Example:
    >>> from pathlib import Path
    >>> from foilplan.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("family-pool.json"))
    ...     print(f"Pool: {config.vessel.length}x{config.vessel.width}")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from foilplan.application.config.adapter import (
    config_to_geometry,
    config_to_membrane,
    config_to_settings,
)
from foilplan.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from foilplan.application.config.schema import (
    SUPPORTED_VERSIONS,
    BasinSchema,
    MembraneSchema,
    PlanConfiguration,
    PlannerSettingsSchema,
    StairsSchema,
    VesselSchema,
)
from foilplan.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate_config,
)

__all__ = [
    "BasinSchema",
    "ConfigError",
    "MembraneSchema",
    "PlanConfiguration",
    "PlannerSettingsSchema",
    "SUPPORTED_VERSIONS",
    "StairsSchema",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "VesselSchema",
    "config_to_geometry",
    "config_to_membrane",
    "config_to_settings",
    "load_config",
    "load_config_from_dict",
    "validate_config",
]
