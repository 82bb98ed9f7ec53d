# src/portal_schema/core/config.py
"""
Configuration schema and loading for portal-schema.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from portal_schema.contracts import IdentityKey, ProvenancePolicy
from portal_schema.core.overrides import OverrideTables
from portal_schema.core.schema_map import DEFAULT_COMPONENT_ID


class OverrideSettings(BaseModel):
    """Extra display-name overrides layered on top of the built-in tables.

    Example YAML:
        overrides:
          attribute:
            "Bulk WES Level 4": "Bulk DNA Level 4"
          label:
            BulkWESLevel4: BulkDNALevel4
    """

    model_config = {"frozen": True}

    attribute: dict[str, str] = Field(
        default_factory=dict,
        description="Raw attribute display name -> current display name",
    )
    label: dict[str, str] = Field(
        default_factory=dict,
        description="Raw label -> current label",
    )
    include_defaults: bool = Field(
        default=True,
        description="Start from the built-in legacy-name tables",
    )

    def tables(self) -> OverrideTables:
        """Build the immutable lookup tables these settings describe."""
        if self.include_defaults:
            return OverrideTables.with_defaults(attribute=self.attribute, label=self.label)
        return OverrideTables(attribute=self.attribute, label=self.label)


class LoggingSettings(BaseModel):
    """Logging output configuration."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class PortalSchemaSettings(BaseModel):
    """Top-level portal-schema configuration.

    All settings are validated and frozen after construction.
    """

    model_config = {"frozen": True}

    schema_path: Path | None = Field(
        default=None,
        description="JSON-LD data model file (relative paths resolve against the settings file)",
    )
    component_id: str = Field(
        default=DEFAULT_COMPONENT_ID,
        min_length=1,
        description="Class id whose direct subclasses are the root manifests",
    )
    identity_key: IdentityKey = Field(
        default=IdentityKey.ID,
        description="Attribute field used to deduplicate resolved attributes",
    )
    provenance: ProvenancePolicy = Field(
        default=ProvenancePolicy.MERGE,
        description="Whether revisits add their manifest name (merge) or are dropped (first)",
    )
    overrides: OverrideSettings = Field(
        default_factory=OverrideSettings,
        description="Display-name override tables",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    def override_tables(self) -> OverrideTables:
        return self.overrides.tables()


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Args:
        config: Configuration dict (may contain nested structures)

    Returns:
        New dict with environment variables expanded
    """
    import os

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default = match.group(2)  # None if no default specified
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            if default is not None:
                return default
            # No env var and no default - keep original
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lower_keys(value: Any) -> Any:
    """Lower-case nested mapping keys (Dynaconf upper-cases env-provided keys).

    Override tables are left alone: their keys are schema names.
    """
    if not isinstance(value, dict):
        return value
    lowered: dict[str, Any] = {}
    for k, v in value.items():
        key = k.lower() if isinstance(k, str) else k
        lowered[key] = v if key in {"attribute", "label"} else _lower_keys(v)
    return lowered


def load_settings(config_path: Path) -> PortalSchemaSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (PORTAL_SCHEMA_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: PORTAL_SCHEMA_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated PortalSchemaSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="PORTAL_SCHEMA",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    raw_config = _expand_env_vars(raw_config)

    schema_path = raw_config.get("schema_path")
    if schema_path:
        resolved = Path(str(schema_path)).expanduser()
        if not resolved.is_absolute():
            resolved = (config_path.parent / resolved).resolve()
        raw_config["schema_path"] = resolved

    return PortalSchemaSettings(**raw_config)
