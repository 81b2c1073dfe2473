"""
Settings file loading for the flowblob CLI.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Example settings.yaml:

    activity:
      azure_storage_account: mystorageaccount
      azure_storage_access_key: "${AZURE_STORAGE_ACCESS_KEY}"
      method: upload
      container_name: samples
    logging:
      level: INFO
      json_output: false

The activity block is passed through unvalidated here; the activity's own
configure() validates it so that missing settings are reported by name with
the same errors a host runtime would see.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

ENVVAR_PREFIX = "FLOWBLOB"


class LoggingSettings(BaseModel):
    """Logging options applied by the CLI before running the activity."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class FlowblobSettings(BaseModel):
    """Top-level settings file schema."""

    model_config = {"frozen": True, "extra": "forbid"}

    activity: dict[str, Any] = Field(
        default_factory=dict,
        description="Raw activity settings (validated by the activity itself)",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as-is so the activity's own
    validation reports them.
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
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
    """Lowercase mapping keys; Dynaconf env overrides arrive upper-cased."""
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def load_settings(config_path: Path) -> FlowblobSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence:
    1. Environment variables (FLOWBLOB_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Nested keys use a double underscore, e.g.
    FLOWBLOB_ACTIVITY__CONTAINER_NAME=samples.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated FlowblobSettings instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If the file fails schema validation
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENVVAR_PREFIX,
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _lower_keys(raw_config)
    raw_config = _expand_env_vars(raw_config)

    return FlowblobSettings(**raw_config)
