# src/flowblob/plugins/config_base.py
"""Base classes for typed plugin configurations.

This module provides base classes that activity configs inherit from to get:
- Strict validation (reject unknown fields)
- Immutability after validation
- Factory methods with clear error messages naming the failing field

Example usage:
    class MyActivityConfig(PluginConfig):
        container_name: str

    cfg = MyActivityConfig.from_dict(settings)
    cfg.container_name  # Direct access, validated once
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationError


class PluginConfigError(Exception):
    """Raised when plugin configuration is invalid.

    Attributes:
        fields: Names of the settings/inputs that failed validation.
    """

    def __init__(self, message: str, *, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.fields = fields


class ActivityConfigError(PluginConfigError):
    """Raised when a required setting is absent from the host context."""

    def __init__(self, setting: str) -> None:
        super().__init__(f"Missing required setting '{setting}'", fields=(setting,))
        self.setting = setting


def _format_validation_error(cls_name: str, error: ValidationError) -> tuple[str, tuple[str, ...]]:
    """Flatten a pydantic ValidationError into one message plus field names."""
    details: list[str] = []
    fields: list[str] = []
    for item in error.errors():
        loc = ".".join(str(part) for part in item["loc"])
        if loc and loc not in fields:
            fields.append(loc)
        details.append(f"{loc}: {item['msg']}" if loc else item["msg"])
    return f"Invalid configuration for {cls_name}: " + "; ".join(details), tuple(fields)


class PluginConfig(BaseModel):
    """Base class for typed plugin configurations.

    Settings are frozen after validation. Numbers are accepted where strings
    are expected (a host may hand over 42 for a setting declared as string);
    None, lists and mappings are not.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        coerce_numbers_to_str=True,
    )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Args:
            config: Dictionary of configuration values.

        Returns:
            Validated configuration instance.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            message, fields = _format_validation_error(cls.__name__, e)
            raise PluginConfigError(message, fields=fields) from e
        except ValueError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}") from e
