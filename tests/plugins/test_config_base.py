# tests/plugins/test_config_base.py
"""Tests for plugin configuration base classes."""

import pytest
from pydantic import ValidationError, field_validator

from flowblob.plugins.config_base import ActivityConfigError, PluginConfig, PluginConfigError


class TestPluginConfig:
    """Tests for PluginConfig base class."""

    def test_rejects_extra_fields(self) -> None:
        """Extra fields should raise validation error."""

        class MyConfig(PluginConfig):
            name: str

        with pytest.raises(ValidationError) as exc_info:
            MyConfig(name="test", unknown_field="value")  # type: ignore[call-arg]

        assert "Extra inputs are not permitted" in str(exc_info.value)

    def test_from_dict_wraps_validation_error(self) -> None:
        """from_dict should wrap ValidationError in PluginConfigError."""

        class MyConfig(PluginConfig):
            required_field: str

        with pytest.raises(PluginConfigError) as exc_info:
            MyConfig.from_dict({})

        assert "Invalid configuration for MyConfig" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ValidationError)
        assert exc_info.value.fields == ("required_field",)

    def test_from_dict_success(self) -> None:
        class MyConfig(PluginConfig):
            name: str
            count: int = 10

        cfg = MyConfig.from_dict({"name": "test"})

        assert cfg.name == "test"
        assert cfg.count == 10

    def test_frozen_after_validation(self) -> None:
        class MyConfig(PluginConfig):
            name: str

        cfg = MyConfig.from_dict({"name": "test"})
        with pytest.raises(ValidationError):
            cfg.name = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(("value", "expected"), [(42, "42"), (3.5, "3.5")])
    def test_numbers_coerced_to_string(self, value: object, expected: str) -> None:
        class MyConfig(PluginConfig):
            name: str

        assert MyConfig.from_dict({"name": value}).name == expected

    @pytest.mark.parametrize("value", [None, ["a"], {"k": "v"}])
    def test_non_scalar_rejected_for_string(self, value: object) -> None:
        class MyConfig(PluginConfig):
            name: str

        with pytest.raises(PluginConfigError) as exc_info:
            MyConfig.from_dict({"name": value})
        assert exc_info.value.fields == ("name",)

    def test_every_failing_field_named(self) -> None:
        class MyConfig(PluginConfig):
            first: str
            second: str
            third: str = "ok"

        with pytest.raises(PluginConfigError) as exc_info:
            MyConfig.from_dict({"third": ["bad"]})

        assert exc_info.value.fields == ("first", "second", "third")

    def test_field_validator_error_names_field(self) -> None:
        class MyConfig(PluginConfig):
            name: str

            @field_validator("name")
            @classmethod
            def reject_admin(cls, v: str) -> str:
                if v == "admin":
                    raise ValueError("reserved name")
                return v

        with pytest.raises(PluginConfigError, match="reserved name") as exc_info:
            MyConfig.from_dict({"name": "admin"})
        assert exc_info.value.fields == ("name",)

    def test_non_dict_rejected(self) -> None:
        class MyConfig(PluginConfig):
            name: str

        with pytest.raises(PluginConfigError, match="config must be a dict, got list"):
            MyConfig.from_dict(["name"])  # type: ignore[arg-type]


class TestActivityConfigError:
    """Missing host settings."""

    def test_names_the_setting(self) -> None:
        error = ActivityConfigError("container_name")

        assert str(error) == "Missing required setting 'container_name'"
        assert error.setting == "container_name"
        assert error.fields == ("container_name",)

    def test_is_plugin_config_error(self) -> None:
        assert isinstance(ActivityConfigError("method"), PluginConfigError)
