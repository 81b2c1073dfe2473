"""Declared activity metadata.

The host runtime binds an activity to a static schema describing its
settings, inputs and outputs. This mirrors the activity descriptor document
that workflow runtimes load next to the activity code.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal

FieldType = Literal["string", "integer", "object"]


@dataclass(frozen=True)
class FieldSpec:
    """A single declared setting, input or output."""

    name: str
    type: FieldType = "string"
    required: bool = False
    allowed: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.required:
            data["required"] = True
        if self.allowed:
            data["allowed"] = list(self.allowed)
        return data


@dataclass(frozen=True)
class ActivityMetadata:
    """Static schema an activity exposes to its host."""

    name: str
    version: str
    title: str = ""
    settings: tuple[FieldSpec, ...] = field(default_factory=tuple)
    inputs: tuple[FieldSpec, ...] = field(default_factory=tuple)
    outputs: tuple[FieldSpec, ...] = field(default_factory=tuple)

    @property
    def required_settings(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.settings if spec.required)

    @property
    def setting_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.settings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "title": self.title,
            "settings": [spec.to_dict() for spec in self.settings],
            "input": [spec.to_dict() for spec in self.inputs],
            "output": [spec.to_dict() for spec in self.outputs],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
