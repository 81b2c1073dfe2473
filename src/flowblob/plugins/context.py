# src/flowblob/plugins/context.py
"""Activity execution context.

The host runtime hands a fresh context to every evaluate() call. Activities
read settings and inputs from it and publish outputs to it; they never keep
a reference to it after evaluate() returns.

ActivityContext is the protocol the shim depends on. InMemoryActivityContext
is a dict-backed implementation used by the CLI and by tests.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from flowblob.contracts.metadata import ActivityMetadata


@runtime_checkable
class ActivityContext(Protocol):
    """What an activity may ask of its host during one evaluation."""

    def get_setting(self, name: str) -> tuple[Any, bool]:
        """Return (value, exists) for a named setting."""
        ...

    def get_input(self, name: str) -> Any:
        """Return the named input, or None when it was not provided."""
        ...

    def set_output(self, name: str, value: Any) -> None:
        """Publish a named output value."""
        ...


@dataclass
class InMemoryActivityContext:
    """Dict-backed ActivityContext.

    When metadata is supplied, set_output() rejects names the activity did
    not declare, the same way a metadata-driven host would.

    Example:
        ctx = InMemoryActivityContext(
            settings={"method": "list", ...},
            inputs={"file": "abc.txt", "data": "hello"},
        )
        result = activity.evaluate(ctx)
        ctx.outputs.get("result")
    """

    settings: dict[str, Any] = field(default_factory=dict)
    inputs: dict[str, Any] = field(default_factory=dict)
    outputs: dict[str, Any] = field(default_factory=dict)
    metadata: ActivityMetadata | None = None

    def get_setting(self, name: str) -> tuple[Any, bool]:
        if name in self.settings:
            return self.settings[name], True
        return None, False

    def get_input(self, name: str) -> Any:
        return self.inputs.get(name)

    def set_output(self, name: str, value: Any) -> None:
        if self.metadata is not None:
            declared = {spec.name for spec in self.metadata.outputs}
            if name not in declared:
                raise KeyError(f"Output '{name}' is not declared by activity '{self.metadata.name}'")
        self.outputs[name] = value
