# src/flowblob/plugins/base.py
"""Base class for activity implementations.

Activities MUST subclass BaseActivity. Plugin discovery uses issubclass()
checks against it, which a Protocol with non-method members cannot support.

Lifecycle contract (driven by the host runtime):
    __init__(metadata) once -> evaluate(ctx) many times

- __init__: binds the activity to its declared metadata. The host may pass
  its own copy (e.g. loaded from a descriptor file); it must describe the
  same activity.
- evaluate: performs one step. Always returns EvalResult(done=True, ...).
  Expected failures (bad settings, provider errors) come back in
  EvalResult.error; bugs propagate as exceptions.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from flowblob.contracts import ActivityMetadata, EvalResult
from flowblob.plugins.context import ActivityContext


class BaseActivity(ABC):
    """Base class for activities.

    Example:
        class EchoActivity(BaseActivity):
            name = "echo"
            declared_metadata = ActivityMetadata(name="echo", version="1.0.0", ...)

            def evaluate(self, ctx: ActivityContext) -> EvalResult:
                ctx.set_output("result", ctx.get_input("data"))
                return EvalResult.success()
    """

    name: ClassVar[str]
    plugin_version: ClassVar[str] = "0.0.0"
    declared_metadata: ClassVar[ActivityMetadata]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declared = cls.__dict__.get("declared_metadata")
        if declared is not None and declared.name != cls.__dict__.get("name", declared.name):
            raise TypeError(f"{cls.__name__}: declared_metadata.name '{declared.name}' does not match name '{cls.name}'")

    def __init__(self, metadata: ActivityMetadata | None = None) -> None:
        if metadata is not None and metadata.name != self.name:
            raise ValueError(f"Metadata for '{metadata.name}' cannot be bound to activity '{self.name}'")
        self._metadata = metadata if metadata is not None else self.declared_metadata

    def metadata(self) -> ActivityMetadata:
        """Return the schema this activity instance is bound to."""
        return self._metadata

    @abstractmethod
    def evaluate(self, ctx: ActivityContext) -> EvalResult:
        """Run one evaluation step against the given context."""
        ...
