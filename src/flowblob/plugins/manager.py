"""Plugin manager for activity discovery, registration, and lookup.

Uses pluggy for hook-based plugin registration.
"""

from dataclasses import dataclass
from typing import Any

import pluggy

from flowblob.plugins.base import BaseActivity
from flowblob.plugins.hookspecs import PROJECT_NAME, FlowblobActivitySpec


@dataclass(frozen=True)
class ActivitySpec:
    """Registration record for an activity."""

    name: str
    version: str
    description: str
    required_settings: tuple[str, ...]

    @classmethod
    def from_activity(cls, activity_cls: type[BaseActivity]) -> "ActivitySpec":
        from flowblob.plugins.discovery import get_activity_description

        return cls(
            name=activity_cls.name,
            version=activity_cls.plugin_version,
            description=get_activity_description(activity_cls),
            required_settings=activity_cls.declared_metadata.required_settings,
        )


class PluginManager:
    """Manages activity discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        activity_cls = manager.get_activity_by_name("azure_blob")
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FlowblobActivitySpec)
        self._activities: dict[str, type[BaseActivity]] = {}

    def register_builtin_plugins(self) -> None:
        """Discover and register all built-in activities."""
        from flowblob.plugins.discovery import create_dynamic_hookimpl, discover_all_activities

        self.register(create_dynamic_hookimpl(discover_all_activities(), "flowblob_get_activities"))

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods
        """
        self._pm.register(plugin)
        self._refresh_caches()

    def _refresh_caches(self) -> None:
        """Refresh the activity cache from hooks.

        Raises:
            ValueError: If two registered activities share a name
        """
        new_activities: dict[str, type[BaseActivity]] = {}

        for activities in self._pm.hook.flowblob_get_activities():
            for cls in activities:
                name = cls.name
                if name in new_activities:
                    raise ValueError(f"Duplicate activity name: '{name}'. Already registered by {new_activities[name].__name__}")
                new_activities[name] = cls

        self._activities = new_activities

    def get_activities(self) -> list[type[BaseActivity]]:
        """Get all registered activities."""
        return list(self._activities.values())

    def get_activity_by_name(self, name: str) -> type[BaseActivity] | None:
        """Get activity class by name."""
        return self._activities.get(name)

    def get_specs(self) -> list[ActivitySpec]:
        """Registration records for all activities, sorted by name."""
        return [ActivitySpec.from_activity(cls) for cls in sorted(self._activities.values(), key=lambda c: c.name)]
