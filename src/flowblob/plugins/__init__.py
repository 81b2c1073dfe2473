# src/flowblob/plugins/__init__.py
"""Plugin system: activity base class, context, configuration and registry.

Quick start:
    from flowblob.plugins import PluginManager, InMemoryActivityContext

    manager = PluginManager()
    manager.register_builtin_plugins()
    activity = manager.get_activity_by_name("azure_blob")()
    outcome = activity.evaluate(InMemoryActivityContext(settings={...}))
"""

from flowblob.plugins.base import BaseActivity
from flowblob.plugins.config_base import ActivityConfigError, PluginConfig, PluginConfigError
from flowblob.plugins.context import ActivityContext, InMemoryActivityContext
from flowblob.plugins.hookspecs import hookimpl, hookspec
from flowblob.plugins.manager import ActivitySpec, PluginManager

__all__ = [
    "ActivityConfigError",
    "ActivityContext",
    "ActivitySpec",
    "BaseActivity",
    "InMemoryActivityContext",
    "PluginConfig",
    "PluginConfigError",
    "PluginManager",
    "hookimpl",
    "hookspec",
]
