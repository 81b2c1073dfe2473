"""Dynamic activity discovery by package scanning.

Scans configured plugin packages for classes that:
1. Inherit from BaseActivity
2. Have a `name` class attribute
3. Are not abstract (no @abstractmethod methods without implementation)

Modules are imported by their dotted name so that discovered classes are the
same objects tests and callers import directly.
"""

import importlib
import inspect
import logging
import pkgutil
from typing import Any

logger = logging.getLogger(__name__)

# Modules that never define activities: scanning them would only import helpers
EXCLUDED_MODULES: frozenset[str] = frozenset(
    {
        "auth",
        "operations",
    }
)

# Packages scanned for built-in activities (non-recursive)
PLUGIN_PACKAGES: tuple[str, ...] = ("flowblob.plugins.azure",)


def discover_activities_in_package(package_name: str, base_class: type) -> list[type]:
    """Discover activity classes in a package.

    Args:
        package_name: Dotted package name to scan
        base_class: Base class that activities must inherit from

    Returns:
        List of discovered activity classes
    """
    package = importlib.import_module(package_name)
    discovered: list[type] = []

    # Sorted so discovery order, and thus duplicate-name errors, is deterministic
    for module_info in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        if module_info.ispkg or module_info.name in EXCLUDED_MODULES:
            continue

        # Activity code is system-owned: import errors are bugs, let them propagate.
        module = importlib.import_module(f"{package_name}.{module_info.name}")
        discovered.extend(_discover_in_module(module, base_class))

    return discovered


def _discover_in_module(module: Any, base_class: type) -> list[type]:
    discovered: list[type] = []
    for name, obj in inspect.getmembers(module, inspect.isclass):
        # Must be defined in this module (not imported)
        if obj.__module__ != module.__name__:
            continue
        # Must inherit from base_class (but not BE base_class)
        if not issubclass(obj, base_class) or obj is base_class:
            continue
        # Intermediate bases with unimplemented abstract methods are not activities
        if inspect.isabstract(obj):
            continue

        # Trust boundary: scanned classes may not define `name` at all
        plugin_name = getattr(obj, "name", None)
        if not plugin_name:
            logger.warning(
                "Class %s in %s inherits from %s but has no/empty 'name' attribute - skipping",
                name,
                module.__name__,
                base_class.__name__,
            )
            continue

        discovered.append(obj)

    return discovered


def discover_all_activities() -> list[type]:
    """Discover all built-in activities.

    Raises:
        ValueError: If two activities share a name.
    """
    from flowblob.plugins.base import BaseActivity

    all_discovered: list[type] = []
    seen: dict[str, type] = {}

    for package_name in PLUGIN_PACKAGES:
        for cls in discover_activities_in_package(package_name, BaseActivity):
            cls_name: str = cls.name  # type: ignore[attr-defined]
            if cls_name in seen:
                raise ValueError(
                    f"Duplicate activity name '{cls_name}': "
                    f"found in both {seen[cls_name].__module__} and {cls.__module__}. "
                    f"Activity names must be unique."
                )
            seen[cls_name] = cls
            all_discovered.append(cls)

    return all_discovered


def get_activity_description(activity_cls: type) -> str:
    """First non-empty docstring line, or a name-based fallback."""
    if activity_cls.__doc__:
        for line in activity_cls.__doc__.strip().split("\n"):
            cleaned = line.strip()
            if cleaned:
                return cleaned

    name = getattr(activity_cls, "name", activity_cls.__name__)
    return f"{name} activity"


def create_dynamic_hookimpl(activity_classes: list[type], hook_method_name: str) -> object:
    """Create a pluggy hookimpl object returning the given classes.

    Args:
        activity_classes: Activity classes to register
        hook_method_name: Name of the hook method (e.g., "flowblob_get_activities")

    Returns:
        Object instance with the decorated hook method
    """
    from flowblob.plugins.hookspecs import hookimpl

    class DynamicHookImpl:
        """Dynamically generated hook implementer."""

    def hook_method(self: Any) -> list[type]:
        return activity_classes

    setattr(DynamicHookImpl, hook_method_name, hookimpl(hook_method))

    return DynamicHookImpl()
