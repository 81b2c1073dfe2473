# src/flowblob/plugins/hookspecs.py
"""pluggy hook specifications for flowblob activities.

Usage (implementing a plugin):
    from flowblob.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def flowblob_get_activities(self):
            return [MyActivity]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from flowblob.plugins.base import BaseActivity

PROJECT_NAME = "flowblob"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FlowblobActivitySpec:
    """Hook specifications for activity plugins."""

    @hookspec
    def flowblob_get_activities(self) -> list[type["BaseActivity"]]:  # type: ignore[empty-body]
        """Return activity plugin classes.

        Returns:
            List of activity classes (not instances)
        """
