"""Extension layer — plugin system via pluggy.

Discovery: entry points in the ``shopledger.plugins`` group.
Plugin failures are reported as warnings, never as errors.
"""

from shopledger.plugins.event_bus import EventBus
from shopledger.plugins.hookspecs import hookimpl
from shopledger.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager", "hookimpl"]
