"""Extension layer — traffic observers via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from udpcomm.plugins.manager import PluginManager
from udpcomm.plugins.observers import Observers

__all__ = ["Observers", "PluginManager"]
