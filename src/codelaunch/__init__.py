"""codelaunch: Discover VS Code instances, recent workspaces and SSH hosts."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from codelaunch.discovery import (  # noqa: E402
    discover_remote_machines,
    discover_workspaces,
    locate_instances,
)
from codelaunch.session import DiscoverySession  # noqa: E402

__all__ = [
    "DiscoverySession",
    "__version__",
    "discover_remote_machines",
    "discover_workspaces",
    "locate_instances",
]
