"""Discovery of editor instances, recent workspaces and SSH machines.

Finds every VS Code family installation on the search path, reads the
workspaces each one recently opened and the SSH hosts it is configured to
reach. All discovery is read-only.

Public API::

    from codelaunch.discovery import (
        InstanceLocator, discover_workspaces, discover_remote_machines,
    )

    instances = InstanceLocator().locate_instances()
    for ws in discover_workspaces(instances):
        print(f"{ws.folder_name}: {ws.path}")
"""

from __future__ import annotations

from codelaunch.discovery.editions import EDITIONS, Edition, EditorVersion
from codelaunch.discovery.instances import InstanceLocator, locate, locate_instances
from codelaunch.discovery.models import (
    EditorInstance,
    RemoteMachine,
    Workspace,
    WorkspaceKind,
    WorkspaceLocation,
)
from codelaunch.discovery.remote_machines import (
    RemoteMachineDiscovery,
    discover_remote_machines,
)
from codelaunch.discovery.uri import decode_workspace_uri
from codelaunch.discovery.workspaces import WorkspaceDiscovery, discover_workspaces

__all__ = [
    "EDITIONS",
    "Edition",
    "EditorInstance",
    "EditorVersion",
    "InstanceLocator",
    "RemoteMachine",
    "RemoteMachineDiscovery",
    "Workspace",
    "WorkspaceDiscovery",
    "WorkspaceKind",
    "WorkspaceLocation",
    "decode_workspace_uri",
    "discover_remote_machines",
    "discover_workspaces",
    "locate",
    "locate_instances",
]
