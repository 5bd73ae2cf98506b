"""Data models for the discovery module.

Contains the records produced by discovery: editor installations, the
workspaces they recently opened and the SSH hosts they can connect to.
Every record is immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from codelaunch.discovery.editions import EditorVersion


class WorkspaceLocation(Enum):
    """Where a workspace lives, derived from its URI scheme and authority."""

    LOCAL = "Local"
    REMOTE_WSL = "WSL"
    REMOTE_SSH = "SSH"
    DEV_CONTAINER = "Dev Container"
    CODESPACES = "Codespaces"


class WorkspaceKind(Enum):
    """Whether a history entry is a bare folder or a ``.code-workspace`` file."""

    FOLDER = "Folder"
    WORKSPACE = "Workspace"


@dataclass(frozen=True)
class EditorInstance:
    """A single validated editor installation.

    Attributes:
        version: Release channel of the installation.
        executable_path: Absolute path to the validated editor executable.
        app_data_directory: Directory holding the instance's persisted state
            (``storage.json``, ``User/settings.json``, ``User/globalStorage``).
        display_name: Edition data-directory name, e.g. "Code - Insiders".
        portable: True when the state lives in ``<install>/data/user-data``.
    """

    version: EditorVersion
    executable_path: Path
    app_data_directory: Path
    display_name: str = "Code"
    portable: bool = False


@dataclass(frozen=True, eq=False)
class Workspace:
    """A folder or multi-root workspace recently opened by an instance.

    Attributes:
        path: Percent-decoded workspace URI, the canonical location.
        relative_path: Filesystem portion of the URI.
        folder_name: Last path segment (drive letter for a drive root).
        location: Where the workspace lives.
        kind: Folder or workspace descriptor.
        instance: The editor instance whose history listed the entry.
        extra_info: Machine component for remote locations.
        label: Display override taken from the editor's history metadata.
    """

    path: str
    relative_path: str
    folder_name: str
    location: WorkspaceLocation
    kind: WorkspaceKind
    instance: EditorInstance
    extra_info: str | None = None
    label: str | None = None

    # Equality drives de-duplication of the aggregated list. Keep this tuple
    # in lockstep with the fields above: a field left out here is one that
    # two otherwise identical entries may differ in and still collapse.
    # ``instance`` is left out so the same folder listed by stable and
    # insiders shows once, opened with whichever instance came first.
    def _identity(self) -> tuple:
        return (
            self.path,
            self.relative_path,
            self.folder_name,
            self.location,
            self.kind,
            self.extra_info,
            self.label,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Workspace):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    @property
    def is_local(self) -> bool:
        return self.location is WorkspaceLocation.LOCAL


@dataclass(frozen=True)
class RemoteMachine:
    """An SSH host an instance can open a remote window on.

    Attributes:
        host: The ``Host`` directive value; connection target and display key.
        instance: Editor instance used to connect.
        host_name: The ``HostName`` directive value, or "".
        user: The ``User`` directive value, or "".
    """

    host: str
    instance: EditorInstance
    host_name: str = ""
    user: str = ""
