"""Decoding of workspace URIs recorded in the editor's history.

The editor stores every recently opened folder or workspace file as a URI:

- ``file:///c%3A/Users/me/project`` for local folders;
- ``vscode-remote://wsl%2BUbuntu/home/me/project`` for WSL distributions;
- ``vscode-remote://ssh-remote%2Bdev-box/home/me/project`` for SSH hosts;
- ``vscode-remote://dev-container%2B<hex>/workspaces/project`` for
  dev containers and ``vscode-remote://codespaces%2B<name>/...`` for
  Codespaces.

``decode_workspace_uri`` turns such a string into a ``Workspace``. Anything
that does not match one of the patterns is dropped by returning ``None``.
History files are full of entries this module does not care about, so
there is no logging here.
"""

from __future__ import annotations

import json
import re
from urllib.parse import unquote

from codelaunch.discovery.models import (
    EditorInstance,
    Workspace,
    WorkspaceKind,
    WorkspaceLocation,
)

WORKSPACE_FILE_SUFFIX = ".code-workspace"

_LOCAL = re.compile(r"^file://(?P<path>/.*)$", re.IGNORECASE)

# Authority kinds of ``vscode-remote://<kind>+<machine>/<path>``.
_REMOTE_KINDS: dict[str, WorkspaceLocation] = {
    "wsl": WorkspaceLocation.REMOTE_WSL,
    "ssh-remote": WorkspaceLocation.REMOTE_SSH,
    "dev-container": WorkspaceLocation.DEV_CONTAINER,
    "attached-container": WorkspaceLocation.DEV_CONTAINER,
    "codespaces": WorkspaceLocation.CODESPACES,
    "vsonline": WorkspaceLocation.CODESPACES,
}

_REMOTE = re.compile(
    r"^vscode-remote://(?P<kind>[\w-]+)\+(?P<machine>[^/]+)(?P<path>/.*)?$",
    re.IGNORECASE,
)

_DRIVE_PATH = re.compile(r"^/[A-Za-z]:")
_HEX = re.compile(r"^(?:[0-9a-fA-F]{2})+$")


def _decode_ssh_authority(machine: str) -> str:
    """Decode the hex-encoded JSON authority used for unusual host names.

    Hosts whose names are not valid in a URI authority are written as the
    hex encoding of ``{"hostName": "..."}``. Plain names pass through.
    """
    if not _HEX.match(machine):
        return machine
    try:
        payload = json.loads(bytes.fromhex(machine).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return machine
    if isinstance(payload, dict) and isinstance(payload.get("hostName"), str):
        return payload["hostName"]
    return machine


def _classify(uri: str) -> tuple[WorkspaceLocation, str, str | None] | None:
    """Return (location, relative path, machine) or None if unrecognized."""
    local = _LOCAL.match(uri)
    if local:
        path = local.group("path")
        # ``/c:/Users`` is a Windows drive path; drop the URI's leading slash.
        if _DRIVE_PATH.match(path):
            path = path[1:]
        return WorkspaceLocation.LOCAL, path, None

    remote = _REMOTE.match(uri)
    if remote:
        location = _REMOTE_KINDS.get(remote.group("kind").lower())
        if location is None:
            return None
        machine = remote.group("machine")
        if location is WorkspaceLocation.REMOTE_SSH:
            machine = _decode_ssh_authority(machine)
        return location, remote.group("path") or "/", machine

    return None


def folder_name_of(path: str) -> str:
    """Return the last segment of a path or URI.

    A trailing separator is ignored and a drive root yields its letter,
    so ``file:///C:/`` gives ``C`` rather than an empty string.
    """
    segments = re.split(r"[/\\]", path.rstrip("/\\"))
    return segments[-1].rstrip(":")


def decode_workspace_uri(
    uri: str | None,
    instance: EditorInstance,
    kind: WorkspaceKind | None = None,
) -> Workspace | None:
    """Decode a history URI into a ``Workspace``.

    Args:
        uri: Raw URI as stored by the editor (percent-encoded).
        instance: Instance whose history listed the URI.
        kind: Force the workspace kind. When omitted the kind is WORKSPACE
            for ``.code-workspace`` files and FOLDER otherwise.

    Returns:
        The decoded workspace, or None when the URI is empty or uses an
        unrecognized scheme.
    """
    if not uri:
        return None
    decoded = unquote(uri)
    classified = _classify(decoded)
    if classified is None:
        return None
    location, relative_path, machine = classified

    if kind is None:
        is_descriptor = decoded.lower().endswith(WORKSPACE_FILE_SUFFIX)
        kind = WorkspaceKind.WORKSPACE if is_descriptor else WorkspaceKind.FOLDER

    return Workspace(
        path=decoded,
        relative_path=relative_path,
        folder_name=folder_name_of(decoded),
        location=location,
        kind=kind,
        instance=instance,
        extra_info=machine,
    )
