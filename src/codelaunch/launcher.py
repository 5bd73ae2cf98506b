"""Launching editor windows for query results.

Builds the command-line arguments the editor expects for each kind of
target and starts the owning instance's executable without waiting for it.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

from codelaunch.discovery.models import RemoteMachine, Workspace, WorkspaceKind
from codelaunch.exceptions import LaunchError

logger = logging.getLogger(__name__)

REMOTE_SSH_EXTENSION = "ms-vscode-remote.remote-ssh"


def _workspace_flag(workspace: Workspace) -> str:
    return "--file-uri" if workspace.kind is WorkspaceKind.WORKSPACE else "--folder-uri"


def workspace_arguments(workspace: Workspace) -> str:
    """Arguments opening a folder (``--folder-uri``) or workspace file (``--file-uri``)."""
    return f'{_workspace_flag(workspace)} "{workspace.path}"'


def machine_arguments(machine: RemoteMachine) -> str:
    """Arguments opening a new remote window on an SSH host."""
    return (
        f"--new-window --enable-proposed-api {REMOTE_SSH_EXTENSION} "
        f'--remote ssh-remote+"{machine.host}"'
    )


def target_arguments(target: Workspace | RemoteMachine) -> str:
    """Display form of the arguments, as shown to the user."""
    if isinstance(target, Workspace):
        return workspace_arguments(target)
    return machine_arguments(target)


def target_argv(target: Workspace | RemoteMachine) -> list[str]:
    """Arguments passed to the executable, one list item per argument."""
    if isinstance(target, Workspace):
        return [_workspace_flag(target), target.path]
    return [
        "--new-window",
        "--enable-proposed-api",
        REMOTE_SSH_EXTENSION,
        "--remote",
        f"ssh-remote+{target.host}",
    ]


def launch(target: Workspace | RemoteMachine) -> subprocess.Popen:
    """Open ``target`` with the instance that discovered it.

    Raises:
        LaunchError: If the executable cannot be started (for example it
            was removed after discovery).
    """
    executable = target.instance.executable_path
    argv = [str(executable), *target_argv(target)]
    logger.info("Launching %s", argv)
    try:
        return subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=sys.platform != "win32",
        )
    except OSError as exc:
        raise LaunchError(f"Failed to start {executable}: {exc}") from exc


def open_directory(workspace: Workspace) -> None:
    """Open a local workspace's folder in the platform file manager.

    Raises:
        LaunchError: If the workspace is remote or the file manager fails.
    """
    if not workspace.is_local:
        raise LaunchError(f"Cannot open remote workspace folder: {workspace.path}")
    folder = Path(workspace.relative_path)
    try:
        if sys.platform == "win32":
            os.startfile(folder)  # type: ignore[attr-defined]
        else:
            opener = "open" if sys.platform == "darwin" else "xdg-open"
            subprocess.Popen([opener, str(folder)], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as exc:
        raise LaunchError(f"Failed to open {folder}: {exc}") from exc
