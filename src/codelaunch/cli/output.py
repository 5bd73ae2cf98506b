"""Rich output formatting helpers for the codelaunch CLI.

Provides terminal tables for discovered instances, workspaces, remote
machines and scored query results, plus JSON-friendly views of each record
for ``--format json``.

Location Color Mapping:
    Local = green, WSL = cyan, SSH = magenta, containers/Codespaces = blue
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from codelaunch.discovery.instances import instance_count_by_version
from codelaunch.discovery.models import (
    EditorInstance,
    RemoteMachine,
    Workspace,
    WorkspaceLocation,
)
from codelaunch.discovery.remote_machines import SETTINGS_FILE
from codelaunch.discovery.workspaces import STATE_DB, STORAGE_FILE
from codelaunch.results import ResultCandidate

_LOCATION_STYLES: dict[WorkspaceLocation, str] = {
    WorkspaceLocation.LOCAL: "green",
    WorkspaceLocation.REMOTE_WSL: "cyan",
    WorkspaceLocation.REMOTE_SSH: "magenta",
    WorkspaceLocation.DEV_CONTAINER: "blue",
    WorkspaceLocation.CODESPACES: "blue",
}

console = Console()


def location_style(location: WorkspaceLocation) -> str:
    """Return the Rich style string for a workspace location."""
    return _LOCATION_STYLES.get(location, "white")


def _state_files(instance: EditorInstance) -> list[str]:
    """Names of the history/settings files present for an instance."""
    app_data = instance.app_data_directory
    present: list[str] = []
    for relative in (STORAGE_FILE, STATE_DB, SETTINGS_FILE):
        if (app_data / relative).is_file():
            present.append(str(relative))
    return present


def instance_to_dict(instance: EditorInstance) -> dict[str, Any]:
    return {
        "version": instance.version.value,
        "name": instance.display_name,
        "executable": str(instance.executable_path),
        "app_data": str(instance.app_data_directory),
        "portable": instance.portable,
        "state_files": _state_files(instance),
    }


def workspace_to_dict(workspace: Workspace) -> dict[str, Any]:
    return {
        "path": workspace.path,
        "relative_path": workspace.relative_path,
        "folder_name": workspace.folder_name,
        "location": workspace.location.value,
        "kind": workspace.kind.value,
        "extra_info": workspace.extra_info,
        "label": workspace.label,
        "instance": workspace.instance.display_name,
    }


def machine_to_dict(machine: RemoteMachine) -> dict[str, Any]:
    return {
        "host": machine.host,
        "host_name": machine.host_name,
        "user": machine.user,
        "instance": machine.instance.display_name,
    }


def print_instances(instances: list[EditorInstance]) -> None:
    """Print a table of discovered editor instances."""
    if not instances:
        console.print("[yellow]No VS Code instances found on PATH.[/yellow]")
        console.print(
            "[dim]Check that the editor's install or bin directory is on PATH "
            "and that it contains resources/app/product.json.[/dim]"
        )
        return

    table = Table(title="Editor Instances", show_header=True, header_style="bold")
    table.add_column("Version", style="bold")
    table.add_column("Executable")
    table.add_column("State Directory", style="dim")
    table.add_column("Portable", justify="center")
    table.add_column("History Files", style="dim")
    for instance in instances:
        portable = Text("yes", style="cyan") if instance.portable else Text("-", style="dim")
        table.add_row(
            instance.display_name,
            str(instance.executable_path),
            str(instance.app_data_directory),
            portable,
            ", ".join(_state_files(instance)) or "-",
        )
    console.print(table)

    counts = instance_count_by_version(instances)
    parts = [f"[bold]{len(instances)}[/bold] instance(s)"]
    parts.extend(f"{version}: {count}" for version, count in counts.items())
    console.print(" | ".join(parts))


def print_workspaces(workspaces: list[Workspace]) -> None:
    """Print a table of discovered workspaces."""
    if not workspaces:
        console.print("[dim]No workspaces found.[/dim]")
        return

    table = Table(title="Recent Workspaces", show_header=True, header_style="bold")
    table.add_column("Name", style="bold")
    table.add_column("Location", justify="center")
    table.add_column("Kind", style="dim")
    table.add_column("Path")
    table.add_column("Instance", style="dim")
    for ws in workspaces:
        table.add_row(
            ws.label or ws.folder_name,
            Text(ws.location.value, style=location_style(ws.location)),
            ws.kind.value,
            ws.relative_path,
            ws.instance.display_name,
        )
    console.print(table)


def print_machines(machines: list[RemoteMachine]) -> None:
    """Print a table of SSH remote machines."""
    if not machines:
        console.print("[dim]No remote machines found.[/dim]")
        return

    table = Table(title="SSH Remote Machines", show_header=True, header_style="bold")
    table.add_column("Host", style="bold")
    table.add_column("HostName")
    table.add_column("User")
    table.add_column("Instance", style="dim")
    for machine in machines:
        table.add_row(machine.host, machine.host_name or "-", machine.user or "-", machine.instance.display_name)
    console.print(table)


def print_results(results: list[ResultCandidate]) -> None:
    """Print scored query results, best first."""
    table = Table(title="Results", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Subtitle")
    table.add_column("Score", justify="right")
    for index, result in enumerate(results, start=1):
        table.add_row(str(index), result.title, result.subtitle, str(result.score))
    console.print(table)

