"""``codelaunch instances|workspaces|machines`` -- Show what discovery finds.

Diagnostic commands that print each discovery stage on its own: the
editor instances found on the search path, the workspaces in their
history, and the SSH hosts they can reach.

Exit Codes:
    0 -- Something was found.
    2 -- Nothing was found.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from codelaunch.cli.options import build_session, discovery_options, format_option
from codelaunch.cli.output import (
    instance_to_dict,
    machine_to_dict,
    print_instances,
    print_machines,
    print_workspaces,
    workspace_to_dict,
)


@click.command("instances")
@discovery_options
@format_option
def instances_command(search_path: str | None, ssh_config: Path | None, output_format: str) -> None:
    """List VS Code family installations found on the search path."""
    session = build_session(search_path, ssh_config)
    if output_format == "json":
        click.echo(json.dumps([instance_to_dict(i) for i in session.instances], indent=2))
    else:
        print_instances(session.instances)
    sys.exit(0 if session.instances else 2)


@click.command("workspaces")
@discovery_options
@format_option
def workspaces_command(search_path: str | None, ssh_config: Path | None, output_format: str) -> None:
    """List workspaces recently opened by every discovered instance."""
    session = build_session(search_path, ssh_config)
    workspaces = session.workspace_discovery.discover(session.instances)
    if output_format == "json":
        click.echo(json.dumps([workspace_to_dict(w) for w in workspaces], indent=2))
    else:
        print_workspaces(workspaces)
    sys.exit(0 if workspaces else 2)


@click.command("machines")
@discovery_options
@format_option
def machines_command(search_path: str | None, ssh_config: Path | None, output_format: str) -> None:
    """List SSH remote machines configured for discovered instances."""
    session = build_session(search_path, ssh_config)
    machines = session.machine_discovery.discover(session.instances)
    if output_format == "json":
        click.echo(json.dumps([machine_to_dict(m) for m in machines], indent=2))
    else:
        print_machines(machines)
    sys.exit(0 if machines else 2)
