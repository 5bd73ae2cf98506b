"""``codelaunch query|open`` -- Search and open workspaces and SSH hosts.

``query`` prints the scored result list for a search string, best match
first. ``open`` launches the best match with the editor instance that
discovered it.

Exit Codes:
    0 -- Results printed / target launched.
    1 -- The editor could not be started.
    2 -- Nothing matched the search.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from codelaunch.cli.options import (
    build_session,
    discovery_options,
    format_option,
    resolve_settings,
    settings_options,
)
from codelaunch.cli.output import print_results
from codelaunch.discovery.models import Workspace
from codelaunch.exceptions import LaunchError
from codelaunch.launcher import launch, open_directory
from codelaunch.session import sort_by_score


@click.command("query")
@click.argument("search", required=False, default="")
@click.option(
    "--keyword", default="",
    help="Action keyword the query was made with; with no SEARCH lists everything.",
)
@settings_options
@discovery_options
@format_option
def query_command(
    search: str,
    keyword: str,
    settings_path: Path | None,
    extra_workspaces: tuple[str, ...],
    no_workspaces: bool,
    no_machines: bool,
    search_path: str | None,
    ssh_config: Path | None,
    output_format: str,
) -> None:
    """Search workspaces and SSH hosts matching SEARCH."""
    settings = resolve_settings(settings_path, extra_workspaces, no_workspaces, no_machines)
    session = build_session(search_path, ssh_config, settings)
    results = sort_by_score(session.build_results(search, keyword))

    if not results:
        if output_format == "json":
            click.echo(json.dumps({"results": [], "summary": "No matches"}))
        else:
            click.echo("No matching workspaces or remote machines.")
        sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps({"results": [r.to_dict() for r in results]}, indent=2))
    else:
        print_results(results)


@click.command("open")
@click.argument("search")
@click.option(
    "--reveal", is_flag=True, default=False,
    help="Open the best local workspace's folder in the file manager instead.",
)
@settings_options
@discovery_options
def open_command(
    search: str,
    reveal: bool,
    settings_path: Path | None,
    extra_workspaces: tuple[str, ...],
    no_workspaces: bool,
    no_machines: bool,
    search_path: str | None,
    ssh_config: Path | None,
) -> None:
    """Open the best match for SEARCH in VS Code."""
    settings = resolve_settings(settings_path, extra_workspaces, no_workspaces, no_machines)
    session = build_session(search_path, ssh_config, settings)
    results = sort_by_score(session.build_results(search))
    if not results:
        click.echo(f"Nothing matches '{search}'.")
        sys.exit(2)

    best = results[0]
    try:
        if reveal:
            if not isinstance(best.target, Workspace):
                raise LaunchError(f"'{best.title}' is a remote machine, not a folder")
            open_directory(best.target)
        else:
            launch(best.target)
    except LaunchError as exc:
        click.echo(f"Failed to open '{best.title}': {exc}", err=True)
        sys.exit(1)
    click.echo(f"Opening {best.title}")
