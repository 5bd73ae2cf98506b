"""Options shared by several codelaunch commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from codelaunch.config import LauncherSettings, load_settings
from codelaunch.discovery.instances import InstanceLocator
from codelaunch.discovery.remote_machines import RemoteMachineDiscovery
from codelaunch.exceptions import ConfigError
from codelaunch.session import DiscoverySession


def discovery_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--search-path`` and ``--ssh-config`` to a command."""
    func = click.option(
        "--ssh-config",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="SSH config used when no instance names one (default: ~/.ssh/config).",
    )(func)
    func = click.option(
        "--search-path",
        default=None,
        help="Search path to scan instead of $PATH.",
    )(func)
    return func


def format_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--format", "output_format",
        type=click.Choice(["text", "json"]),
        default="text",
        help="Output format: text (default) or json.",
    )(func)


def settings_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the settings file and per-run overrides to a command."""
    func = click.option(
        "--no-machines", is_flag=True, default=False,
        help="Leave out SSH remote machines.",
    )(func)
    func = click.option(
        "--no-workspaces", is_flag=True, default=False,
        help="Leave out workspaces from editor history.",
    )(func)
    func = click.option(
        "--workspace", "extra_workspaces", multiple=True,
        help="Extra workspace URI to offer (repeatable).",
    )(func)
    func = click.option(
        "--settings", "settings_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Settings file (YAML or JSON).",
    )(func)
    return func


def resolve_settings(
    settings_path: Path | None,
    extra_workspaces: tuple[str, ...],
    no_workspaces: bool,
    no_machines: bool,
) -> LauncherSettings:
    """Load the settings file and apply command-line overrides.

    Raises:
        click.ClickException: If the settings file is invalid.
    """
    try:
        settings = load_settings(settings_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    settings.custom_workspaces.extend(extra_workspaces)
    if no_workspaces:
        settings.discover_workspaces = False
    if no_machines:
        settings.discover_machines = False
    return settings


def build_session(
    search_path: str | None,
    ssh_config: Path | None,
    settings: LauncherSettings | None = None,
) -> DiscoverySession:
    """Create and initialize a session for one CLI invocation."""
    session = DiscoverySession(
        settings=settings,
        locator=InstanceLocator(),
        machine_discovery=RemoteMachineDiscovery(default_config=ssh_config),
    )
    session.initialize(search_path)
    return session
