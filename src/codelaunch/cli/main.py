"""codelaunch CLI -- Open VS Code workspaces and SSH hosts from the terminal.

Entry point for the ``codelaunch`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    instances  -- List editor installations found on PATH.
    workspaces -- List recently opened workspaces.
    machines   -- List SSH remote machines.
    query      -- Search workspaces and machines.
    open       -- Open the best match.

Usage::

    codelaunch instances
    codelaunch query api
    codelaunch query --keyword vsc          # list everything
    codelaunch open api
    codelaunch open kr1 --no-workspaces     # SSH hosts only
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from codelaunch import __version__
from codelaunch.cli.discover_cmd import (
    instances_command,
    machines_command,
    workspaces_command,
)
from codelaunch.cli.query_cmd import open_command, query_command


def configure_logging(verbose: bool) -> None:
    """Send codelaunch log records to stderr through Rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    root = logging.getLogger("codelaunch")
    root.handlers[:] = [handler]
    root.setLevel(logging.INFO if verbose else logging.WARNING)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log discovery details to stderr.")
def cli(verbose: bool) -> None:
    """codelaunch: find and open VS Code workspaces and SSH hosts.

    Discovers every VS Code, Insiders and VSCodium installation on PATH,
    the folders and workspaces each recently opened, and the SSH hosts
    configured for Remote-SSH.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(instances_command)
cli.add_command(workspaces_command)
cli.add_command(machines_command)
cli.add_command(query_command)
cli.add_command(open_command)
