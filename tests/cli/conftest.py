"""Fixtures for CLI tests: a portable installation with history and SSH hosts."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.discovery.helpers import create_install, write_settings, write_ssh_config, write_state_db


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def editor_env(tmp_path: Path) -> list[str]:
    """Portable VS Code install with two folders and two SSH hosts.

    Returns the ``--search-path``/``--ssh-config`` arguments that point
    discovery at it.
    """
    install = create_install(tmp_path / "VSCode", portable=True)
    user_data = install / "data" / "user-data"
    write_state_db(user_data, {
        "entries": [
            {"folderUri": "file:///home/me/api-server"},
            {"folderUri": "vscode-remote://wsl%2BUbuntu/home/me/webapp"},
            {"workspace": {"id": "1", "configPath": "file:///home/me/all.code-workspace"}},
        ],
    })
    config = write_ssh_config(
        tmp_path / "ssh" / "config",
        "Host dev-box\n  HostName 10.0.0.12\n  User alice\n\nHost 43.128.131.41-proxy-kr1\n",
    )
    write_settings(user_data, {"remote.SSH.configFile": str(config)})
    return [
        "--search-path", str(install / "bin"),
        "--ssh-config", str(tmp_path / "no-default-config"),
    ]


@pytest.fixture
def empty_env(tmp_path: Path) -> list[str]:
    """Arguments for a search path with no editor installations."""
    return [
        "--search-path", str(tmp_path / "nothing-here"),
        "--ssh-config", str(tmp_path / "no-default-config"),
    ]
