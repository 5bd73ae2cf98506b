"""Launcher settings.

The settings mirror what a launcher host persists for this tool:

.. code-block:: yaml

    customWorkspaces:
      - file:///home/me/notes
      - vscode-remote://ssh-remote+box/srv/app
    discoverWorkspaces: true
    discoverMachines: true

Keys may also be written in snake_case (``custom_workspaces``). The file is
read with ``yaml.safe_load``, so a JSON settings file works unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from platformdirs import user_config_dir

from codelaunch.exceptions import ConfigError

APP_NAME = "codelaunch"

# Accepted spellings for each field.
_KEYS: dict[str, tuple[str, ...]] = {
    "custom_workspaces": ("customWorkspaces", "custom_workspaces"),
    "discover_workspaces": ("discoverWorkspaces", "discover_workspaces"),
    "discover_machines": ("discoverMachines", "discover_machines"),
}


@dataclass
class LauncherSettings:
    """User settings that shape the result list.

    Attributes:
        custom_workspaces: Extra workspace URIs always offered, opened with
            the default instance.
        discover_workspaces: Include workspaces from editor history.
        discover_machines: Include SSH hosts.
    """

    custom_workspaces: list[str] = field(default_factory=list)
    discover_workspaces: bool = True
    discover_machines: bool = True


def default_settings_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / "settings.yaml"


def _lookup(data: dict[str, Any], name: str) -> Any:
    for key in _KEYS[name]:
        if key in data:
            return data[key]
    return None


def settings_from_mapping(data: dict[str, Any]) -> LauncherSettings:
    """Build settings from a decoded mapping.

    Raises:
        ConfigError: If a field has the wrong type.
    """
    settings = LauncherSettings()

    custom = _lookup(data, "custom_workspaces")
    if custom is not None:
        if not isinstance(custom, list) or not all(isinstance(u, str) for u in custom):
            raise ConfigError("customWorkspaces must be a list of URI strings")
        settings.custom_workspaces = list(custom)

    for name in ("discover_workspaces", "discover_machines"):
        value = _lookup(data, name)
        if value is None:
            continue
        if not isinstance(value, bool):
            raise ConfigError(f"{_KEYS[name][0]} must be true or false")
        setattr(settings, name, value)
    return settings


def load_settings(path: Path | None = None) -> LauncherSettings:
    """Load settings from a YAML or JSON file.

    Args:
        path: Settings file. Defaults to the per-user config location.

    Returns:
        The settings; defaults when the file does not exist or is empty.

    Raises:
        ConfigError: If the file cannot be read or parsed, or holds
            fields of the wrong type.
    """
    settings_path = path if path is not None else default_settings_path()
    if not settings_path.is_file():
        return LauncherSettings()
    try:
        data = yaml.safe_load(settings_path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot load settings from {settings_path}: {exc}") from exc
    if data is None:
        return LauncherSettings()
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {settings_path} must contain a mapping")
    return settings_from_mapping(data)
