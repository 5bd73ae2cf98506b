"""Discovery of SSH remote machines configured for remote development.

For every instance the editor's ``User/settings.json`` may name an SSH
config file through ``remote.SSH.configFile``. Each distinct config file is
parsed once and its hosts are attached to the first instance that named it.
When no instance names a config file at all, the user's default
``~/.ssh/config`` is used and its hosts are attached to the first instance.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from codelaunch.discovery.models import EditorInstance, RemoteMachine
from codelaunch.exceptions import (
    DiscoveryError,
    MalformedSourceError,
    UnreadableSourceError,
)
from codelaunch.parsers.jsonc import loads_jsonc
from codelaunch.parsers.ssh_config import parse_ssh_config_file

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("User") / "settings.json"
SSH_CONFIG_SETTING = "remote.SSH.configFile"


def default_ssh_config() -> Path:
    """Return the per-user SSH client config path."""
    return Path.home() / ".ssh" / "config"


def read_configured_ssh_config(settings_path: Path) -> str | None:
    """Return the ``remote.SSH.configFile`` value from a settings file.

    Returns:
        The configured path, or None when the setting is absent or not a
        string.

    Raises:
        UnreadableSourceError: If the settings file cannot be read.
        MalformedSourceError: If it is not UTF-8 or not a JSONC object.
    """
    try:
        content = settings_path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise UnreadableSourceError("settings", settings_path, str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise MalformedSourceError("settings", settings_path, f"not valid UTF-8: {exc}") from exc
    try:
        settings = loads_jsonc(content)
    except ValueError as exc:
        raise MalformedSourceError("settings", settings_path, f"invalid JSON: {exc}") from exc
    if not isinstance(settings, dict):
        raise MalformedSourceError("settings", settings_path, "top-level value is not an object")

    value = settings.get(SSH_CONFIG_SETTING)
    return value if isinstance(value, str) and value else None


def machines_from_config(config_path: Path, instance: EditorInstance) -> list[RemoteMachine]:
    """Parse an SSH config file into machines owned by ``instance``.

    Raises:
        UnreadableSourceError: If the config file cannot be read.
    """
    try:
        hosts = parse_ssh_config_file(config_path)
    except OSError as exc:
        raise UnreadableSourceError("ssh-config", config_path, str(exc)) from exc
    return [
        RemoteMachine(host=h.host, instance=instance, host_name=h.host_name, user=h.user)
        for h in hosts
    ]


class RemoteMachineDiscovery:
    """Collects SSH hosts from the config files editor instances point at.

    Attributes:
        default_config: SSH config consulted when no instance names one.
    """

    def __init__(self, default_config: Path | None = None) -> None:
        self.default_config = default_config if default_config is not None else default_ssh_config()

    def _configured_path(self, instance: EditorInstance) -> Path | None:
        """Resolve the SSH config an instance names, or None to skip it."""
        name = instance.display_name
        settings_path = instance.app_data_directory / SETTINGS_FILE
        if not settings_path.is_file():
            logger.info("[%s] No settings file at %s", name, settings_path)
            return None

        configured = read_configured_ssh_config(settings_path)
        if configured is None:
            logger.info("[%s] %s not set in %s", name, SSH_CONFIG_SETTING, settings_path)
            return None

        config_path = Path(configured).expanduser()
        if not config_path.is_file():
            logger.info("[%s] SSH config file does not exist: %s", name, config_path)
            return None
        return config_path

    def discover(self, instances: Sequence[EditorInstance]) -> list[RemoteMachine]:
        """Collect remote machines for all instances.

        Args:
            instances: Instances in priority order.

        Returns:
            Machines in discovery order. A config file named by several
            instances contributes once, owned by the first of them.
        """
        results: list[RemoteMachine] = []
        processed: set[Path] = set()

        for instance in instances:
            try:
                config_path = self._configured_path(instance)
                if config_path is None:
                    continue
                # A path counts as processed once found, even if it then fails to parse.
                if config_path in processed:
                    continue
                processed.add(config_path)
                machines = machines_from_config(config_path, instance)
            except DiscoveryError:
                logger.warning("[%s] Skipping remote machines", instance.display_name, exc_info=True)
                continue
            logger.info(
                "[%s] %d remote machine(s) from %s", instance.display_name, len(machines), config_path,
            )
            results.extend(machines)

        if not processed:
            results.extend(self._discover_default(instances))

        logger.info("%d remote machine(s) from %d instance(s)", len(results), len(instances))
        return results

    def _discover_default(self, instances: Sequence[EditorInstance]) -> list[RemoteMachine]:
        """Fall back to the default SSH config, owned by the first instance."""
        if not instances:
            return []
        config_path = self.default_config
        if not config_path.is_file():
            logger.info("Default SSH config does not exist: %s", config_path)
            return []
        try:
            machines = machines_from_config(config_path, instances[0])
        except DiscoveryError:
            logger.warning("Skipping default SSH config", exc_info=True)
            return []
        logger.info("%d remote machine(s) from default SSH config %s", len(machines), config_path)
        return machines


def discover_remote_machines(
    instances: Sequence[EditorInstance],
    default_config: Path | None = None,
) -> list[RemoteMachine]:
    """Convenience wrapper around ``RemoteMachineDiscovery().discover``."""
    return RemoteMachineDiscovery(default_config=default_config).discover(instances)
