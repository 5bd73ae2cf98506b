"""Parsers for the external text formats discovery reads.

Public API::

    from codelaunch.parsers import SshHost, parse_ssh_config, loads_jsonc
"""

from __future__ import annotations

from codelaunch.parsers.jsonc import loads_jsonc
from codelaunch.parsers.ssh_config import SshHost, parse_ssh_config, parse_ssh_config_file

__all__ = [
    "SshHost",
    "loads_jsonc",
    "parse_ssh_config",
    "parse_ssh_config_file",
]
