"""Parser for OpenSSH client configuration files.

The SSH client config (``~/.ssh/config`` or the file named by the editor's
``remote.SSH.configFile`` setting) is a sequence of blocks:

.. code-block:: text

    Host dev-box
      HostName 10.0.0.12
      User alice

    Host jump
        HostName jump.example.com

A block starts at a line whose first character is a word character and runs
until the next such line or the end of the file, so indented continuation
lines belong to the block above them. Each line of the form
``<Keyword><whitespace><value>`` inside a block is one directive.

Known Limitations
-----------------
- Values are a single whitespace-free token. Quoted values containing
  spaces (``Host "my host"``) are cut at the first space.
- ``Include`` directives are recorded like any other directive and are not
  expanded.
- ``Keyword=value`` syntax is not recognized.
- Keywords keep the case they are written in; ``hostname`` and ``HostName``
  are different keys.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

# First character of a line that opens a new block.
_BLOCK_START = re.compile(r"\w")

# ``Keyword value`` at the start of a (possibly indented) line.
_DIRECTIVE = re.compile(r"\s*(\w+)\s+(\S+)")


@dataclass(frozen=True)
class SshHost(Mapping[str, str]):
    """One block of an SSH config file.

    Behaves as a read-only mapping from directive name to value.

    Attributes:
        directives: Directive name to value, in first-seen order.
    """

    directives: dict[str, str] = field(default_factory=dict)

    def __getitem__(self, key: str) -> str:
        return self.directives[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.directives)

    def __len__(self) -> int:
        return len(self.directives)

    @property
    def host(self) -> str:
        return self.directives.get("Host", "")

    @property
    def host_name(self) -> str:
        return self.directives.get("HostName", "")

    @property
    def user(self) -> str:
        return self.directives.get("User", "")


def _split_blocks(text: str) -> list[list[str]]:
    """Group lines into blocks; lines before the first block are dropped."""
    blocks: list[list[str]] = []
    for line in text.split("\n"):
        if _BLOCK_START.match(line):
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
    return blocks


def _parse_block(lines: list[str]) -> dict[str, str]:
    directives: dict[str, str] = {}
    for line in lines:
        match = _DIRECTIVE.match(line)
        if match is not None:
            key, value = match.groups()
            directives[key] = value
    return directives


def parse_ssh_config(text: str) -> list[SshHost]:
    """Parse SSH client config text into host records.

    Never raises on malformed input; text that does not form a directive is
    ignored, and blocks without a ``Host`` directive are discarded.

    Args:
        text: Full file content.

    Returns:
        One ``SshHost`` per block with a non-empty ``Host``, in file order.
    """
    text = text.replace("\r", "")
    hosts: list[SshHost] = []
    for block in _split_blocks(text):
        directives = _parse_block(block)
        if directives.get("Host"):
            hosts.append(SshHost(directives=directives))
    return hosts


def parse_ssh_config_file(path: Path) -> list[SshHost]:
    """Read and parse an SSH config file.

    Raises:
        OSError: If the file cannot be read.
    """
    return parse_ssh_config(Path(path).read_text(encoding="utf-8-sig", errors="replace"))
