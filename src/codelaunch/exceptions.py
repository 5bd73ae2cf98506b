"""codelaunch exception hierarchy.

All public exceptions inherit from CodeLaunchError, giving callers a single
base class to catch when they want to handle any codelaunch-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from pathlib import Path


class CodeLaunchError(Exception):
    """Base exception for all codelaunch errors."""


class DiscoveryError(CodeLaunchError):
    """Raised when a discovery source cannot be turned into records.

    Carries the component that read the source and the file involved so
    the discovery loop that catches it can log one precise line.

    Attributes:
        source: Short component name (e.g. "settings", "state-db").
        path: The file that failed.
    """

    def __init__(self, source: str, path: Path | str, message: str) -> None:
        super().__init__(f"[{source}] {path}: {message}")
        self.source = source
        self.path = Path(path)


class MalformedSourceError(DiscoveryError):
    """Raised when a source file exists but cannot be parsed.

    Covers invalid JSON in ``settings.json`` or ``storage.json``, an
    unexpected top-level shape, and broken ``state.vscdb`` databases.
    """


class UnreadableSourceError(DiscoveryError):
    """Raised when a source file exists but cannot be read.

    Covers permission errors and other I/O failures.
    """


class ConfigError(CodeLaunchError):
    """Raised when the launcher settings file is invalid.

    Covers malformed YAML/JSON and fields of the wrong type.
    """


class LaunchError(CodeLaunchError):
    """Raised when an editor process or folder cannot be opened."""
