"""Static registry of known VS Code family editions.

Each ``Edition`` describes how one member of the editor family is
recognized on disk: the filename substring that identifies its executable,
the name of its per-user data directory, and the executable stems the
locator probes inside an installation directory.

The table is ordered. Classification walks it top to bottom and the first
edition whose ``marker`` occurs in the executable filename wins; the
Stable edition has an empty marker and therefore sits last as the
catch-all. Adding an edition is a one-entry change here.

Platform Notes:
    Windows installs ship ``Code.exe`` next to a ``bin`` directory holding
    ``code.cmd``. Linux packages ship ``code`` next to ``bin/code`` (a shell
    launcher). Every install carries ``resources/app/product.json``, which
    is the metadata the locator uses to reject look-alike executables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class EditorVersion(Enum):
    """Release channel (or fork) of an editor installation."""

    STABLE = "Stable"
    INSIDERS = "Insiders"
    EXPLORATION = "Exploration"
    VSCODIUM = "VSCodium"


@dataclass(frozen=True)
class Edition:
    """Describes one edition of the editor family.

    Attributes:
        version: Release channel this edition maps to.
        marker: Lower-case substring of the executable filename that
            identifies the edition. Empty for the catch-all.
        data_dir_name: Directory name under the roaming config root where
            a non-portable install keeps its state (e.g. "Code - Insiders").
        executables: Executable stems probed inside an install directory,
            capitalized spelling first.
    """

    version: EditorVersion
    marker: str
    data_dir_name: str
    executables: tuple[str, ...] = field(default_factory=tuple)


EDITIONS: tuple[Edition, ...] = (
    Edition(
        version=EditorVersion.INSIDERS,
        marker="insiders",
        data_dir_name="Code - Insiders",
        executables=("Code - Insiders", "code-insiders"),
    ),
    Edition(
        version=EditorVersion.EXPLORATION,
        marker="exploration",
        data_dir_name="Code - Exploration",
        executables=("Code - Exploration", "code-exploration"),
    ),
    Edition(
        version=EditorVersion.VSCODIUM,
        marker="codium",
        data_dir_name="VSCodium",
        executables=("VSCodium", "codium"),
    ),
    Edition(
        version=EditorVersion.STABLE,
        marker="",
        data_dir_name="Code",
        executables=("Code", "code"),
    ),
)

# Case-insensitive substrings a search-path entry must contain to be probed.
SEARCH_PATH_MARKERS: tuple[str, ...] = (
    "vs code",
    "visualstudiocode",
    "codium",
    "vscode",
)

# Product names accepted in an installation's product metadata.
PRODUCT_NAMES: tuple[str, ...] = (
    "Visual Studio Code",
    "VSCodium",
)

# Probe order for executables inside a directory: the catch-all (stable)
# edition first, then the others in table order.
EXECUTABLE_PROBE_ORDER: tuple[str, ...] = tuple(
    stem for edition in (EDITIONS[-1], *EDITIONS[:-1]) for stem in edition.executables
)


def classify(executable_name: str) -> Edition:
    """Return the edition an executable filename belongs to.

    Args:
        executable_name: Bare filename (no directory) of the executable.

    Returns:
        The first matching ``Edition``; Stable when nothing else matches.
    """
    lowered = executable_name.lower()
    for edition in EDITIONS:
        if edition.marker in lowered:
            return edition
    return EDITIONS[-1]


def is_candidate_directory(entry: str) -> bool:
    """Check whether a search-path entry names the editor family."""
    lowered = entry.lower()
    return any(marker in lowered for marker in SEARCH_PATH_MARKERS)
