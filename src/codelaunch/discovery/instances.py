"""Discovery of VS Code family installations on the search path.

Discovery Algorithm:
    1. Split the search path and keep entries naming the editor family
       (``VS Code``, ``VisualStudioCode``, ``codium``, ``vscode``).
    2. For each existing directory, look for the editor executable: next
       to the ``bin`` directory first, then directly in the directory,
       then among any file inside ``bin``.
    3. Validate every candidate against the installation's product
       metadata (``resources/app/product.json``) so that unrelated
       executables on a matching path are rejected.
    4. Classify the edition from the executable filename and derive the
       state directory (portable ``data/user-data`` or the per-user
       roaming config root).

Scanning touches the filesystem many times, so ``InstanceLocator`` keeps
the last result keyed on the exact search-path string and only rescans when
that string changes.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from collections.abc import Iterable, Sequence
from pathlib import Path

from platformdirs import user_config_dir

from codelaunch.discovery.editions import (
    EXECUTABLE_PROBE_ORDER,
    PRODUCT_NAMES,
    EditorVersion,
    classify,
    is_candidate_directory,
)
from codelaunch.discovery.models import EditorInstance

logger = logging.getLogger(__name__)

# Product metadata location relative to an installation root.
_PRODUCT_JSON = Path("resources") / "app" / "product.json"


def default_executable_suffix() -> str:
    """Return the executable filename suffix for the running platform."""
    return ".exe" if sys.platform == "win32" else ""


def default_app_data_root() -> Path:
    """Return the per-user roaming config root editors keep state under."""
    return Path(user_config_dir(roaming=True))


def read_product_name(executable: Path) -> str | None:
    """Read the product name from the metadata shipped with an executable.

    Looks beside the executable and beside its parent directory, which
    covers both the main binary and the launcher scripts in ``bin``.

    Returns:
        ``nameLong`` (or ``nameShort``) from ``product.json``, or None when
        no readable metadata exists.
    """
    for root in (executable.parent, executable.parent.parent):
        product_json = root / _PRODUCT_JSON
        if not product_json.is_file():
            continue
        try:
            data = json.loads(product_json.read_text(encoding="utf-8-sig"))
        except (OSError, ValueError):
            logger.warning("Unreadable product metadata: %s", product_json, exc_info=True)
            continue
        if not isinstance(data, dict):
            continue
        name = data.get("nameLong") or data.get("nameShort")
        if isinstance(name, str):
            return name
    return None


def is_valid_executable(candidate: Path) -> bool:
    """Check that a file is a genuine editor executable.

    The product name from the installation metadata must contain one of
    the family's display names, case-insensitively.
    """
    try:
        if not candidate.is_file():
            return False
    except OSError:
        return False

    product_name = read_product_name(candidate)
    if product_name is None:
        logger.info("No product metadata for %s", candidate)
        return False
    lowered = product_name.lower()
    if not any(name.lower() in lowered for name in PRODUCT_NAMES):
        logger.warning("Not a VS Code executable: %s (product %r)", candidate, product_name)
        return False
    return True


def _bin_directory(directory: Path) -> Path:
    return directory if directory.name.lower() == "bin" else directory / "bin"


def _probe(directory: Path, suffix: str) -> Path | None:
    """Return the first known executable in ``directory`` that validates."""
    for stem in EXECUTABLE_PROBE_ORDER:
        candidate = directory / f"{stem}{suffix}"
        if is_valid_executable(candidate):
            return candidate
    return None


def _scan_bin(bin_dir: Path) -> Path | None:
    """Return the first top-level file in ``bin_dir`` that validates."""
    try:
        entries = sorted(bin_dir.iterdir())
    except OSError:
        return None
    for entry in entries:
        if is_valid_executable(entry):
            return entry
    return None


def find_executable(directory: Path, suffix: str = "") -> Path | None:
    """Find the validated editor executable for one search-path directory.

    Args:
        directory: A search-path entry.
        suffix: Executable filename suffix (".exe" on Windows).

    Returns:
        The executable path, or None if nothing in the directory validates.
    """
    bin_dir = _bin_directory(directory)
    has_bin = bin_dir.is_dir()

    if has_bin:
        found = _probe(bin_dir.parent, suffix)
        if found is not None:
            return found

    found = _probe(directory, suffix)
    if found is not None:
        return found

    if has_bin:
        return _scan_bin(bin_dir)
    return None


def _install_root(executable: Path) -> Path:
    """Installation root of an executable (the parent of ``bin`` for scripts)."""
    parent = executable.parent
    return parent.parent if parent.name.lower() == "bin" else parent


def build_instance(executable: Path, app_data_root: Path) -> EditorInstance:
    """Create the ``EditorInstance`` for a validated executable."""
    edition = classify(executable.name)
    portable_data = _install_root(executable) / "data"
    portable = portable_data.is_dir()
    app_data = portable_data / "user-data" if portable else app_data_root / edition.data_dir_name
    return EditorInstance(
        version=edition.version,
        executable_path=executable,
        app_data_directory=app_data,
        display_name=edition.data_dir_name,
        portable=portable,
    )


def locate(
    directories: Iterable[str],
    app_data_root: Path | None = None,
    executable_suffix: str | None = None,
) -> list[EditorInstance]:
    """Find validated editor instances among search-path directories.

    Never raises; directories that do not exist or hold nothing valid are
    skipped.

    Args:
        directories: Search-path entries in priority order.
        app_data_root: Roaming config root. Defaults to the platform's.
        executable_suffix: Executable suffix. Defaults to the platform's.

    Returns:
        One instance per (version, state directory) slot, first directory
        winning.
    """
    root = app_data_root if app_data_root is not None else default_app_data_root()
    suffix = executable_suffix if executable_suffix is not None else default_executable_suffix()

    candidates = [entry for entry in directories if entry and is_candidate_directory(entry)]
    logger.info("Found %d editor-related search path entries", len(candidates))

    instances: list[EditorInstance] = []
    claimed: set[tuple[EditorVersion, Path]] = set()
    for entry in candidates:
        directory = Path(entry)
        try:
            if not directory.is_dir():
                continue
        except OSError:
            continue

        executable = find_executable(directory, suffix)
        if executable is None:
            logger.warning("No valid editor executable under %s", directory)
            continue

        instance = build_instance(executable, root)
        slot = (instance.version, instance.app_data_directory)
        if slot in claimed:
            logger.info("Skipping %s: %s already discovered", executable, instance.display_name)
            continue
        claimed.add(slot)
        instances.append(instance)
        logger.info(
            "Found %s at %s (state %s, portable=%s)",
            instance.display_name, executable, instance.app_data_directory, instance.portable,
        )

    logger.info("Instance scan complete: %d instance(s)", len(instances))
    return instances


class InstanceLocator:
    """Memoizing front end for ``locate``.

    The scan result is cached against the exact search-path string. A lock
    makes concurrent callers wait for a scan in flight and reuse its result
    instead of starting another.

    Usage::

        locator = InstanceLocator()
        instances = locator.locate_instances()
    """

    def __init__(
        self,
        app_data_root: Path | None = None,
        executable_suffix: str | None = None,
    ) -> None:
        self._app_data_root = app_data_root
        self._executable_suffix = executable_suffix
        self._lock = threading.Lock()
        self._search_path: str | None = None
        self._instances: list[EditorInstance] = []

    def locate_instances(self, search_path: str | None = None) -> list[EditorInstance]:
        """Return the instances for ``search_path`` (``PATH`` by default).

        Rescans only when the search-path string differs from the last scan.
        """
        value = search_path if search_path is not None else os.environ.get("PATH", "")
        with self._lock:
            if value != self._search_path:
                logger.info("Scanning search path (%d characters)", len(value))
                self._instances = locate(
                    value.split(os.pathsep),
                    app_data_root=self._app_data_root,
                    executable_suffix=self._executable_suffix,
                )
                self._search_path = value
            return list(self._instances)

    def invalidate(self) -> None:
        """Forget the cached scan so the next call rescans."""
        with self._lock:
            self._search_path = None
            self._instances = []


def locate_instances(
    search_path: str | None = None,
    app_data_root: Path | None = None,
) -> list[EditorInstance]:
    """One-shot scan of ``search_path`` (``PATH`` by default), no caching."""
    value = search_path if search_path is not None else os.environ.get("PATH", "")
    return locate(value.split(os.pathsep), app_data_root=app_data_root)


def instance_count_by_version(instances: Sequence[EditorInstance]) -> dict[str, int]:
    """Count instances per version name, for diagnostics output."""
    counts: dict[str, int] = {}
    for instance in instances:
        counts[instance.version.value] = counts.get(instance.version.value, 0) + 1
    return counts
