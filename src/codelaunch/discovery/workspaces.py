"""Discovery of recently opened workspaces from editor history stores.

Each instance records its history in one or both of two places:

- ``<state>/storage.json`` -- the JSON file older releases use. Up to
  v1.54 it holds ``openedPathsList.workspaces3`` (a list of URIs); from
  v1.55 it holds ``openedPathsList.entries`` (objects with ``folderUri``).
- ``<state>/User/globalStorage/state.vscdb`` -- the SQLite key-value store
  used since v1.64. The ``ItemTable`` row keyed
  ``history.recentlyOpenedPathsList`` holds a JSON document whose
  ``entries`` list folders (``folderUri``) and multi-root workspaces
  (``workspace.configPath``), each optionally with a display ``label``.

Both sources are read for every instance and their results concatenated,
so side-by-side installations with state in either format all contribute.
Readers raise ``DiscoveryError`` subclasses; ``WorkspaceDiscovery.discover``
is the one place that logs them and moves on.
"""

from __future__ import annotations

import json
import logging
import re
import sqlite3
from collections.abc import Iterable
from contextlib import closing
from dataclasses import replace
from pathlib import Path
from typing import Any

from codelaunch.discovery.models import EditorInstance, Workspace, WorkspaceKind
from codelaunch.discovery.uri import decode_workspace_uri
from codelaunch.exceptions import (
    DiscoveryError,
    MalformedSourceError,
    UnreadableSourceError,
)

logger = logging.getLogger(__name__)

STORAGE_FILE = "storage.json"
STATE_DB = Path("User") / "globalStorage" / "state.vscdb"
HISTORY_KEY = "history.recentlyOpenedPathsList"

# ``text [tag]`` as written by the editor for remote entries.
_TRAILING_TAG_LABEL = re.compile(r"^(.+?)\s*(\[.+\])\s*$")
# ``[tag] text``, already in display order.
_LEADING_TAG_LABEL = re.compile(r"^\s*(\[.+?\])\s*(.+?)\s*$")


def normalize_label(label: str) -> str:
    """Reassemble a history label as ``"<[tag]> <text>"``.

    ``"project [SSH: box]"`` becomes ``"[SSH: box] project"``; a label that
    already leads with its tag is kept as is. Labels without a bracket
    tag are returned trimmed.
    """
    leading = _LEADING_TAG_LABEL.match(label)
    if leading:
        return f"{leading.group(1)} {leading.group(2)}"
    trailing = _TRAILING_TAG_LABEL.match(label)
    if trailing:
        return f"{trailing.group(2)} {trailing.group(1)}"
    return label.strip()


def _with_label(workspace: Workspace, entry: dict[str, Any]) -> Workspace:
    label = entry.get("label")
    if isinstance(label, str) and label.strip():
        return replace(workspace, label=normalize_label(label))
    return workspace


def parse_history_entry(entry: Any, instance: EditorInstance) -> Workspace | None:
    """Decode one ``entries`` element from ``state.vscdb``.

    Returns:
        A FOLDER workspace for ``folderUri`` entries, a WORKSPACE one for
        ``workspace.configPath`` entries, None for anything else (recent
        files, malformed elements, unrecognized URIs).
    """
    if not isinstance(entry, dict):
        return None

    folder_uri = entry.get("folderUri")
    if isinstance(folder_uri, str):
        workspace = decode_workspace_uri(folder_uri, instance, WorkspaceKind.FOLDER)
        return _with_label(workspace, entry) if workspace else None

    descriptor = entry.get("workspace")
    if isinstance(descriptor, dict) and isinstance(descriptor.get("configPath"), str):
        workspace = decode_workspace_uri(
            descriptor["configPath"], instance, WorkspaceKind.WORKSPACE
        )
        return _with_label(workspace, entry) if workspace else None

    return None


def _decode_all(uris: Iterable[Any], instance: EditorInstance) -> list[Workspace]:
    workspaces: list[Workspace] = []
    for uri in uris:
        if not isinstance(uri, str):
            continue
        workspace = decode_workspace_uri(uri, instance)
        if workspace is not None:
            workspaces.append(workspace)
    return workspaces


def read_storage_json(path: Path, instance: EditorInstance) -> list[Workspace]:
    """Read workspaces from a legacy ``storage.json``.

    Raises:
        UnreadableSourceError: If the file cannot be read.
        MalformedSourceError: If it is not UTF-8 or not a JSON object.
    """
    try:
        content = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise UnreadableSourceError("storage", path, str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise MalformedSourceError("storage", path, f"not valid UTF-8: {exc}") from exc
    try:
        data = json.loads(content)
    except ValueError as exc:
        raise MalformedSourceError("storage", path, f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedSourceError("storage", path, "top-level value is not an object")

    opened = data.get("openedPathsList")
    if not isinstance(opened, dict):
        return []

    workspaces: list[Workspace] = []
    # Releases before v1.55
    legacy = opened.get("workspaces3")
    if isinstance(legacy, list):
        found = _decode_all(legacy, instance)
        logger.info("[%s] %d workspace(s) from storage.json workspaces3", instance.display_name, len(found))
        workspaces.extend(found)

    # v1.55 and later
    entries = opened.get("entries")
    if isinstance(entries, list):
        uris = (e.get("folderUri") for e in entries if isinstance(e, dict))
        found = _decode_all(uris, instance)
        logger.info("[%s] %d workspace(s) from storage.json entries", instance.display_name, len(found))
        workspaces.extend(found)
    return workspaces


def _query_history(path: Path) -> str | bytes | None:
    """Fetch the raw history value from a ``state.vscdb`` opened read-only."""
    uri = f"{path.resolve().as_uri()}?mode=ro"
    with closing(sqlite3.connect(uri, uri=True)) as connection:
        row = connection.execute(
            "SELECT value FROM ItemTable WHERE key = ?", (HISTORY_KEY,)
        ).fetchone()
    if row is None or row[0] is None:
        return None
    value = row[0]
    return value if isinstance(value, (str, bytes)) else str(value)


def read_state_db(path: Path, instance: EditorInstance) -> list[Workspace]:
    """Read workspaces from ``state.vscdb``.

    Raises:
        MalformedSourceError: If the database or the stored JSON is broken.
    """
    try:
        raw = _query_history(path)
    except sqlite3.Error as exc:
        raise MalformedSourceError("state-db", path, f"query failed: {exc}") from exc
    if raw is None:
        logger.info("[%s] No %s row in %s", instance.display_name, HISTORY_KEY, path)
        return []

    try:
        # json.loads decodes BLOB values itself; bad bytes raise UnicodeDecodeError.
        history = json.loads(raw)
    except ValueError as exc:
        raise MalformedSourceError("state-db", path, f"invalid history JSON: {exc}") from exc
    entries = history.get("entries") if isinstance(history, dict) else None
    if not isinstance(entries, list):
        logger.info("[%s] History in %s has no 'entries' list", instance.display_name, path)
        return []

    workspaces = [ws for ws in (parse_history_entry(e, instance) for e in entries) if ws is not None]
    logger.info("[%s] %d workspace(s) from state.vscdb", instance.display_name, len(workspaces))
    return workspaces


class WorkspaceDiscovery:
    """Collects recently opened workspaces across editor instances.

    Usage::

        discovery = WorkspaceDiscovery()
        for ws in discovery.discover(instances):
            print(ws.folder_name, ws.location.value)
    """

    def discover_instance(self, instance: EditorInstance) -> list[Workspace]:
        """Collect workspaces from both history stores of one instance.

        A broken source is logged and contributes nothing; the other source
        is still read.
        """
        workspaces: list[Workspace] = []

        storage = instance.app_data_directory / STORAGE_FILE
        if storage.is_file():
            try:
                workspaces.extend(read_storage_json(storage, instance))
            except DiscoveryError:
                logger.warning("Skipping %s", storage, exc_info=True)
        else:
            logger.info("[%s] No %s", instance.display_name, storage)

        state_db = instance.app_data_directory / STATE_DB
        if state_db.is_file():
            try:
                workspaces.extend(read_state_db(state_db, instance))
            except DiscoveryError:
                logger.warning("Skipping %s", state_db, exc_info=True)
        else:
            logger.info("[%s] No %s", instance.display_name, state_db)

        return workspaces

    def discover(self, instances: Iterable[EditorInstance]) -> list[Workspace]:
        """Collect workspaces for every instance, in instance order."""
        results: list[Workspace] = []
        instance_count = 0
        for instance in instances:
            instance_count += 1
            results.extend(self.discover_instance(instance))
        logger.info("%d workspace(s) from %d instance(s)", len(results), instance_count)
        return results


def discover_workspaces(instances: Iterable[EditorInstance]) -> list[Workspace]:
    """Convenience wrapper around ``WorkspaceDiscovery().discover``."""
    return WorkspaceDiscovery().discover(instances)
