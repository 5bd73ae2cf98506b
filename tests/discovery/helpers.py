"""Shared test helpers for building fake editor installations and state.

Each helper creates a minimal but realistic directory layout: an install
directory with an executable, ``resources/app/product.json`` and a ``bin``
launcher, and the history/settings files an editor writes into its state
directory. Used by the discovery, session and CLI tests.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any


def create_install(
    root: Path,
    executable: str = "code",
    product_name: str = "Visual Studio Code",
    portable: bool = False,
    with_bin: bool = True,
) -> Path:
    """Create a fake editor installation and return its directory.

    Args:
        root: Installation directory to create.
        executable: Filename of the main executable.
        product_name: ``nameLong`` written to ``product.json``.
        portable: Create ``data/user-data`` (portable mode).
        with_bin: Create ``bin/<executable>`` launcher script.
    """
    root.mkdir(parents=True, exist_ok=True)
    exe = root / executable
    exe.write_text("#!/bin/sh\n")
    exe.chmod(0o755)

    app = root / "resources" / "app"
    app.mkdir(parents=True, exist_ok=True)
    (app / "product.json").write_text(json.dumps({"nameShort": "Code", "nameLong": product_name}))

    if with_bin:
        bin_dir = root / "bin"
        bin_dir.mkdir(exist_ok=True)
        (bin_dir / executable).write_text("#!/bin/sh\n")
    if portable:
        (root / "data" / "user-data").mkdir(parents=True, exist_ok=True)
    return root


def create_impostor(root: Path, executable: str = "code") -> Path:
    """Create a directory with an executable whose metadata is not VS Code."""
    return create_install(root, executable=executable, product_name="Totally Different Editor")


def _write(path: Path, data: Any) -> None:
    """Write raw bytes or text as is; serialize anything else to JSON."""
    if isinstance(data, bytes):
        path.write_bytes(data)
    else:
        path.write_text(data if isinstance(data, str) else json.dumps(data))


def write_storage_json(app_data: Path, data: Any) -> Path:
    """Write ``storage.json``; ``data`` is serialized unless already text or bytes."""
    app_data.mkdir(parents=True, exist_ok=True)
    path = app_data / "storage.json"
    _write(path, data)
    return path


def write_state_db(app_data: Path, history: Any | None) -> Path:
    """Create ``User/globalStorage/state.vscdb`` holding ``history``.

    ``history`` is serialized unless already text or bytes (bytes are
    stored as a BLOB); None leaves the table without the history row.
    """
    db_dir = app_data / "User" / "globalStorage"
    db_dir.mkdir(parents=True, exist_ok=True)
    path = db_dir / "state.vscdb"
    with closing(sqlite3.connect(path)) as connection:
        connection.execute(
            "CREATE TABLE IF NOT EXISTS ItemTable (key TEXT UNIQUE ON CONFLICT REPLACE, value BLOB)"
        )
        connection.execute(
            "INSERT INTO ItemTable (key, value) VALUES (?, ?)", ("workbench.panel.width", "300")
        )
        if history is not None:
            value = history if isinstance(history, (str, bytes)) else json.dumps(history)
            connection.execute(
                "INSERT INTO ItemTable (key, value) VALUES (?, ?)",
                ("history.recentlyOpenedPathsList", value),
            )
        connection.commit()
    return path


def write_settings(app_data: Path, content: str | bytes | dict) -> Path:
    """Write ``User/settings.json`` (raw text, raw bytes or a dict)."""
    user_dir = app_data / "User"
    user_dir.mkdir(parents=True, exist_ok=True)
    path = user_dir / "settings.json"
    _write(path, content)
    return path


def write_ssh_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path
