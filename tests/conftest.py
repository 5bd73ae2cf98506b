"""Shared fixtures for codelaunch tests."""

import pathlib

import pytest

from codelaunch.discovery.editions import EditorVersion
from codelaunch.discovery.models import EditorInstance


@pytest.fixture
def app_data(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create an empty editor state directory."""
    directory = tmp_path / "state" / "Code"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def stable_instance(tmp_path: pathlib.Path, app_data: pathlib.Path) -> EditorInstance:
    """A Stable instance whose state lives in ``app_data``."""
    return EditorInstance(
        version=EditorVersion.STABLE,
        executable_path=tmp_path / "install" / "code",
        app_data_directory=app_data,
        display_name="Code",
    )


@pytest.fixture
def insiders_instance(tmp_path: pathlib.Path) -> EditorInstance:
    """An Insiders instance with its own (empty) state directory."""
    directory = tmp_path / "state" / "Code - Insiders"
    directory.mkdir(parents=True)
    return EditorInstance(
        version=EditorVersion.INSIDERS,
        executable_path=tmp_path / "install-insiders" / "code-insiders",
        app_data_directory=directory,
        display_name="Code - Insiders",
    )
