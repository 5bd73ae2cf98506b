"""Tests for editor instance discovery on the search path.

Uses temporary directories laid out like real installations (executable,
``resources/app/product.json``, ``bin`` launcher) and passes an explicit
search-path string so the host's PATH never leaks in.
"""

from __future__ import annotations

import os
import threading
import time
from pathlib import Path

import pytest

from codelaunch.discovery.editions import (
    EDITIONS,
    EXECUTABLE_PROBE_ORDER,
    EditorVersion,
    classify,
    is_candidate_directory,
)
from codelaunch.discovery.instances import (
    InstanceLocator,
    find_executable,
    instance_count_by_version,
    is_valid_executable,
    locate,
    read_product_name,
)

from tests.discovery.helpers import create_impostor, create_install


def _search_path(*entries: Path | str) -> str:
    return os.pathsep.join(str(e) for e in entries)


# ---------------------------------------------------------------------------
# Edition classification
# ---------------------------------------------------------------------------


class TestClassify:
    """Executable filename to edition mapping."""

    def test_stable(self) -> None:
        assert classify("Code.exe").version is EditorVersion.STABLE
        assert classify("code").version is EditorVersion.STABLE

    def test_insiders(self) -> None:
        edition = classify("Code - Insiders.exe")
        assert edition.version is EditorVersion.INSIDERS
        assert edition.data_dir_name == "Code - Insiders"

    def test_exploration(self) -> None:
        assert classify("code-exploration").version is EditorVersion.EXPLORATION

    def test_codium(self) -> None:
        edition = classify("codium")
        assert edition.version is EditorVersion.VSCODIUM
        assert edition.data_dir_name == "VSCodium"

    def test_unknown_name_falls_back_to_stable(self) -> None:
        assert classify("editor").version is EditorVersion.STABLE


class TestCandidateDirectory:
    """Search-path entry filtering."""

    def test_markers_match_case_insensitively(self) -> None:
        assert is_candidate_directory(r"C:\Program Files\Microsoft VS Code\bin")
        assert is_candidate_directory("/opt/VSCodium/bin")
        assert is_candidate_directory("/usr/share/vscode/bin")

    def test_unrelated_entry_rejected(self) -> None:
        assert not is_candidate_directory("/usr/local/bin")


# ---------------------------------------------------------------------------
# Executable validation
# ---------------------------------------------------------------------------


class TestValidation:
    """Product metadata checks."""

    def test_genuine_install_validates(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode")
        assert read_product_name(install / "code") == "Visual Studio Code"
        assert is_valid_executable(install / "code")

    def test_bin_launcher_reads_metadata_from_install_root(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode")
        assert is_valid_executable(install / "bin" / "code")

    def test_impostor_rejected(self, tmp_path: Path) -> None:
        install = create_impostor(tmp_path / "VSCode")
        assert not is_valid_executable(install / "code")

    def test_missing_metadata_rejected(self, tmp_path: Path) -> None:
        directory = tmp_path / "VSCode"
        directory.mkdir()
        (directory / "code").write_text("")
        assert not is_valid_executable(directory / "code")

    def test_missing_file_rejected(self, tmp_path: Path) -> None:
        assert not is_valid_executable(tmp_path / "code")

    def test_codium_product_accepted(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCodium", executable="codium", product_name="VSCodium")
        assert is_valid_executable(install / "codium")


class TestFindExecutable:
    """Per-directory executable probing."""

    def test_bin_entry_finds_main_executable(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode")
        assert find_executable(install / "bin") == install / "code"

    def test_install_entry_finds_executable(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", with_bin=False)
        assert find_executable(install) == install / "code"

    def test_falls_back_to_any_file_in_bin(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", executable="code-oss")
        assert find_executable(install / "bin") == install / "bin" / "code-oss"

    def test_nothing_valid(self, tmp_path: Path) -> None:
        install = create_impostor(tmp_path / "VSCode")
        assert find_executable(install / "bin") is None


# ---------------------------------------------------------------------------
# locate()
# ---------------------------------------------------------------------------


class TestLocate:
    """Whole search-path scans."""

    def test_portable_install(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", portable=True)
        instances = locate([str(install / "bin")], app_data_root=tmp_path / "roaming", executable_suffix="")
        assert len(instances) == 1
        instance = instances[0]
        assert instance.version is EditorVersion.STABLE
        assert instance.executable_path == install / "code"
        assert instance.app_data_directory == install / "data" / "user-data"
        assert instance.portable is True

    def test_installed_uses_roaming_root(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode Insiders", executable="code-insiders")
        roaming = tmp_path / "roaming"
        instances = locate([str(install / "bin")], app_data_root=roaming, executable_suffix="")
        assert len(instances) == 1
        assert instances[0].version is EditorVersion.INSIDERS
        assert instances[0].app_data_directory == roaming / "Code - Insiders"
        assert instances[0].portable is False

    def test_non_candidate_entries_skipped(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "editors" / "plain")
        assert locate([str(install / "bin")], app_data_root=tmp_path, executable_suffix="") == []

    def test_missing_directory_skipped(self, tmp_path: Path) -> None:
        assert locate([str(tmp_path / "VSCode" / "bin"), ""], app_data_root=tmp_path) == []

    def test_impostor_never_yields_instance(self, tmp_path: Path) -> None:
        install = create_impostor(tmp_path / "VSCode")
        assert locate([str(install / "bin")], app_data_root=tmp_path, executable_suffix="") == []

    def test_first_install_wins_version_slot(self, tmp_path: Path) -> None:
        first = create_install(tmp_path / "VSCode-a")
        second = create_install(tmp_path / "VSCode-b")
        roaming = tmp_path / "roaming"
        instances = locate(
            [str(first / "bin"), str(second / "bin")], app_data_root=roaming, executable_suffix=""
        )
        assert [i.executable_path for i in instances] == [first / "code"]

    def test_portable_installs_of_same_version_both_kept(self, tmp_path: Path) -> None:
        first = create_install(tmp_path / "VSCode-a", portable=True)
        second = create_install(tmp_path / "VSCode-b", portable=True)
        instances = locate(
            [str(first / "bin"), str(second / "bin")], app_data_root=tmp_path, executable_suffix=""
        )
        assert len(instances) == 2

    def test_side_by_side_editions(self, tmp_path: Path) -> None:
        stable = create_install(tmp_path / "VSCode")
        insiders = create_install(tmp_path / "VSCode-insiders", executable="code-insiders")
        codium = create_install(tmp_path / "VSCodium", executable="codium", product_name="VSCodium")
        instances = locate(
            [str(stable / "bin"), str(insiders / "bin"), str(codium / "bin")],
            app_data_root=tmp_path / "roaming",
            executable_suffix="",
        )
        assert [i.version for i in instances] == [
            EditorVersion.STABLE,
            EditorVersion.INSIDERS,
            EditorVersion.VSCODIUM,
        ]
        assert instance_count_by_version(instances) == {"Stable": 1, "Insiders": 1, "VSCodium": 1}


# ---------------------------------------------------------------------------
# InstanceLocator memoization
# ---------------------------------------------------------------------------


class TestInstanceLocator:
    """Caching keyed on the search-path string."""

    def test_same_path_is_idempotent(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", portable=True)
        locator = InstanceLocator(app_data_root=tmp_path, executable_suffix="")
        path = _search_path(install / "bin")
        assert locator.locate_instances(path) == locator.locate_instances(path)

    def test_same_path_does_not_rescan(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", portable=True)
        locator = InstanceLocator(app_data_root=tmp_path, executable_suffix="")
        path = _search_path(install / "bin")
        first = locator.locate_instances(path)
        (install / "resources" / "app" / "product.json").unlink()
        assert locator.locate_instances(path) == first

    def test_changed_path_rescans(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", portable=True)
        locator = InstanceLocator(app_data_root=tmp_path, executable_suffix="")
        assert len(locator.locate_instances(_search_path(install / "bin"))) == 1
        assert locator.locate_instances(_search_path(tmp_path / "nothing")) == []

    def test_invalidate_forces_rescan(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", portable=True)
        locator = InstanceLocator(app_data_root=tmp_path, executable_suffix="")
        path = _search_path(install / "bin")
        locator.locate_instances(path)
        (install / "resources" / "app" / "product.json").unlink()
        locator.invalidate()
        assert locator.locate_instances(path) == []

    def test_returned_list_is_a_copy(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode", portable=True)
        locator = InstanceLocator(app_data_root=tmp_path, executable_suffix="")
        path = _search_path(install / "bin")
        locator.locate_instances(path).clear()
        assert len(locator.locate_instances(path)) == 1

    def test_concurrent_callers_share_one_scan(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[int] = []
        started = threading.Event()

        def slow_locate(directories, app_data_root=None, executable_suffix=None):
            calls.append(1)
            started.set()
            time.sleep(0.2)
            return []

        monkeypatch.setattr("codelaunch.discovery.instances.locate", slow_locate)
        locator = InstanceLocator(app_data_root=tmp_path, executable_suffix="")
        path = _search_path(tmp_path / "VSCode" / "bin")
        results: list[list] = []

        def worker() -> None:
            results.append(locator.locate_instances(path))

        first = threading.Thread(target=worker)
        first.start()
        assert started.wait(timeout=5)
        others = [threading.Thread(target=worker) for _ in range(4)]
        for thread in others:
            thread.start()
        for thread in [first, *others]:
            thread.join(timeout=5)

        assert len(calls) == 1
        assert results == [[]] * 5


# ---------------------------------------------------------------------------
# Edition table consistency
# ---------------------------------------------------------------------------


class TestEditionTable:
    """The probe order is derived from the edition table."""

    def test_probe_order_stable_first(self) -> None:
        assert EXECUTABLE_PROBE_ORDER == (
            "Code",
            "code",
            "Code - Insiders",
            "code-insiders",
            "Code - Exploration",
            "code-exploration",
            "VSCodium",
            "codium",
        )

    def test_every_edition_executable_probed(self) -> None:
        for edition in EDITIONS:
            assert set(edition.executables) <= set(EXECUTABLE_PROBE_ORDER)

    def test_probe_stems_classify_to_their_edition(self) -> None:
        for edition in EDITIONS:
            for stem in edition.executables:
                assert classify(stem) is edition


class TestMetadataLayouts:
    """Which ``product.json`` locations are read."""

    def test_bom_prefixed_product_json(self, tmp_path: Path) -> None:
        install = create_install(tmp_path / "VSCode")
        product = install / "resources" / "app" / "product.json"
        product.write_bytes(b"\xef\xbb\xbf" + product.read_bytes())
        assert is_valid_executable(install / "code")

    def test_bundle_layout_not_read(self, tmp_path: Path) -> None:
        directory = tmp_path / "VSCode"
        app = directory / "Contents" / "Resources" / "app"
        app.mkdir(parents=True)
        (app / "product.json").write_text('{"nameLong": "Visual Studio Code"}')
        (directory / "code").write_text("")
        assert read_product_name(directory / "code") is None
