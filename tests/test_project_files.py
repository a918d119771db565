"""
Tests for ProjectFileService and PodValidator.
"""

import pytest
from unittest.mock import MagicMock

from qtpods.domain.pod import Pod
from qtpods.infra.command_runner import CommandResult
from qtpods.infra.git_client import GitClient
from qtpods.services.catalog_service import CatalogService
from qtpods.services.pod_validator import PodValidator
from qtpods.services.project_file_service import (
    ProjectFileService,
    render_pods_pri,
    render_pods_subdirs_pri,
    subdirs_pro_name,
    SUBDIRS_PRO,
)

PODS = [Pod("qt-json", "u1"), Pod("qt-logger", "u2")]


class TestRendering:
    """Tests for the pure render functions."""

    def test_pods_pri(self):
        assert render_pods_pri(PODS) == (
            "# Auto-generated by qt-pods. Do not edit.\n"
            "# Include this to your application project file with:\n"
            "# include(../pods.pri)\n"
            "# This file should be put under version control.\n"
            "\n"
            "include(qt-json/qt-json.pri)\n"
            "include(qt-logger/qt-logger.pri)\n"
            "\n"
        )

    def test_pods_pri_empty(self):
        assert render_pods_pri([]).endswith("under version control.\n\n\n")

    def test_pods_subdirs_pri(self):
        assert render_pods_subdirs_pri(PODS) == (
            "# Auto-generated by qt-pods. Do not edit.\n"
            "# Include this to your subdirs project file with:\n"
            "# include(pods-subdirs.pri)\n"
            "# This file should be put under version control.\n"
            "\n"
            "SUBDIRS += \\\n\tqt-json \\\n\tqt-logger \n\n"
        )

    def test_pods_subdirs_pri_empty(self):
        assert render_pods_subdirs_pri([]).endswith("\nSUBDIRS += \n\n")

    def test_subdirs_pro_name(self, tmp_path):
        repo = tmp_path / "myapp"
        repo.mkdir()
        assert subdirs_pro_name(repo) == "myapp.pro"
        assert subdirs_pro_name(repo / ".") == "myapp.pro"


class TestProjectFileService:
    """Tests for writing and staging the generated files."""

    @pytest.fixture
    def git(self):
        git = MagicMock(spec=GitClient)
        git.is_git_repo.return_value = True
        git.stage.return_value = CommandResult(args=[], cwd="", returncode=0)
        return git

    @pytest.fixture
    def catalog(self):
        catalog = MagicMock(spec=CatalogService)
        catalog.installed_pods.return_value = list(PODS)
        return catalog

    @pytest.fixture
    def repo(self, tmp_path):
        path = tmp_path / "myapp"
        path.mkdir()
        return path

    def test_write_pods_pri_uses_installed_list(self, git, catalog, repo):
        service = ProjectFileService(git, catalog)

        path = service.write_pods_pri(repo)

        assert path.read_text() == render_pods_pri(PODS)
        catalog.installed_pods.assert_called_once_with(repo)
        git.stage.assert_called_once_with(repo, "pods.pri")

    def test_write_overwrites(self, git, catalog, repo):
        (repo / "pods.pri").write_text("stale content that is much longer than the new file " * 20)
        service = ProjectFileService(git, catalog)

        service.write_pods_pri(repo, [])

        assert (repo / "pods.pri").read_text() == render_pods_pri([])

    def test_regeneration_is_byte_identical(self, git, catalog, repo):
        service = ProjectFileService(git, catalog)

        service.regenerate_all(repo)
        first = {p.name: p.read_bytes() for p in repo.iterdir()}
        service.regenerate_all(repo)
        second = {p.name: p.read_bytes() for p in repo.iterdir()}

        assert first == second
        assert set(first) == {"pods.pri", "pods-subdirs.pri", "myapp.pro"}

    def test_unix_line_endings(self, git, catalog, repo):
        ProjectFileService(git, catalog).write_pods_subdirs_pri(repo)

        assert b"\r\n" not in (repo / "pods-subdirs.pri").read_bytes()

    def test_subdirs_pro_created_once(self, git, catalog, repo):
        service = ProjectFileService(git, catalog)

        service.write_subdirs_pro(repo)
        assert (repo / "myapp.pro").read_text() == SUBDIRS_PRO

        (repo / "myapp.pro").write_text("# hand edited\n")
        service.write_subdirs_pro(repo)

        assert (repo / "myapp.pro").read_text() == "# hand edited\n"
        assert git.stage.call_count == 2

    def test_regenerate_all_lists_once(self, git, catalog, repo):
        ProjectFileService(git, catalog).regenerate_all(repo)

        catalog.installed_pods.assert_called_once_with(repo)
        staged = [c.args[1] for c in git.stage.call_args_list]
        assert staged == ["pods.pri", "pods-subdirs.pri", "myapp.pro"]

    def test_no_staging_outside_repository(self, git, catalog, repo):
        git.is_git_repo.return_value = False

        ProjectFileService(git, catalog).regenerate_all(repo)

        git.stage.assert_not_called()
        assert (repo / "pods.pri").exists()


class TestPodValidator:
    """Tests for PodValidator."""

    def _make_pod(self, repo, name, files=None):
        pod_dir = repo / name
        pod_dir.mkdir()
        if files is None:
            files = ["LICENSE", "README.md", f"{name}.pri", f"{name}.pro"]
        for file_name in files:
            (pod_dir / file_name).write_text("")
        return pod_dir

    def test_valid_pod(self, tmp_path):
        self._make_pod(tmp_path, "qt-json")

        assert PodValidator().check_pod(tmp_path, "qt-json") is True
        assert PodValidator().problems(tmp_path, "qt-json") == []

    def test_uppercase_name_is_invalid(self, tmp_path):
        self._make_pod(tmp_path, "QtJson")

        assert PodValidator().check_pod(tmp_path, "QtJson") is False
        assert PodValidator().problems(tmp_path, "QtJson") == ["name 'QtJson' is not all lowercase"]

    def test_missing_directory(self, tmp_path):
        assert PodValidator().check_pod(tmp_path, "qt-json") is False

    @pytest.mark.parametrize("missing", ["LICENSE", "README.md", "qt-json.pri", "qt-json.pro"])
    def test_missing_file(self, tmp_path, missing):
        files = [f for f in ["LICENSE", "README.md", "qt-json.pri", "qt-json.pro"] if f != missing]
        self._make_pod(tmp_path, "qt-json", files)

        validator = PodValidator()

        assert validator.check_pod(tmp_path, "qt-json") is False
        assert validator.problems(tmp_path, "qt-json") == [f"missing {missing}"]
