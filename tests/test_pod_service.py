"""
Tests for PodService, the pod lifecycle orchestrator.

Tests cover:
- Precondition: non-repositories are rejected before any command runs
- Install / remove / update, single and batch
- Metadata and generated files staying in step with submodules
- Completion callbacks
- Project scaffold creation
"""

import pytest
from unittest.mock import MagicMock

from qtpods.domain.operation import FailureKind, OperationStatus
from qtpods.domain.pod import Pod
from qtpods.infra.podinfo_store import PodInfoStore


JSON_POD = Pod(
    name="qt-json",
    url="https://example.org/qt-json.git",
    author="Jane Doe",
    description="JSON helpers",
    license="MIT",
    website="https://example.org/qt-json",
)
LOG_POD = Pod(name="qt-logger", url="https://example.org/qt-logger.git", author="Kim")


def _podinfo_groups(repo):
    return set(PodInfoStore().load(repo))


class TestPrecondition:
    """Every mutating operation on a non-repository fails up front."""

    @pytest.fixture
    def not_a_repo(self, tmp_path):
        path = tmp_path / 'plain'
        path.mkdir()
        return path

    @pytest.mark.parametrize("call", [
        lambda s, r: s.install_pod(r, JSON_POD),
        lambda s, r: s.install_pods(r, [JSON_POD, LOG_POD]),
        lambda s, r: s.remove_pod(r, "qt-json"),
        lambda s, r: s.remove_pods(r, ["qt-json", "qt-logger"]),
        lambda s, r: s.update_pod(r, "qt-json"),
        lambda s, r: s.update_pods(r, ["qt-json"]),
        lambda s, r: s.update_all_pods(r),
        lambda s, r: s.generate_pods_pri(r),
        lambda s, r: s.generate_pods_subdirs_pri(r),
        lambda s, r: s.generate_subdirs_pro(r),
        lambda s, r: s.generate_all(r),
    ])
    def test_fails_without_running_commands(self, service, fake_runner, not_a_repo, call):
        result = call(service, not_a_repo)

        assert result.success is False
        assert result.failure == FailureKind.PRECONDITION
        assert fake_runner.calls == []
        assert list(not_a_repo.iterdir()) == []

    def test_is_git_repository(self, service, repo, tmp_path):
        assert service.is_git_repository(repo) is True
        assert service.is_git_repository(tmp_path) is False


class TestInstall:
    """Tests for install_pod / install_pods."""

    def test_install_pod_success(self, service, fake_runner, repo):
        result = service.install_pod(repo, JSON_POD)

        assert result.success is True
        assert result.regenerated is True
        assert result.pods == ["qt-json"]
        assert "submodule add https://example.org/qt-json.git qt-json" in fake_runner.commands()

        installed = service.list_installed_pods(repo)
        assert installed == [JSON_POD]

    def test_install_writes_generated_files(self, service, repo):
        service.install_pod(repo, JSON_POD)

        assert "include(qt-json/qt-json.pri)\n" in (repo / "pods.pri").read_text()
        assert "\\\n\tqt-json " in (repo / "pods-subdirs.pri").read_text()
        assert (repo / "myapp.pro").exists()

    def test_install_stages_files(self, service, fake_runner, repo):
        service.install_pod(repo, JSON_POD)

        commands = fake_runner.commands()
        assert "add .podinfo" in commands
        assert "add pods.pri" in commands
        assert "add pods-subdirs.pri" in commands
        assert "add myapp.pro" in commands

    def test_install_pod_add_fails(self, service, fake_runner, repo):
        fake_runner.fail("submodule", "add")

        result = service.install_pod(repo, JSON_POD)

        assert result.success is False
        assert result.failure_kind() == FailureKind.COMMAND
        assert result.regenerated is False
        assert not (repo / ".podinfo").exists()
        assert not (repo / "pods.pri").exists()

    def test_install_pods_batch(self, service, repo):
        result = service.install_pods(repo, [JSON_POD, LOG_POD])

        assert result.success is True
        assert result.total == 2
        assert [p.name for p in service.list_installed_pods(repo)] == ["qt-json", "qt-logger"]
        assert _podinfo_groups(repo) == {"qt-json", "qt-logger"}

    def test_install_pods_partial_failure(self, service, fake_runner, repo):
        fake_runner.fail("submodule", "add", "qt-logger")

        result = service.install_pods(repo, [JSON_POD, LOG_POD])

        assert result.success is False
        assert result.successful == 1
        assert result.failed == 1
        # Metadata is written for the pod that was added
        assert _podinfo_groups(repo) == {"qt-json"}
        # but nothing is regenerated
        assert result.regenerated is False
        assert not (repo / "pods.pri").exists()

    def test_install_existing_pod_fails(self, service, repo):
        service.install_pod(repo, JSON_POD)

        result = service.install_pod(repo, JSON_POD)

        assert result.success is False
        assert result.details[0].steps[0].returncode == 128

    def test_install_pod_named_default(self, service, repo):
        pod = Pod(name="DEFAULT", url="https://example.org/default.git", author="Ann")

        result = service.install_pod(repo, pod)

        assert result.success is True
        assert service.list_installed_pods(repo) == [pod]
        assert _podinfo_groups(repo) == {"DEFAULT"}

    def test_install_keeps_readable_groups_of_damaged_podinfo(self, service, repo):
        (repo / ".podinfo").write_text("[a]\nauthor = Ann\nstray line\n[b]\nauthor = Bob\n")

        result = service.install_pod(repo, JSON_POD)

        assert result.success is True
        assert _podinfo_groups(repo) == {"a", "b", "qt-json"}

    def test_install_with_unreadable_podinfo(self, service, repo):
        (repo / ".podinfo").write_text("no header\n[a]\nauthor = Ann\n")

        result = service.install_pod(repo, JSON_POD)

        assert result.success is False
        assert result.failure_kind() == FailureKind.PARSE
        assert result.regenerated is False
        assert (repo / ".podinfo").read_text() == "no header\n[a]\nauthor = Ann\n"

    def test_install_with_unwritable_podinfo(self, service, repo):
        service.store.write = MagicMock(side_effect=PermissionError("read-only"))

        result = service.install_pod(repo, JSON_POD)

        assert result.success is False
        assert result.failure_kind() == FailureKind.FILESYSTEM
        assert "read-only" in result.details[0].error


class TestRemove:
    """Tests for remove_pod / remove_pods."""

    def test_remove_pod_success(self, service, fake_runner, repo):
        service.install_pods(repo, [JSON_POD, LOG_POD])
        fake_runner.calls.clear()

        result = service.remove_pod(repo, "qt-json")

        assert result.success is True
        assert result.regenerated is True
        steps = [step.name for step in result.details[0].steps]
        assert steps == ["deinit", "remove_tree", "remove_module_state"]
        assert fake_runner.commands()[:2] == ["submodule deinit -f qt-json", "rm -rf qt-json"]

        assert [p.name for p in service.list_installed_pods(repo)] == ["qt-logger"]
        assert _podinfo_groups(repo) == {"qt-logger"}
        assert not (repo / ".git" / "modules" / "qt-json").exists()
        assert "qt-json" not in (repo / "pods.pri").read_text()

    @pytest.mark.parametrize("failing", [("deinit",), ("rm", "-rf")])
    def test_remove_pod_step_failure_keeps_metadata(self, service, fake_runner, repo, failing):
        service.install_pod(repo, JSON_POD)
        pods_pri = (repo / "pods.pri").read_text()
        fake_runner.fail(*failing)

        result = service.remove_pod(repo, "qt-json")

        assert result.success is False
        assert result.regenerated is False
        assert _podinfo_groups(repo) == {"qt-json"}
        assert (repo / "pods.pri").read_text() == pods_pri

    def test_remove_pod_stops_after_failed_deinit(self, service, fake_runner, repo):
        service.install_pod(repo, JSON_POD)
        fake_runner.fail("deinit")
        fake_runner.calls.clear()

        result = service.remove_pod(repo, "qt-json")

        assert [step.name for step in result.details[0].steps] == ["deinit"]
        assert fake_runner.commands() == ["submodule deinit -f qt-json"]

    def test_remove_pods_partial_failure(self, service, fake_runner, repo):
        service.install_pods(repo, [JSON_POD, LOG_POD])
        pods_pri = (repo / "pods.pri").read_text()
        fake_runner.fail("deinit", "qt-logger")

        result = service.remove_pods(repo, ["qt-json", "qt-logger"])

        assert result.success is False
        assert result.successful == 1
        assert result.failed == 1
        # Metadata for the removed pod is purged, the other is retained
        assert _podinfo_groups(repo) == {"qt-logger"}
        # Generated files are not regenerated
        assert result.regenerated is False
        assert (repo / "pods.pri").read_text() == pods_pri

    def test_remove_pods_continues_after_failure(self, service, fake_runner, repo):
        service.install_pods(repo, [JSON_POD, LOG_POD])
        fake_runner.fail("deinit", "qt-json")

        result = service.remove_pods(repo, ["qt-json", "qt-logger"])

        assert [d.status for d in result.details] == [OperationStatus.FAILED, OperationStatus.SUCCESS]
        assert _podinfo_groups(repo) == {"qt-json"}

    def test_remove_missing_pod(self, service, repo):
        result = service.remove_pod(repo, "nope")

        assert result.success is False
        assert result.failure_kind() == FailureKind.COMMAND


class TestUpdate:
    """Tests for update_pod / update_pods / update_all_pods."""

    def test_update_pod_runs_in_pod_directory(self, service, fake_runner, repo):
        service.install_pod(repo, JSON_POD)
        fake_runner.calls.clear()
        fake_runner.cwds.clear()

        result = service.update_pod(repo, "qt-json")

        assert result.success is True
        assert fake_runner.commands() == ["stash", "checkout master", "pull"]
        assert fake_runner.cwds == [str(repo / "qt-json")] * 3

    def test_update_pod_custom_branch(self, service, fake_runner, repo):
        service.install_pod(repo, JSON_POD)
        fake_runner.calls.clear()

        service.update_pod(repo, "qt-json", branch="main")

        assert "checkout main" in fake_runner.commands()

    def test_update_pod_reports_failure(self, service, fake_runner, repo):
        service.install_pod(repo, JSON_POD)
        fake_runner.fail("pull")

        result = service.update_pod(repo, "qt-json")

        assert result.success is False
        assert [s.name for s in result.details[0].steps] == ["stash", "checkout", "pull"]

    def test_update_missing_pod_directory(self, service, repo):
        result = service.update_pod(repo, "ghost")

        assert result.success is False
        assert result.details[0].steps[0].returncode == -1

    def test_update_pods_aggregate(self, service, fake_runner, repo):
        service.install_pods(repo, [JSON_POD, LOG_POD])
        fake_runner.fail("checkout", "master")

        result = service.update_pods(repo, ["qt-json", "qt-logger"])

        assert result.success is False
        assert result.failed == 2
        assert result.regenerated is False

    def test_update_all_pods(self, service, fake_runner, repo):
        service.install_pods(repo, [JSON_POD, LOG_POD])
        fake_runner.calls.clear()

        result = service.update_all_pods(repo)

        assert result.success is True
        assert result.pods == ["qt-json", "qt-logger"]
        assert result.regenerated is True
        assert fake_runner.commands().count("pull") == 2

    def test_update_all_pods_empty_repository(self, service, repo):
        result = service.update_all_pods(repo)

        assert result.success is True
        assert result.total == 0

    def test_update_all_pods_failure_skips_regeneration(self, service, fake_runner, repo):
        service.install_pods(repo, [JSON_POD, LOG_POD])
        (repo / "pods.pri").unlink()
        fake_runner.fail("stash")

        result = service.update_all_pods(repo)

        assert result.success is False
        assert not (repo / "pods.pri").exists()


class TestCompletionCallback:
    """on_complete receives the same result the operation returns."""

    def test_callback_on_success(self, service, repo):
        callback = MagicMock()

        result = service.install_pod(repo, JSON_POD, on_complete=callback)

        callback.assert_called_once_with(result)

    def test_callback_on_precondition_failure(self, service, tmp_path):
        callback = MagicMock()

        result = service.remove_pods(tmp_path, ["a", "b"], on_complete=callback)

        callback.assert_called_once_with(result)
        assert result.pods == ["a", "b"]
        assert result.success is False


class TestGenerate:
    """Tests for the generate_* operations."""

    def test_generate_is_idempotent(self, service, repo):
        service.install_pods(repo, [JSON_POD, LOG_POD])

        service.generate_pods_pri(repo)
        first = (repo / "pods.pri").read_bytes()
        service.generate_pods_pri(repo)

        assert (repo / "pods.pri").read_bytes() == first

    def test_generate_subdirs_pro_keeps_edits(self, service, repo):
        (repo / "myapp.pro").write_text("TEMPLATE = subdirs\nSUBDIRS = app\n")

        result = service.generate_subdirs_pro(repo)

        assert result.success is True
        assert (repo / "myapp.pro").read_text() == "TEMPLATE = subdirs\nSUBDIRS = app\n"

    def test_generate_all(self, service, repo):
        result = service.generate_all(repo)

        assert result.success is True
        assert result.regenerated is True
        for name in ("pods.pri", "pods-subdirs.pri", "myapp.pro"):
            assert (repo / name).exists()


class TestCheckPod:
    def test_check_pod_delegates_to_validator(self, service, repo):
        assert service.check_pod(repo, "missing") is False


class TestCreateProject:
    """Tests for create_project."""

    def test_create_project_new_directory(self, service, fake_runner, tmp_path):
        target = tmp_path / "newapp"

        result = service.create_project(target)

        assert result.success is True
        assert "init" in fake_runner.commands()
        assert (target / ".git").is_dir()
        assert (target / "newapp.pro").read_text().startswith("# Auto-generated by qt-pods.")
        assert (target / "pods.pri").exists()
        assert (target / "pods-subdirs.pri").exists()

    def test_create_project_existing_repository(self, service, fake_runner, repo):
        result = service.create_project(repo)

        assert result.success is True
        assert "init" not in fake_runner.commands()

    def test_create_project_init_fails(self, service, fake_runner, tmp_path):
        fake_runner.fail("init")

        result = service.create_project(tmp_path / "broken")

        assert result.success is False
        assert result.failure == FailureKind.COMMAND
        assert not (tmp_path / "broken" / "pods.pri").exists()


class TestListing:
    def test_list_available_uses_configured_sources(self, fake_runner):
        from qtpods.infra.catalog_client import CatalogClient
        from qtpods.infra.git_client import GitClient
        from qtpods.services.pod_service import PodService

        client = MagicMock(spec=CatalogClient)
        client.is_online.return_value = True
        client.fetch.return_value = '{"qt-json": "https://example.org/qt-json.git"}'
        service = PodService(
            config={'general': {'sources': ['https://example.org/pods.json']}},
            git_client=GitClient(runner=fake_runner),
            catalog_client=client,
        )

        pods = service.list_available_pods()

        client.fetch.assert_called_once_with('https://example.org/pods.json')
        assert pods == [Pod(name="qt-json", url="https://example.org/qt-json.git")]
