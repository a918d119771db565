"""
Pod lifecycle service for qtpods.

Orchestrates install/remove/update of pods in a repository:
- checks the target is a git repository before touching anything
- runs the submodule command sequence through SubmoduleGateway
- keeps .podinfo and the generated project files in step with the
  submodule state

All operations block until done. Every mutating operation returns an
OperationResult and passes the same object to an optional per-call
``on_complete`` callback.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import logging

from ..config import load_config
from ..domain.pod import Pod
from ..domain.operation import (
    FailureKind,
    OperationResult,
    OperationStatus,
    PodOperationDetail,
)
from ..infra.catalog_client import CatalogClient
from ..infra.command_runner import CommandRunner
from ..infra.git_client import GitClient
from ..infra.podinfo_store import PodInfoError, PodInfoStore
from .catalog_service import CatalogService
from .pod_validator import PodValidator
from .project_file_service import ProjectFileService
from .submodule_gateway import DEFAULT_PRIMARY_BRANCH, SubmoduleGateway

logger = logging.getLogger(__name__)

RepoPath = Union[str, Path]
OnComplete = Optional[Callable[[OperationResult], None]]


class PodService:
    """
    Service for pod operations on a repository.

    Not safe for concurrent mutation of the same repository; callers
    must serialize access per repository.

    Example:
        service = PodService()
        result = service.install_pod("/path/to/repo", Pod("mypod", url))
        if not result.success:
            print(result.errors)

        for pod in service.list_installed_pods("/path/to/repo"):
            print(pod.name)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        catalog_client: Optional[CatalogClient] = None
    ):
        """
        Initialize PodService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (built from config if None)
            catalog_client: CatalogClient instance (built from config if None)
        """
        self.config = config if config is not None else load_config()
        general = self.config.get('general', {})
        git_config = self.config.get('git', {})
        catalog_config = self.config.get('catalog', {})

        self.git = git_client or GitClient(
            runner=CommandRunner(timeout=git_config.get('timeout_seconds')),
            executable=git_config.get('executable', 'git')
        )
        if catalog_client is None:
            catalog_client = CatalogClient(
                timeout=catalog_config.get('timeout_seconds', 10),
                probe_host=catalog_config.get('probe_host', '1.1.1.1'),
                probe_port=catalog_config.get('probe_port', 53)
            )

        self.primary_branch = general.get('primary_branch', DEFAULT_PRIMARY_BRANCH)
        self.sources: List[str] = list(general.get('sources', []))

        self.store = PodInfoStore(self.git)
        self.catalog = CatalogService(catalog_client, self.store)
        self.gateway = SubmoduleGateway(self.git)
        self.files = ProjectFileService(self.git, self.catalog)
        self.validator = PodValidator()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _precondition(self, result: OperationResult) -> bool:
        if self.is_git_repository(result.repository):
            return True
        result.fail(FailureKind.PRECONDITION, f"{result.repository} is not a git repository")
        logger.warning(result.error)
        return False

    def _regenerate(self, result: OperationResult) -> None:
        try:
            self.files.regenerate_all(result.repository)
        except OSError as e:
            result.fail(FailureKind.FILESYSTEM, f"Could not write project files: {e}")
            logger.error(result.error)
            return
        result.regenerated = True

    def _finish(self, result: OperationResult, on_complete: OnComplete) -> OperationResult:
        if result.success:
            logger.info(f"{result.operation} succeeded for {result.repository}")
        else:
            logger.warning(f"{result.operation} failed for {result.repository}: {'; '.join(result.errors)}")
        if on_complete is not None:
            on_complete(result)
        return result

    def _update_store(self, detail: PodOperationDetail, action: str, update: Callable, *args) -> None:
        """Run a .podinfo update, failing detail instead of raising."""
        try:
            update(*args)
        except PodInfoError as e:
            self._fail_detail(detail, FailureKind.PARSE, f"Could not {action}: {e}")
        except OSError as e:
            self._fail_detail(detail, FailureKind.FILESYSTEM, f"Could not {action}: {e}")

    def _fail_detail(self, detail: PodOperationDetail, kind: FailureKind, message: str) -> None:
        detail.status = OperationStatus.FAILED
        detail.failure = kind
        detail.error = message
        logger.error(f"{detail.pod_name}: {message}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_git_repository(self, repository: RepoPath) -> bool:
        """True if repository is the root of a git working tree."""
        return self.git.is_git_repo(repository)

    def list_installed_pods(self, repository: RepoPath) -> List[Pod]:
        return self.catalog.installed_pods(repository)

    def list_available_pods(self, sources: Optional[Sequence[str]] = None) -> List[Pod]:
        """List catalog pods from sources (configured sources if None)."""
        if sources is None:
            sources = self.sources
        return self.catalog.available_pods(sources)

    def check_pod(self, repository: RepoPath, pod_name: str) -> bool:
        valid = self.validator.check_pod(repository, pod_name)
        logger.debug(f"check_pod {pod_name} in {repository}: {valid}")
        return valid

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install_pod(self, repository: RepoPath, pod: Pod, on_complete: OnComplete = None) -> OperationResult:
        """Install a single pod."""
        return self._install("install_pod", repository, [pod], on_complete)

    def install_pods(
        self,
        repository: RepoPath,
        pods: Sequence[Pod],
        on_complete: OnComplete = None
    ) -> OperationResult:
        """
        Install several pods.

        Metadata is written for every pod whose submodule was added; the
        project files are regenerated only if every pod was added.
        """
        return self._install("install_pods", repository, pods, on_complete)

    def _install(self, operation, repository, pods, on_complete) -> OperationResult:
        result = OperationResult(
            operation=operation,
            repository=str(repository),
            pods=[pod.name for pod in pods]
        )
        if not self._precondition(result):
            return self._finish(result, on_complete)

        for pod in pods:
            detail = self.gateway.add(repository, pod)
            if detail.ok:
                self._update_store(detail, "write pod metadata", self.store.write, repository, pod)
            result.add_detail(detail)

        if result.success:
            self._regenerate(result)
        return self._finish(result, on_complete)

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    def remove_pod(self, repository: RepoPath, pod_name: str, on_complete: OnComplete = None) -> OperationResult:
        """Remove a single pod."""
        return self._remove("remove_pod", repository, [pod_name], on_complete)

    def remove_pods(
        self,
        repository: RepoPath,
        pod_names: Sequence[str],
        on_complete: OnComplete = None
    ) -> OperationResult:
        """
        Remove several pods.

        Each pod's metadata is purged as soon as its own removal
        succeeds, whatever happens to the others. The project files are
        regenerated once, and only if every pod was removed.
        """
        return self._remove("remove_pods", repository, pod_names, on_complete)

    def _remove(self, operation, repository, pod_names, on_complete) -> OperationResult:
        result = OperationResult(
            operation=operation,
            repository=str(repository),
            pods=list(pod_names)
        )
        if not self._precondition(result):
            return self._finish(result, on_complete)

        for pod_name in pod_names:
            detail = self.gateway.remove(repository, pod_name)
            if detail.ok:
                self._update_store(detail, "purge pod metadata", self.store.purge, repository, pod_name)
            result.add_detail(detail)

        if result.success:
            self._regenerate(result)
        return self._finish(result, on_complete)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_pod(
        self,
        repository: RepoPath,
        pod_name: str,
        branch: Optional[str] = None,
        on_complete: OnComplete = None
    ) -> OperationResult:
        """Update a single pod; succeeds only if stash, checkout and pull all did."""
        return self._update("update_pod", repository, [pod_name], branch, on_complete)

    def update_pods(
        self,
        repository: RepoPath,
        pod_names: Sequence[str],
        branch: Optional[str] = None,
        on_complete: OnComplete = None
    ) -> OperationResult:
        """Update several pods, continuing past failures."""
        return self._update("update_pods", repository, pod_names, branch, on_complete)

    def update_all_pods(
        self,
        repository: RepoPath,
        branch: Optional[str] = None,
        on_complete: OnComplete = None
    ) -> OperationResult:
        """Update every installed pod and regenerate project files on full success."""
        result = OperationResult(operation="update_all_pods", repository=str(repository))
        if not self._precondition(result):
            return self._finish(result, on_complete)

        pod_names = [pod.name for pod in self.catalog.installed_pods(repository)]
        result.pods = pod_names
        self._update_each(result, repository, pod_names, branch)

        if result.success:
            self._regenerate(result)
        return self._finish(result, on_complete)

    def _update(self, operation, repository, pod_names, branch, on_complete) -> OperationResult:
        result = OperationResult(
            operation=operation,
            repository=str(repository),
            pods=list(pod_names)
        )
        if not self._precondition(result):
            return self._finish(result, on_complete)

        self._update_each(result, repository, pod_names, branch)
        return self._finish(result, on_complete)

    def _update_each(self, result, repository, pod_names, branch) -> None:
        branch = branch or self.primary_branch
        for pod_name in pod_names:
            result.add_detail(self.gateway.update(repository, pod_name, branch))

    # ------------------------------------------------------------------
    # Project files
    # ------------------------------------------------------------------

    def generate_pods_pri(self, repository: RepoPath, on_complete: OnComplete = None) -> OperationResult:
        return self._generate("generate_pods_pri", repository, self.files.write_pods_pri, on_complete)

    def generate_pods_subdirs_pri(self, repository: RepoPath, on_complete: OnComplete = None) -> OperationResult:
        return self._generate(
            "generate_pods_subdirs_pri", repository, self.files.write_pods_subdirs_pri, on_complete
        )

    def generate_subdirs_pro(self, repository: RepoPath, on_complete: OnComplete = None) -> OperationResult:
        return self._generate("generate_subdirs_pro", repository, self.files.write_subdirs_pro, on_complete)

    def generate_all(self, repository: RepoPath, on_complete: OnComplete = None) -> OperationResult:
        return self._generate("generate_all", repository, self.files.regenerate_all, on_complete)

    def _generate(self, operation, repository, writer, on_complete) -> OperationResult:
        result = OperationResult(operation=operation, repository=str(repository))
        if not self._precondition(result):
            return self._finish(result, on_complete)
        try:
            writer(repository)
        except OSError as e:
            result.fail(FailureKind.FILESYSTEM, f"Could not write project file: {e}")
        else:
            result.regenerated = True
        return self._finish(result, on_complete)

    # ------------------------------------------------------------------
    # Project scaffold
    # ------------------------------------------------------------------

    def create_project(self, repository: RepoPath, on_complete: OnComplete = None) -> OperationResult:
        """
        Create an empty pods project.

        Creates the directory if needed, initializes a git repository
        unless one is already there, then writes the project files.
        """
        result = OperationResult(operation="create_project", repository=str(repository))
        try:
            Path(repository).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            result.fail(FailureKind.FILESYSTEM, f"Could not create {repository}: {e}")
            return self._finish(result, on_complete)

        if not self.is_git_repository(repository):
            init = self.git.init(repository)
            if not init.ok:
                result.fail(FailureKind.COMMAND, f"git init exited with status {init.returncode}")
                return self._finish(result, on_complete)

        self._regenerate(result)
        return self._finish(result, on_complete)
