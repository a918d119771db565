"""
Submodule gateway for qtpods.

Runs the fixed git command sequence behind each pod lifecycle step.
Each step only runs if the previous one exited with status zero.
Nothing is rolled back: a failed sequence leaves the repository as the
completed steps left it.
"""

from pathlib import Path
from typing import Union
import logging

from ..domain.pod import Pod
from ..domain.operation import PodOperationDetail, StepResult
from ..infra.command_runner import CommandResult
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_BRANCH = "master"


class SubmoduleGateway:
    """
    Add, remove and update pod submodules.

    Example:
        gateway = SubmoduleGateway()
        detail = gateway.remove("/path/to/repo", "mypod")
        if not detail.ok:
            print(detail.error)
    """

    def __init__(self, git_client: GitClient = None):
        self.git = git_client or GitClient()

    @staticmethod
    def _record(detail: PodOperationDetail, name: str, result: CommandResult) -> bool:
        return detail.add_step(StepResult(
            name=name,
            command=list(result.args),
            returncode=result.returncode,
            output=result.output,
        ))

    def add(self, repository: Union[str, Path], pod: Pod) -> PodOperationDetail:
        """Register pod.url as submodule pod.name."""
        detail = PodOperationDetail(pod_name=pod.name, action="install")
        self._record(detail, "submodule_add", self.git.submodule_add(repository, pod.url, pod.name))
        if detail.ok:
            logger.info(f"Added submodule {pod.name} from {pod.url}")
        return detail

    def remove(self, repository: Union[str, Path], pod_name: str) -> PodOperationDetail:
        """Deinit the submodule, remove its tree, then drop git's module state."""
        detail = PodOperationDetail(pod_name=pod_name, action="remove")

        if not self._record(detail, "deinit", self.git.submodule_deinit(repository, pod_name)):
            return detail
        if not self._record(detail, "remove_tree", self.git.remove_tracked(repository, pod_name)):
            return detail
        self._record(detail, "remove_module_state", self.git.remove_module_state(repository, pod_name))

        if detail.ok:
            logger.info(f"Removed submodule {pod_name}")
        return detail

    def update(
        self,
        repository: Union[str, Path],
        pod_name: str,
        branch: str = DEFAULT_PRIMARY_BRANCH
    ) -> PodOperationDetail:
        """Stash local changes in the pod, check out branch and pull."""
        detail = PodOperationDetail(pod_name=pod_name, action="update")
        pod_dir = Path(repository) / pod_name

        if not self._record(detail, "stash", self.git.stash(pod_dir)):
            return detail
        if not self._record(detail, "checkout", self.git.checkout(pod_dir, branch)):
            return detail
        self._record(detail, "pull", self.git.pull(pod_dir))

        if detail.ok:
            logger.info(f"Updated {pod_name} to latest {branch}")
        return detail
