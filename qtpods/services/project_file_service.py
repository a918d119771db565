"""
Project file generator service for qtpods.

Generates the qmake include files derived from the installed-pod list:
- pods.pri: include directive per pod, for application projects
- pods-subdirs.pri: SUBDIRS entry per pod, for the subdirs project
- <repo-dir-name>.pro: the subdirs project itself, created only once

Rendering is pure; writing truncates the file and stages it.
"""

from pathlib import Path
from typing import Optional, Sequence, Union
import logging

from ..domain.pod import Pod
from ..infra.git_client import GitClient
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)

PODS_PRI = "pods.pri"
PODS_SUBDIRS_PRI = "pods-subdirs.pri"

PODS_PRI_HEADER = (
    "# Auto-generated by qt-pods. Do not edit.\n"
    "# Include this to your application project file with:\n"
    "# include(../pods.pri)\n"
    "# This file should be put under version control.\n"
)

PODS_SUBDIRS_PRI_HEADER = (
    "# Auto-generated by qt-pods. Do not edit.\n"
    "# Include this to your subdirs project file with:\n"
    "# include(pods-subdirs.pri)\n"
    "# This file should be put under version control.\n"
)

SUBDIRS_PRO = (
    "# Auto-generated by qt-pods.\n"
    "# This file should be put under version control.\n"
    "TEMPLATE = subdirs\n"
    "SUBDIRS =\n"
    "include(pods-subdirs.pri)\n"
)


def render_pods_pri(pods: Sequence[Pod]) -> str:
    includes = "".join(f"include({pod.name}/{pod.name}.pri)\n" for pod in pods)
    return f"{PODS_PRI_HEADER}\n{includes}\n"


def render_pods_subdirs_pri(pods: Sequence[Pod]) -> str:
    subdirs = "SUBDIRS += " + "".join(f"\\\n\t{pod.name} " for pod in pods)
    return f"{PODS_SUBDIRS_PRI_HEADER}\n{subdirs}\n\n"


def subdirs_pro_name(repository: Union[str, Path]) -> str:
    """Subdirs project file name: the repository directory's own name."""
    return f"{Path(repository).resolve().name}.pro"


class ProjectFileService:
    """
    Regenerates a repository's qmake include files.

    Example:
        service = ProjectFileService()
        service.regenerate_all("/path/to/repo")
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        catalog: Optional[CatalogService] = None
    ):
        self.git = git_client or GitClient()
        self.catalog = catalog or CatalogService()

    def _write(self, repository: Union[str, Path], file_name: str, content: str) -> Path:
        path = Path(repository) / file_name
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(content)
        logger.debug(f"Wrote {path}")
        self._stage(repository, file_name)
        return path

    def _stage(self, repository: Union[str, Path], file_name: str) -> None:
        if not self.git.is_git_repo(repository):
            return
        result = self.git.stage(repository, file_name)
        if not result.ok:
            logger.warning(f"Could not stage {file_name} in {repository}: {result.output}")

    def _pods(self, repository, pods: Optional[Sequence[Pod]]) -> Sequence[Pod]:
        return self.catalog.installed_pods(repository) if pods is None else pods

    def write_pods_pri(
        self,
        repository: Union[str, Path],
        pods: Optional[Sequence[Pod]] = None
    ) -> Path:
        """Regenerate pods.pri from pods (the installed list if None)."""
        return self._write(repository, PODS_PRI, render_pods_pri(self._pods(repository, pods)))

    def write_pods_subdirs_pri(
        self,
        repository: Union[str, Path],
        pods: Optional[Sequence[Pod]] = None
    ) -> Path:
        """Regenerate pods-subdirs.pri from pods (the installed list if None)."""
        content = render_pods_subdirs_pri(self._pods(repository, pods))
        return self._write(repository, PODS_SUBDIRS_PRI, content)

    def write_subdirs_pro(self, repository: Union[str, Path]) -> Path:
        """Create the subdirs project file unless it already exists."""
        file_name = subdirs_pro_name(repository)
        path = Path(repository) / file_name
        if path.exists():
            logger.debug(f"Keeping existing {path}")
            self._stage(repository, file_name)
            return path
        return self._write(repository, file_name, SUBDIRS_PRO)

    def regenerate_all(self, repository: Union[str, Path]) -> None:
        """Regenerate all three files from a single listing."""
        pods = self.catalog.installed_pods(repository)
        self.write_pods_pri(repository, pods)
        self.write_pods_subdirs_pri(repository, pods)
        self.write_subdirs_pro(repository)
        logger.info(f"Regenerated project files for {len(pods)} pods in {repository}")
