"""
Pod metadata store for qtpods.

Persists descriptive pod metadata in a ``.podinfo`` file at the
repository root, one INI group per pod:

    [mypod]
    author = Jane Doe
    description = Does things
    license = MIT
    website = https://example.org

Every change is written immediately (atomic write, then rename) and the
file is staged for the next commit.
"""

import configparser
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union
import logging

from ..domain.pod import Pod, METADATA_FIELDS
from .command_runner import CommandResult
from .git_client import GitClient

logger = logging.getLogger(__name__)

PODINFO_FILE = ".podinfo"

# configparser's defaults group; no pod name can take it
NO_DEFAULT_SECTION = "\x00"


class PodInfoError(Exception):
    """Raised when .podinfo is too damaged to rewrite without losing groups."""


class PodInfoStore:
    """
    Read/write access to a repository's .podinfo file.

    Example:
        store = PodInfoStore()
        store.write("/path/to/repo", pod)
        pod = store.read("/path/to/repo", Pod(name="mypod"))
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        self.git = git_client or GitClient()

    @staticmethod
    def path(repository: Union[str, Path]) -> Path:
        return Path(repository) / PODINFO_FILE

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        # Every group is a pod, including one named DEFAULT
        parser = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            default_section=NO_DEFAULT_SECTION
        )
        parser.optionxform = str  # keep key case
        return parser

    def _load_parser(
        self,
        repository: Union[str, Path],
        for_update: bool = False
    ) -> configparser.ConfigParser:
        """
        Parse .podinfo, keeping every group that could be read.

        Lines configparser cannot read are skipped. If the file cannot be
        read at all, an empty parser is returned, unless for_update is set:
        then PodInfoError is raised so the file is never overwritten with
        less than it held.
        """
        parser = self._new_parser()
        path = self.path(repository)
        if not path.exists():
            return parser
        try:
            with open(path, 'r', encoding='utf-8') as f:
                parser.read_file(f)
        except configparser.MissingSectionHeaderError as e:
            return self._unreadable(path, e, for_update)
        except configparser.ParsingError as e:
            logger.warning(f"Skipping malformed lines in {path}: {e}")
        except (configparser.Error, UnicodeDecodeError) as e:
            return self._unreadable(path, e, for_update)
        except OSError as e:
            if for_update:
                raise
            logger.warning(f"Error reading {path}: {e}")
            return self._new_parser()
        return parser

    def _unreadable(self, path: Path, error: Exception, for_update: bool) -> configparser.ConfigParser:
        if for_update:
            raise PodInfoError(f"{path} is unreadable, not rewriting it: {error}") from error
        logger.warning(f"Error reading {path}: {error}")
        return self._new_parser()

    def _save(self, repository: Union[str, Path], parser: configparser.ConfigParser) -> None:
        """Write atomically using temp file and rename."""
        path = self.path(repository)
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f"{path.name}.",
            suffix=".tmp"
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
                parser.write(f)
            os.replace(temp_path, path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def stage(self, repository: Union[str, Path]) -> Optional[CommandResult]:
        """Stage .podinfo if it exists inside a git repository."""
        if not self.git.is_git_repo(repository) or not self.path(repository).exists():
            return None
        result = self.git.stage(repository, PODINFO_FILE)
        if not result.ok:
            logger.warning(f"Could not stage {PODINFO_FILE} in {repository}: {result.output}")
        return result

    def load(self, repository: Union[str, Path]) -> Dict[str, Dict[str, str]]:
        """
        Parse the whole store.

        Returns:
            Mapping of pod name to its metadata fields
        """
        parser = self._load_parser(repository)
        return {
            section: {key: parser.get(section, key, fallback='') for key in METADATA_FIELDS}
            for section in parser.sections()
        }

    def write(self, repository: Union[str, Path], pod: Pod) -> None:
        """Create or replace the group for pod."""
        parser = self._load_parser(repository, for_update=True)
        if not parser.has_section(pod.name):
            parser.add_section(pod.name)
        for key, value in pod.metadata().items():
            parser.set(pod.name, key, value or '')
        self._save(repository, parser)
        logger.debug(f"Wrote metadata for {pod.name} to {self.path(repository)}")
        self.stage(repository)

    def purge(self, repository: Union[str, Path], pod_name: str) -> bool:
        """
        Remove the group for pod_name.

        Returns:
            True if a group was removed, False if there was none
        """
        parser = self._load_parser(repository, for_update=True)
        removed = parser.remove_section(pod_name)
        if removed:
            self._save(repository, parser)
            logger.debug(f"Purged metadata for {pod_name} from {self.path(repository)}")
        self.stage(repository)
        return removed

    def read(self, repository: Union[str, Path], pod: Pod) -> Pod:
        """
        Fill pod's metadata from its group.

        Fields stay as they are if the store has no group for the pod.
        """
        entries = self.load(repository)
        self.stage(repository)
        fields = entries.get(pod.name)
        if fields is None:
            return pod
        return pod.with_metadata(**fields)
