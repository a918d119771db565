"""
Git client infrastructure for qtpods.

Provides a clean abstraction over the git invocations qtpods needs.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Every method returns the CommandResult of the underlying invocation;
success is judged by exit status only.
"""

import shutil
from pathlib import Path
from typing import Optional, Union
import logging

from .command_runner import CommandRunner, CommandResult

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        if client.is_git_repo("/path/to/repo"):
            client.submodule_add("/path/to/repo", url, "mypod")
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        executable: str = "git"
    ):
        """
        Initialize GitClient.

        Args:
            runner: CommandRunner instance (creates new if None)
            executable: git executable name or path
        """
        self.runner = runner or CommandRunner()
        self.executable = executable

    def _git(self, cwd: PathLike, *args: str) -> CommandResult:
        return self.runner.run([self.executable, *args], cwd=cwd)

    def is_git_repo(self, path: PathLike) -> bool:
        """Check if path is the root of a git working tree."""
        return (Path(path) / ".git").exists()

    def init(self, path: PathLike) -> CommandResult:
        """Create an empty repository in path."""
        return self._git(path, "init")

    def submodule_add(self, repository: PathLike, url: str, name: str) -> CommandResult:
        """Register and clone url as submodule name."""
        return self._git(repository, "submodule", "add", url, name)

    def submodule_deinit(self, repository: PathLike, name: str) -> CommandResult:
        """Unregister submodule name, discarding local changes."""
        return self._git(repository, "submodule", "deinit", "-f", name)

    def remove_tracked(self, repository: PathLike, name: str) -> CommandResult:
        """Remove name from the index and the working tree."""
        return self._git(repository, "rm", "-rf", name)

    def remove_module_state(self, repository: PathLike, name: str) -> CommandResult:
        """
        Delete git's internal state directory for submodule name.

        A missing directory counts as success, like ``rm -rf``.
        """
        module_dir = Path(repository) / ".git" / "modules" / name
        args = ["rm", "-rf", str(module_dir)]
        try:
            if module_dir.is_dir() and not module_dir.is_symlink():
                shutil.rmtree(module_dir)
            elif module_dir.exists() or module_dir.is_symlink():
                module_dir.unlink()
        except OSError as e:
            logger.warning(f"Could not remove {module_dir}: {e}")
            return CommandResult(args=args, cwd=str(repository), returncode=1, output=str(e))
        return CommandResult(args=args, cwd=str(repository), returncode=0)

    def stash(self, path: PathLike) -> CommandResult:
        """Stash local changes."""
        return self._git(path, "stash")

    def checkout(self, path: PathLike, branch: str) -> CommandResult:
        """Check out branch."""
        return self._git(path, "checkout", branch)

    def pull(self, path: PathLike) -> CommandResult:
        """Pull the checked out branch from its upstream."""
        return self._git(path, "pull")

    def stage(self, repository: PathLike, file_name: str) -> CommandResult:
        """Mark file_name for inclusion in the next commit."""
        return self._git(repository, "add", file_name)
