"""
Command execution infrastructure for qtpods.

Runs an external command in an explicit working directory and reports
its exit status and captured output. The process-wide working directory
is never changed, so a failing command cannot leave the caller in the
wrong place.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union
import logging

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of running an external command."""
    args: List[str]
    cwd: str
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """
    Synchronous command executor.

    Example:
        runner = CommandRunner()
        result = runner.run(["git", "status"], cwd="/path/to/repo")
        if result.ok:
            print(result.output)
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize CommandRunner.

        Args:
            timeout: Command timeout in seconds (None waits forever)
        """
        self.timeout = timeout

    def run(self, args: Sequence[str], cwd: Union[str, Path]) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Args:
            args: Command and arguments (no shell involved)
            cwd: Working directory for the child process

        Returns:
            CommandResult; returncode is -1 if the command could not be
            started or timed out
        """
        args = [str(a) for a in args]
        cwd = str(cwd)
        logger.info(f"Running {' '.join(args)} in {cwd}")

        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                encoding='utf-8',
                errors='replace',  # git may print non-UTF-8 file names
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Command timed out after {self.timeout}s: {' '.join(args)}")
            return CommandResult(args=args, cwd=cwd, returncode=-1, output="timed out")
        except OSError as e:
            logger.warning(f"Could not run {' '.join(args)} in {cwd}: {e}")
            return CommandResult(args=args, cwd=cwd, returncode=-1, output=str(e))

        output = (completed.stdout or "") + (completed.stderr or "")
        if output.strip():
            logger.debug(output.rstrip())
        if completed.returncode != 0:
            logger.warning(f"{' '.join(args)} exited with status {completed.returncode}")

        return CommandResult(
            args=args,
            cwd=cwd,
            returncode=completed.returncode,
            output=output.strip()
        )
