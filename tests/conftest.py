"""
Shared fixtures for qtpods tests.

FakeGitRunner stands in for the git binary: it understands the handful
of commands qtpods issues and mimics their effect on disk, so lifecycle
tests can check .gitmodules, .podinfo and the generated files without a
real git or network.
"""

import shutil
from pathlib import Path
from typing import List, Sequence

import pytest

from qtpods.infra.command_runner import CommandRunner, CommandResult
from qtpods.infra.git_client import GitClient
from qtpods.infra.catalog_client import CatalogClient
from qtpods.services.pod_service import PodService


def _read_sections(gitmodules: Path) -> List[List[str]]:
    if not gitmodules.exists():
        return []
    sections = []
    for line in gitmodules.read_text().splitlines():
        if line.startswith('['):
            sections.append([line])
        elif sections:
            sections[-1].append(line)
    return sections


class FakeGitRunner(CommandRunner):
    """Records commands and simulates their effect on the repository."""

    def __init__(self):
        super().__init__()
        self.calls: List[List[str]] = []
        self.cwds: List[str] = []
        self._failures: List[Sequence[str]] = []

    def fail(self, *tokens: str) -> None:
        """Make any command containing all of tokens exit with status 1."""
        self._failures.append(tokens)

    def commands(self) -> List[str]:
        return [' '.join(args[1:]) for args in self.calls]

    def run(self, args, cwd) -> CommandResult:
        args = [str(a) for a in args]
        self.calls.append(args)
        self.cwds.append(str(cwd))
        cwd = Path(cwd)

        def done(code: int, output: str = "") -> CommandResult:
            return CommandResult(args=args, cwd=str(cwd), returncode=code, output=output)

        if not cwd.is_dir():
            return done(-1, f"No such directory: {cwd}")
        for tokens in self._failures:
            if all(token in args for token in tokens):
                return done(1, "simulated failure")

        command = args[1:]
        if command[:2] == ['submodule', 'add']:
            return done(self._add(cwd, command[2], command[3]))
        if command[:2] == ['submodule', 'deinit']:
            name = command[-1]
            registered = any(f'"{name}"' in s[0] for s in _read_sections(cwd / '.gitmodules'))
            return done(0 if registered else 1)
        if command[:2] == ['rm', '-rf']:
            return done(self._rm(cwd, command[2]))
        if command == ['init']:
            (cwd / '.git').mkdir(exist_ok=True)
            return done(0)
        if command[0] in ('stash', 'checkout', 'pull', 'add'):
            return done(0)
        return done(1, f"unsupported: {' '.join(command)}")

    def _add(self, repo: Path, url: str, name: str) -> int:
        gitmodules = repo / '.gitmodules'
        if any(f'"{name}"' in s[0] for s in _read_sections(gitmodules)):
            return 128
        (repo / name).mkdir()
        (repo / name / '.git').write_text(f"gitdir: ../.git/modules/{name}\n")
        (repo / '.git' / 'modules' / name).mkdir(parents=True)
        with open(gitmodules, 'a') as f:
            f.write(f'[submodule "{name}"]\n\tpath = {name}\n\turl = {url}\n')
        return 0

    def _rm(self, repo: Path, name: str) -> int:
        gitmodules = repo / '.gitmodules'
        sections = _read_sections(gitmodules)
        kept = [s for s in sections if f'"{name}"' not in s[0]]
        if len(kept) == len(sections):
            return 128
        gitmodules.write_text(''.join('\n'.join(s) + '\n' for s in kept))
        shutil.rmtree(repo / name, ignore_errors=True)
        return 0


@pytest.fixture
def fake_runner():
    return FakeGitRunner()


@pytest.fixture
def offline_catalog_client():
    client = CatalogClient()
    client.is_online = lambda: False
    return client


@pytest.fixture
def repo(tmp_path):
    """An empty git repository (just a .git directory)."""
    path = tmp_path / 'myapp'
    (path / '.git').mkdir(parents=True)
    return path


@pytest.fixture
def service(fake_runner, offline_catalog_client):
    return PodService(
        config={},
        git_client=GitClient(runner=fake_runner),
        catalog_client=offline_catalog_client,
    )
