"""
Infrastructure layer for qtpods.

Contains abstractions for external systems:
- CommandRunner: External command execution
- GitClient: Git command execution
- PodInfoStore: .podinfo metadata persistence
- CatalogClient: HTTP access to pod catalogs

These provide clean interfaces that can be mocked for testing.
"""

from .command_runner import CommandRunner, CommandResult
from .git_client import GitClient
from .podinfo_store import PodInfoStore, PodInfoError, PODINFO_FILE
from .catalog_client import CatalogClient

__all__ = [
    'CommandRunner',
    'CommandResult',
    'GitClient',
    'PodInfoStore',
    'PodInfoError',
    'PODINFO_FILE',
    'CatalogClient',
]
