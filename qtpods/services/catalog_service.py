"""
Catalog service for qtpods.

Resolves the two pod listings:
- installed pods: .gitmodules registrations joined with .podinfo metadata
- available pods: catalog documents fetched from source URLs

Catalog documents are JSON objects keyed by pod name. Two shapes are
accepted per entry:

    {"mypod": {"url": "...", "author": "...", "description": "...", "license": "..."}}
    {"mypod": "https://example.org/mypod.git"}      # legacy

Parse failures never propagate; a bad document contributes no pods.
"""

import configparser
import json
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union
import logging

from ..domain.pod import Pod
from ..infra.catalog_client import CatalogClient
from ..infra.podinfo_store import PodInfoStore

logger = logging.getLogger(__name__)

GITMODULES_FILE = ".gitmodules"
SUBMODULE_SECTION_PREFIX = "submodule"


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_catalog(document: Union[str, bytes]) -> List[Pod]:
    """
    Parse one catalog document into pods.

    Returns:
        Pods in document order; empty if the document is malformed
    """
    try:
        data = json.loads(document)
    except (ValueError, TypeError) as e:
        logger.debug(f"Ignoring malformed pod catalog: {e}")
        return []

    if not isinstance(data, dict):
        logger.debug(f"Ignoring pod catalog with top-level {type(data).__name__}")
        return []

    pods = []
    for name, entry in data.items():
        if isinstance(entry, dict):
            pods.append(Pod(
                name=name,
                url=_text(entry.get('url')),
                author=_text(entry.get('author')),
                description=_text(entry.get('description')),
                license=_text(entry.get('license')),
            ))
        else:
            pods.append(Pod(name=name, url=_text(entry)))
    return pods


def read_submodules(repository: Union[str, Path]) -> List[Tuple[str, str]]:
    """
    Read (path, url) registrations from the repository's .gitmodules.

    Returns:
        Registrations in manifest order; empty if the manifest is
        missing or unreadable
    """
    manifest = Path(repository) / GITMODULES_FILE
    if not manifest.exists():
        return []

    parser = configparser.ConfigParser(interpolation=None, strict=False)
    try:
        with open(manifest, 'r', encoding='utf-8') as f:
            parser.read_file(f)
    except (configparser.Error, UnicodeDecodeError, OSError) as e:
        logger.warning(f"Error reading {manifest}: {e}")
        return []

    submodules = []
    for section in parser.sections():
        if not section.startswith(SUBMODULE_SECTION_PREFIX):
            continue
        path = parser.get(section, 'path', fallback='')
        if not path:
            logger.debug(f"Skipping {section} in {manifest}: no path")
            continue
        submodules.append((path, parser.get(section, 'url', fallback='')))
    return submodules


class CatalogService:
    """
    Service for listing installed and available pods.

    Example:
        service = CatalogService()
        for pod in service.installed_pods("/path/to/repo"):
            print(pod.name, pod.url)
    """

    def __init__(
        self,
        catalog_client: Optional[CatalogClient] = None,
        store: Optional[PodInfoStore] = None
    ):
        self.client = catalog_client or CatalogClient()
        self.store = store or PodInfoStore()

    def installed_pods(self, repository: Union[str, Path]) -> List[Pod]:
        """List installed pods with their recorded metadata."""
        submodules = read_submodules(repository)
        if not submodules:
            return []

        metadata = self.store.load(repository)
        self.store.stage(repository)

        pods = []
        for name, url in submodules:
            pod = Pod(name=name, url=url)
            fields = metadata.get(name)
            if fields is not None:
                pod = pod.with_metadata(**fields)
            pods.append(pod)
        return pods

    def available_pods(self, sources: Sequence[str]) -> List[Pod]:
        """
        Collect pods from every source, in source order.

        Returns an empty list without sending any request if the
        network is unreachable.
        """
        if not sources:
            return []
        if not self.client.is_online():
            logger.info("No network connection available.")
            return []

        pods = []
        for source in sources:
            document = self.client.fetch(source)
            if document is None:
                continue
            found = parse_catalog(document)
            logger.debug(f"{len(found)} pods from {source}")
            pods.extend(found)
        return pods

    def find_available(self, name: str, sources: Sequence[str]) -> Optional[Pod]:
        """Look up a pod by name in the catalog; the first source wins."""
        for pod in self.available_pods(sources):
            if pod.name == name:
                return pod
        return None
