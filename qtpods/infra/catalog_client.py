"""
Catalog client infrastructure for qtpods.

Fetches pod catalog documents from source URLs over HTTP. The client
keeps a single requests.Session for its lifetime; it knows nothing
about the document format.
"""

import socket
from typing import Optional
import logging

import requests

logger = logging.getLogger(__name__)


class CatalogClient:
    """
    HTTP access to pod catalog sources.

    Example:
        client = CatalogClient(timeout=10)
        if client.is_online():
            text = client.fetch("https://example.org/pods.json")
    """

    def __init__(
        self,
        timeout: float = 10,
        probe_host: str = "1.1.1.1",
        probe_port: int = 53,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize CatalogClient.

        Args:
            timeout: Per-request timeout in seconds
            probe_host: Host used to check that the network is reachable
            probe_port: Port used for the reachability probe
            session: requests.Session to reuse (creates new if None)
        """
        self.timeout = timeout
        self.probe_host = probe_host
        self.probe_port = probe_port
        self.session = session or requests.Session()

    def is_online(self) -> bool:
        """Check whether the network is reachable at all."""
        try:
            with socket.create_connection((self.probe_host, self.probe_port), timeout=self.timeout):
                return True
        except OSError as e:
            logger.debug(f"Network not reachable ({self.probe_host}:{self.probe_port}): {e}")
            return False

    def fetch(self, source: str) -> Optional[str]:
        """
        Fetch a catalog document.

        An HTTP error status is logged but the body is still returned,
        since some hosts serve a usable document with an error code.

        Returns:
            Response body, or None if the request itself failed
        """
        try:
            response = self.session.get(source, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Error fetching pod catalog {source}: {e}")
            return None

        if not response.ok:
            logger.warning(f"Pod catalog {source} returned status {response.status_code}")
        return response.text

    def close(self) -> None:
        self.session.close()
