"""
Transports for fetching remote images into a directory.
"""

from abc import ABC, abstractmethod
import logging
import posixpath
import subprocess
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import requests
from requests.exceptions import RequestException

from errors import FetchFailedError

logger = logging.getLogger('collect-images')

DEFAULT_TIMEOUT = 30.0
CHUNK_SIZE = 8192


def url_file_name(url: str) -> str:
    """
    Get the file name a URL's resource is saved under.

    Args:
        url: The URL of the remote resource

    Returns:
        str: The last segment of the unquoted URL path (query and fragment
        dropped), or "" when the path has no usable final segment
    """
    # Unquote first: %2F and %5C must not smuggle separators into the name
    path = unquote(urlsplit(url).path).replace("\\", "/")
    name = posixpath.basename(path)
    if name in (".", ".."):
        return ""
    return name


class HttpClient(ABC):
    """Abstract base class for fetching remote resources."""

    @abstractmethod
    def fetch(self, url: str, dest_dir: Path) -> Path:
        """
        Retrieve a URL into a directory, keeping the remote file name.

        Args:
            url: The URL to fetch
            dest_dir: Existing directory the file is written into

        Returns:
            Path: Path of the fetched file

        Raises:
            FetchFailedError: If the resource could not be retrieved
        """
        pass


class RequestsClient(HttpClient):
    """Implementation of HttpClient using the requests library."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str, dest_dir: Path) -> Path:
        file_name = url_file_name(url)
        if not file_name:
            raise FetchFailedError(f"No file name in URL: {url}", locator=url)
        destination = Path(dest_dir) / file_name

        logger.debug(f"Downloading from URL: {url}")
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(destination, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
        except (RequestException, OSError) as e:
            # Never leave a truncated image behind
            destination.unlink(missing_ok=True)
            raise FetchFailedError(f"Error downloading {url}: {e}", locator=url) from e

        logger.debug(f"Download successful: {url} -> {destination}")
        return destination


class WgetClient(HttpClient):
    """Implementation of HttpClient that shells out to wget."""

    def __init__(self, executable: str = "wget"):
        self.executable = executable

    def fetch(self, url: str, dest_dir: Path) -> Path:
        file_name = url_file_name(url)
        if not file_name:
            raise FetchFailedError(f"No file name in URL: {url}", locator=url)
        destination = Path(dest_dir) / file_name

        cmd = [self.executable, "-q", "-O", str(destination), url]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise FetchFailedError(f"Could not run {self.executable}: {e}", locator=url) from e

        if proc.returncode != 0:
            # wget -O creates the output file before the transfer starts
            destination.unlink(missing_ok=True)
            detail = proc.stderr.strip() if proc.stderr else ""
            raise FetchFailedError(
                f"{self.executable} exited with status {proc.returncode} for {url}"
                + (f": {detail}" if detail else ""),
                locator=url,
            )
        return destination


def create_http_client(kind: str = "requests", timeout: float = DEFAULT_TIMEOUT) -> HttpClient:
    """
    Factory function to create a fetch transport.

    Args:
        kind: "requests" or "wget"
        timeout: Request timeout in seconds (requests transport only)

    Returns:
        HttpClient: An instance of an HttpClient implementation
    """
    if kind == "wget":
        return WgetClient()
    if kind == "requests":
        return RequestsClient(timeout=timeout)
    raise ValueError(f"Unknown fetcher: {kind}")
