import logging
from pathlib import Path

import pytest

from errors import FetchFailedError
from http_client import HttpClient, url_file_name
from logger_setup import LOGGER_NAME, LoggerSetup


class FakeHttpClient(HttpClient):
    """Writes fixed bytes instead of downloading; records every call."""

    def __init__(self, content: bytes = b"\x89PNG fake image", fail: bool = False):
        self.content = content
        self.fail = fail
        self.calls = []

    def fetch(self, url, dest_dir):
        self.calls.append((url, Path(dest_dir)))
        if self.fail:
            raise FetchFailedError(f"Error downloading {url}: connection refused", locator=url)
        destination = Path(dest_dir) / url_file_name(url)
        destination.write_bytes(self.content)
        return destination


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    # Handlers may hold streams captured for a single test
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    LoggerSetup._process_logger = None


@pytest.fixture
def http_client():
    return FakeHttpClient()


@pytest.fixture
def failing_http_client():
    return FakeHttpClient(fail=True)


@pytest.fixture
def site(tmp_path):
    """A blog tree: posts under content/, loose images under the root."""
    root = tmp_path / "site"
    content = root / "content"
    content.mkdir(parents=True)
    (root / "static").mkdir()
    return root
