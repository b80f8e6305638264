import subprocess

import pytest
import requests

import http_client
from errors import FetchFailedError
from http_client import RequestsClient, WgetClient, create_http_client, url_file_name


class FakeResponse:
    def __init__(self, chunks, status_code=200):
        self.chunks = chunks
        self.status_code = status_code

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size=1):
        yield from self.chunks


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def test_url_file_name():
    assert url_file_name("http://x/y/cat.png") == "cat.png"
    assert url_file_name("https://x/y/cat.png?size=large") == "cat.png"
    assert url_file_name("https://x/y/big%20cat.png") == "big cat.png"
    assert url_file_name("https://x/") == ""


def test_requests_client_streams_to_file(tmp_path):
    session = FakeSession(FakeResponse([b"abc", b"def"]))
    client = RequestsClient(timeout=5, session=session)

    path = client.fetch("http://x/y/cat.png", tmp_path)

    assert path == tmp_path / "cat.png"
    assert path.read_bytes() == b"abcdef"
    assert session.requests == [("http://x/y/cat.png", {"stream": True, "timeout": 5})]


def test_requests_client_http_error(tmp_path):
    client = RequestsClient(session=FakeSession(FakeResponse([], status_code=404)))

    with pytest.raises(FetchFailedError) as excinfo:
        client.fetch("http://x/y/cat.png", tmp_path)

    assert excinfo.value.locator == "http://x/y/cat.png"
    assert not (tmp_path / "cat.png").exists()


def test_requests_client_connection_error(tmp_path):
    client = RequestsClient(session=FakeSession(error=requests.ConnectionError("refused")))

    with pytest.raises(FetchFailedError):
        client.fetch("http://x/y/cat.png", tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_requests_client_needs_a_file_name(tmp_path):
    session = FakeSession(FakeResponse([b"x"]))

    with pytest.raises(FetchFailedError):
        RequestsClient(session=session).fetch("http://x/", tmp_path)
    assert session.requests == []


def test_wget_client_runs_wget(tmp_path, monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        with open(cmd[3], "wb") as f:
            f.write(b"pixels")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(http_client.subprocess, "run", fake_run)

    path = WgetClient().fetch("http://x/y/cat.png", tmp_path)

    assert path == tmp_path / "cat.png"
    assert calls == [["wget", "-q", "-O", str(tmp_path / "cat.png"), "http://x/y/cat.png"]]


def test_wget_client_non_zero_exit(tmp_path, monkeypatch):
    def fake_run(cmd, **kwargs):
        open(cmd[3], "wb").close()
        return subprocess.CompletedProcess(cmd, 8, "", "ERROR 404: Not Found.")

    monkeypatch.setattr(http_client.subprocess, "run", fake_run)

    with pytest.raises(FetchFailedError) as excinfo:
        WgetClient().fetch("http://x/y/cat.png", tmp_path)

    assert "404" in str(excinfo.value)
    assert not (tmp_path / "cat.png").exists()


def test_wget_client_missing_executable(tmp_path):
    client = WgetClient(executable=str(tmp_path / "no-such-wget"))

    with pytest.raises(FetchFailedError):
        client.fetch("http://x/y/cat.png", tmp_path)


def test_create_http_client():
    assert isinstance(create_http_client(), RequestsClient)
    assert create_http_client("requests", timeout=3).timeout == 3
    assert isinstance(create_http_client("wget"), WgetClient)
    with pytest.raises(ValueError):
        create_http_client("ftp")


def test_url_file_name_keeps_encoded_separators_out():
    assert url_file_name("http://h/..%2F..%2Fevil.png") == "evil.png"
    assert url_file_name("http://h/a%5C..%5Cb.png") == "b.png"
    assert url_file_name("http://h/img/%2E%2E") == ""
    assert url_file_name("http://h/img/.") == ""
