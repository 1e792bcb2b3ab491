"""Pytest configuration and shared fixtures."""

import io
import json
from unittest.mock import MagicMock

import pytest

from docker_remote.api.http_client import DockerHTTPClient


class FakeRawResponse:
    """Stand-in for http.client.HTTPResponse backed by bytes."""

    def __init__(self, status=200, body=b"", reason="OK", headers=None):
        self.status = status
        self.reason = reason
        self._headers = headers or {"Content-Type": "application/json"}
        self._body = io.BytesIO(body)
        self.closed = False

    def getheaders(self):
        return list(self._headers.items())

    def read(self):
        return self._body.read()

    def readline(self):
        return self._body.readline()

    def close(self):
        self.closed = True


def make_response(status_code=200, payload=None, text=None):
    """Build a mock transport response."""
    response = MagicMock()
    response.status_code = status_code
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    response.text = text
    response.content = text.encode("utf-8")
    response.json.return_value = payload
    return response


@pytest.fixture
def response_factory():
    """Factory for mock transport responses."""
    return make_response


@pytest.fixture
def mock_http():
    """Mock transport with a default empty 200 response."""
    http = MagicMock(spec=DockerHTTPClient)
    http.get.return_value = make_response(200, {})
    http.post.return_value = make_response(200, {})
    http.delete.return_value = make_response(204)
    return http


@pytest.fixture
def raw_response():
    """Factory for FakeRawResponse objects."""
    return FakeRawResponse


@pytest.fixture
def http_client(monkeypatch):
    """DockerHTTPClient whose connections are mocks.

    Set ``http_client.next_raw`` to the FakeRawResponse the next request gets;
    every connection created is recorded in ``http_client.connections``.
    """
    client = DockerHTTPClient(base_url="unix:///tmp/docker-test.sock")
    client.connections = []
    client.next_raw = FakeRawResponse()

    def connect():
        conn = MagicMock()
        conn.getresponse.return_value = client.next_raw
        client.connections.append(conn)
        return conn

    monkeypatch.setattr(client, "_connect", connect)
    return client
