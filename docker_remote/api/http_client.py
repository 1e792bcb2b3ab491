"""
HTTP Client for the Docker daemon
Pure Python implementation using http.client and socket,
talking to the daemon over a Unix socket or plain TCP
"""

import socket
import http.client
import json
import logging
import platform
import os
from typing import Optional, Dict, Any, Callable, Iterator
from urllib.parse import quote, urlsplit

logger = logging.getLogger(__name__)

DEFAULT_UNIX_SOCKET = '/var/run/docker.sock'


class UnixHTTPConnection(http.client.HTTPConnection):
    """HTTP connection over Unix socket"""

    def __init__(self, socket_path: str, timeout: int = 60):
        super().__init__('localhost', timeout=timeout)
        self.socket_path = socket_path

    def connect(self):
        """Connect to Unix socket"""
        self.sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.sock.settimeout(self.timeout)
        self.sock.connect(self.socket_path)


def default_socket_path() -> str:
    """Docker socket path for the current platform"""
    if platform.system() == "Darwin":  # macOS
        socket_path = os.path.expanduser('~/.docker/run/docker.sock')
        # Fallback to default Unix socket
        if os.path.exists(socket_path):
            return socket_path
    return DEFAULT_UNIX_SOCKET


def encode_params(params: Optional[Dict[str, Any]]) -> str:
    """
    Encode query parameters the way the Docker API expects them

    Args:
        params: Parameter mapping; None values are dropped

    Returns:
        Query string without the leading '?'
    """
    if not params:
        return ''

    query_parts = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        elif isinstance(value, (list, dict)):
            value = json.dumps(value)
        query_parts.append(f"{quote(str(key))}={quote(str(value), safe='')}")
    return '&'.join(query_parts)


class Response:
    """
    Response of the Docker daemon

    The body is read lazily: ``content`` drains whatever is left on the
    connection, ``iter_lines`` yields it line by line as it arrives and
    hands every non-empty line to the callback given to the request.
    """

    def __init__(self, raw: http.client.HTTPResponse, connection: http.client.HTTPConnection,
                 callback: Optional[Callable[[bytes], None]] = None):
        self.raw = raw
        self.status_code = int(raw.status)
        self.reason = raw.reason
        self.headers = dict(raw.getheaders())
        self._connection = connection
        self._callback = callback
        self._chunks = []
        self._content = None

    def __repr__(self):
        return f"<Response [{self.status_code}]>"

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def closed(self) -> bool:
        return self._connection is None

    @property
    def content(self) -> bytes:
        """Full response body"""
        if self._content is None:
            self._chunks.append(self.raw.read())
            self._finish()
        return self._content

    @property
    def text(self) -> str:
        return self.content.decode('utf-8', errors='replace')

    def read(self) -> bytes:
        """Drain the body and release the connection"""
        return self.content

    def json(self) -> Any:
        """Decode the body as JSON"""
        return json.loads(self.content)

    def iter_lines(self) -> Iterator[bytes]:
        """
        Iterate over body lines as the daemon sends them

        Yields:
            Stripped, non-empty lines
        """
        if self._content is not None:
            for line in self._content.splitlines():
                if line.strip():
                    yield line.strip()
            return

        while True:
            line = self.raw.readline()
            if not line:
                break
            self._chunks.append(line)
            line = line.strip()
            if not line:
                continue
            if self._callback:
                self._callback(line)
            yield line

        self._finish()

    def _finish(self):
        self._content = b''.join(self._chunks)
        self._chunks = []
        self.close()

    def close(self):
        """Release the connection"""
        if self._connection is not None:
            self.raw.close()
            self._connection.close()
            self._connection = None


class DockerHTTPClient:
    """HTTP client for Docker daemon"""

    def __init__(self, base_url: Optional[str] = None, timeout: int = 60,
                 api_version: Optional[str] = None):
        """
        Initialize Docker HTTP client

        Args:
            base_url: unix:// socket, tcp:// or http:// address (default: auto-detect)
            timeout: Request timeout in seconds
            api_version: Engine API version to pin, e.g. '1.43'
        """
        self.timeout = timeout
        # accept both '1.43' and 'v1.43'
        self.api_version = api_version.lstrip('vV') if api_version else None
        self.socket_path = None
        self.host = None
        self.port = None

        if not base_url:
            self.socket_path = default_socket_path()
        elif base_url.startswith('unix://') or base_url.startswith('/'):
            # Remove unix:// prefix if present
            self.socket_path = base_url.replace('unix://', '', 1)
        elif base_url.startswith(('tcp://', 'http://')):
            address = urlsplit(base_url)
            self.host = address.hostname
            self.port = address.port or 2375
        else:
            raise ValueError(f"Unsupported Docker host: {base_url}")

    @classmethod
    def from_settings(cls, settings) -> 'DockerHTTPClient':
        """Create a client from a Settings instance"""
        return cls(
            base_url=settings.get('docker_host'),
            timeout=settings.get('timeout', 60),
            api_version=settings.get('api_version'),
        )

    def __repr__(self):
        target = self.socket_path or f"{self.host}:{self.port}"
        return f"<DockerHTTPClient: {target}>"

    def _connect(self) -> http.client.HTTPConnection:
        if self.socket_path:
            return UnixHTTPConnection(self.socket_path, timeout=self.timeout)
        return http.client.HTTPConnection(self.host, self.port, timeout=self.timeout)

    def build_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Build request URL from API path and query params

        Args:
            path: API path such as '/containers/json'
            params: URL query parameters

        Returns:
            Request target including version prefix and query string
        """
        url = f"/v{self.api_version}{path}" if self.api_version else path
        query = encode_params(params)
        if query:
            url = f"{url}?{query}"
        return url

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                data: Optional[Any] = None, body: Optional[Any] = None,
                headers: Optional[Dict[str, str]] = None, stream: bool = False,
                callback: Optional[Callable[[bytes], None]] = None,
                wait: bool = True) -> Response:
        """
        Make HTTP request to Docker daemon

        Status codes are not checked here; callers decide which ones they expect.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path
            params: URL query parameters
            data: JSON-serializable request body
            body: Raw request body, bytes or a readable binary stream
            headers: HTTP headers
            stream: Read the response line by line, feeding callback
            callback: Called with every non-empty line of a streamed response
            wait: With stream, drain the response before returning

        Returns:
            Response object; still open when stream is set and wait is not
        """
        url = self.build_url(path, params)

        # Prepare headers
        req_headers = {'Host': 'localhost'} if self.socket_path else {}
        if headers:
            req_headers.update(headers)

        if data is not None:
            body = json.dumps(data).encode('utf-8')
            req_headers['Content-Type'] = 'application/json'

        logger.debug(f"{method} {url}")

        conn = self._connect()
        try:
            conn.request(method, url, body=body, headers=req_headers)
            raw = conn.getresponse()
        except Exception:
            conn.close()
            raise

        response = Response(raw, conn, callback=callback if stream else None)
        logger.debug(f"{method} {url} -> {response.status_code}")

        if stream:
            if wait:
                for _ in response.iter_lines():
                    pass
            return response

        response.read()
        return response

    def get(self, path: str, **kwargs) -> Response:
        """Make GET request"""
        return self.request('GET', path, **kwargs)

    def post(self, path: str, **kwargs) -> Response:
        """Make POST request"""
        return self.request('POST', path, **kwargs)

    def delete(self, path: str, **kwargs) -> Response:
        """Make DELETE request"""
        return self.request('DELETE', path, **kwargs)

    def put(self, path: str, **kwargs) -> Response:
        """Make PUT request"""
        return self.request('PUT', path, **kwargs)
