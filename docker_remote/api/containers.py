"""
Docker Containers API
"""

import logging
import struct
from typing import List, Dict, Any, Optional

from .exceptions import ContainerNotFound, ImageNotFound, expect_status
from .models import Container

logger = logging.getLogger(__name__)

STREAM_HEADER_SIZE = 8


def demultiplex(data: bytes) -> bytes:
    """
    Strip the stream headers Docker puts in front of non-TTY output

    Every frame starts with [stream, 0, 0, 0, size (4 bytes, big endian)].
    Data that does not start with such a header is returned unchanged.
    """
    if len(data) < STREAM_HEADER_SIZE or data[0] not in (0, 1, 2) or data[1:4] != b'\x00\x00\x00':
        return data

    output = []
    offset = 0
    while offset + STREAM_HEADER_SIZE <= len(data):
        _, size = struct.unpack('>BxxxL', data[offset:offset + STREAM_HEADER_SIZE])
        offset += STREAM_HEADER_SIZE
        output.append(data[offset:offset + size])
        offset += size
    return b''.join(output)


class ContainerManager:
    """Docker containers: list, inspect and lifecycle"""

    def __init__(self, http):
        """
        Args:
            http: Transport shared with the Docker facade
        """
        self.http = http

    def find_all(self, all: bool = False, limit: Optional[int] = None,
                 filters: Optional[Dict[str, Any]] = None) -> List[Container]:
        """
        List containers

        Args:
            all: Show all containers (including stopped)
            limit: Maximum number of containers to return
            filters: Filters to apply

        Returns:
            List of Container objects
        """
        params = {'all': all}
        if limit:
            params['limit'] = limit
        if filters:
            params['filters'] = filters

        response = expect_status(self.http.get('/containers/json', params=params), 200)
        return [Container.from_attrs(c_data) for c_data in response.json()]

    def find(self, container_id: str) -> Optional[Container]:
        """
        Get container by ID or name

        Returns:
            Container object, or None if the daemon does not know it
        """
        response = self.http.get(f'/containers/{container_id}/json')
        if response.status_code == 404:
            return None
        expect_status(response, 200)
        return Container.from_attrs(response.json())

    def inspect(self, container: Container) -> Container:
        """
        Refresh container attributes

        Raises:
            ContainerNotFound: If container not found
        """
        response = self.http.get(f'/containers/{container.id}/json')
        if response.status_code == 404:
            raise ContainerNotFound(f"Container not found: {container.id}")
        expect_status(response, 200)
        container.attrs = response.json()
        return container

    def create(self, container: Container) -> Container:
        """
        Create container from its config; sets its ID

        Raises:
            ImageNotFound: If the image is not available locally
        """
        params = {}
        if container.name:
            params['name'] = container.name

        response = self.http.post('/containers/create', params=params, data=container.config)
        if response.status_code == 404:
            raise ImageNotFound(f"Image not found: {container.image}")
        expect_status(response, 201)

        container.id = response.json()['Id']
        logger.info(f"Container created: {container.name or container.short_id}")
        return container

    def start(self, container: Container) -> Container:
        """Start container"""
        response = self.http.post(f'/containers/{container.id}/start')
        expect_status(response, 204, 304)
        logger.info(f"Container started: {container.name or container.short_id}")
        return container

    def run(self, container: Container, wait: bool = False) -> Container:
        """
        Create and start container

        Args:
            container: Container to run
            wait: Block until it exits, setting exit_code
        """
        self.create(container)
        self.start(container)
        if wait:
            self.wait(container)
        return container

    def wait(self, container: Container) -> int:
        """
        Block until container stops

        Returns:
            Exit code, also stored on the container
        """
        response = expect_status(self.http.post(f'/containers/{container.id}/wait'), 200)
        container.exit_code = response.json()['StatusCode']
        return container.exit_code

    def stop(self, container: Container, timeout: int = 10) -> Container:
        """Stop container"""
        response = self.http.post(f'/containers/{container.id}/stop', params={'t': timeout})
        if response.status_code == 404:
            raise ContainerNotFound(f"Container not found: {container.id}")
        expect_status(response, 204, 304)
        logger.info(f"Container stopped: {container.name or container.short_id}")
        return container

    def restart(self, container: Container, timeout: int = 10) -> Container:
        """Restart container"""
        response = self.http.post(f'/containers/{container.id}/restart', params={'t': timeout})
        if response.status_code == 404:
            raise ContainerNotFound(f"Container not found: {container.id}")
        expect_status(response, 204)
        return container

    def kill(self, container: Container, signal: str = 'SIGKILL') -> Container:
        """Kill container"""
        response = self.http.post(f'/containers/{container.id}/kill', params={'signal': signal})
        if response.status_code == 404:
            raise ContainerNotFound(f"Container not found: {container.id}")
        expect_status(response, 204)
        return container

    def logs(self, container: Container, stdout: bool = True, stderr: bool = True,
             timestamps: bool = False, tail: str = 'all') -> str:
        """
        Get container logs

        Args:
            container: Container
            stdout: Return stdout stream
            stderr: Return stderr stream
            timestamps: Show timestamps
            tail: Number of lines to show from end ('all' for all)

        Returns:
            Log output
        """
        params = {
            'stdout': stdout,
            'stderr': stderr,
            'timestamps': timestamps,
            'tail': tail,
        }
        response = expect_status(self.http.get(f'/containers/{container.id}/logs', params=params), 200)
        return demultiplex(response.content).decode('utf-8', errors='replace')

    def remove(self, container: Container, volumes: bool = False, force: bool = False):
        """
        Remove container

        Raises:
            ContainerNotFound: If container not found
        """
        params = {'v': volumes, 'force': force}
        response = self.http.delete(f'/containers/{container.id}', params=params)
        if response.status_code == 404:
            raise ContainerNotFound(f"Container not found: {container.id}")
        expect_status(response, 204)
        logger.info(f"Container removed: {container.name or container.short_id}")
