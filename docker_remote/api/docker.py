"""
Docker - Main API entry point
"""

import logging
from typing import Any, Dict, Optional, Union

from ..settings import Settings
from .containers import ContainerManager
from .context import ContextInterface
from .exceptions import UnexpectedStatusCodeException
from .http_client import DockerHTTPClient, Response
from .images import ImageManager
from .models import BuildOptions, CommitOptions, Container, Image
from .progress import NO_PROGRESS, as_sink

logger = logging.getLogger(__name__)


class Docker:
    """
    Docker API facade

    The container and image managers are created along with the facade
    and share its transport.
    """

    def __init__(self, http=None, container_manager: Optional[ContainerManager] = None,
                 image_manager: Optional[ImageManager] = None,
                 settings: Optional[Settings] = None):
        """
        Initialize Docker facade

        Args:
            http: Transport (default: DockerHTTPClient built from settings)
            container_manager: Container manager to use instead of the default one
            image_manager: Image manager to use instead of the default one
            settings: Settings for the default transport
        """
        if http is None:
            http = DockerHTTPClient.from_settings(settings or Settings())
        self.http = http
        self.containers = container_manager or ContainerManager(self.http)
        self.images = image_manager or ImageManager(self.http)

    def __repr__(self):
        return f"<Docker: {self.http!r}>"

    def get_http_client(self):
        return self.http

    def get_container_manager(self) -> ContainerManager:
        return self.containers

    def get_image_manager(self) -> ImageManager:
        return self.images

    def get_version(self) -> Dict[str, Any]:
        """Show the docker components version information"""
        return self.http.get('/version').json()

    def get_info(self) -> Dict[str, Any]:
        """Display system-wide information"""
        return self.http.get('/info').json()

    def build(self, context: ContextInterface, name: str, progress=NO_PROGRESS,
              quiet: bool = False, use_cache: bool = True,
              remove_intermediate: bool = False, wait: bool = True,
              options: Optional[BuildOptions] = None) -> Response:
        """
        Build an image with docker

        The context is read once and sent as the request body; a stream
        returned by ``context.read()`` is closed once sent.

        Args:
            context: Build context
            name: Name of the wanted image
            progress: Sink (or callable) receiving build output events
            quiet: Quiet build (does not output commands during build)
            use_cache: Use docker cache
            remove_intermediate: Remove intermediate containers during build
            wait: Whether to wait for build to finish
            options: BuildOptions overriding the four flags above

        Returns:
            Raw response; still streaming when wait is False
        """
        if options is None:
            options = BuildOptions(
                quiet=quiet,
                use_cache=use_cache,
                remove_intermediate=remove_intermediate,
                wait=wait,
            )
        sink = as_sink(progress)
        content = context.read()

        logger.info(f"Building image {name}")
        try:
            response = self.http.post(
                '/build',
                params=options.to_params(name),
                headers={'Content-Type': 'application/tar'},
                body=content,
                stream=True,
                callback=sink.feed,
                wait=options.wait,
            )
        finally:
            if hasattr(content, 'close'):
                content.close()

        if options.wait:
            logger.info(f"Image build finished: {name} (status {response.status_code})")
        return response

    def commit(self, container: Container,
               options: Union[CommitOptions, Dict[str, Any], None] = None) -> Image:
        """
        Commit a container into an image

        Args:
            container: Container to commit
            options: CommitOptions, or a mapping with the same keys

        Returns:
            The new Image

        Raises:
            UnexpectedStatusCodeException: If Docker does not answer 201
        """
        if options is None:
            options = CommitOptions()
        elif not isinstance(options, CommitOptions):
            options = CommitOptions.from_mapping(options)

        response = self.http.post('/commit', params=options.to_params(container.id))

        if response.status_code != 201:
            raise UnexpectedStatusCodeException.from_response(response)

        image = Image(response.json()['Id'])
        if options.repo is not None:
            image.repository = options.repo
        if options.tag is not None:
            image.tag = options.tag

        logger.info(f"Container {container.name or container.short_id} committed as {image!r}")
        return image
