"""
Docker Images API
"""

import logging
from typing import List, Dict, Any, Optional

from .exceptions import ImageNotFound, PullError, expect_status
from .models import Image
from .progress import NO_PROGRESS, CollectingProgress, as_sink

logger = logging.getLogger(__name__)


def image_reference(image: Image) -> str:
    """Name to address an image by in API paths"""
    return image.name if image.repository else image.id


class ImageManager:
    """Docker images: list, inspect, pull, tag and remove"""

    def __init__(self, http):
        """
        Args:
            http: Transport shared with the Docker facade
        """
        self.http = http

    def find_all(self, all: bool = False, filters: Optional[Dict[str, Any]] = None) -> List[Image]:
        """
        List images

        Args:
            all: Show all images (including intermediates)
            filters: Filters to apply

        Returns:
            List of Image objects
        """
        params = {'all': all}
        if filters:
            params['filters'] = filters

        response = expect_status(self.http.get('/images/json', params=params), 200)
        return [Image.from_attrs(img_data) for img_data in response.json()]

    def find(self, repository: str, tag: str = 'latest') -> Optional[Image]:
        """
        Get image by repository and tag

        Returns:
            Image object, or None if the daemon does not know it
        """
        response = self.http.get(f'/images/{repository}:{tag}/json')
        if response.status_code == 404:
            return None
        expect_status(response, 200)
        attrs = response.json()
        return Image(attrs.get('Id', ''), repository, tag, attrs=attrs)

    def inspect(self, image: Image) -> Image:
        """
        Refresh image attributes

        Raises:
            ImageNotFound: If image not found
        """
        reference = image_reference(image)
        response = self.http.get(f'/images/{reference}/json')
        if response.status_code == 404:
            raise ImageNotFound(f"Image not found: {reference}")
        expect_status(response, 200)
        image.attrs = response.json()
        image.id = image.attrs.get('Id', image.id)
        return image

    def pull(self, repository: str, tag: str = 'latest', progress=NO_PROGRESS) -> Image:
        """
        Pull image from registry

        Args:
            repository: Repository name
            tag: Image tag
            progress: Sink receiving pull progress events

        Returns:
            Pulled Image object

        Raises:
            PullError: If the daemon reports an error in the progress stream
        """
        sink = as_sink(progress)
        collected = CollectingProgress()

        def on_line(line: bytes):
            collected.feed(line)
            sink.feed(line)

        logger.info(f"Pulling image {repository}:{tag}")
        response = self.http.post(
            '/images/create',
            params={'fromImage': repository, 'tag': tag},
            stream=True,
            callback=on_line,
        )
        expect_status(response, 200)

        if collected.errors:
            raise PullError(f"Pull failed: {collected.errors[-1]}")

        logger.info(f"Image pulled successfully: {repository}:{tag}")
        return self.inspect(Image(repository=repository, tag=tag))

    def tag(self, image: Image, repository: str, tag: str = 'latest') -> Image:
        """
        Tag image into a repository

        Returns:
            Image object for the new name
        """
        params = {'repo': repository, 'tag': tag}
        response = self.http.post(f'/images/{image_reference(image)}/tag', params=params)
        if response.status_code == 404:
            raise ImageNotFound(f"Image not found: {image_reference(image)}")
        expect_status(response, 201)
        return Image(image.id, repository, tag)

    def history(self, image: Image) -> List[Dict[str, Any]]:
        """Image layer history"""
        response = expect_status(self.http.get(f'/images/{image_reference(image)}/history'), 200)
        return response.json()

    def search(self, term: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Search for images on Docker Hub

        Args:
            term: Search term
            limit: Maximum number of results
        """
        params = {'term': term, 'limit': limit}
        return expect_status(self.http.get('/images/search', params=params), 200).json()

    def remove(self, image: Image, force: bool = False, noprune: bool = False) -> List[Dict[str, str]]:
        """
        Remove image

        Args:
            image: Image to remove
            force: Force removal
            noprune: Don't delete untagged parents

        Returns:
            Untagged and deleted entries reported by the daemon
        """
        reference = image_reference(image)
        params = {'force': force, 'noprune': noprune}
        response = self.http.delete(f'/images/{reference}', params=params)
        if response.status_code == 404:
            raise ImageNotFound(f"Image not found: {reference}")
        expect_status(response, 200)
        logger.info(f"Image removed: {reference}")
        return response.json()
