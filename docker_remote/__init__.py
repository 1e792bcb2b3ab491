"""
docker-remote - Python binding for the Docker Engine remote API
"""

from .api import (
    Docker,
    DockerHTTPClient,
    Context,
    ContextBuilder,
    Container,
    Image,
    Port,
    DockerException,
    UnexpectedStatusCodeException
)
from .settings import Settings

__all__ = [
    'Docker',
    'DockerHTTPClient',
    'Context',
    'ContextBuilder',
    'Container',
    'Image',
    'Port',
    'DockerException',
    'UnexpectedStatusCodeException',
    'Settings'
]

__version__ = '1.0.0'
