"""
Docker Engine API binding
Thin client over the daemon's REST endpoints, talking over a Unix socket or TCP
"""

from .docker import Docker
from .http_client import DockerHTTPClient, Response
from .containers import ContainerManager
from .images import ImageManager
from .context import Context, ContextBuilder, ContextInterface
from .models import BuildOptions, CommitOptions, Container, Image
from .ports import Port, PortCollection, PortSpec
from .progress import (
    NO_PROGRESS,
    CallbackProgress,
    CollectingProgress,
    ProgressSink
)
from .exceptions import (
    DockerException,
    UnexpectedStatusCodeException,
    ContainerNotFound,
    ImageNotFound,
    BuildError,
    PullError
)

__all__ = [
    'Docker',
    'DockerHTTPClient',
    'Response',
    'ContainerManager',
    'ImageManager',
    'Context',
    'ContextBuilder',
    'ContextInterface',
    'BuildOptions',
    'CommitOptions',
    'Container',
    'Image',
    'Port',
    'PortCollection',
    'PortSpec',
    'NO_PROGRESS',
    'CallbackProgress',
    'CollectingProgress',
    'ProgressSink',
    'DockerException',
    'UnexpectedStatusCodeException',
    'ContainerNotFound',
    'ImageNotFound',
    'BuildError',
    'PullError'
]
