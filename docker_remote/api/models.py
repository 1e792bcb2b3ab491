"""
Docker value objects and request options
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .ports import PortSpec


class Image:
    """Docker Image object"""

    def __init__(self, id: str = '', repository: Optional[str] = None,
                 tag: Optional[str] = None, attrs: Optional[Dict[str, Any]] = None):
        self.id = id
        self.repository = repository
        self.tag = tag
        self.attrs = attrs or {}

    @classmethod
    def from_attrs(cls, attrs: Dict[str, Any]) -> 'Image':
        """Create from an /images/json or /images/{name}/json entry"""
        image = cls(attrs.get('Id', ''), attrs=attrs)
        tags = [t for t in (attrs.get('RepoTags') or []) if t != '<none>:<none>']
        if tags:
            image.repository, _, image.tag = tags[0].rpartition(':')
        return image

    @property
    def short_id(self) -> str:
        return self.id.split(':')[-1][:12]

    @property
    def tags(self) -> List[str]:
        return self.attrs.get('RepoTags') or ([self.name] if self.repository else [])

    @property
    def name(self) -> str:
        """repository:tag, or the ID when the image is untagged"""
        if not self.repository:
            return self.id
        return f"{self.repository}:{self.tag or 'latest'}"

    def __repr__(self):
        return f"<Image: {self.name if self.repository else self.short_id}>"

    def __eq__(self, other):
        if not isinstance(other, Image):
            return NotImplemented
        return (self.id, self.repository, self.tag) == (other.id, other.repository, other.tag)

    def __hash__(self):
        return hash((self.id, self.repository, self.tag))


class Container:
    """
    Docker Container object

    ``config`` is the body sent to /containers/create, ``attrs`` holds
    what the daemon reports back on inspect.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, id: str = '',
                 name: Optional[str] = None):
        self.config = dict(config or {})
        self.id = id
        self.name = name
        self.attrs: Dict[str, Any] = {}
        self.exit_code: Optional[int] = None

    @classmethod
    def from_attrs(cls, attrs: Dict[str, Any]) -> 'Container':
        """Create from an /containers/json or /containers/{id}/json entry"""
        container = cls(id=attrs.get('Id', ''))
        container.attrs = attrs
        name = attrs.get('Name') or (attrs.get('Names') or [''])[0]
        container.name = name.lstrip('/') or None
        return container

    def __repr__(self):
        return f"<Container: {self.name or self.short_id}>"

    @property
    def short_id(self) -> str:
        return self.id[:12]

    @property
    def status(self) -> str:
        state = self.attrs.get('State', {})
        if isinstance(state, dict):
            return state.get('Status', 'unknown')
        return self.attrs.get('Status', state if isinstance(state, str) else 'unknown')

    @property
    def running(self) -> bool:
        state = self.attrs.get('State')
        if isinstance(state, dict):
            return bool(state.get('Running'))
        return state == 'running'

    @property
    def image(self) -> Optional[str]:
        return self.config.get('Image') or self.attrs.get('Image')

    @image.setter
    def image(self, image: Union[str, Image]):
        self.config['Image'] = image.name if isinstance(image, Image) else image

    def set_command(self, command: Union[str, List[str]]):
        self.config['Cmd'] = ['sh', '-c', command] if isinstance(command, str) else list(command)
        return self

    def set_env(self, environment: Dict[str, str]):
        self.config['Env'] = [f"{k}={v}" for k, v in environment.items()]
        return self

    def set_exposed_ports(self, ports: PortSpec):
        self.config['ExposedPorts'] = ports.to_exposed_ports()
        return self

    def set_port_bindings(self, ports: PortSpec):
        """Expose the ports and bind them on the host"""
        self.set_exposed_ports(ports)
        self.config.setdefault('HostConfig', {})['PortBindings'] = ports.to_spec()
        return self


@dataclass
class BuildOptions:
    """Options of an image build, sent as /build query parameters"""

    quiet: bool = False
    use_cache: bool = True
    remove_intermediate: bool = False
    wait: bool = True

    def to_params(self, name: str) -> Dict[str, Any]:
        return {
            'q': int(self.quiet),
            't': name,
            'nocache': int(not self.use_cache),
            'rm': int(self.remove_intermediate),
        }


@dataclass
class CommitOptions:
    """
    Options of a container commit, sent as /commit query parameters

    Attributes:
        repo: Repository of the new image
        tag: Tag of the new image
        comment: Commit message
        author: Author of the image
        run: Container configuration applied to the image, sent JSON-encoded
    """

    repo: Optional[str] = None
    tag: Optional[str] = None
    comment: Optional[str] = None
    author: Optional[str] = None
    run: Optional[Any] = None

    @classmethod
    def from_mapping(cls, config: Dict[str, Any]) -> 'CommitOptions':
        known = {'repo', 'tag', 'comment', 'author', 'run'}
        unknown = set(config) - known - {'m', 'container'}
        if unknown:
            raise ValueError(f"Unknown commit options: {', '.join(sorted(unknown))}")
        return cls(
            repo=config.get('repo'),
            tag=config.get('tag'),
            comment=config.get('comment', config.get('m')),
            author=config.get('author'),
            run=config.get('run'),
        )

    def to_params(self, container_id: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.repo is not None:
            params['repo'] = self.repo
        if self.tag is not None:
            params['tag'] = self.tag
        if self.comment is not None:
            params['comment'] = self.comment
        if self.author is not None:
            params['author'] = self.author
        if self.run is not None:
            params['run'] = json.dumps(self.run)
        params['container'] = container_id
        return params
