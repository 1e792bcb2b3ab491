"""
Port specifications for container creation
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class PortSpec(ABC):
    """Anything that can describe port bindings and exposed ports"""

    @abstractmethod
    def to_spec(self) -> Dict[str, List[Dict[str, str]]]:
        """Port bindings, as used in HostConfig.PortBindings"""

    @abstractmethod
    def to_exposed_ports(self) -> Dict[str, dict]:
        """Exposed ports, as used in the container ExposedPorts"""


class Port(PortSpec):
    """
    Single port mapping

    Accepts the docker CLI notation ``[[host_ip:][host_port]:]port[/protocol]``,
    e.g. ``80``, ``8080:80``, ``127.0.0.1:8080:80/udp``.
    """

    PROTOCOLS = ('tcp', 'udp', 'sctp')

    def __init__(self, spec: str):
        self.host_ip, self.host_port, self.port, self.protocol = self.parse(spec)

    @classmethod
    def parse(cls, spec: str):
        """
        Split a port notation into its parts

        Args:
            spec: Port notation

        Returns:
            Tuple of (host_ip, host_port, port, protocol)

        Raises:
            ValueError: If the notation is malformed
        """
        spec = str(spec).strip()
        protocol = 'tcp'
        if '/' in spec:
            spec, protocol = spec.rsplit('/', 1)
            protocol = protocol.lower()
            if protocol not in cls.PROTOCOLS:
                raise ValueError(f"Unknown port protocol: {protocol}")

        parts = spec.split(':')
        if len(parts) > 3:
            raise ValueError(f"Invalid port specification: {spec}")

        host_ip: Optional[str] = None
        host_port: Optional[int] = None
        if len(parts) == 3:
            host_ip = parts[0] or None
        if len(parts) >= 2 and parts[-2]:
            host_port = cls._to_port(parts[-2])

        return host_ip, host_port, cls._to_port(parts[-1]), protocol

    @staticmethod
    def _to_port(value: str) -> int:
        try:
            port = int(value)
        except ValueError:
            raise ValueError(f"Invalid port number: {value!r}") from None
        if not 0 < port < 65536:
            raise ValueError(f"Port out of range: {port}")
        return port

    @property
    def key(self) -> str:
        return f"{self.port}/{self.protocol}"

    def __repr__(self):
        return f"<Port: {self}>"

    def __str__(self):
        host = ''
        if self.host_ip:
            host = f"{self.host_ip}:{self.host_port or ''}:"
        elif self.host_port:
            host = f"{self.host_port}:"
        return f"{host}{self.key}"

    def binding(self) -> Dict[str, str]:
        return {
            'HostIp': self.host_ip or '',
            'HostPort': str(self.host_port) if self.host_port else '',
        }

    def to_spec(self):
        return {self.key: [self.binding()]}

    def to_exposed_ports(self):
        return {self.key: {}}


class PortCollection(PortSpec):
    """Several ports; bindings of the same container port are merged"""

    def __init__(self, *ports):
        self.ports = [port if isinstance(port, Port) else Port(port) for port in ports]

    def add(self, port) -> 'PortCollection':
        self.ports.append(port if isinstance(port, Port) else Port(port))
        return self

    def __iter__(self):
        return iter(self.ports)

    def __len__(self):
        return len(self.ports)

    def to_spec(self):
        spec = {}
        for port in self.ports:
            spec.setdefault(port.key, []).append(port.binding())
        return spec

    def to_exposed_ports(self):
        exposed = {}
        for port in self.ports:
            exposed.update(port.to_exposed_ports())
        return exposed
