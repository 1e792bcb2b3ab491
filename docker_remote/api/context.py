"""
Build contexts: tar archives sent to /build
"""

import hashlib
import io
import json
import logging
import os
import shutil
import tarfile
import tempfile
from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class ContextInterface(ABC):
    """Source of a build context"""

    @abstractmethod
    def read(self) -> Union[BinaryIO, bytes]:
        """
        Build context content

        Returns:
            Readable binary stream positioned at the start, or raw tar bytes
        """


def write_tar(directory: str, fileobj: BinaryIO):
    """
    Write the content of a directory to a tar archive

    Args:
        directory: Directory to archive, entries are stored relative to it
        fileobj: Binary file to write the archive to
    """
    with tarfile.open(fileobj=fileobj, mode='w') as tar:
        for root, dirs, files in os.walk(directory):
            dirs.sort()
            for file in sorted(files):
                file_path = os.path.join(root, file)
                arcname = os.path.relpath(file_path, directory)
                tar.add(file_path, arcname=arcname)


class Context(ContextInterface):
    """Build context made of a directory holding a Dockerfile"""

    FORMAT_STREAM = 'stream'
    FORMAT_TAR = 'tar'

    def __init__(self, directory: str, format: str = FORMAT_STREAM, cleanup: bool = False):
        """
        Args:
            directory: Build context directory
            format: 'stream' to read a file object, 'tar' to read bytes
            cleanup: Delete the directory on cleanup()
        """
        if format not in (self.FORMAT_STREAM, self.FORMAT_TAR):
            raise ValueError(f"Unknown context format: {format}")
        self.directory = directory
        self.format = format
        self._cleanup = cleanup

    def __repr__(self):
        return f"<Context: {self.directory} ({self.format})>"

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.cleanup()

    @property
    def dockerfile_content(self) -> str:
        with open(os.path.join(self.directory, 'Dockerfile'), 'r', encoding='utf-8') as f:
            return f.read()

    def to_tar(self) -> bytes:
        """Build context as tar archive bytes"""
        tar_stream = io.BytesIO()
        write_tar(self.directory, tar_stream)
        return tar_stream.getvalue()

    def to_stream(self) -> BinaryIO:
        """Build context as a temporary file, removed once closed"""
        stream = tempfile.TemporaryFile()
        write_tar(self.directory, stream)
        stream.seek(0)
        return stream

    def read(self):
        if self.format == self.FORMAT_TAR:
            return self.to_tar()
        return self.to_stream()

    def cleanup(self):
        """Remove the directory if this context owns it"""
        if self._cleanup and os.path.isdir(self.directory):
            shutil.rmtree(self.directory)
            logger.debug(f"Removed build context {self.directory}")


class ContextBuilder:
    """
    Write a Dockerfile and its files without touching the local tree

        context = (ContextBuilder()
                   .from_image('alpine:3.19')
                   .run('apk add --no-cache curl')
                   .command(['curl', '--version'])
                   .to_context())
    """

    def __init__(self):
        self.commands: List[str] = []
        self.files: Dict[str, bytes] = {}
        self.format = Context.FORMAT_STREAM

    def _add(self, instruction: str) -> 'ContextBuilder':
        self.commands.append(instruction)
        return self

    @staticmethod
    def _exec_form(command: Union[str, List[str]]) -> str:
        if isinstance(command, str):
            return command
        return json.dumps(list(command))

    def from_image(self, image: str):
        return self._add(f"FROM {image}")

    def file(self, name: str, content: Union[str, bytes]):
        """Put a file in the context without any instruction"""
        if isinstance(content, str):
            content = content.encode('utf-8')
        self.files[name] = content
        return self

    def add(self, path: str, content: Union[str, bytes]):
        """Add content to the image at path"""
        if isinstance(content, str):
            content = content.encode('utf-8')
        name = f"add_{hashlib.sha1(content).hexdigest()[:12]}"
        self.files[name] = content
        return self._add(f"ADD {name} {path}")

    def copy(self, source: str, destination: str):
        return self._add(f"COPY {source} {destination}")

    def run(self, command: Union[str, List[str]]):
        return self._add(f"RUN {self._exec_form(command)}")

    def env(self, name: str, value: str):
        return self._add(f"ENV {name}={json.dumps(str(value))}")

    def workdir(self, path: str):
        return self._add(f"WORKDIR {path}")

    def expose(self, port: Union[int, str]):
        return self._add(f"EXPOSE {port}")

    def user(self, user: str):
        return self._add(f"USER {user}")

    def volume(self, path: str):
        return self._add(f"VOLUME {path}")

    def entrypoint(self, command: Union[str, List[str]]):
        return self._add(f"ENTRYPOINT {self._exec_form(command)}")

    def command(self, command: Union[str, List[str]]):
        return self._add(f"CMD {self._exec_form(command)}")

    def set_format(self, format: str):
        self.format = format
        return self

    def get_dockerfile_content(self) -> str:
        return '\n'.join(self.commands) + '\n'

    def to_context(self, directory: Optional[str] = None) -> Context:
        """
        Write the Dockerfile and files and wrap them in a Context

        Args:
            directory: Where to write (default: a new temporary directory,
                removed by Context.cleanup())

        Returns:
            Context over the written directory
        """
        if not self.commands or not self.commands[0].startswith('FROM '):
            raise ValueError("A build context needs a FROM instruction first")

        owned = directory is None
        if owned:
            directory = tempfile.mkdtemp(prefix='docker-remote-')
        os.makedirs(directory, exist_ok=True)

        with open(os.path.join(directory, 'Dockerfile'), 'w', encoding='utf-8') as f:
            f.write(self.get_dockerfile_content())
        for name, content in self.files.items():
            path = os.path.join(directory, name)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'wb') as f:
                f.write(content)

        return Context(directory, format=self.format, cleanup=owned)
