"""Unit tests for build contexts."""

import io
import os
import tarfile

import pytest

from docker_remote.api.context import Context, ContextBuilder, ContextInterface


def tar_names(data: bytes):
    with tarfile.open(fileobj=io.BytesIO(data), mode="r") as tar:
        return sorted(tar.getnames())


def tar_member(data: bytes, name: str) -> bytes:
    with tarfile.open(fileobj=io.BytesIO(data), mode="r") as tar:
        return tar.extractfile(name).read()


@pytest.fixture
def context_dir(tmp_path):
    (tmp_path / "Dockerfile").write_text("FROM alpine\nCOPY app /app\n")
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "main.sh").write_text("echo hello\n")
    return tmp_path


class TestContext:
    """Tests for directory contexts."""

    def test_tar_format_returns_bytes(self, context_dir):
        content = Context(str(context_dir), format="tar").read()

        assert isinstance(content, bytes)
        assert tar_names(content) == ["Dockerfile", "app/main.sh"]

    def test_stream_format_returns_file(self, context_dir):
        stream = Context(str(context_dir)).read()
        try:
            assert hasattr(stream, "read")
            assert tar_names(stream.read()) == ["Dockerfile", "app/main.sh"]
        finally:
            stream.close()

    def test_dockerfile_content(self, context_dir):
        assert Context(str(context_dir)).dockerfile_content.startswith("FROM alpine")

    def test_unknown_format(self, context_dir):
        with pytest.raises(ValueError):
            Context(str(context_dir), format="zip")

    def test_cleanup_only_owned(self, context_dir):
        Context(str(context_dir)).cleanup()

        assert context_dir.exists()

    def test_is_context_interface(self, context_dir):
        assert isinstance(Context(str(context_dir)), ContextInterface)


class TestContextBuilder:
    """Tests for ContextBuilder."""

    def test_dockerfile_instructions(self):
        builder = (ContextBuilder()
                   .from_image("alpine:3.19")
                   .env("GREETING", "hello world")
                   .run("apk add --no-cache curl")
                   .workdir("/srv")
                   .expose(8080)
                   .user("nobody")
                   .entrypoint(["curl"])
                   .command(["--version"]))

        assert builder.get_dockerfile_content() == (
            "FROM alpine:3.19\n"
            'ENV GREETING="hello world"\n'
            "RUN apk add --no-cache curl\n"
            "WORKDIR /srv\n"
            "EXPOSE 8080\n"
            "USER nobody\n"
            'ENTRYPOINT ["curl"]\n'
            'CMD ["--version"]\n'
        )

    def test_add_writes_file(self):
        builder = ContextBuilder().from_image("alpine").add("/etc/motd", "welcome")

        with builder.set_format("tar").to_context() as context:
            content = context.read()
            name = builder.commands[1].split()[1]

            assert builder.commands[1] == f"ADD {name} /etc/motd"
            assert tar_member(content, name) == b"welcome"
            assert tar_member(content, "Dockerfile").startswith(b"FROM alpine")

        assert not os.path.exists(context.directory)

    def test_file_in_subdirectory(self, tmp_path):
        context = (ContextBuilder()
                   .from_image("alpine")
                   .file("conf/app.ini", "[app]\n")
                   .copy("conf", "/etc/app")
                   .to_context(str(tmp_path / "ctx")))

        assert (tmp_path / "ctx" / "conf" / "app.ini").read_text() == "[app]\n"
        context.cleanup()
        assert (tmp_path / "ctx").exists()

    def test_requires_from(self):
        with pytest.raises(ValueError):
            ContextBuilder().run("true").to_context()
