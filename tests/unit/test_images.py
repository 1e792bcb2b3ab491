"""Unit tests for ImageManager."""

import pytest

from docker_remote.api.exceptions import ImageNotFound, PullError, UnexpectedStatusCodeException
from docker_remote.api.images import ImageManager
from docker_remote.api.models import Image


@pytest.fixture
def manager(mock_http):
    return ImageManager(mock_http)


class TestFind:
    """Tests for find_all, find and inspect."""

    def test_find_all(self, manager, mock_http, response_factory):
        mock_http.get.return_value = response_factory(200, [
            {"Id": "sha256:aaa", "RepoTags": ["redis:7"]},
            {"Id": "sha256:bbb", "RepoTags": None},
        ])

        images = manager.find_all()

        assert [(i.repository, i.tag) for i in images] == [("redis", "7"), (None, None)]
        mock_http.get.assert_called_once_with("/images/json", params={"all": False})

    def test_find(self, manager, mock_http, response_factory):
        mock_http.get.return_value = response_factory(200, {"Id": "sha256:aaa"})

        image = manager.find("redis", "7")

        assert image == Image("sha256:aaa", "redis", "7")
        mock_http.get.assert_called_once_with("/images/redis:7/json")

    def test_find_missing(self, manager, mock_http, response_factory):
        mock_http.get.return_value = response_factory(404)

        assert manager.find("ghost") is None

    def test_inspect_by_id(self, manager, mock_http, response_factory):
        mock_http.get.return_value = response_factory(200, {"Id": "sha256:aaa", "Size": 10})
        image = Image("sha256:aaa")

        manager.inspect(image)

        assert image.attrs["Size"] == 10
        mock_http.get.assert_called_once_with("/images/sha256:aaa/json")

    def test_inspect_missing(self, manager, mock_http, response_factory):
        mock_http.get.return_value = response_factory(404)

        with pytest.raises(ImageNotFound):
            manager.inspect(Image(repository="ghost"))


class TestPull:
    """Tests for pull."""

    def test_pull(self, manager, mock_http, response_factory):
        events = []

        def post(path, **kwargs):
            kwargs["callback"](b'{"status": "Pulling from library/redis", "id": "7"}')
            return response_factory(200)

        mock_http.post.side_effect = post
        mock_http.get.return_value = response_factory(200, {"Id": "sha256:aaa"})

        image = manager.pull("redis", "7", progress=events.append)

        assert image.id == "sha256:aaa"
        assert image.name == "redis:7"
        assert events == [{"status": "Pulling from library/redis", "id": "7"}]
        kwargs = mock_http.post.call_args.kwargs
        assert kwargs["params"] == {"fromImage": "redis", "tag": "7"}
        assert kwargs["stream"] is True

    def test_pull_error_event(self, manager, mock_http, response_factory):
        def post(path, **kwargs):
            kwargs["callback"](b'{"error": "manifest unknown"}')
            return response_factory(200)

        mock_http.post.side_effect = post

        with pytest.raises(PullError, match="manifest unknown"):
            manager.pull("redis", "nope")

    def test_pull_bad_status(self, manager, mock_http, response_factory):
        mock_http.post.return_value = response_factory(404, text="repository not found")

        with pytest.raises(UnexpectedStatusCodeException):
            manager.pull("ghost")


class TestTagRemoveSearch:
    """Tests for tag, history, search and remove."""

    def test_tag(self, manager, mock_http, response_factory):
        mock_http.post.return_value = response_factory(201)

        tagged = manager.tag(Image("sha256:aaa", "redis", "7"), "registry.local/redis", "prod")

        assert tagged == Image("sha256:aaa", "registry.local/redis", "prod")
        mock_http.post.assert_called_once_with(
            "/images/redis:7/tag", params={"repo": "registry.local/redis", "tag": "prod"}
        )

    def test_history(self, manager, mock_http, response_factory):
        mock_http.get.return_value = response_factory(200, [{"Id": "sha256:aaa"}])

        assert manager.history(Image("sha256:aaa")) == [{"Id": "sha256:aaa"}]

    def test_search(self, manager, mock_http, response_factory):
        mock_http.get.return_value = response_factory(200, [{"name": "redis"}])

        assert manager.search("redis", limit=5) == [{"name": "redis"}]
        mock_http.get.assert_called_once_with("/images/search", params={"term": "redis", "limit": 5})

    def test_remove(self, manager, mock_http, response_factory):
        mock_http.delete.return_value = response_factory(200, [{"Untagged": "redis:7"}])

        assert manager.remove(Image(repository="redis", tag="7"), force=True) == [{"Untagged": "redis:7"}]
        mock_http.delete.assert_called_once_with(
            "/images/redis:7", params={"force": True, "noprune": False}
        )

    def test_remove_missing(self, manager, mock_http, response_factory):
        mock_http.delete.return_value = response_factory(404)

        with pytest.raises(ImageNotFound):
            manager.remove(Image("sha256:ghost"))
