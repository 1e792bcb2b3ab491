"""Unit tests for Docker API exceptions."""

import pytest

from docker_remote.api.exceptions import (
    ContainerNotFound,
    DockerException,
    ImageNotFound,
    UnexpectedStatusCodeException,
    expect_status,
)


class TestUnexpectedStatusCodeException:
    """Tests for UnexpectedStatusCodeException."""

    def test_default_message(self):
        error = UnexpectedStatusCodeException(500)

        assert error.status_code == 500
        assert str(error) == "Status Code: 500"

    def test_explicit_message(self):
        error = UnexpectedStatusCodeException(409, "conflict")

        assert error.message == "conflict"
        assert str(error) == "conflict"

    def test_status_normalized_to_int(self):
        assert UnexpectedStatusCodeException("201").status_code == 201

    def test_from_response_strips_body(self, response_factory):
        error = UnexpectedStatusCodeException.from_response(
            response_factory(500, text="\n server error \n")
        )

        assert error.status_code == 500
        assert error.message == "server error"

    def test_from_response_empty_body(self, response_factory):
        error = UnexpectedStatusCodeException.from_response(response_factory(502, text="   "))

        assert error.message == "Status Code: 502"

    def test_hierarchy(self):
        assert issubclass(UnexpectedStatusCodeException, DockerException)
        assert ContainerNotFound("gone").status_code == 404
        assert isinstance(ImageNotFound(), UnexpectedStatusCodeException)


class TestExpectStatus:
    """Tests for expect_status."""

    def test_expected(self, response_factory):
        response = response_factory(204)
        assert expect_status(response, 204, 304) is response

    def test_unexpected(self, response_factory):
        with pytest.raises(UnexpectedStatusCodeException) as exc_info:
            expect_status(response_factory(409, text="name in use"), 201)

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "name in use"
