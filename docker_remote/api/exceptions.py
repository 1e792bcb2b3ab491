"""
Docker API Exceptions
"""


class DockerException(Exception):
    """Base Docker exception"""
    pass


class UnexpectedStatusCodeException(DockerException):
    """Docker answered with a status code the operation does not expect"""

    def __init__(self, status_code, message=None):
        self.status_code = int(status_code)
        self.message = message or f"Status Code: {self.status_code}"
        super().__init__(self.message)

    @staticmethod
    def from_response(response):
        """
        Build the exception from a transport response

        Args:
            response: Response with status_code and text

        Returns:
            Exception carrying the status code and the stripped body
        """
        return UnexpectedStatusCodeException(response.status_code, response.text.strip())


class ContainerNotFound(UnexpectedStatusCodeException):
    """Container not found"""

    def __init__(self, message=None):
        super().__init__(404, message)


class ImageNotFound(UnexpectedStatusCodeException):
    """Image not found"""

    def __init__(self, message=None):
        super().__init__(404, message)


class BuildError(DockerException):
    """Image build error"""
    pass


class PullError(DockerException):
    """Image pull error"""
    pass


def expect_status(response, *expected):
    """
    Ensure a response carries one of the expected status codes

    Args:
        response: Transport response
        *expected: Accepted status codes

    Raises:
        UnexpectedStatusCodeException: For any other status
    """
    if response.status_code not in expected:
        raise UnexpectedStatusCodeException.from_response(response)
    return response
