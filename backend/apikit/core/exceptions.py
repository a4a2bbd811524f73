"""Exceptions raised by responders and form requests."""

from starlette.responses import Response


class ApiKitError(Exception):
    """Base exception for apikit."""

    pass


class HttpResponseException(ApiKitError):
    """Carries a ready-made response out of the request lifecycle.

    Registered exception handlers return ``exc.response`` unchanged.
    """

    def __init__(self, response: Response):
        super().__init__(f"HTTP response exception ({response.status_code})")
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code


class MalformedBodyError(ApiKitError):
    """Raised when a request body cannot be decoded as JSON."""

    pass
