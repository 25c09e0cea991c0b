"""Error hierarchy for docrest.

Every error carries an optional numeric ``code`` which the generic error
handler uses as the HTTP status of the response.
"""

from typing import Optional

DEFAULT_ERROR_MESSAGE = "An unspecified error occurred."


class DocRestError(Exception):
    """Base exception for all docrest failures."""

    code: Optional[int] = None

    def __init__(self, message: str = "", code: Optional[int] = None):
        super().__init__(message or DEFAULT_ERROR_MESSAGE)
        self.message = message or DEFAULT_ERROR_MESSAGE
        if code is not None:
            self.code = code


class ConfigError(DocRestError):
    """Raised for invalid runtime configuration."""


class BadRequestError(DocRestError):
    """Raised when a request (body or addressed name) cannot be used."""

    code = 400


class NotFoundError(DocRestError):
    """Raised when a document addressed by identifier does not exist."""

    code = 404


class ConflictError(DocRestError):
    """Raised when a write collides with an existing document."""

    code = 409
