"""
Error taxonomy shared by the directory, blog and HTTP layers.

Each error carries the HTTP status it maps to and the JSON body key the
legacy clients expect (``message`` for some endpoints, ``error`` for others).
"""

from __future__ import annotations


class BlogBackendError(Exception):
    status_code = 500
    key = "error"

    def __init__(self, detail: str, *, key: str | None = None):
        super().__init__(detail)
        self.detail = detail
        if key:
            self.key = key

    def as_body(self) -> dict:
        return {self.key: self.detail}


class ValidationError(BlogBackendError):
    """A required field is missing from the request."""

    status_code = 400
    key = "message"


class NotFound(BlogBackendError):
    """No document matched the lookup."""

    status_code = 404


class InternalError(BlogBackendError):
    """Driver failure or an unacknowledged write."""

    status_code = 500


class NotConnected(InternalError):
    def __init__(self, detail: str = "Database not connected", **kwargs):
        super().__init__(detail, **kwargs)


class AlreadyExists(BlogBackendError):
    """The username is already taken."""

    status_code = 201
    key = "message"

    def __init__(self, detail: str = "exists", **kwargs):
        super().__init__(detail, **kwargs)
