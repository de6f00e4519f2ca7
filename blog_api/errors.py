"""Domain errors raised by the service layer.

Each error carries a human-readable message naming the offending identifier.
The API layer maps them to HTTP status codes in one place (see main.py).
"""


class BlogError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(BlogError):
    """A referenced entity does not exist."""

    status_code = 404


class AuthenticationError(BlogError):
    status_code = 401


class ConflictError(BlogError):
    """A uniqueness rule or an existing association blocks the write."""

    status_code = 409


class InvariantViolationError(BlogError):
    """The write would break a cross-row rule, e.g. a reply on another post."""

    status_code = 400
