"""
Domain errors raised by the data-access layer.

Each error carries the HTTP status the API reports it with; the handlers
registered in main.py turn them into {"detail": message} responses.
"""


class JoblyError(Exception):
    """Base application exception."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(JoblyError):
    """Client sent data that cannot be applied (empty update, bad filter, bad reference)."""

    status_code = 400


class NotFoundError(JoblyError):
    """The targeted record does not exist."""

    status_code = 404


class DuplicateKeyError(JoblyError):
    """A create collided with an existing unique key."""

    status_code = 400


__all__ = [
    "DuplicateKeyError",
    "InvalidInputError",
    "JoblyError",
    "NotFoundError",
]
