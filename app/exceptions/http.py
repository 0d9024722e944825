"""
Application error hierarchy. Each error carries the HTTP status an outer API
layer should answer with, so routes can translate them without a lookup table.
"""


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(AppError):
    """A required argument (typically a password) is missing or blank."""

    status_code = 400


class MalformedCredentialError(AppError):
    """
    A stored hash or salt has the wrong length. This means the users table holds
    corrupted credential data and should be alerted on, not shown to the client.
    """

    status_code = 500


class ValidationError(AppError):
    """Business-rule violation, e.g. a duplicate username."""

    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class StoreTimeoutError(AppError):
    """The database did not answer in time."""

    status_code = 503
