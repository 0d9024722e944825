from .http import (
    AppError,
    InvalidInputError,
    MalformedCredentialError,
    NotFoundError,
    StoreTimeoutError,
    ValidationError,
)

__all__ = [
    "AppError",
    "InvalidInputError",
    "MalformedCredentialError",
    "NotFoundError",
    "StoreTimeoutError",
    "ValidationError",
]
