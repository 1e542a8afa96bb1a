"""Core module - Error policy, cookie signing, sessions and GitHub OAuth."""

from .errors import (
    APIError,
    NotAuthenticatedError,
    StoreErrorKind,
    StoreOperation,
    TaskStoreError,
    map_store_error,
)
from .security import generate_token, sign_value, read_signed_value

__all__ = [
    # Errors
    "APIError",
    "NotAuthenticatedError",
    "StoreErrorKind",
    "StoreOperation",
    "TaskStoreError",
    "map_store_error",
    # Security
    "generate_token",
    "sign_value",
    "read_signed_value",
]
