"""GitHub 외부 기여 집계 도구."""

from contrib_sieve.client import GitHubClient
from contrib_sieve.exceptions import (
    AuthorizationError,
    ContribSieveError,
    FetchError,
    InvalidInputError,
    InvalidUsernameError,
    PaginationError,
)

__version__ = "0.1.0"

__all__ = [
    "AuthorizationError",
    "ContribSieveError",
    "FetchError",
    "GitHubClient",
    "InvalidInputError",
    "InvalidUsernameError",
    "PaginationError",
]
