"""
core/exceptions.py - Unified exception hierarchy

Exception classes shared by the inventory cache, the filter engine and the
command line interface.

Hierarchy:
    QuakeInventoryError (base)
    ├── FetchError (remote inventory fetch failed)
    │   └── FetchCancelledError
    ├── InvalidFilterError (filter names an unknown attribute or is malformed)
    ├── UnknownResourceKindError
    ├── UninitializedCacheError (read before the first successful refresh)
    └── ConfigError

Usage:
    from core.exceptions import FetchError, InvalidFilterError

    try:
        cache.refresh()
    except FetchError as e:
        if is_authorization_error(e):
            print("check the API token")
"""

from typing import Any, Dict, Optional

# =============================================================================
# Base exception
# =============================================================================


class QuakeInventoryError(Exception):
    """Base class for every custom exception of the project

    Attributes:
        message: error message
        cause: underlying exception (for chaining)
        details: extra structured information
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Return the exception as a dictionary"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# Remote fetch
# =============================================================================


class FetchError(QuakeInventoryError):
    """The remote inventory could not be fetched or decoded

    Attributes:
        reason: one of FETCH_REASONS
        status_code: HTTP status code when the remote answered with an error
    """

    NETWORK = "network"
    AUTHORIZATION = "authorization"
    HTTP = "http"
    DECODING = "decoding"
    IO = "io"
    CANCELLED = "cancelled"

    def __init__(
        self,
        message: str,
        reason: str = NETWORK,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(f"inventory fetch failed ({reason}): {message}", cause)
        self.reason = reason
        self.status_code = status_code
        self.details["reason"] = reason
        if status_code is not None:
            self.details["status_code"] = status_code


class FetchCancelledError(FetchError):
    """The caller cancelled the refresh before it could be installed"""

    def __init__(self, message: str = "refresh cancelled by caller"):
        super().__init__(message, reason=FetchError.CANCELLED)


FETCH_REASONS = (
    FetchError.NETWORK,
    FetchError.AUTHORIZATION,
    FetchError.HTTP,
    FetchError.DECODING,
    FetchError.IO,
    FetchError.CANCELLED,
)


# =============================================================================
# Query
# =============================================================================


class InvalidFilterError(QuakeInventoryError):
    """A filter is malformed or names an attribute unknown to the kind"""

    def __init__(
        self,
        attribute: str,
        message: str,
        kind: Optional[str] = None,
    ):
        prefix = f"invalid filter [{attribute}]"
        if kind:
            prefix = f"invalid filter [{attribute}] for {kind}"
        super().__init__(f"{prefix}: {message}")
        self.attribute = attribute
        self.kind = kind
        self.details["attribute"] = attribute
        if kind:
            self.details["kind"] = kind


class UnknownResourceKindError(QuakeInventoryError):
    """The requested resource kind is not part of the inventory"""

    def __init__(self, kind: str, known: Optional[list[str]] = None):
        message = f"unknown resource kind '{kind}'"
        if known:
            message = f"{message} (expected one of: {', '.join(known)})"
        super().__init__(message)
        self.kind = kind
        self.details["kind"] = kind


class UninitializedCacheError(QuakeInventoryError):
    """The inventory cache was read before its first successful refresh

    Distinguishes "never fetched" from "the remote reported no resources".
    """

    def __init__(self, message: str = "inventory cache has not been refreshed yet"):
        super().__init__(message)


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(QuakeInventoryError):
    """Configuration error"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"configuration error [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# Utilities
# =============================================================================


def is_authorization_error(error: Exception) -> bool:
    """Check whether the error is an authorization failure of the remote API"""
    return isinstance(error, FetchError) and error.reason == FetchError.AUTHORIZATION


def format_error_for_user(error: Exception) -> str:
    """Format an error for display

    Args:
        error: exception

    Returns:
        User friendly message
    """
    if is_authorization_error(error):
        return f"{error} (check the API token and project)"

    if isinstance(error, QuakeInventoryError):
        return str(error)

    return f"{type(error).__name__}: {error}"
