"""
Shared service-layer utilities.

This module provides the ServiceResult pattern (inspired by Rust's Result type),
the domain error taxonomy and the BaseService class used by the marketplace,
chat and authentication services.

Guidelines
- Keep services stateless; pass dependencies via the constructor.
- Return structured results instead of raising for expected outcomes.
- Infrastructure failures (database down, etc.) are NOT business errors:
  let them propagate.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


# Common error codes for services
class ErrorCodes:
    """Standard error codes used across services."""

    # Validation errors
    VALIDATION_ERROR = "validation_error"
    INVALID_TRANSITION = "invalid_transition"
    REFERENCE_NOT_FOUND = "reference_not_found"

    # Lookup errors
    LISTING_NOT_FOUND = "listing_not_found"
    MESSAGE_NOT_FOUND = "message_not_found"
    CONVERSATION_NOT_FOUND = "conversation_not_found"
    USER_NOT_FOUND = "user_not_found"

    # Permission errors
    PERMISSION_DENIED = "permission_denied"
    USER_BANNED = "user_banned"

    # Uniqueness errors
    CONFLICT = "conflict"


class ErrorKind:
    """Taxonomy buckets; the HTTP boundary maps these to status codes."""

    VALIDATION = "validation"
    REFERENCE = "reference"
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"


class ServiceError(Exception):
    """Base class for expected business failures.

    Raised inside services and converted to a ServiceResult at the service
    boundary via ``service_fail``.
    """

    kind = ErrorKind.VALIDATION
    default_code = ErrorCodes.VALIDATION_ERROR

    def __init__(self, message: str = "", code: Optional[str] = None, fields: Optional[Dict[str, List[str]]] = None):
        self.code = code or self.default_code
        self.message = message or self.code
        self.fields = fields or {}
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed or missing input. Carries field-level detail."""

    kind = ErrorKind.VALIDATION
    default_code = ErrorCodes.VALIDATION_ERROR

    @classmethod
    def for_fields(cls, fields: Dict[str, List[str]], message: str = "Invalid input") -> "ValidationError":
        return cls(message, fields=fields)


class ReferenceNotFoundError(ServiceError):
    """A referenced category/server/user does not exist at write time."""

    kind = ErrorKind.REFERENCE
    default_code = ErrorCodes.REFERENCE_NOT_FOUND


class NotFoundError(ServiceError):
    """The target entity of the operation does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_code = ErrorCodes.LISTING_NOT_FOUND


class AuthorizationError(ServiceError):
    """The principal lacks the role or ownership the operation requires."""

    kind = ErrorKind.AUTHORIZATION
    default_code = ErrorCodes.PERMISSION_DENIED


class ConflictError(ServiceError):
    """A uniqueness constraint could not be normalized into success."""

    kind = ErrorKind.CONFLICT
    default_code = ErrorCodes.CONFLICT


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)
        error_fields: Field-level validation messages, keyed by field path
        kind: Error taxonomy bucket (see ErrorKind)

    Examples:
        >>> result = service_ok(listing)
        >>> if result.ok:
        ...     return Response(ListingSerializer(result.value).data, 200)

        >>> result = service_err("listing_not_found", "Listing 10 does not exist", kind=ErrorKind.NOT_FOUND)
        >>> result.error
        'listing_not_found'
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    error_fields: Dict[str, List[str]] = field(default_factory=dict)
    kind: Optional[str] = None

    def map(self, func: Callable[[T], Any]) -> "ServiceResult":
        """Transform the success value if ok=True, otherwise pass through error."""
        if self.ok and self.value is not None:
            return service_ok(func(self.value))
        return self

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with 'success' and either 'data' or 'error'
        """
        if self.ok:
            return {"success": True, "data": self.value}
        return {
            "success": False,
            "error": {"code": self.error, "message": self.error_detail, "fields": self.error_fields},
        }


def service_ok(value: Optional[T] = None) -> ServiceResult[T]:
    """Create a successful ServiceResult."""
    return ServiceResult(ok=True, value=value)


def service_err(
    error: str,
    error_detail: str = "",
    kind: str = ErrorKind.VALIDATION,
    fields: Optional[Dict[str, List[str]]] = None,
) -> ServiceResult:
    """
    Create a failed ServiceResult.

    Example:
        >>> return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {id} does not exist", ErrorKind.NOT_FOUND)
    """
    return ServiceResult(
        ok=False, error=error, error_detail=error_detail or error, error_fields=fields or {}, kind=kind
    )


def service_fail(exc: ServiceError) -> ServiceResult:
    """Convert a raised ServiceError into a failed ServiceResult."""
    return service_err(exc.code, exc.message, kind=exc.kind, fields=exc.fields)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class ListingService(BaseService):
            def __init__(self, listings=None):
                super().__init__()
                self.listings = listings or ListingRepository()

            @BaseService.log_performance
            def list_pending(self, principal, filters):
                ...
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and the outcome of the returned ServiceResult.
        Unexpected exceptions are logged and re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000

                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper
