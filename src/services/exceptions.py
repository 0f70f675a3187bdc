"""Domain errors for session and generation operations.

Provides the error taxonomy raised by the service layer and a decorator
that maps it onto HTTP responses for the generation routers.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class GenerationServiceError(Exception):
    """Base class for session and generation errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(GenerationServiceError):
    """Raised when a required field is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidSessionError(GenerationServiceError):
    """Raised when a session is absent or not owned by the caller."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(GenerationServiceError):
    """Raised when an artifact does not exist under the caller's scope."""

    status_code = status.HTTP_404_NOT_FOUND


class NotFoundOrForbiddenError(NotFoundError):
    """Raised when an update matches no artifact owned by the caller."""


class ProviderError(GenerationServiceError):
    """Raised when the upstream generation provider fails."""

    status_code = status.HTTP_502_BAD_GATEWAY


class StorageError(GenerationServiceError):
    """Raised when persisting or reading data fails."""


def handle_generation_errors(func: F) -> F:
    """Translate domain errors raised by an endpoint into HTTPExceptions."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except (ProviderError, StorageError) as e:
            logger.error(f"{type(e).__name__} in {func.__name__}: {e.message} ({e.details})")
            detail: dict[str, str] = {"error": e.message}
            if e.details and isinstance(e, ProviderError):
                detail["details"] = e.details
            raise HTTPException(status_code=e.status_code, detail=detail) from e
        except GenerationServiceError as e:
            logger.info(f"{type(e).__name__} in {func.__name__}: {e.message}")
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

    return wrapper  # type: ignore[return-value]
