"""Translation of core errors into HTTP responses."""
from fastapi import HTTPException
from starlette import status

from core.errors import (
    MatchCoreError,
    ProfileNotFoundError,
    ProfileValidationError,
    SelfSwipeError,
    StorageUnavailableError,
)

STATUS_BY_ERROR = (
    (SelfSwipeError, status.HTTP_400_BAD_REQUEST),
    (ProfileValidationError, status.HTTP_400_BAD_REQUEST),
    (ProfileNotFoundError, status.HTTP_404_NOT_FOUND),
    (StorageUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_exception(exc: MatchCoreError) -> HTTPException:
    for error_cls, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")
