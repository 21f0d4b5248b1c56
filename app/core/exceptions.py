"""
Domain exceptions for the prayer and prayer chain services.

Services raise these for business rule violations. The API layer turns them
into JSON error bodies of the form ``{"error": <message>, "kind": <kind>}``
with the status code carried by the exception class.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for every error a service can raise"""

    kind: str = "domain_error"
    status_code: int = 500
    default_message: str = "an unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "kind": self.kind}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class NotFoundError(DomainError):
    kind = "not_found"
    status_code = 404
    default_message = "resource not found"


class ForbiddenError(DomainError):
    kind = "forbidden"
    status_code = 403
    default_message = "you are not allowed to perform this action"


class ConflictError(DomainError):
    kind = "conflict"
    status_code = 409
    default_message = "resource already exists"


class AlreadyPrayedError(ConflictError):
    default_message = "you have already prayed for this request"


class AlreadyAnsweredError(ConflictError):
    default_message = "this prayer request is already marked as answered"


class AlreadyMemberError(ConflictError):
    default_message = "already a member of this prayer chain"


class DuplicateCommitmentError(ConflictError):
    default_message = "already committed to pray for this member"


class InvalidOperationError(DomainError):
    kind = "invalid_operation"
    status_code = 400
    default_message = "invalid operation"


class SelfCommitmentError(InvalidOperationError):
    default_message = "cannot commit to pray for yourself"


class TargetNotMemberError(InvalidOperationError):
    default_message = "can only commit to pray for members of the same chain"


class NotAMemberError(InvalidOperationError):
    """Acting user holds no membership in the chain, whether committing or leaving"""
    default_message = "not a member of this prayer chain"


NotMemberError = NotAMemberError


class StorageError(DomainError):
    kind = "storage_failure"
    status_code = 500
    default_message = "storage operation failed"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    else:
        logger.debug(f"{request.method} {request.url.path} rejected: {exc!r}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Unhandled storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=StorageError().to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to the application"""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
