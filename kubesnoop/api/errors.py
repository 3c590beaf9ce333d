"""Structured error response models for consistent API error handling."""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from kubesnoop.core.errors import (
    DuplicateRuleError,
    RuleFileError,
    RuleNotFoundError,
    RuleStoreUnavailableError,
)

logger = structlog.get_logger(__name__)


class ErrorResponse(BaseModel):
    """Standardized error response schema."""

    error: bool = True
    code: str
    message: str
    details: dict[str, Any] | None = None


def create_error_response(code: str, message: str, details: dict[str, Any] | None = None) -> ErrorResponse:
    """Create standardized error response."""
    return ErrorResponse(code=code, message=message, details=details)


def _json_error(status_code: int, response: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.model_dump(exclude_none=True))


async def rule_not_found_handler(request: Request, exc: RuleNotFoundError) -> JSONResponse:
    return _json_error(
        status.HTTP_404_NOT_FOUND,
        create_error_response("rule_not_found", str(exc), {"rule_id": exc.rule_id}),
    )


async def duplicate_rule_handler(request: Request, exc: DuplicateRuleError) -> JSONResponse:
    return _json_error(
        status.HTTP_409_CONFLICT,
        create_error_response("duplicate_rule", str(exc), {"name": exc.name}),
    )


async def rule_file_handler(request: Request, exc: RuleFileError) -> JSONResponse:
    return _json_error(status.HTTP_400_BAD_REQUEST, create_error_response("invalid_rules", str(exc)))


async def store_unavailable_handler(request: Request, exc: RuleStoreUnavailableError) -> JSONResponse:
    logger.error("rule_store_unavailable", path=request.url.path, error=str(exc))
    details: dict[str, Any] = {
        "partial_findings": [finding.model_dump(mode="json") for finding in exc.partial_findings],
    }
    if exc.resource_type:
        details["resource_type"] = exc.resource_type
    return _json_error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        create_error_response("rule_store_unavailable", str(exc), details),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RuleNotFoundError, rule_not_found_handler)
    app.add_exception_handler(DuplicateRuleError, duplicate_rule_handler)
    app.add_exception_handler(RuleFileError, rule_file_handler)
    app.add_exception_handler(RuleStoreUnavailableError, store_unavailable_handler)
