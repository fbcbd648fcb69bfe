# ============================================================================
# FILE: jamvault/api/errors.py
# ============================================================================
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from typing import Any, Dict, List, Sequence
import logging

logger = logging.getLogger(__name__)

def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Reduce pydantic errors to {field, message} pairs"""
    formatted = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        formatted.append({
            "field": ".".join(location) or "request",
            "message": error.get("msg", "Invalid value"),
        })
    return formatted

def bad_request(errors: Sequence[Dict[str, Any]], message: str = "Invalid request") -> HTTPException:
    """400 carrying field-level detail, for validation done inside a handler"""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": message, "details": format_validation_errors(errors)},
    )

def validation_failed(e: ValidationError) -> HTTPException:
    return bad_request(e.errors())

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": format_validation_errors(exc.errors())},
    )

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
