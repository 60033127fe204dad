"""
Application error types and their HTTP rendering.

Validation failures are reported as a list of violations, one per offending
field, in the shape ``{"property_path": "price", "message": "..."}``.
"""
from typing import Any, Dict, List

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ValidationFailed(Exception):
    """Raised by handlers when a payload passes schema parsing but breaks a domain rule."""

    def __init__(self, violations: List[Dict[str, str]]):
        super().__init__(violations)
        self.violations = violations

    @classmethod
    def single(cls, property_path: str, message: str) -> "ValidationFailed":
        return cls([{"property_path": property_path, "message": message}])


def _property_path(loc: Any) -> str:
    # Drop the "body"/"query"/"path" origin marker FastAPI prepends
    parts = [str(p) for p in loc]
    if parts and parts[0] in ("body", "query", "path", "header", "cookie"):
        parts = parts[1:]
    return ".".join(parts)


def violations_from_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    return [
        {"property_path": _property_path(err.get("loc", ())), "message": err.get("msg", "")}
        for err in errors
    ]


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=violations_from_errors(exc.errors()),
    )


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.violations)
