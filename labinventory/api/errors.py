"""Exception handlers shared by all API routes."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Location prefixes FastAPI adds to validation errors
_LOCATION_ROOTS = frozenset({"body", "query", "path", "header"})


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with a flat list of issues instead of FastAPI's default 422."""
    issues = [
        {
            "path": ".".join(str(part) for part in error["loc"] if part not in _LOCATION_ROOTS),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request.", "issues": issues})
