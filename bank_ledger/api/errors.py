"""
Error responses

Every error leaves the API as ``{"error": "<message>"}``. Ledger errors keep
their message verbatim; routes choose the status code.
"""

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import LedgerError, NotFoundError
from ..logging_config import get_logger, log_action


logger = get_logger("bank_ledger.api")


def to_http_error(exc: LedgerError, not_found_status: int = 404) -> HTTPException:
    """Map a ledger error to an HTTPException carrying its message"""
    status_code = not_found_status if isinstance(exc, NotFoundError) else 400
    return HTTPException(status_code=status_code, detail=str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    log_action(
        logger, "warning", f"Request failed: {exc.detail}",
        action="http_error", resource=f"{request.method} {request.url.path}",
        extra={"status_code": exc.status_code}
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Report the first failing field only
    first_error = exc.errors()[0]
    field = ".".join(str(loc) for loc in first_error.get("loc", []) if loc != "body")
    message = first_error.get("msg", "Validation error")

    log_action(
        logger, "warning", f"Validation error: {message} on field {field}",
        action="validation_error", resource=f"{request.method} {request.url.path}"
    )
    return JSONResponse(
        status_code=400,
        content={"error": f"Validation error on field '{field}': {message}"}
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}", exc_info=exc
    )
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})
