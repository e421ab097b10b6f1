import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from doorman.errors import AuthenticationError, InvalidInputError, NotFoundError, ServerError, UserError, ValidationError

logger = structlog.get_logger(__name__)


def create_json_error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Create JSON error response with a stable code for machine parsing."""
    return JSONResponse(status_code=status_code, content={"success": False, "error": code, "message": message})


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
    elif isinstance(exc, NotFoundError):
        status_code = 404
    else:
        # ValidationError and any other UserError subclass
        status_code = 400

    code = exc.code if isinstance(exc, UserError) else ValidationError.code
    return create_json_error_response(status_code=status_code, code=code, message=str(exc))


async def request_validation_handler(request: Request, exc: Exception) -> Response:
    """Report malformed request bodies as INVALID_INPUT instead of FastAPI's 422."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    # loc is ("body", "field", ...) for body errors; a bare ("body",) means the body itself was unusable
    fields = sorted({".".join(str(part) for part in error["loc"][1:]) for error in errors if len(error["loc"]) > 1})
    message = f"Invalid or missing fields: {', '.join(fields)}" if fields else InvalidInputError.default_message
    logger.debug("request_validation_failed", path=request.url.path, fields=fields)
    return create_json_error_response(status_code=400, code=InvalidInputError.code, message=message)


async def server_error_handler(request: Request, exc: Exception) -> Response:
    """Handle storage and delivery failures: full detail in the log, generic text to the client."""
    code = exc.code if isinstance(exc, ServerError) else ServerError.code
    public_message = exc.public_message if isinstance(exc, ServerError) else ServerError.public_message
    logger.error("server_error", path=request.url.path, code=code, error=str(exc), exc_info=exc)
    return create_json_error_response(status_code=500, code=code, message=public_message)


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", path=request.url.path, error=str(exc))
    return create_json_error_response(status_code=500, code=ServerError.code, message=ServerError.public_message)
