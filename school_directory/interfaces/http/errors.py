import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...domain.errors import DirectoryError, InternalError, InvalidInput, NotFound

logger = structlog.get_logger(__name__)

STATUS_CODES = (
    (InvalidInput, 400),
    (NotFound, 404),
    (InternalError, 500),
)


def status_for(exc: DirectoryError) -> int:
    for cls, code in STATUS_CODES:
        if isinstance(exc, cls):
            return code
    return 500


def format_validation_error(error: dict) -> str:
    """Первая ошибка валидации в виде "<поле> <сообщение>", напр. "students[1] must be email address"."""
    if error.get("type") == "json_invalid":
        return "body must be valid JSON"
    loc = [str(p) for p in error.get("loc", ())]
    if len(loc) > 1:
        loc = loc[1:]
    field = loc[0] + "".join(f"[{p}]" for p in loc[1:]) if loc else "request"
    return f"{field} {error['msg']}"


async def directory_error_handler(request: Request, exc: DirectoryError):
    code = status_for(exc)
    if code >= 500:
        # подробности уже залогированы репозиторием, клиенту только общее сообщение
        return JSONResponse(status_code=code, content={"message": InternalError().message})
    return JSONResponse(status_code=code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = format_validation_error(errors[0]) if errors else "invalid request"
    return JSONResponse(status_code=400, content={"message": message})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_type=type(exc).__name__,
    )
    return JSONResponse(status_code=500, content={"message": InternalError().message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DirectoryError, directory_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
