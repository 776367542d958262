"""
Uniform response envelope: {"code": int, "message": str, "data": ...}.

Route handlers return `success(...)`; errors are turned into envelopes by the
exception handlers registered in `install_exception_handlers`.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.errors import ClientError, ServerError

logger = logging.getLogger(__name__)


class Envelope(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


def success(data: Any = None, message: str = "Success", code: int = 200) -> Envelope:
    return Envelope(code=code, message=message, data=data)


def error_response(status_code: int, code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=Envelope(code=code, message=message, data=None).model_dump(),
    )


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    logger.warning("%s %s -> client error %d: %s", request.method, request.url.path, exc.code, exc.message)
    return error_response(exc.status_code, exc.code, exc.message)


async def server_error_handler(request: Request, exc: ServerError) -> JSONResponse:
    logger.error(
        "%s %s -> server error %d: %s",
        request.method,
        request.url.path,
        exc.code,
        exc.message,
        exc_info=exc,
    )
    return error_response(exc.status_code, exc.code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid request: {field} {first.get('msg', '')}".strip()
    logger.warning("%s %s -> validation error: %s", request.method, request.url.path, message)
    return error_response(400, 400, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error in %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, 500, "Internal Server Error")


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(ServerError, server_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
