"""Error envelope: every failure is rendered as {success: false, message}"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from bazicash_gateway.domain.exceptions import InvalidSignatureError

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # dict details carry extra envelope fields (e.g. "info" on 501)
    if isinstance(exc.detail, dict):
        content = {"success": False, **exc.detail}
    else:
        content = {"success": False, "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    message = f"Campo inválido: {field}" if field else "Requisição inválida"
    logging.info(
        "Request validation failed",
        extra={"request_id": getattr(request.state, "request_id", "unknown"), "field": field},
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message, "field": field or None},
    )


async def invalid_signature_handler(request: Request, exc: InvalidSignatureError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"success": False, "message": str(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for errors no endpoint mapped; details stay in the logs"""
    logging.error(
        f"Unhandled error: {exc}",
        exc_info=exc,
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(status_code=500, content={"success": False, "message": INTERNAL_ERROR_MESSAGE})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidSignatureError, invalid_signature_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
