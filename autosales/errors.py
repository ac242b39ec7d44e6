import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


async def _integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(
        "integrity_error method=%s path=%s error=%s",
        request.method,
        request.url.path,
        exc.orig,
    )
    return JSONResponse(
        status_code=409,
        content={"detail": "Request conflicts with existing data"},
    )


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(
        "unhandled_error method=%s path=%s", request.method, request.url.path
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IntegrityError, _integrity_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
