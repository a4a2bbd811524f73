"""Exception handlers rendering failures as ``{"errors": [...]}`` envelopes."""

import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from apikit.config import settings
from apikit.core.exceptions import HttpResponseException
from apikit.core.responder import MSG_INTERNAL_ERROR, ApiResponder

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


async def http_response_exception_handler(
    _request: Request, exc: HttpResponseException
) -> Response:
    """Return the response carried by the exception unchanged."""
    return exc.response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    detail = exc.detail
    if isinstance(detail, (list, tuple)):
        errors = [str(item) for item in detail]
    else:
        errors = [str(detail)]
    responder = ApiResponder.from_request(request).set_status_code(exc.status_code)
    return responder.respond({"errors": errors}, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    logger.error(
        "[%s] Unhandled exception on %s %s",
        _request_id(request),
        request.method,
        request.url.path,
        exc_info=exc,
    )
    message = str(exc) if settings.dev_mode and str(exc) else MSG_INTERNAL_ERROR
    return ApiResponder.from_request(request).respond_internal_error(message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HttpResponseException, http_response_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
