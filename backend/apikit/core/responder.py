"""JSON responder: wraps handler results in the standard response envelope.

One responder belongs to one request: the status code set through
``set_status_code`` lives on the instance, so a new instance is created per
request (see ``apikit.api.dependencies.get_responder``).
"""

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any, Self

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.requests import Request
from starlette.responses import Response

from apikit.config import settings
from apikit.core.pagination import Paginator
from apikit.core.params import to_input_dict
from apikit.models.envelope import (
    ErrorMessages,
    PaginationMeta,
    data_envelope,
    error_envelope,
    message_envelope,
    meta_envelope,
)

logger = logging.getLogger(__name__)

ResponseFactory = Callable[..., Response]

MSG_NOT_FOUND = "Resource not found."
MSG_NO_SUBSCRIPTION = "This account has no valid subscription."
MSG_INTERNAL_ERROR = "Internal error."
MSG_UNPROCESSABLE = "Unprocessable entity."
MSG_UNAUTHORIZED = "Unauthorized access."
MSG_CREATED = "Resource created successfully."
MSG_UPDATED = "Resource updated successfully."
MSG_DELETED = "Resource deleted successfully."

# Starlette renamed HTTP_422_UNPROCESSABLE_ENTITY; the old name warns
HTTP_422_UNPROCESSABLE = 422


def _parse_limit(query_params: Mapping[str, str], param: str, default: int) -> int:
    raw = query_params.get(param)
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-integer %s=%r", param, raw)
        return default


class ApiResponder:
    """Builds envelope responses at the currently-set status code."""

    def __init__(
        self,
        query_params: Mapping[str, str] | None = None,
        *,
        response_factory: ResponseFactory = JSONResponse,
        default_limit: int | None = None,
        limit_param: str | None = None,
    ) -> None:
        self.query_params: Mapping[str, str] = query_params if query_params is not None else {}
        self.response_factory = response_factory
        self.status_code: int = status.HTTP_200_OK
        # Page size requested by the client. Not applied by any respond_*
        # method; route handlers use it when building paginated queries.
        self.limit: int = _parse_limit(
            self.query_params,
            limit_param or settings.limit_param,
            default_limit if default_limit is not None else settings.default_limit,
        )

    @classmethod
    def from_request(cls, request: Request, **kwargs: Any) -> "ApiResponder":
        return cls(request.query_params, **kwargs)

    # ------------------------------------------------------------------
    # Status code
    # ------------------------------------------------------------------

    def get_status_code(self) -> int:
        return self.status_code

    def set_status_code(self, status_code: int) -> Self:
        """Set the status for the next response; returns self for chaining."""
        self.status_code = status_code
        return self

    # ------------------------------------------------------------------
    # Primitive
    # ------------------------------------------------------------------

    def respond(self, data: Any, headers: Mapping[str, str] | None = None) -> Response:
        """Emit ``data`` verbatim as the JSON body."""
        return self.response_factory(
            content=jsonable_encoder(data),
            status_code=self.get_status_code(),
            headers=dict(headers) if headers else None,
        )

    # ------------------------------------------------------------------
    # Success
    # ------------------------------------------------------------------

    def respond_data(self, data: Any) -> Response:
        return self.set_status_code(status.HTTP_200_OK).respond(data_envelope(data))

    def respond_with_pagination(self, data: Any, paginator: Paginator) -> Response:
        """Respond with ``{meta, data}``, meta taken from ``paginator``.

        The request's query parameters are appended to the paginator first so
        the next/previous links carry them.
        """
        paginator.appends(to_input_dict(self.query_params))
        meta = PaginationMeta(
            total=paginator.total(),
            pages=math.ceil(paginator.total() / paginator.per_page()),
            current=paginator.current_page(),
            limit=paginator.per_page(),
            next=paginator.next_page_url(),
            previous=paginator.previous_page_url(),
        )
        return self.set_status_code(status.HTTP_200_OK).respond(meta_envelope(meta, data))

    def respond_with_meta(self, data: Any, meta: Mapping[str, Any] | None = None) -> Response:
        return self.respond(meta_envelope(dict(meta) if meta is not None else None, data))

    def respond_with_message(self, message: str, data: Any = None) -> Response:
        """Respond with ``{message}``, or ``{message, data}`` unless data is None.

        Empty containers count as supplied data.
        """
        return self.respond(message_envelope(message, data))

    def respond_created(self, data: Any = None) -> Response:
        return self.set_status_code(status.HTTP_201_CREATED).respond_with_message(MSG_CREATED, data)

    def respond_updated(self, data: Any = None) -> Response:
        return self.set_status_code(status.HTTP_200_OK).respond_with_message(MSG_UPDATED, data)

    def respond_deleted(self) -> Response:
        return self.set_status_code(status.HTTP_200_OK).respond_with_message(MSG_DELETED)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def respond_with_error(self, message: ErrorMessages) -> Response:
        return self.set_status_code(status.HTTP_400_BAD_REQUEST).respond(error_envelope(message))

    def respond_not_found(self, message: str = MSG_NOT_FOUND) -> Response:
        return self.set_status_code(status.HTTP_404_NOT_FOUND).respond(error_envelope([message]))

    def respond_no_subscription(self, message: str = MSG_NO_SUBSCRIPTION) -> Response:
        return self.set_status_code(status.HTTP_403_FORBIDDEN).respond(error_envelope([message]))

    def respond_internal_error(self, message: str = MSG_INTERNAL_ERROR) -> Response:
        return self.set_status_code(status.HTTP_500_INTERNAL_SERVER_ERROR).respond(
            error_envelope([message])
        )

    def respond_unprocessable_entity(self, message: str = MSG_UNPROCESSABLE) -> Response:
        return self.set_status_code(HTTP_422_UNPROCESSABLE).respond(error_envelope([message]))

    def respond_unauthorized(self, message: str = MSG_UNAUTHORIZED) -> Response:
        return self.set_status_code(status.HTTP_401_UNAUTHORIZED).respond(error_envelope([message]))
