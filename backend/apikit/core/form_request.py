"""Self-validating request objects.

A form request declares its field constraints as a pydantic model
(``rules``), may restrict access (``authorize``) and may derive extra state
once validation has passed by implementing ``PostValidationHook``.

Lifecycle::

    UNINITIALIZED -> VALIDATING -> VALID -> HANDLED
                                \\-> REJECTED

A rejected request never reaches ``handle_request`` or the route handler.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any, NoReturn, Self

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.requests import Request

from apikit.config import settings
from apikit.core.exceptions import HttpResponseException, MalformedBodyError
from apikit.core.params import to_input_dict
from apikit.core.responder import HTTP_422_UNPROCESSABLE
from apikit.models.envelope import ErrorMessages, error_envelope

logger = logging.getLogger(__name__)

MSG_FORBIDDEN = "This action is unauthorized."


class RequestState(str, Enum):
    UNINITIALIZED = "uninitialized"
    VALIDATING = "validating"
    VALID = "valid"
    HANDLED = "handled"
    REJECTED = "rejected"


class ValidationFailureMode(str, Enum):
    """How a failed form request is reported.

    PROPAGATE raises the framework's own exceptions (FastAPI renders
    ``{"detail": ...}``); JSON raises an ``HttpResponseException`` carrying an
    ``{"errors": [...]}`` envelope.
    """

    PROPAGATE = "propagate"
    JSON = "json"


class PostValidationHook(ABC):
    """Capability: run extra logic after a form request validates."""

    @abstractmethod
    def handle_request(self) -> None:
        """Called exactly once, after successful validation."""


def format_validation_errors(exc: ValidationError) -> list[str]:
    """Flatten pydantic errors into ``"<field>: <message>"`` strings."""
    messages: list[str] = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_body(request: Request) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return to_input_dict(form)
    if "json" not in content_type:
        return {}
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedBodyError("Malformed JSON body.") from exc
    # Only object bodies contribute named fields
    return body if isinstance(body, dict) else {}


class FormRequest(ABC):
    """Base class for validated requests."""

    failure_mode: ValidationFailureMode | None = None

    def __init__(
        self,
        input: Mapping[str, Any] | None = None,
        route_params: Mapping[str, Any] | None = None,
        *,
        request: Request | None = None,
        failure_mode: ValidationFailureMode | str | None = None,
    ) -> None:
        self.request = request
        self.input: dict[str, Any] = dict(input) if input is not None else {}
        self.route_params: dict[str, Any] = dict(route_params) if route_params is not None else {}
        if failure_mode is not None:
            self.failure_mode = ValidationFailureMode(failure_mode)
        self.resource: Any = None
        self.state = RequestState.UNINITIALIZED
        self._validated: BaseModel | None = None

    @classmethod
    async def from_request(cls, request: Request, **kwargs: Any) -> Self:
        """Collect query parameters and the JSON or form body (body wins).

        A key sent more than once becomes a list of its values.
        """
        body = await _read_body(request)
        return cls(
            {**to_input_dict(request.query_params), **body},
            request.path_params,
            request=request,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------

    def authorize(self) -> bool:
        return True

    @abstractmethod
    def rules(self) -> type[BaseModel]:
        """Return the pydantic model declaring this request's fields."""

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def get_failure_mode(self) -> ValidationFailureMode:
        if self.failure_mode is not None:
            return ValidationFailureMode(self.failure_mode)
        return ValidationFailureMode(settings.validation_failure_mode)

    def validate(self) -> None:
        """Authorize, validate the input, then run the post-validation hook."""
        self.state = RequestState.VALIDATING

        if not self.authorize():
            self.state = RequestState.REJECTED
            logger.info("%s rejected: not authorized", type(self).__name__)
            self.failed_authorization()

        try:
            self._validated = self.rules().model_validate(self.input)
        except ValidationError as exc:
            self.state = RequestState.REJECTED
            logger.info(
                "%s rejected: %d validation error(s)", type(self).__name__, exc.error_count()
            )
            self.failed_validation(exc)

        self.state = RequestState.VALID

        if isinstance(self, PostValidationHook):
            self.handle_request()
            self.state = RequestState.HANDLED

    def failed_authorization(self) -> NoReturn:
        if self.get_failure_mode() is ValidationFailureMode.JSON:
            self.throw_response_exception(MSG_FORBIDDEN, status.HTTP_403_FORBIDDEN)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=MSG_FORBIDDEN)

    def failed_validation(self, exc: ValidationError) -> NoReturn:
        if self.get_failure_mode() is ValidationFailureMode.JSON:
            self.throw_response_exception(format_validation_errors(exc))
        raise RequestValidationError(exc.errors(include_url=False)) from exc

    def throw_response_exception(
        self,
        errors: ErrorMessages,
        status_code: int = HTTP_422_UNPROCESSABLE,
    ) -> NoReturn:
        """Abort the request with an ``{"errors": [...]}`` JSON response."""
        raise HttpResponseException(
            JSONResponse(content=error_envelope(errors), status_code=status_code)
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def validated(self) -> BaseModel:
        """Return the validated model; only available after ``validate()``."""
        if self._validated is None:
            raise RuntimeError(f"{type(self).__name__} has not been validated")
        return self._validated

    @property
    def query_params(self) -> Mapping[str, str]:
        if self.request is None:
            return {}
        return self.request.query_params

    def get_resource(self) -> Any:
        return self.resource

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self.state.value})"
