"""API dependencies: per-request responders and form requests."""

from typing import Annotated, Any, TypeVar

from fastapi import Depends, HTTPException, Request, status

from apikit.core.exceptions import MalformedBodyError
from apikit.core.form_request import FormRequest
from apikit.core.responder import ApiResponder

FormRequestT = TypeVar("FormRequestT", bound=FormRequest)

# ---------------------------------------------------------------------------
# Responder dependency
# ---------------------------------------------------------------------------


def get_responder(request: Request) -> ApiResponder:
    """Create a fresh responder bound to the current request's query string."""
    return ApiResponder.from_request(request)


Responder = Annotated[ApiResponder, Depends(get_responder)]

# ---------------------------------------------------------------------------
# Form request dependency
# ---------------------------------------------------------------------------


def form_request(request_cls: type[FormRequestT], **options: Any) -> Any:
    """Resolve and validate ``request_cls`` before the route handler runs.

    Usage::

        @router.post("/posts")
        async def store(
            form: Annotated[StorePostRequest, form_request(StorePostRequest)],
            responder: Responder,
        ): ...
    """

    async def _resolve(request: Request) -> FormRequestT:
        try:
            form = await request_cls.from_request(request, **options)
        except MalformedBodyError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            ) from exc
        form.validate()
        return form

    _resolve.__name__ = f"resolve_{request_cls.__name__}"
    return Depends(_resolve)
