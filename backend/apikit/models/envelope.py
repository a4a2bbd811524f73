"""JSON response envelopes.

Every body emitted by the responder takes one of these shapes:

    { "data": ... }
    { "meta": {...}, "data": ... }
    { "message": "..." }
    { "message": "...", "data": ... }
    { "errors": ["...", ...] }  or  { "errors": {"field": [...]} }

The pydantic models document the shapes (e.g. as ``response_model`` on a
route); the builder functions produce the plain dict bodies.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination block attached to paginated responses."""

    total: int
    pages: int
    current: int
    limit: int
    next: str | None = None
    previous: str | None = None


class DataEnvelope(BaseModel, Generic[T]):
    """Success with payload."""

    data: T


class PaginatedEnvelope(BaseModel, Generic[T]):
    """Paginated or meta-annotated success."""

    meta: PaginationMeta | dict[str, Any]
    data: T


class MessageEnvelope(BaseModel, Generic[T]):
    """Success with a message and an optional payload."""

    message: str
    data: T | None = None


ErrorMessages = str | Iterable[str] | Mapping[str, Any]


class ErrorEnvelope(BaseModel):
    """Failure."""

    errors: list[str] | dict[str, Any]


def normalize_errors(message: ErrorMessages) -> list[str] | Mapping[str, Any]:
    """Wrap a single message in a list; use lists and mappings as given.

    A mapping (e.g. field name to messages) is kept whole. Other iterables
    such as tuples or generators are materialised into a list.
    """
    if isinstance(message, str):
        return [message]
    if isinstance(message, (list, Mapping)):
        return message
    return list(message)


def data_envelope(data: Any) -> dict:
    return {"data": data}


def meta_envelope(meta: PaginationMeta | dict | None, data: Any) -> dict:
    if isinstance(meta, PaginationMeta):
        meta = meta.model_dump()
    return {
        "meta": meta if meta is not None else {},
        "data": data,
    }


def message_envelope(message: str, data: Any = None) -> dict:
    """Build a message envelope; ``data`` is only included when not None."""
    if data is not None:
        return {"message": message, "data": data}
    return {"message": message}


def error_envelope(message: ErrorMessages) -> dict:
    return {"errors": normalize_errors(message)}
