"""Flattening of multi-valued request parameters."""

from collections.abc import Mapping
from typing import Any


def to_input_dict(params: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``params`` into a plain dict, keeping every value of a repeated key.

    Starlette's ``QueryParams`` and ``FormData`` return only the last value
    when iterated; here a key sent once maps to its value and a key sent more
    than once maps to the list of its values, in order.
    """
    multi_items = getattr(params, "multi_items", None)
    if multi_items is None:
        return dict(params)
    result: dict[str, Any] = {}
    for key, value in multi_items():
        if key not in result:
            result[key] = value
        elif isinstance(result[key], list):
            result[key].append(value)
        else:
            result[key] = [result[key], value]
    return result
