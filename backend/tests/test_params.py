"""Tests for multi-valued parameter flattening."""

from starlette.datastructures import FormData, QueryParams

from apikit.core.params import to_input_dict


def test_single_values_stay_scalar():
    assert to_input_dict(QueryParams("q=shoes&page=2")) == {"q": "shoes", "page": "2"}


def test_repeated_keys_become_lists_in_order():
    params = QueryParams("tag[]=a&q=x&tag[]=b&tag[]=c")
    assert to_input_dict(params) == {"tag[]": ["a", "b", "c"], "q": "x"}


def test_form_data():
    form = FormData([("color", "red"), ("color", "blue"), ("size", "m")])
    assert to_input_dict(form) == {"color": ["red", "blue"], "size": "m"}


def test_plain_mapping_is_copied():
    source = {"limit": "10"}
    result = to_input_dict(source)
    assert result == source
    assert result is not source
