from urllib.parse import parse_qsl

from core.services.query import build_query_string


def test_empty_or_missing_params_yield_empty_string():
    assert build_query_string() == ""
    assert build_query_string({}) == ""


def test_only_none_values_yield_empty_string():
    assert build_query_string({"a": None, "b": None}) == ""


def test_none_scalars_are_omitted():
    qs = build_query_string({"page": 2, "q": None})
    assert qs == "?page=2"


def test_lists_become_repeated_keys_without_brackets():
    qs = build_query_string({"tag": ["a", "b"], "page": 1})
    assert qs.startswith("?")
    assert parse_qsl(qs[1:]) == [("tag", "a"), ("tag", "b"), ("page", "1")]
    assert "%5B" not in qs


def test_none_items_inside_lists_are_skipped():
    qs = build_query_string({"id": [1, None, 3]})
    assert parse_qsl(qs[1:]) == [("id", "1"), ("id", "3")]


def test_list_of_only_none_is_dropped():
    assert build_query_string({"id": [None, None]}) == ""


def test_scalar_text_conversion():
    qs = build_query_string({"active": True, "deleted": False, "ratio": 0.5})
    assert parse_qsl(qs[1:]) == [("active", "true"), ("deleted", "false"), ("ratio", "0.5")]


def test_values_are_url_encoded():
    assert build_query_string({"q": "a b&c"}) == "?q=a+b%26c"


def test_input_is_not_mutated():
    params = {"tag": ["a", None], "q": None}
    build_query_string(params)
    assert params == {"tag": ["a", None], "q": None}
