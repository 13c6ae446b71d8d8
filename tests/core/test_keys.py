"""Tests for cache key encoding."""

import pytest
from pydantic import BaseModel

from typeahead.core.errors import EncodingError
from typeahead.core.keys import encode


def test_encode_is_deterministic():
    """Test that identical parts always give the same key."""
    assert encode(["GET", "USERS"]) == encode(["GET", "USERS"])
    assert encode(["GET", "USERS"]) == "GET||USERS"


def test_encode_canonicalizes_mapping_order():
    """Test that key order inside a structured part does not matter."""
    assert encode([{"a": 1, "b": 2}]) == encode([{"b": 2, "a": 1}])
    assert encode([{"outer": {"y": [1, 2], "x": None}}]) == encode([{"outer": {"x": None, "y": [1, 2]}}])


def test_encode_distinguishes_different_requests():
    assert encode(["GET", "USERS"]) != encode(["GET", "POSTS"])
    assert encode([{"page": 1}]) != encode([{"page": 2}])
    assert encode(["GET", {"q": "a"}]) != encode([{"q": "a"}, "GET"])
    assert encode([True]) != encode(["True"])
    assert encode([True]) != encode(["true"])


def test_encode_scalars_and_custom_separator():
    assert encode(["GET", 1, 2.5, None, False], separator="::") == "GET::1::2.5::null::false"


def test_encode_pydantic_model_part():
    """Test that pydantic models are encoded from their JSON dump."""

    class Query(BaseModel):
        term: str
        limit: int

    assert encode([Query(term="le", limit=5)]) == encode([{"limit": 5, "term": "le"}])


def test_encode_preserves_unicode():
    assert encode([{"name": "Zoë"}]) == '{"name":"Zoë"}'


def test_encode_rejects_cycles():
    """Test that a cyclic structure fails instead of being dropped."""
    looped = {"a": 1}
    looped["self"] = looped
    with pytest.raises(EncodingError):
        encode(["GET", looped])


def test_encode_allows_shared_non_cyclic_references():
    shared = [1, 2]
    assert encode([{"a": shared, "b": shared}]) == '{"a":[1,2],"b":[1,2]}'


@pytest.mark.parametrize(
    "part",
    [{1, 2}, b"bytes", object(), {1: "int key"}, float("nan"), [float("inf")]],
)
def test_encode_rejects_unsupported_parts(part):
    with pytest.raises(EncodingError):
        encode(["GET", part])


def test_encode_rejects_ambiguous_parts():
    """Test that a part containing the separator cannot be joined."""
    with pytest.raises(EncodingError):
        encode(["GET||USERS"])
    with pytest.raises(EncodingError):
        encode([{"q": "a||b"}])


@pytest.mark.parametrize("parts", [[], "GET", None])
def test_encode_rejects_bad_parts_sequence(parts):
    with pytest.raises(EncodingError):
        encode(parts)


def test_encode_rejects_empty_separator():
    with pytest.raises(EncodingError):
        encode(["GET"], separator="")


def test_encoding_error_is_value_error():
    assert issubclass(EncodingError, ValueError)


def test_encode_parts_touching_separator_cannot_collide():
    """Test that a part ending in half the separator is refused."""
    with pytest.raises(EncodingError):
        encode(["a|", "b"])
    assert encode(["a", "|b"]) == "a|||b"
    assert encode(["a", "b|"]) == "a||b|"


@pytest.mark.parametrize(
    "text, value",
    [
        ("1", 1),
        ("2.5", 2.5),
        ("true", True),
        ("null", None),
        ('{"q":"a"}', {"q": "a"}),
        ("[1,2]", [1, 2]),
    ],
)
def test_encode_json_looking_string_differs_from_value(text, value):
    """Test that a string never encodes like the value it spells."""
    assert encode(["GET", text]) != encode(["GET", value])
    assert encode(["GET", text]) == encode(["GET", text])


def test_encode_quoted_string_stays_distinct():
    assert encode(['"1"']) != encode(["1"])
    assert encode(["1"]) == '"1"'


def test_encode_plain_strings_are_verbatim():
    assert encode(["GET", "users", "lea graham"]) == "GET||users||lea graham"
