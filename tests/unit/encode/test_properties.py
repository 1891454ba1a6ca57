"""Property tests: decoding then encoding well-typed documents is lossless."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from typed_transform import JSONValue, from_json, to_json


class Reading:
    def __init__(self) -> None:
        self.name = ""
        self.count = 0
        self.ratio = 0.0
        self.active = False
        self.labels: list[object] = []
        self.extra: dict[str, object] = {}


_SAFE_KEY = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8)

_SCALAR: st.SearchStrategy[JSONValue] = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.text(max_size=20),
)

_JSON_VALUE: st.SearchStrategy[JSONValue] = st.recursive(
    _SCALAR,
    lambda child: st.one_of(
        st.lists(child, max_size=4),
        st.dictionaries(_SAFE_KEY, child, max_size=4),
    ),
    max_leaves=20,
)

_READING = st.fixed_dictionaries(
    {
        "name": st.text(max_size=20),
        "count": st.integers(min_value=-(2**31), max_value=2**31),
        "ratio": st.floats(allow_nan=False, allow_infinity=False),
        "active": st.booleans(),
        "labels": st.lists(_JSON_VALUE, max_size=4),
        "extra": st.dictionaries(_SAFE_KEY, _JSON_VALUE, max_size=4),
    }
)


@given(document=_READING)
@settings(max_examples=50, derandomize=True, deadline=None)
def test_property_decode_then_encode_roundtrip(document: dict[str, JSONValue]) -> None:
    assert to_json(from_json(document, Reading)) == document


@given(document=_READING)
@settings(max_examples=25, derandomize=True, deadline=None)
def test_property_encode_is_stable(document: dict[str, JSONValue]) -> None:
    decoded = from_json(document, Reading)
    assert to_json(decoded) == to_json(decoded)
    assert to_json(from_json(to_json(decoded), Reading)) == document
