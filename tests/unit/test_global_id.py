import base64
import uuid

import pytest

from relaystore.core.exceptions import DecodeError, InvalidIDError, UnknownTypeError
from relaystore.graphql.common import decode_node_id, from_global_id, to_global_id
from relaystore.graphql.registry import NodeRegistry


async def _load_one(context, key):
    return None


async def _load_many(context, keys):
    return [None] * len(keys)


@pytest.fixture
def registry() -> NodeRegistry:
    registry = NodeRegistry()
    registry.register("User", _load_one, _load_many, parse_key=int)
    registry.register("Post", _load_one, _load_many, parse_key=uuid.UUID)
    registry.register("Video", _load_one, _load_many, parse_key=uuid.UUID)
    registry.register("Tag", _load_one, _load_many)
    registry.freeze()
    return registry


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


@pytest.mark.parametrize(
    "type_tag,raw_key",
    [
        ("User", 1),
        ("User", 0),
        ("User", 9_007_199_254_740_993),
        ("Post", uuid.UUID("6f1c3f0e-8f5e-4b1a-9a51-0d7a3d1c2b4e")),
        ("Tag", "go"),
        ("Tag", "with:colon and ünïcode"),
    ],
)
def test_global_id_round_trip(registry, type_tag, raw_key):
    global_id = to_global_id(type_tag, raw_key)

    decoded = from_global_id(global_id, registry)

    assert decoded == (type_tag, raw_key)
    assert type(decoded.raw_key) is type(raw_key)


def test_global_id_is_deterministic():
    assert to_global_id("User", 42) == to_global_id("User", 42)


def test_shared_key_space_yields_distinct_ids(registry):
    key = uuid.uuid4()

    post_id = to_global_id("Post", key)
    video_id = to_global_id("Video", key)

    assert post_id != video_id
    assert from_global_id(post_id, registry).type_tag == "Post"
    assert from_global_id(video_id, registry).type_tag == "Video"


def test_global_id_is_url_safe():
    # These bytes encode to the two alphabet-specific characters
    global_id = to_global_id("Tag", ">>>???")
    assert "+" not in global_id and "/" not in global_id


def test_unregistered_type_is_unknown(registry):
    with pytest.raises(UnknownTypeError) as exc_info:
        from_global_id(to_global_id("Ghost", 1), registry)
    assert exc_info.value.type_tag == "Ghost"
    assert exc_info.value.code == "UNKNOWN_TYPE"


@pytest.mark.parametrize(
    "value",
    [
        "",
        "not base64!",
        "%%%%",
        "VXNlcjox=",  # bad padding
        _b64("User"),  # no separator
        _b64(":1"),  # empty type tag
        _b64("User:abc"),  # key is not an int
        _b64("User:01"),  # non-canonical key
        _b64("User: 1"),
        _b64("Post:not-a-uuid"),
        _b64("Post:6F1C3F0E-8F5E-4B1A-9A51-0D7A3D1C2B4E"),  # non-canonical uuid
        "VXNlcjox\n",
        "Üser",
    ],
)
def test_malformed_global_ids_fail_cleanly(registry, value):
    with pytest.raises(DecodeError):
        from_global_id(value, registry)


def test_arbitrary_bytes_fail_cleanly(registry):
    garbage = base64.urlsafe_b64encode(bytes(range(256))).decode("ascii")
    with pytest.raises(DecodeError):
        from_global_id(garbage, registry)


def test_non_string_global_id_is_rejected(registry):
    with pytest.raises(DecodeError):
        from_global_id(1234, registry)


def test_standard_alphabet_spelling_is_rejected(registry):
    global_id = to_global_id("Tag", ">>>???")
    standard = global_id.replace("-", "+").replace("_", "/")
    assert standard != global_id

    with pytest.raises(DecodeError):
        from_global_id(standard, registry)


@pytest.mark.parametrize("type_tag", ["", "Us:er"])
def test_encode_rejects_invalid_type_tags(type_tag):
    with pytest.raises(ValueError):
        to_global_id(type_tag, 1)


@pytest.mark.parametrize("raw_key", [True, 1.5, None, b"1"])
def test_encode_rejects_unsupported_keys(raw_key):
    with pytest.raises(TypeError):
        to_global_id("User", raw_key)


def test_decode_node_id_returns_the_raw_key(registry):
    assert decode_node_id(to_global_id("User", 7), "User", registry) == 7


def test_decode_node_id_rejects_other_types(registry):
    with pytest.raises(InvalidIDError) as exc_info:
        decode_node_id(to_global_id("Post", uuid.uuid4()), "User", registry)
    assert exc_info.value.code == "INVALID_ID"


def test_decode_node_id_wraps_unknown_types(registry):
    with pytest.raises(InvalidIDError):
        decode_node_id(to_global_id("Ghost", 1), "User", registry)
