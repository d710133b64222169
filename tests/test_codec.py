"""Tests for the value codec."""

import base64

import pytest

from core import codec
from model.keys import KeyType
from util.errors import EncodingError, UnsupportedTypeError


def _blob(data: bytes) -> dict:
    return {"type": "binary", "data": base64.b64encode(data).decode("ascii")}


# ── Classification ───────────────────────────────────────


def test_printable_ascii_is_text():
    assert not codec.is_binary(b"hello world ~!")


@pytest.mark.parametrize("raw", [b"\x00", b"tab\there", b"\x7f", b"\xff", b"line\n"])
def test_control_and_high_bytes_are_binary(raw):
    assert codec.is_binary(raw)


def test_empty_is_text():
    assert codec.decode_scalar(b"") == ""


# ── Decode ───────────────────────────────────────────────


def test_decode_number_string_gives_parsed_json():
    assert codec.decode(KeyType.STRING, b"42") == 42


def test_decode_json_object():
    assert codec.decode("string", b'{"a": [1, 2]}') == {"a": [1, 2]}


def test_decode_plain_text():
    assert codec.decode("string", b"hello") == "hello"


def test_decode_binary_wraps_base64():
    raw = bytes(range(0, 8)) + b"\xfe\xff"
    assert codec.decode("string", raw) == _blob(raw)


def test_multibyte_utf8_text_is_binary():
    raw = "héllo".encode("utf-8")
    assert codec.decode("string", raw) == _blob(raw)


def test_multibyte_utf8_inside_json_is_parsed():
    assert codec.decode("string", '"héllo"'.encode("utf-8")) == "héllo"


def test_non_finite_constants_are_not_json():
    assert codec.decode("string", b"NaN") == "NaN"
    assert codec.decode("string", b"-Infinity") == "-Infinity"


def test_decode_list_is_per_element():
    raw = [b"1", b"text", b'{"k":"v"}', b"\x00\x01"]
    assert codec.decode("list", raw) == [1, "text", {"k": "v"}, _blob(b"\x00\x01")]


def test_decode_set():
    assert sorted(codec.decode("set", [b"b", b"a"])) == ["a", "b"]


def test_decode_hash_values_only():
    raw = {b"count": b"3", b"name": b"x", b"raw": b"\xff"}
    assert codec.decode("hash", raw) == {"count": 3, "name": "x", "raw": _blob(b"\xff")}


def test_decode_zset_keeps_float_scores():
    raw = [(b"low", 0.5), (b"7", 1.25), (b"\x01", 3.0)]
    assert codec.decode("zset", raw) == [
        {"score": 0.5, "member": "low"},
        {"score": 1.25, "member": 7},
        {"score": 3.0, "member": _blob(b"\x01")},
    ]


@pytest.mark.parametrize("key_type", list(KeyType))
def test_parse_key_type_accepts_members(key_type):
    assert codec.parse_key_type(key_type) is key_type


@pytest.mark.parametrize(
    "key_type,raw,expected",
    [
        (KeyType.STRING, b"hi", "hi"),
        (KeyType.LIST, [b"1"], [1]),
        (KeyType.SET, [b"a"], ["a"]),
        (KeyType.HASH, {b"f": b"v"}, {"f": "v"}),
        (KeyType.ZSET, [(b"m", 1.0)], [{"score": 1.0, "member": "m"}]),
    ],
)
def test_decode_takes_key_type_members(key_type, raw, expected):
    assert codec.decode(key_type, raw) == expected


def test_overflowing_number_stays_text():
    assert codec.decode("string", b"1e400") == "1e400"
    assert codec.decode("list", [b"-1e400", b"1.5"]) == ["-1e400", 1.5]


def test_infinite_zset_scores_are_strings():
    raw = [(b"lo", float("-inf")), (b"hi", float("inf"))]
    assert codec.decode("zset", raw) == [
        {"score": "-inf", "member": "lo"},
        {"score": "inf", "member": "hi"},
    ]


def test_infinite_score_strings_encode_back():
    encoded = codec.encode("zset", [{"score": "inf", "member": "hi"}])
    assert encoded.payload == [(b"hi", float("inf"))]


@pytest.mark.parametrize("tag", ["stream", "unknown", "none", ""])
def test_decode_rejects_unknown_type(tag):
    with pytest.raises(UnsupportedTypeError):
        codec.decode(tag, b"x")


# ── Encode ───────────────────────────────────────────────


def test_encode_string_verbatim():
    assert codec.encode("string", "plain").payload == b"plain"


def test_encode_structure_as_compact_json():
    assert codec.encode("string", {"a": 1, "b": [True, None]}).payload == (
        b'{"a":1,"b":[true,null]}'
    )


def test_encode_binary_blob_writes_raw_bytes():
    raw = b"\x00\x10\xff"
    assert codec.encode("string", _blob(raw)).payload == raw


def test_blob_lookalike_with_bad_base64_stays_json():
    value = {"type": "binary", "data": "not base64!"}
    assert codec.encode("string", value).payload == (
        b'{"type":"binary","data":"not base64!"}'
    )


def test_encode_list():
    encoded = codec.encode("list", ["x", 2, {"k": 1}])
    assert encoded.type == KeyType.LIST
    assert encoded.payload == [b"x", b"2", b'{"k":1}']


def test_encode_hash():
    encoded = codec.encode("hash", {"f": "v", "n": 1})
    assert encoded.payload == {"f": b"v", "n": b"1"}


def test_encode_zset():
    encoded = codec.encode("zset", [{"score": 1, "member": "a"}, {"score": "2.5", "member": 3}])
    assert encoded.payload == [(b"a", 1.0), (b"3", 2.5)]


@pytest.mark.parametrize(
    "key_type,value",
    [
        ("list", "not-a-list"),
        ("set", {"a": 1}),
        ("hash", ["a", "b"]),
        ("zset", ["a"]),
        ("zset", [{"score": 1}]),
        ("zset", [{"member": "a"}]),
        ("zset", [{"score": "high", "member": "a"}]),
        ("zset", [{"score": True, "member": "a"}]),
        ("string", float("nan")),
    ],
)
def test_encode_rejects_mismatched_shapes(key_type, value):
    with pytest.raises(EncodingError):
        codec.encode(key_type, value)


def test_encode_rejects_unknown_type():
    with pytest.raises(UnsupportedTypeError):
        codec.encode("stream", [])


def test_empty_collection_is_flagged():
    assert codec.encode("list", []).is_empty
    assert not codec.encode("string", "").is_empty


# ── Round trip ───────────────────────────────────────────


@pytest.mark.parametrize(
    "raw",
    [b"hello", b"42", b"3.5", b"true", b"null", b"[1, 2]", b'{"a": "b"}', b"", b"\x00\xff\x80", "é".encode()],
)
def test_scalar_round_trip(raw):
    decoded = codec.decode("string", raw)
    rewritten = codec.encode("string", decoded).payload
    assert codec.decode("string", rewritten) == decoded


def test_binary_round_trip_is_byte_identical():
    raw = bytes(range(256))
    decoded = codec.decode("string", raw)
    assert codec.encode("string", decoded).payload == raw
