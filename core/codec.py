# core/codec.py
"""
Value codec between the store's native replies and the JSON-safe wire form.

Decoding works per scalar (a string value, a list element, a set member, a
hash value, a sorted-set member):
  1. valid UTF-8 JSON  -> the parsed structure
  2. printable ASCII   -> the plain string
  3. anything else     -> {"type": "binary", "data": <base64>}

The printable test is byte-wise on [32, 126]. Multi-byte UTF-8 text that is
not JSON therefore comes back as binary; the base64 form still writes back
byte-identical content.
"""
import base64
import binascii
import json
import math
from typing import Any, Dict, List, Mapping, Tuple
from core.entities import EncodedValue
from model.keys import KeyType, VALUE_TYPES
from util.constants import BINARY_MARKER
from util.errors import EncodingError, UnsupportedTypeError
from util.functions import as_text

_PRINTABLE_MIN = 32
_PRINTABLE_MAX = 126


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON-safe on the way out
    raise ValueError(f"non-finite JSON constant: {name}")


def _finite_float(text: str) -> float:
    # Literals such as 1e400 overflow to inf; keep those as text
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"JSON number out of range: {text}")
    return value


def wire_float(value: float) -> float | str:
    """Non-finite floats go out as "inf" / "-inf" / "nan"; float() reads them back."""
    if math.isfinite(value):
        return value
    if math.isnan(value):
        return "nan"
    return "inf" if value > 0 else "-inf"


def is_binary(data: bytes) -> bool:
    return any(b < _PRINTABLE_MIN or b > _PRINTABLE_MAX for b in data)


def binary_blob(data: bytes) -> Dict[str, str]:
    return {"type": BINARY_MARKER, "data": base64.b64encode(data).decode("ascii")}


def _blob_bytes(value: Any) -> bytes | None:
    """Return the decoded bytes when `value` is a binary blob, else None."""
    if not isinstance(value, dict) or set(value) != {"type", "data"}:
        return None
    if value["type"] != BINARY_MARKER or not isinstance(value["data"], str):
        return None
    try:
        return base64.b64decode(value["data"], validate=True)
    except (binascii.Error, ValueError):
        # Not a blob we issued; keep it as a JSON object
        return None


def parse_key_type(name: Any) -> KeyType:
    """Map a TYPE reply to KeyType; anything outside the known tags is UNKNOWN."""
    if isinstance(name, KeyType):
        return name
    try:
        return KeyType(as_text(name).lower())
    except ValueError:
        return KeyType.UNKNOWN


def parse_value_type(name: Any) -> KeyType:
    """Strict variant for reads and writes: only the five value types pass."""
    key_type = parse_key_type(name)
    if key_type not in VALUE_TYPES:
        raise UnsupportedTypeError(as_text(name))
    return key_type


# ---------------- Decode ----------------


def decode_scalar(raw: bytes | str) -> Any:
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    raw = bytes(raw)
    try:
        return json.loads(
            raw.decode("utf-8"),
            parse_constant=_reject_constant,
            parse_float=_finite_float,
        )
    except (UnicodeDecodeError, ValueError, RecursionError):
        pass
    if is_binary(raw):
        return binary_blob(raw)
    return raw.decode("ascii")


def decode(key_type: KeyType | str, raw: Any) -> Any:
    """
    Decode a native reply for `key_type` into its wire payload.
    raw shapes: string -> bytes, list/set -> iterable of bytes,
    hash -> {field: bytes}, zset -> [(member, score), ...].
    """
    kt = parse_value_type(key_type)
    if kt == KeyType.STRING:
        return decode_scalar(raw)
    if kt in (KeyType.LIST, KeyType.SET):
        return [decode_scalar(item) for item in raw]
    if kt == KeyType.HASH:
        return {as_text(field): decode_scalar(value) for field, value in raw.items()}
    return [
        {"score": wire_float(float(score)), "member": decode_scalar(member)}
        for member, score in raw
    ]


# ---------------- Encode ----------------


def encode_scalar(value: Any) -> bytes:
    """
    - str: stored verbatim.
    - binary blob: its base64 content, byte for byte.
    - anything else: compact JSON.
    """
    if isinstance(value, str):
        return value.encode("utf-8")
    blob = _blob_bytes(value)
    if blob is not None:
        return blob
    try:
        return json.dumps(
            value, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        ).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Value is not JSON-serializable: {e}") from e


def _encode_sequence(key_type: KeyType, value: Any) -> List[bytes]:
    if not isinstance(value, (list, tuple)):
        raise EncodingError(f"{key_type.value} value must be an array")
    return [encode_scalar(item) for item in value]


def _encode_hash(value: Any) -> Dict[str, bytes]:
    if not isinstance(value, Mapping):
        raise EncodingError("hash value must be an object of field -> value")
    out: Dict[str, bytes] = {}
    for field, item in value.items():
        if not isinstance(field, str):
            raise EncodingError("hash field names must be strings")
        out[field] = encode_scalar(item)
    return out


def _parse_score(score: Any) -> float:
    if isinstance(score, bool):
        raise EncodingError("zset score must be a number")
    try:
        parsed = float(score)
    except (TypeError, ValueError):
        raise EncodingError(f"zset score must be a number, got {score!r}")
    if math.isnan(parsed):
        raise EncodingError("zset score must not be NaN")
    return parsed


def _encode_zset(value: Any) -> List[Tuple[bytes, float]]:
    if not isinstance(value, (list, tuple)):
        raise EncodingError("zset value must be an array of {score, member}")
    out: List[Tuple[bytes, float]] = []
    for entry in value:
        if not isinstance(entry, Mapping) or "score" not in entry or "member" not in entry:
            raise EncodingError("zset entries must be objects with score and member")
        out.append((encode_scalar(entry["member"]), _parse_score(entry["score"])))
    return out


def encode(key_type: KeyType | str, value: Any) -> EncodedValue:
    """
    Validate and convert a wire value into the native content to write.
    Raises UnsupportedTypeError / EncodingError before anything touches the store.
    """
    kt = parse_value_type(key_type)
    if kt == KeyType.STRING:
        return EncodedValue(kt, encode_scalar(value))
    if kt in (KeyType.LIST, KeyType.SET):
        return EncodedValue(kt, _encode_sequence(kt, value))
    if kt == KeyType.HASH:
        return EncodedValue(kt, _encode_hash(value))
    return EncodedValue(kt, _encode_zset(value))
