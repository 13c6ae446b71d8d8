"""
Cache key encoding.
Why: identical requests must map to one key, distinct requests to distinct keys.
"""

import json
import math
from typing import Any, Sequence

from pydantic import BaseModel

from .errors import EncodingError

DEFAULT_SEPARATOR = "||"

_SCALARS = (str, int, float, bool, type(None))


def _canonical(value: Any, seen: set) -> Any:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    if isinstance(value, float) and not math.isfinite(value):
        raise EncodingError(f"non-finite float is not encodable: {value!r}")
    if isinstance(value, _SCALARS):
        return value
    if not isinstance(value, (dict, list, tuple)):
        raise EncodingError(f"unsupported key part type: {type(value).__name__}")

    marker = id(value)
    if marker in seen:
        raise EncodingError("cyclic structure in key part")
    seen.add(marker)
    try:
        if isinstance(value, dict):
            out = {}
            for k, v in value.items():
                if not isinstance(k, str):
                    raise EncodingError(f"mapping keys must be str, got {type(k).__name__}")
                out[k] = _canonical(v, seen)
            return out
        return [_canonical(v, seen) for v in value]
    finally:
        seen.discard(marker)


def _dumps(value: Any) -> str:
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def _encode_part(part: Any, separator: str) -> str:
    if isinstance(part, str):
        # "1", "true" or '{"q":"a"}' would read like a non-string part
        text = _dumps(part) if _is_json(part) else part
    else:
        text = _dumps(_canonical(part, set()))
    if separator in text:
        raise EncodingError(f"key part {part!r} contains the separator {separator!r}")
    return text


def encode(parts: Sequence[Any], separator: str = DEFAULT_SEPARATOR) -> str:
    """Join ``parts`` into a deterministic cache key.

    Strings are used verbatim unless they already parse as JSON, in which
    case they are quoted; every other part is serialized to canonical JSON
    (sorted object keys, compact separators). So ``{"a": 1, "b": 2}`` and
    ``{"b": 2, "a": 1}`` share a key while ``1`` and ``"1"`` do not.

    Raises:
        EncodingError: a part is cyclic, of an unsupported type, or would
            make the joined key ambiguous.
    """
    if not separator:
        raise EncodingError("separator must be a non-empty string")
    if isinstance(parts, (str, bytes)) or not isinstance(parts, Sequence):
        raise EncodingError("parts must be a sequence of key parts")
    if not parts:
        raise EncodingError("at least one key part is required")
    encoded = [_encode_part(p, separator) for p in parts]
    key = separator.join(encoded)
    # the key must split back into exactly the parts that built it
    if key.split(separator) != encoded:
        raise EncodingError(f"key parts {encoded!r} run into the separator {separator!r}")
    return key
