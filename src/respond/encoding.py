import base64
import dataclasses
import json
from collections.abc import Callable
from typing import Any

type JSONEncoder = Callable[[Any], bytes]


def encode_json(value: Any) -> bytes:
    """Encode a reply value as compact UTF-8 JSON.

    Dataclass instances are encoded as objects and bytes as base64 strings. NaN and
    infinity are rejected rather than producing invalid JSON.
    """
    return json.dumps(
        value,
        default=_encode_default,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def _encode_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)

    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")

    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
