"""
Canonical, platform-independent byte encoding for transcript inputs.

Values are first normalized into plain CBOR data and then encoded with
cbor2 in canonical mode (RFC 8949 core deterministic encoding: shortest
integer forms, bignum tags for large integers, sorted map keys). Equal values
of the same type therefore always produce the same bytes.

Normalization rules:
  - None, bool, int, str, bytes: as-is (bool stays distinct from int)
  - list / tuple: CBOR array
  - dict: CBOR map (keys must be str, int or bytes)
  - dataclass instance: [type name, [field values in declaration order]]
  - py_ecc prime-field element: its integer representative
  - py_ecc extension-field element: list of coefficient integers

Floats and sets are rejected: floats are not exact, and a transcript input
should never depend on how a platform rounds.
"""

from __future__ import annotations

import dataclasses
from typing import Any

import cbor2

from errors import SerializationError


def _is_prime_field_element(value: Any) -> bool:
    return hasattr(value, "field_modulus") and hasattr(value, "n") and not hasattr(value, "coeffs")


def _is_extension_field_element(value: Any) -> bool:
    return hasattr(value, "field_modulus") and hasattr(value, "coeffs")


def _normalize(value: Any, path: str) -> Any:
    if value is None or isinstance(value, (bool, int, str, bytes)):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, float):
        raise SerializationError("floats have no canonical encoding", {"path": path})
    if isinstance(value, (list, tuple)):
        return [_normalize(v, f"{path}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            if not isinstance(k, (str, int, bytes)) or isinstance(k, bool):
                raise SerializationError("map keys must be str, int or bytes", {"path": path, "key": repr(k)})
            out[k] = _normalize(v, f"{path}.{k}")
        return out
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [
            type(value).__name__,
            [_normalize(getattr(value, f.name), f"{path}.{f.name}") for f in dataclasses.fields(value)],
        ]
    if _is_prime_field_element(value):
        return int(value.n)
    if _is_extension_field_element(value):
        return [_normalize(c, f"{path}.coeffs") for c in value.coeffs]
    raise SerializationError(
        f"no canonical encoding for {type(value).__name__}", {"path": path}
    )


def to_bytes(value: Any) -> bytes:
    """
    Canonically encode `value`.

    Raises:
        SerializationError: if the value (or something inside it) has no
            canonical encoding
    """
    normalized = _normalize(value, "$")
    try:
        return cbor2.dumps(normalized, canonical=True)
    except (cbor2.CBOREncodeError, ValueError, TypeError) as exc:
        raise SerializationError(f"cbor encoding failed: {exc}", {"type": type(value).__name__}) from exc


__all__ = ["to_bytes"]
