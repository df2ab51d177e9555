"""
structdoc.formats — Convert between real-world data and JSON values.

Supported conversions:
    • Python objects (dict, list, str, int, float, bool, None) ↔ JVal
    • JSON text ↔ JVal
    • Canonical serialization (the equality test used by the diff engine)
    • Presentation: pretty-printed, minified, key-sorted
"""

import json
import math
from typing import Any, Union

from .core import JArray, JBool, JNull, JNumber, JObject, JString, JVal

DEFAULT_INDENT = "  "


# ═══════════════════════════════════════════════════════════════════
#  PYTHON OBJECTS ↔ JSON VALUES
# ═══════════════════════════════════════════════════════════════════

def from_python(obj: Any) -> JVal:
    """
    Convert a Python object to a JSON value.

    Mapping:
        None       → JNull
        bool       → JBool
        int/float  → JNumber   (finite only)
        str        → JString
        list/tuple → JArray
        dict       → JObject   (keys coerced with str())

    Values that are already JVal instances pass through untouched.
    Nested structures are converted recursively.
    """
    if isinstance(obj, JVal):
        return obj
    if obj is None:
        return JNull()
    if isinstance(obj, bool):  # Must check before int (bool is subclass of int)
        return JBool(obj)
    if isinstance(obj, int):
        return JNumber(obj)
    if isinstance(obj, float):
        if not math.isfinite(obj):
            raise ValueError(f"Non-finite number is not representable in JSON: {obj!r}")
        return JNumber(obj)
    if isinstance(obj, str):
        return JString(obj)
    if isinstance(obj, (list, tuple)):
        return JArray([from_python(item) for item in obj])
    if isinstance(obj, dict):
        return JObject({str(k): from_python(v) for k, v in obj.items()})

    raise TypeError(f"Cannot convert {type(obj).__name__} to a JSON value")


def to_python(val: JVal) -> Any:
    """
    Convert a JSON value back to a plain Python object.

    Inverse of from_python:
        to_python(from_python(obj)) == obj
    for JSON-compatible objects.
    """
    if isinstance(val, JNull):
        return None
    if isinstance(val, (JBool, JNumber, JString)):
        return val.val
    if isinstance(val, JArray):
        return [to_python(item) for item in val.items]
    if isinstance(val, JObject):
        return {k: to_python(v) for k, v in val.entries.items()}
    raise TypeError(f"Unknown JVal type: {type(val)}")


# ═══════════════════════════════════════════════════════════════════
#  JSON TEXT ↔ JSON VALUES
# ═══════════════════════════════════════════════════════════════════

def from_json(text: Union[str, bytes]) -> JVal:
    """Parse JSON text (or UTF-8 bytes) into a JSON value."""
    return from_python(json.loads(text))


def to_json(val: JVal, **kwargs) -> str:
    """Convert a JSON value to JSON text.  Extra kwargs go to json.dumps."""
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(to_python(val), **kwargs)


# ═══════════════════════════════════════════════════════════════════
#  CANONICAL SERIALIZATION
# ═══════════════════════════════════════════════════════════════════

def _canonical_python(val: JVal) -> Any:
    # Integral floats print as integers so 1 and 1.0 serialize identically,
    # the way a float64-only decoder would see them.
    if isinstance(val, JNumber):
        if isinstance(val.val, float) and val.val.is_integer():
            return int(val.val)
        return val.val
    if isinstance(val, JArray):
        return [_canonical_python(item) for item in val.items]
    if isinstance(val, JObject):
        return {k: _canonical_python(v) for k, v in val.entries.items()}
    return to_python(val)


def canonical(val: JVal) -> str:
    """
    Deterministic compact encoding: sorted keys, no whitespace, integral
    numbers without a fractional part.

    Two values are equal for diffing purposes iff their canonical forms are
    identical.
    """
    return json.dumps(_canonical_python(val), sort_keys=True,
                      separators=(",", ":"), ensure_ascii=False, allow_nan=False)


# ═══════════════════════════════════════════════════════════════════
#  PRESENTATION
# ═══════════════════════════════════════════════════════════════════

def format_json(val: JVal, indent: str = DEFAULT_INDENT) -> str:
    """Pretty-print with the given indent string (empty falls back to two spaces)."""
    return to_json(val, indent=indent or DEFAULT_INDENT)


def minify(val: JVal) -> str:
    """Compact encoding with all insignificant whitespace removed."""
    return to_json(val, separators=(",", ":"))


def sort_keys(val: JVal, recursive: bool = False) -> JVal:
    """
    Return a copy whose object keys are in sorted order.

    With recursive=False only the top-level object is reordered; nested
    values are copied as they are.  The input is never modified.
    """
    if isinstance(val, JObject):
        return JObject({
            k: sort_keys(val.entries[k], recursive) if recursive else val.entries[k].clone()
            for k in sorted(val.entries)
        })
    if isinstance(val, JArray) and recursive:
        return JArray([sort_keys(item, recursive) for item in val.items])
    return val.clone()
