"""
structdoc.transform — Reshaping helpers built on path queries.

    transform   pick values by path and file them under new keys
    keys        sorted member names of an object
    values      member values of an object, in key order
    to_array    {"a": 1}               → [{"key": "a", "value": 1}]
    from_array  [{"key": "a", ...}]    → {"a": ...}

None of these modify their input; results hold clones.
"""

from typing import Mapping, Union

from .core import JArray, JObject, JString, JVal
from .errors import TypeMismatch
from .path import PathExpression, compile_path

DEFAULT_KEY_FIELD = "key"
VALUE_FIELD = "value"


def _require_object(value: JVal, what: str) -> JObject:
    if not isinstance(value, JObject):
        kind = getattr(value, "kind", type(value).__name__)
        raise TypeMismatch(f"{what} requires an object, got {kind}")
    return value


def transform(value: JVal, mappings: Mapping[str, Union[str, PathExpression]]) -> JObject:
    """
    Build a new object from path selections.

    For each new_key → path: one match is stored as is, several matches are
    stored as an array, and no match leaves new_key out.  Every path is
    compiled before anything is evaluated.
    """
    compiled = {
        new_key: path if isinstance(path, PathExpression) else compile_path(path)
        for new_key, path in mappings.items()
    }
    result = JObject()
    for new_key, expr in compiled.items():
        found = expr.get(value)
        if len(found) == 1:
            result.entries[new_key] = found[0].clone()
        elif found:
            result.entries[new_key] = JArray([v.clone() for v in found])
    return result


def keys(value: JVal) -> list[str]:
    return sorted(_require_object(value, "keys").entries)


def values(value: JVal) -> list[JVal]:
    return [v.clone() for v in _require_object(value, "values").entries.values()]


def to_array(value: JVal) -> JArray:
    """Object → array of {"key": k, "value": v} pairs, in key order."""
    obj = _require_object(value, "to_array")
    return JArray([
        JObject({DEFAULT_KEY_FIELD: JString(k), VALUE_FIELD: v.clone()})
        for k, v in obj.entries.items()
    ])


def from_array(value: JVal, key_field: str = DEFAULT_KEY_FIELD) -> JObject:
    """
    Array of objects → object.

    Items whose `key_field` is a string become members: the item's "value"
    member when it has one, otherwise the item without its key field.  Other
    items are skipped; a repeated key keeps the last item.
    """
    if not isinstance(value, JArray):
        kind = getattr(value, "kind", type(value).__name__)
        raise TypeMismatch(f"from_array requires an array of objects, got {kind}")
    key_field = key_field or DEFAULT_KEY_FIELD

    result = JObject()
    for position, item in enumerate(value.items):
        if not isinstance(item, JObject):
            raise TypeMismatch(f"from_array item must be an object, got {item.kind}",
                               key=position)
        key = item.entries.get(key_field)
        if not isinstance(key, JString):
            continue
        if VALUE_FIELD in item.entries:
            result.entries[key.val] = item.entries[VALUE_FIELD].clone()
        else:
            result.entries[key.val] = JObject({
                k: v.clone() for k, v in item.entries.items() if k != key_field
            })
    return result
