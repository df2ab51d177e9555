"""
structdoc.flatten — Nested value ↔ single-level mapping.

    flatten({"a": {"b": [1, 2]}, "c": null}, ".")
        → {"a.b[0]": 1, "a.b[1]": 2, "c": null}

Object keys are joined with the separator; array positions are appended as
[i] with no separator before the bracket.  Only scalars become entries, so
an empty object or array leaves no trace and cannot come back through
unflatten.

unflatten reverses the walk, reading a trailing [i] on any segment as an
array position.  Keys whose own text looks like "[3]" therefore cannot be
told apart from indices.
"""

import logging
import re
from typing import Union

from .core import JArray, JNull, JObject, JVal
from .errors import TypeMismatch

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "."

_SEGMENT = re.compile(r"(.*?)((?:\[[0-9]+\])*)")
_INDEX = re.compile(r"\[([0-9]+)\]")

# Padding for array slots not yet assigned; a later key may still fill it.
_HOLE = JNull()


# ═══════════════════════════════════════════════════════════════════
#  FLATTEN
# ═══════════════════════════════════════════════════════════════════

def flatten(value: JVal, separator: str = DEFAULT_SEPARATOR) -> JObject:
    """Single-level Object of every scalar leaf keyed by its joined path."""
    separator = separator or DEFAULT_SEPARATOR
    result = JObject()
    _flatten_into("", value, result, separator)
    return result


def _flatten_into(prefix: str, value: JVal, result: JObject, sep: str) -> None:
    if isinstance(value, JObject):
        for k, v in value.entries.items():
            _flatten_into(f"{prefix}{sep}{k}" if prefix else k, v, result, sep)
    elif isinstance(value, JArray):
        for i, v in enumerate(value.items):
            _flatten_into(f"{prefix}[{i}]", v, result, sep)
    else:
        result.entries[prefix] = value


# ═══════════════════════════════════════════════════════════════════
#  UNFLATTEN
# ═══════════════════════════════════════════════════════════════════

def _tokens(key: str, sep: str) -> list[Union[str, int]]:
    """Split a flat key into member names and array indices."""
    tokens: list[Union[str, int]] = []
    for position, segment in enumerate(key.split(sep)):
        name, indices = _SEGMENT.fullmatch(segment).groups()
        # A leading "[0]" with no name means the root itself is an array.
        if name or position > 0 or not indices:
            tokens.append(name)
        tokens.extend(int(i) for i in _INDEX.findall(indices))
    return tokens


def _empty_for(token: Union[str, int]) -> JVal:
    return JArray() if isinstance(token, int) else JObject()


def _fits(container: JVal, token: Union[str, int]) -> bool:
    if isinstance(token, int):
        return isinstance(container, JArray)
    return isinstance(container, JObject)


def _lookup(container: JVal, token: Union[str, int]):
    if isinstance(container, JArray):
        return container.items[token] if token < len(container.items) else None
    return container.entries.get(token)


def _assign(container: JVal, token: Union[str, int], value: JVal) -> None:
    if isinstance(container, JArray):
        while len(container.items) <= token:
            container.items.append(_HOLE)
        container.items[token] = value
    else:
        container.entries[token] = value


def unflatten(mapping: JVal, separator: str = DEFAULT_SEPARATOR) -> JVal:
    """
    Rebuild a nested value from a flat Object.

    Missing objects and arrays along a key's route are created (arrays are
    padded with null up to the assigned index).  When a route runs into an
    existing value of the wrong kind, that key is dropped without error.
    """
    if not isinstance(mapping, JObject):
        kind = getattr(mapping, "kind", type(mapping).__name__)
        raise TypeMismatch(f"Unflatten input must be an object, got {kind}")
    separator = separator or DEFAULT_SEPARATOR

    root = None
    for key, value in mapping.entries.items():
        tokens = _tokens(key, separator)
        if root is None:
            root = _empty_for(tokens[0])
        if not _fits(root, tokens[0]):
            logger.debug("Dropping %r: root is already an %s", key, root.kind)
            continue

        container = root
        for token, next_token in zip(tokens, tokens[1:]):
            child = _lookup(container, token)
            if child is None or child is _HOLE:
                child = _empty_for(next_token)
                _assign(container, token, child)
            elif not _fits(child, next_token):
                logger.debug("Dropping %r: %s is in the way", key, child.kind)
                break
            container = child
        else:
            _assign(container, tokens[-1], value.clone())

    return root if root is not None else JObject()
