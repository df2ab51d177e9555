"""
structdoc.merge — N-way object merge, shallow or deep.

Objects are folded left to right into an accumulator; later objects win.

    shallow:  later top-level keys replace earlier ones wholesale, whatever
              their type.
    deep:     when both the accumulator and the next object hold an Object
              under the same key, merge those recursively; otherwise the later
              value replaces the earlier one.  Arrays are never concatenated
              or merged element-wise.

ALGORITHM:
    1. Reject fewer than two inputs, or any input that is not an Object
    2. acc ← {}
    3. For each object: merge it into acc (shallow or deep)
    4. Return acc

The inputs are never modified: every value placed in the result is a clone.
"""

import logging
from typing import Sequence

from .core import JObject, JVal
from .errors import InsufficientInputs, TypeMismatch

logger = logging.getLogger(__name__)

MIN_MERGE_INPUTS = 2


def merge(objects: Sequence[JVal], deep: bool = False) -> JObject:
    """
    Merge a sequence of Objects into a new Object.

    Arguments:
        objects: at least two JObject values, earliest first
        deep:    merge nested objects recursively instead of replacing them

    Raises InsufficientInputs (a ValueError) for fewer than two inputs and
    TypeMismatch when any input is not an Object.
    """
    objects = list(objects)
    if len(objects) < MIN_MERGE_INPUTS:
        raise InsufficientInputs(
            f"At least {MIN_MERGE_INPUTS} objects are required, got {len(objects)}")

    for position, obj in enumerate(objects):
        if not isinstance(obj, JObject):
            kind = getattr(obj, "kind", type(obj).__name__)
            raise TypeMismatch(f"All merge inputs must be objects, got {kind}",
                               key=position)

    logger.debug("Merging %d objects (deep=%s)", len(objects), deep)
    result = JObject()
    for obj in objects:
        if deep:
            _deep_merge_into(result, obj)
        else:
            for k, v in obj.entries.items():
                result.entries[k] = v.clone()
    return result


def _deep_merge_into(dst: JObject, src: JObject) -> None:
    """Recursively merge src into dst.  dst is owned by the caller."""
    for k, v in src.entries.items():
        current = dst.entries.get(k)
        if isinstance(v, JObject) and isinstance(current, JObject):
            _deep_merge_into(current, v)
        else:
            dst.entries[k] = v.clone()
