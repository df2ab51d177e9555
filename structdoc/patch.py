"""
structdoc.patch — Ordered patch application over JSON Pointer locations.

A patch is a list of operations in the RFC 6902 shape:

    {"op": "add" | "replace" | "remove" | "copy" | "move",
     "path": "/a/b", "value": ..., "from": "/x"}

Each pointer is translated into a PathExpression made of FieldSteps only.
Whether a segment such as "0" addresses an object member or an array
element is decided at evaluation time from the container actually found
there, so mixed-shape documents behave the same as with a static decoder.

    add, replace   set the target (the member is created in an existing object)
    remove         delete the target
    copy           the `from` location must exist; its value is set at the target
    move           copy, then delete `from`

NOT TRANSACTIONAL: operations mutate the document one after another.  If
operation k fails, operations 0..k-1 stay applied and the error carries
operation_index = k.  Callers that need all-or-nothing should pass a
value.clone() and discard it on error.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from .core import JVal
from .errors import InvalidPathSyntax, SourceNotFound, StructDocError, UnsupportedOperation
from .formats import from_python, to_python
from .path import FieldStep, PathExpression, RootStep

logger = logging.getLogger(__name__)

SUPPORTED_OPS = ("add", "replace", "remove", "copy", "move")


# ═══════════════════════════════════════════════════════════════════
#  JSON POINTER (RFC 6901)
# ═══════════════════════════════════════════════════════════════════

def unescape_pointer_token(token: str) -> str:
    # Order matters: ~1 first, then ~0, so "~01" becomes "~1" and not "/".
    return token.replace("~1", "/").replace("~0", "~")


def escape_pointer_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def split_pointer(pointer: str) -> list[str]:
    """
    Unescaped reference tokens of a pointer.

    "" and "/" both address the whole document.  A missing leading slash
    is tolerated: "a/b" is read as "/a/b".
    """
    if not isinstance(pointer, str):
        raise InvalidPathSyntax("Pointer must be a string", path=repr(pointer))
    if pointer in ("", "/"):
        return []
    body = pointer[1:] if pointer.startswith("/") else pointer
    return [unescape_pointer_token(token) for token in body.split("/")]


def pointer_to_path(pointer: str) -> PathExpression:
    """Translate a JSON Pointer into an equivalent PathExpression."""
    return PathExpression.from_steps(
        [RootStep()] + [FieldStep(token) for token in split_pointer(pointer)])


def route_to_pointer(route: Iterable[Union[str, int]]) -> str:
    """Inverse direction: a sequence of keys/indices as a JSON Pointer."""
    return "".join("/" + escape_pointer_token(str(key)) for key in route)


# ═══════════════════════════════════════════════════════════════════
#  OPERATIONS
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PatchOperation:
    """
    One patch operation.

    value is None when the operation carries no value at all; a JSON null
    value is JNull().  `op` is kept as given so that unknown operations are
    reported when applied, not when parsed.
    """
    op: str
    path: str = ""
    value: Optional[JVal] = None
    from_: Optional[str] = None

    @classmethod
    def from_python(cls, obj: dict[str, Any]) -> "PatchOperation":
        if not isinstance(obj, dict):
            raise UnsupportedOperation(f"Patch operation must be an object, got {type(obj).__name__}")
        return cls(
            op=obj.get("op", ""),
            path=obj.get("path", ""),
            value=from_python(obj["value"]) if "value" in obj else None,
            from_=obj.get("from"),
        )

    def to_python(self) -> dict[str, Any]:
        out: dict[str, Any] = {"op": self.op, "path": self.path}
        if self.value is not None:
            out["value"] = to_python(self.value)
        if self.from_ is not None:
            out["from"] = self.from_
        return out


def _coerce(op: Union[PatchOperation, dict]) -> PatchOperation:
    return op if isinstance(op, PatchOperation) else PatchOperation.from_python(op)


def apply_patch(value: JVal, ops: Iterable[Union[PatchOperation, dict]]) -> JVal:
    """
    Apply `ops` in order to `value` (in place) and return the resulting root.

    The root is only a new object when an operation targets "" (the whole
    document).
    """
    for index, raw in enumerate(ops):
        try:
            op = _coerce(raw)
            logger.debug("Patch operation %d: %s %s", index, op.op, op.path)
            value = _apply_one(value, op)
        except StructDocError as exc:
            exc.operation_index = index
            raise
    return value


def _apply_one(root: JVal, op: PatchOperation) -> JVal:
    if op.op not in SUPPORTED_OPS:
        raise UnsupportedOperation(f"Unsupported patch operation: {op.op!r}", path=op.path)

    target = pointer_to_path(op.path)

    if op.op in ("add", "replace"):
        if op.value is None:
            raise UnsupportedOperation(f"'{op.op}' requires a value", path=op.path)
        return target.set(root, op.value)

    if op.op == "remove":
        target.delete(root)
        return root

    # copy / move
    if op.from_ is None:
        raise UnsupportedOperation(f"'{op.op}' requires a 'from' location", path=op.path)
    source = pointer_to_path(op.from_)
    found = source.get(root)
    if not found:
        raise SourceNotFound("Source path not found", path=op.from_)
    if op.op == "move" and source.steps == target.steps:
        return root
    root = target.set(root, found[0])
    if op.op == "move":
        source.delete(root)
    return root
