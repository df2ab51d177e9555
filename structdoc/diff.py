"""
structdoc.diff — Positional structural diff.

    diff(a, b) → ordered list of DiffEntry, rooted at "$"

ALGORITHM:
    0. If canonical(a) == canonical(b) → no entries.  This is the equality
       test itself, not just a shortcut: numbers that serialize identically
       are equal whatever their internal representation.
    1. Object vs Object:
         keys only in a  → REMOVED at path.key   (in a's key order)
         keys of b       → ADDED at path.key, or recurse   (in b's key order)
    2. Array vs Array: index by index up to max(len(a), len(b)):
         past the end of b → REMOVED at path[i]
         past the end of a → ADDED at path[i]
         otherwise recurse
    3. Object vs Array, or container vs scalar → one TYPE_CHANGED entry
    4. Unequal scalars → one CHANGED entry

Arrays are compared POSITIONALLY.  Inserting one element at the front of an
array reports every shifted element as CHANGED plus one ADDED at the end;
there is no alignment step.  This is a known limitation of the format.

Entries always read as before=a, after=b, but emptiness is symmetric:
    diff(a, b) == []  ⟺  diff(b, a) == []
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .core import JArray, JObject, JVal
from .formats import canonical, to_python

ROOT_PATH = "$"


class DiffKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    TYPE_CHANGED = "type_changed"


@dataclass(frozen=True)
class DiffEntry:
    """A single located difference between two documents."""
    path: str
    kind: DiffKind
    before: Optional[JVal] = None
    after: Optional[JVal] = None

    def to_python(self) -> dict[str, Any]:
        out: dict[str, Any] = {"path": self.path, "kind": self.kind.value}
        if self.before is not None:
            out["before"] = to_python(self.before)
        if self.after is not None:
            out["after"] = to_python(self.after)
        return out

    def __repr__(self) -> str:
        if self.kind is DiffKind.ADDED:
            return f"ADDED at {self.path}: {self.after!r}"
        if self.kind is DiffKind.REMOVED:
            return f"REMOVED at {self.path}: {self.before!r}"
        return f"{self.kind.name} at {self.path}: {self.before!r} → {self.after!r}"


def is_equal(a: JVal, b: JVal) -> bool:
    """Equality under canonical serialization."""
    return a is b or canonical(a) == canonical(b)


def diff(a: JVal, b: JVal, path: str = ROOT_PATH) -> list[DiffEntry]:
    """
    Compute the located differences that turn `a` into `b`.

    Neither input is modified; entries hold references to the original
    sub-values.
    """
    if is_equal(a, b):
        return []

    if isinstance(a, JObject) and isinstance(b, JObject):
        return _object_diff(a, b, path)

    if isinstance(a, JArray) and isinstance(b, JArray):
        return _array_diff(a, b, path)

    if a.is_container or b.is_container:
        return [DiffEntry(path, DiffKind.TYPE_CHANGED, before=a, after=b)]

    return [DiffEntry(path, DiffKind.CHANGED, before=a, after=b)]


def _object_diff(a: JObject, b: JObject, path: str) -> list[DiffEntry]:
    entries: list[DiffEntry] = []

    for k, v in a.entries.items():
        if k not in b.entries:
            entries.append(DiffEntry(f"{path}.{k}", DiffKind.REMOVED, before=v))

    for k, v in b.entries.items():
        child_path = f"{path}.{k}"
        if k in a.entries:
            entries.extend(diff(a.entries[k], v, child_path))
        else:
            entries.append(DiffEntry(child_path, DiffKind.ADDED, after=v))

    return entries


def _array_diff(a: JArray, b: JArray, path: str) -> list[DiffEntry]:
    entries: list[DiffEntry] = []
    m, n = len(a.items), len(b.items)

    for i in range(max(m, n)):
        child_path = f"{path}[{i}]"
        if i >= m:
            entries.append(DiffEntry(child_path, DiffKind.ADDED, after=b.items[i]))
        elif i >= n:
            entries.append(DiffEntry(child_path, DiffKind.REMOVED, before=a.items[i]))
        else:
            entries.extend(diff(a.items[i], b.items[i], child_path))

    return entries


def diff_report(a: JVal, b: JVal) -> dict[str, Any]:
    """Plain-data summary: {"equal", "diff_count", "diffs"}."""
    entries = diff(a, b)
    return {
        "equal": not entries,
        "diff_count": len(entries),
        "diffs": [entry.to_python() for entry in entries],
    }
