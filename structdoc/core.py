"""
structdoc.core — The JSON value model
=====================================

Every engine in this package operates on one closed family of values:

    JSON null      → JNull()
    JSON true      → JBool(True)
    JSON 42, 4.2   → JNumber(42), JNumber(4.2)
    JSON "hi"      → JString("hi")
    JSON [...]     → JArray([...])
    JSON {...}     → JObject({...})

Scalars are frozen.  Containers are mutable: a located reference produced
by a path expression writes straight into the JArray/JObject that holds it.

EQUALITY
────────
Equality is structural.  The variant is compared first, so JBool(True) is
never equal to JNumber(1) even though True == 1 in Python.  Objects compare
as mappings (key order is irrelevant), arrays compare element by element
(order matters).  Numbers compare by value: JNumber(1) == JNumber(1.0).

Containers are unhashable, like the list/dict they wrap.
"""

from dataclasses import dataclass, field
from typing import Union


class JVal:
    """Base class for JSON values.  Not instantiated directly."""
    __slots__ = ()

    kind: str = "value"

    def clone(self) -> "JVal":
        """Independent deep copy.  Scalars are immutable and return self."""
        return self

    @property
    def is_container(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class JNull(JVal):
    kind = "null"

    def __repr__(self) -> str:
        return "JNull()"


@dataclass(frozen=True, slots=True)
class JBool(JVal):
    val: bool
    kind = "boolean"

    def __repr__(self) -> str:
        return f"JBool({self.val!r})"


@dataclass(frozen=True, slots=True)
class JNumber(JVal):
    """
    A JSON number.  Holds a Python int or float; both are float64-compatible
    for the purposes of comparison and canonical serialization.
    """
    val: Union[int, float]
    kind = "number"

    @property
    def is_integral(self) -> bool:
        """True when the number has no fractional component."""
        if isinstance(self.val, int):
            return True
        return self.val.is_integer()

    def __repr__(self) -> str:
        return f"JNumber({self.val!r})"


@dataclass(frozen=True, slots=True)
class JString(JVal):
    val: str
    kind = "string"

    def __repr__(self) -> str:
        return f"JString({self.val!r})"


@dataclass(slots=True)
class JArray(JVal):
    """
    An ordered sequence of values.

    Examples:
        JArray([JNumber(1), JNumber(2)])      # [1, 2]
        JArray()                              # []
    """
    items: list[JVal] = field(default_factory=list)
    kind = "array"

    def clone(self) -> "JArray":
        return JArray([item.clone() for item in self.items])

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        if len(self.items) <= 5:
            return f"JArray({self.items})"
        return f"JArray([{self.items[0]!r}, ..., {self.items[-1]!r}] len={len(self.items)})"


@dataclass(slots=True)
class JObject(JVal):
    """
    A mapping of string keys to values.

    Insertion order is kept so documents round-trip through the codec
    unchanged, but it plays no part in equality or diffing.

    Examples:
        JObject({"name": JString("Alice"), "age": JNumber(30)})
    """
    entries: dict[str, JVal] = field(default_factory=dict)
    kind = "object"

    def clone(self) -> "JObject":
        return JObject({k: v.clone() for k, v in self.entries.items()})

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __repr__(self) -> str:
        if len(self.entries) <= 3:
            return f"JObject({self.entries})"
        return f"JObject({{...}} len={len(self.entries)})"


def is_scalar(val: JVal) -> bool:
    """Null, boolean, number or string."""
    return not isinstance(val, (JArray, JObject))
