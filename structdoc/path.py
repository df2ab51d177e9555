"""
structdoc.path — Compiled path expressions
==========================================

§1  GRAMMAR
───────────

A path starts at the root marker `$` and is followed by any number of
segments, composed left to right:

    .name          object member `name` (letters, digits, `_` and `-`)
    ['name']       quoted member; allows `.`, `[`, spaces, ...  ("..." also works,
                   a backslash escapes the next character)
    [i]            array element i; negative i counts from the end
    .*   [*]       every child: all array elements, or all object values
    ..name         descendant: the current node and everything below it,
    ..*  ..[...]   then the rest of the path applied to each of those
    ..             (bare, at the end) the node and all its descendants

    $.store.book[0].title
    $['odd.key'][-1]
    $..price
    $.users[*].name

Compilation is all-or-nothing: any unknown syntax raises InvalidPathSyntax
before a single step is evaluated.


§2  EVALUATION
──────────────

A compiled PathExpression is a tuple of steps.  Evaluation starts from the
single reference {root} and flat-maps each step over the current set:

    RootStep        identity
    FieldStep(n)    member n of an object; on an array, element int(n) when
                    n is a canonical non-negative integer ("0", "12", not "01")
    IndexStep(i)    element i of an array (negative allowed)
    WildcardStep    all children
    DescendantStep  the node, then every descendant, depth-first pre-order

Missing members, out-of-range indices and wildcards over scalars simply
contribute nothing.  Results come back in document order.


§3  WRITES
──────────

    get     values of all matches (live nodes, not copies)
    set     overwrite every match; when the last step is a FieldStep, also
            create that member in each object the prefix matched that lacks it.
            Intermediate containers are never created, array elements never
            appended.
    delete  remove every match from its container; array gaps close up.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional, Union

from .core import JArray, JObject, JVal
from .errors import InvalidPathSyntax, PathNotAddressable, PathNotFound

logger = logging.getLogger(__name__)

ROOT_MARKER = "$"
COMPILE_CACHE_SIZE = 512

_CANONICAL_INDEX = re.compile(r"0|[1-9][0-9]*")
_INTEGER = re.compile(r"-?[0-9]+")
_PLAIN_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_\-]*|0|[1-9][0-9]*")
_BARE_NAME = re.compile(r"[\w\-]+")


# ═══════════════════════════════════════════════════════════════════
#  LOCATED REFERENCES
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Located:
    """
    A resolved location inside a document.

    container is the JArray/JObject holding the value (None for the root),
    key is the member name or the non-negative element index, and route is
    the sequence of keys leading here from the root.
    """
    container: Optional[JVal]
    key: Union[str, int, None]
    value: JVal
    route: tuple[Union[str, int], ...] = ()

    @property
    def location(self) -> str:
        """Normalized path text, e.g. $.users[0]['first name']."""
        return format_route(self.route)

    @property
    def is_root(self) -> bool:
        return self.container is None

    def get(self) -> JVal:
        return self.value

    def set(self, value: JVal) -> None:
        """Overwrite in place.  The root cannot be replaced through a reference."""
        if isinstance(self.container, JObject):
            self.container.entries[self.key] = value
        elif isinstance(self.container, JArray):
            self.container.items[self.key] = value
        else:
            raise PathNotAddressable("The document root cannot be overwritten in place",
                                     path=self.location)

    def delete(self) -> None:
        """Remove from the container; later array elements shift down by one."""
        if isinstance(self.container, JObject):
            self.container.entries.pop(self.key, None)
        elif isinstance(self.container, JArray):
            del self.container.items[self.key]
        else:
            raise PathNotAddressable("The document root cannot be deleted",
                                     path=self.location)


def format_route(route: tuple) -> str:
    """Render a route of keys/indices as path text that compiles back to it."""
    out = [ROOT_MARKER]
    for key in route:
        if isinstance(key, int):
            out.append(f"[{key}]")
        else:
            out.append(_format_name(key))
    return "".join(out)


def _format_name(name: str) -> str:
    if _PLAIN_NAME.fullmatch(name):
        return f".{name}"
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"['{escaped}']"


def _children(ref: Located) -> Iterator[Located]:
    val = ref.value
    if isinstance(val, JArray):
        for i, item in enumerate(val.items):
            yield Located(val, i, item, ref.route + (i,))
    elif isinstance(val, JObject):
        for k, item in val.entries.items():
            yield Located(val, k, item, ref.route + (k,))


# ═══════════════════════════════════════════════════════════════════
#  STEPS
# ═══════════════════════════════════════════════════════════════════

class Step:
    """One segment of a compiled path.  Steps are immutable and stateless."""
    __slots__ = ()

    def select(self, ref: Located) -> Iterator[Located]:
        raise NotImplementedError

    def render(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class RootStep(Step):
    def select(self, ref: Located) -> Iterator[Located]:
        yield ref

    def render(self) -> str:
        return ROOT_MARKER


@dataclass(frozen=True, slots=True)
class FieldStep(Step):
    name: str

    def select(self, ref: Located) -> Iterator[Located]:
        val = ref.value
        if isinstance(val, JObject):
            if self.name in val.entries:
                yield Located(val, self.name, val.entries[self.name], ref.route + (self.name,))
        elif isinstance(val, JArray):
            # Numeric member names address array elements (JSON Pointer style).
            if _CANONICAL_INDEX.fullmatch(self.name):
                i = int(self.name)
                if i < len(val.items):
                    yield Located(val, i, val.items[i], ref.route + (i,))

    def render(self) -> str:
        return _format_name(self.name)


@dataclass(frozen=True, slots=True)
class IndexStep(Step):
    index: int

    def select(self, ref: Located) -> Iterator[Located]:
        val = ref.value
        if not isinstance(val, JArray):
            return
        i = self.index + len(val.items) if self.index < 0 else self.index
        if 0 <= i < len(val.items):
            yield Located(val, i, val.items[i], ref.route + (i,))

    def render(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True, slots=True)
class WildcardStep(Step):
    def select(self, ref: Located) -> Iterator[Located]:
        yield from _children(ref)

    def render(self) -> str:
        return "[*]"


@dataclass(frozen=True, slots=True)
class DescendantStep(Step):
    def select(self, ref: Located) -> Iterator[Located]:
        yield ref
        for child in _children(ref):
            yield from self.select(child)

    def render(self) -> str:
        return ".."


# ═══════════════════════════════════════════════════════════════════
#  COMPILER
# ═══════════════════════════════════════════════════════════════════

class _Parser:
    """Single-pass scanner turning path text into a step tuple."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def fail(self, reason: str) -> InvalidPathSyntax:
        return InvalidPathSyntax(reason, path=self.text, position=self.pos)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def parse(self) -> tuple[Step, ...]:
        if not self.text.startswith(ROOT_MARKER):
            raise self.fail(f"Path must start with {ROOT_MARKER!r}")
        self.pos = len(ROOT_MARKER)
        steps: list[Step] = [RootStep()]

        while self.pos < len(self.text):
            if self.text.startswith("..", self.pos):
                self.pos += 2
                steps.append(DescendantStep())
                c = self.peek()
                if c == "" or c == "[":
                    continue
                if c == "*":
                    self.pos += 1
                    steps.append(WildcardStep())
                elif c == ".":
                    raise self.fail("Unexpected '.' after '..'")
                else:
                    steps.append(FieldStep(self._name()))
            elif self.peek() == ".":
                self.pos += 1
                if self.peek() == "*":
                    self.pos += 1
                    steps.append(WildcardStep())
                else:
                    steps.append(FieldStep(self._name()))
            elif self.peek() == "[":
                steps.append(self._bracket())
            else:
                raise self.fail(f"Unexpected character {self.peek()!r}")

        return tuple(steps)

    def _name(self) -> str:
        match = _BARE_NAME.match(self.text, self.pos)
        if match is None:
            raise self.fail("Expected a member name")
        self.pos = match.end()
        return match.group()

    def _skip_spaces(self) -> None:
        while self.peek() == " ":
            self.pos += 1

    def _bracket(self) -> Step:
        self.pos += 1  # '['
        self._skip_spaces()
        c = self.peek()
        if c == "*":
            self.pos += 1
            step: Step = WildcardStep()
        elif c in ("'", '"'):
            step = FieldStep(self._quoted(c))
        else:
            match = _INTEGER.match(self.text, self.pos)
            if match is None:
                raise self.fail("Expected an index, '*' or a quoted name inside '[...]'")
            self.pos = match.end()
            step = IndexStep(int(match.group()))
        self._skip_spaces()
        if self.peek() != "]":
            raise self.fail("Expected ']'")
        self.pos += 1
        return step

    def _quoted(self, quote: str) -> str:
        self.pos += 1
        chars = []
        while True:
            c = self.peek()
            if c == "":
                raise self.fail("Unterminated quoted name")
            if c == "\\":
                self.pos += 1
                if self.peek() == "":
                    raise self.fail("Dangling escape in quoted name")
                chars.append(self.peek())
            elif c == quote:
                self.pos += 1
                return "".join(chars)
            else:
                chars.append(c)
            self.pos += 1


# ═══════════════════════════════════════════════════════════════════
#  PATH EXPRESSION
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PathExpression:
    """
    A compiled, immutable, reusable path program.

    Build one with compile_path(text) or PathExpression.from_steps(...).
    Evaluating never modifies the expression; only set/delete touch the
    document they are given.
    """
    text: str
    steps: tuple[Step, ...]

    @classmethod
    def from_steps(cls, steps) -> "PathExpression":
        steps = tuple(steps)
        if not steps or not isinstance(steps[0], RootStep):
            steps = (RootStep(),) + steps
        return cls("".join(step.render() for step in steps), steps)

    def __str__(self) -> str:
        return self.text

    @property
    def depth(self) -> int:
        """Number of non-root steps."""
        return sum(1 for step in self.steps if not isinstance(step, RootStep))

    def parent(self) -> "PathExpression":
        """The expression without its last step (the root stays the root)."""
        if len(self.steps) <= 1:
            return self
        return PathExpression.from_steps(self.steps[:-1])

    def evaluate(self, root: JVal) -> list[Located]:
        """All located references, in document order."""
        refs = [Located(None, None, root)]
        for step in self.steps:
            refs = [found for ref in refs for found in step.select(ref)]
            if not refs:
                break
        return refs

    def get(self, root: JVal) -> list[JVal]:
        return [ref.value for ref in self.evaluate(root)]

    def set(self, root: JVal, value: JVal) -> JVal:
        """
        Write `value` at every match and return the (possibly new) root.

        Raises PathNotAddressable when missing intermediate containers would
        have to be created, PathNotFound when nothing could be written.
        """
        last = self.steps[-1]
        # Objects lacking the terminal member are collected before anything is
        # written, so freshly written values are never descended into.
        parents = self.parent().evaluate(root) if self.depth else []
        missing = []
        if isinstance(last, FieldStep):
            missing = [ref.value for ref in parents
                       if isinstance(ref.value, JObject) and last.name not in ref.value.entries]

        refs = self.evaluate(root)
        for ref in refs:
            if ref.is_root:
                root = value.clone()
            else:
                ref.set(value.clone())
        for obj in missing:
            obj.entries[last.name] = value.clone()
        if missing:
            logger.debug("Created member %r in %d object(s) for %s",
                         last.name, len(missing), self.text)
        if refs or missing:
            return root

        if not parents and self.depth > 1:
            raise PathNotAddressable(
                "Intermediate containers are missing and are not created automatically",
                path=self.text)
        raise PathNotFound("Path matched nothing to set", path=self.text,
                           key=getattr(last, "name", getattr(last, "index", None)))

    def delete(self, root: JVal) -> int:
        """
        Remove every match from its container and return how many were removed.

        Raises PathNotFound when nothing matched and PathNotAddressable when a
        match is the document root.
        """
        refs = self.evaluate(root)
        if not refs:
            raise PathNotFound("Path matched nothing to delete", path=self.text)
        if any(ref.is_root for ref in refs):
            raise PathNotAddressable("The document root cannot be deleted", path=self.text)

        # Array removals run from the highest index down so that the indices
        # of sibling matches stay valid while the gaps close.
        indexed: dict[int, tuple[JArray, set[int]]] = {}
        removed = 0
        for ref in refs:
            if isinstance(ref.container, JArray):
                indexed.setdefault(id(ref.container), (ref.container, set()))[1].add(ref.key)
            elif ref.key in ref.container.entries:
                ref.delete()
                removed += 1
        for array, indices in indexed.values():
            for i in sorted(indices, reverse=True):
                del array.items[i]
                removed += 1
        return removed


def compile_path(text: str) -> PathExpression:
    """Compile path text.  Raises InvalidPathSyntax on any unknown syntax."""
    if not isinstance(text, str) or not text:
        raise InvalidPathSyntax("Path must be a non-empty string", path=repr(text), position=0)
    return _compile_cached(text)


@lru_cache(maxsize=COMPILE_CACHE_SIZE)
def _compile_cached(text: str) -> PathExpression:
    return PathExpression(text, _Parser(text).parse())


def _compiled(path: Union[str, PathExpression]) -> PathExpression:
    return path if isinstance(path, PathExpression) else compile_path(path)


# ═══════════════════════════════════════════════════════════════════
#  CONVENIENCE
# ═══════════════════════════════════════════════════════════════════

def query(root: JVal, path: Union[str, PathExpression]) -> list[JVal]:
    """Values at every match of `path` (possibly empty)."""
    return _compiled(path).get(root)


def set_path(root: JVal, path: Union[str, PathExpression], value: JVal) -> JVal:
    """Set `value` at `path` in place; returns the root (new if `$` was set)."""
    return _compiled(path).set(root, value)


def delete_path(root: JVal, path: Union[str, PathExpression]) -> int:
    """Delete every match of `path` in place; returns the number removed."""
    return _compiled(path).delete(root)
