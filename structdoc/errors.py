"""
structdoc.errors — Error taxonomy shared by all engines.

Every error is a deterministic function of its input, so nothing here is
ever retried.  Each carries the path (and where relevant the offending key
or index) so the caller can act on it.
"""

from typing import Optional, Union


class StructDocError(Exception):
    """Base class for engine errors."""

    def __init__(self, message: str, *, path: Optional[str] = None,
                 key: Union[str, int, None] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.key = key
        # Set by apply_patch when the error came from the k-th operation.
        self.operation_index: Optional[int] = None

    def __str__(self) -> str:
        extras = []
        if self.path is not None:
            extras.append(f"path={self.path!r}")
        if self.key is not None:
            extras.append(f"key={self.key!r}")
        if self.operation_index is not None:
            extras.append(f"operation={self.operation_index}")
        if not extras:
            return self.message
        return f"{self.message} ({', '.join(extras)})"


class InvalidPathSyntax(StructDocError, ValueError):
    """A path or pointer failed to compile."""

    def __init__(self, message: str, *, path: Optional[str] = None,
                 position: Optional[int] = None):
        super().__init__(message, path=path)
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return super().__str__()
        return f"{self.message} at offset {self.position} in {self.path!r}"


class PathNotFound(StructDocError, LookupError):
    """The path matched zero locations where at least one was required."""


class PathNotAddressable(StructDocError):
    """The write would need containers that do not exist (or the root itself)."""


class TypeMismatch(StructDocError, TypeError):
    """An Object was required and something else was given, or vice versa."""


class SourceNotFound(PathNotFound):
    """The `from` location of a copy/move patch matched nothing."""


class UnsupportedOperation(StructDocError):
    """Unknown patch op, or an op missing a member it requires."""


class InvalidSchema(StructDocError):
    """The schema handed to a validator is not itself a valid schema."""


class InsufficientInputs(StructDocError, ValueError):
    """An engine that combines documents was given too few of them."""
