"""
structdoc
=========

Structural operations on in-memory JSON documents.

    query(doc, "$.users[*].name")                   → [JString("Ann"), ...]
    diff({"a": 1, "b": 2}, {"a": 1, "b": 3, "c": 4})
        → [CHANGED at $.b: 2 → 3, ADDED at $.c: 4]
    apply_patch({"a": 5}, [{"op": "move", "from": "/a", "path": "/b"}])
        → {"b": 5}
    flatten({"a": {"b": [1, 2]}})                   → {"a.b[0]": 1, "a.b[1]": 2}
    infer_schema({"id": 7})
        → {"type": "object", "properties": {"id": {"type": "integer"}},
           "required": ["id"]}

(documents shown as JSON; in code they are JVal trees, see from_python)

Every operation is a plain function over the value it is given: no shared
state, no I/O, no locking.  Only set/delete/apply_patch modify their input.
"""

import logging

from structdoc.core import (
    # Types
    JVal,
    JNull,
    JBool,
    JNumber,
    JString,
    JArray,
    JObject,
    is_scalar,
)
from structdoc.errors import (
    StructDocError, InvalidPathSyntax, PathNotFound, PathNotAddressable,
    TypeMismatch, SourceNotFound, UnsupportedOperation, InvalidSchema,
    InsufficientInputs,
)
from structdoc.formats import (
    from_python, to_python, from_json, to_json, canonical,
    format_json, minify, sort_keys,
)
from structdoc.path import (
    PathExpression, Located, compile_path, query, set_path, delete_path,
)
from structdoc.diff import DiffEntry, DiffKind, diff, diff_report, is_equal
from structdoc.patch import PatchOperation, apply_patch, pointer_to_path
from structdoc.merge import merge
from structdoc.flatten import flatten, unflatten
from structdoc.schema import (
    infer_schema, validate, SchemaValidator, JsonSchemaValidator,
    ValidationIssue, ValidationReport,
)
from structdoc.transform import transform, keys, values, to_array, from_array

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "JVal", "JNull", "JBool", "JNumber", "JString", "JArray", "JObject", "is_scalar",
    "StructDocError", "InvalidPathSyntax", "PathNotFound", "PathNotAddressable",
    "TypeMismatch", "SourceNotFound", "UnsupportedOperation", "InvalidSchema",
    "InsufficientInputs",
    "from_python", "to_python", "from_json", "to_json", "canonical",
    "format_json", "minify", "sort_keys",
    "PathExpression", "Located", "compile_path", "query", "set_path", "delete_path",
    "DiffEntry", "DiffKind", "diff", "diff_report", "is_equal",
    "PatchOperation", "apply_patch", "pointer_to_path",
    "merge",
    "flatten", "unflatten",
    "infer_schema", "validate", "SchemaValidator", "JsonSchemaValidator",
    "ValidationIssue", "ValidationReport",
    "transform", "keys", "values", "to_array", "from_array",
]
