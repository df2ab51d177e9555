"""
structdoc.schema — Schema inference from one example, and validation.

INFERENCE is purely structural and single-example based:

    null            → {"type": "null"}
    true / false    → {"type": "boolean"}
    3, 3.0          → {"type": "integer"}      (no fractional part)
    3.5             → {"type": "number"}
    "x"             → {"type": "string"}
    [a, ...]        → {"type": "array", "items": infer(a)}
    []              → {"type": "array", "items": {}}
    {k: v, ...}     → {"type": "object", "properties": {k: infer(v)},
                       "required": sorted(keys)}

Every observed key is required; a single example says nothing about which
fields are optional.

VALIDATION is not implemented here.  Callers inject a SchemaValidator; the
JsonSchemaValidator adapter delegates to the `jsonschema` library.  Output
of infer_schema(v) always validates v (for arrays whose elements share the
first element's shape).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from jsonschema.validators import validator_for
from jsonschema.exceptions import SchemaError

from .core import JArray, JBool, JNull, JNumber, JObject, JString, JVal
from .errors import InvalidSchema
from .formats import to_python
from .patch import route_to_pointer

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  INFERENCE
# ═══════════════════════════════════════════════════════════════════

def _type(name: str) -> JObject:
    return JObject({"type": JString(name)})


def infer_schema(value: JVal) -> JObject:
    """Minimal structural schema describing `value`."""
    if isinstance(value, JNull):
        return _type("null")
    if isinstance(value, JBool):
        return _type("boolean")
    if isinstance(value, JNumber):
        return _type("integer" if value.is_integral else "number")
    if isinstance(value, JString):
        return _type("string")
    if isinstance(value, JArray):
        schema = _type("array")
        schema.entries["items"] = infer_schema(value.items[0]) if value.items else JObject()
        return schema
    if isinstance(value, JObject):
        schema = _type("object")
        schema.entries["properties"] = JObject(
            {k: infer_schema(v) for k, v in value.entries.items()})
        schema.entries["required"] = JArray([JString(k) for k in sorted(value.entries)])
        return schema
    raise TypeError(f"Unknown JVal type: {type(value)}")


# ═══════════════════════════════════════════════════════════════════
#  VALIDATION
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ValidationIssue:
    """One failed constraint: where in the instance, and why."""
    location: str
    message: str

    def to_python(self) -> dict[str, str]:
        return {"location": self.location, "message": self.message}


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    def to_python(self) -> dict[str, Any]:
        return {"valid": self.valid,
                "errors": [issue.to_python() for issue in self.issues]}


class SchemaValidator(Protocol):
    """Capability that checks values against a compiled schema."""

    def compile(self, schema: JVal) -> Any:
        ...

    def validate(self, compiled: Any, value: JVal) -> ValidationReport:
        ...


class JsonSchemaValidator:
    """
    SchemaValidator backed by the `jsonschema` library.

    The draft is taken from the schema's "$schema" member; schemas without
    one are checked with the library's latest supported draft.
    """

    def compile(self, schema: JVal) -> Any:
        raw = to_python(schema)
        cls = validator_for(raw)
        try:
            cls.check_schema(raw)
        except SchemaError as exc:
            raise InvalidSchema(f"Invalid schema: {exc.message}",
                                path=route_to_pointer(exc.path)) from exc
        return cls(raw)

    def validate(self, compiled: Any, value: JVal) -> ValidationReport:
        errors = sorted(compiled.iter_errors(to_python(value)),
                        key=lambda e: [str(p) for p in e.absolute_path])
        issues = [ValidationIssue(route_to_pointer(e.absolute_path), e.message)
                  for e in errors]
        if issues:
            logger.debug("Validation failed with %d issue(s)", len(issues))
        return ValidationReport(valid=not issues, issues=issues)


def validate(schema: JVal, value: JVal,
             validator: Optional[SchemaValidator] = None) -> ValidationReport:
    """Compile `schema` with `validator` (JsonSchemaValidator by default) and check `value`."""
    validator = validator or JsonSchemaValidator()
    return validator.validate(validator.compile(schema), value)
