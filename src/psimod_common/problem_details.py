"""RFC 9457 Problem Details payloads for psimod errors.

Payloads are validated against a JSON Schema (2020-12) with ``jsonschema``
before they are handed to callers, so every failure surfaced by the loader
has the same machine-readable shape.

Examples
--------
>>> problem = build_problem_details(
...     problem_type="https://psimod.dev/problems/ontology-parse-error",
...     title="OntologyParseError",
...     status=422,
...     detail="Invalid definition format in line 12",
...     instance="urn:psimod:load",
... )
>>> problem["status"]
422
"""

# [nav:section public-api]

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import cache
from typing import Final, TypeAlias, TypedDict, cast

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, ValidationError

__all__ = [
    "PROBLEM_DETAILS_SCHEMA",
    "JsonPrimitive",
    "JsonValue",
    "ProblemDetails",
    "ProblemDetailsValidationError",
    "build_problem_details",
    "render_problem",
    "validate_problem_details",
]

# Primitive JSON types (leaf values)
JsonPrimitive: TypeAlias = str | int | float | bool | None

# JSON value can be primitive or nested (dict/list)
JsonValue: TypeAlias = "JsonPrimitive | dict[str, JsonValue] | list[JsonValue]"


# [nav:anchor PROBLEM_DETAILS_SCHEMA]
PROBLEM_DETAILS_SCHEMA: Final[dict[str, object]] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Problem Details",
    "type": "object",
    "required": ["type", "title", "status", "detail", "instance"],
    "properties": {
        "type": {"type": "string", "minLength": 1},
        "title": {"type": "string", "minLength": 1},
        "status": {"type": "integer", "minimum": 100, "maximum": 599},
        "detail": {"type": "string"},
        "instance": {"type": "string", "minLength": 1},
        "code": {"type": "string", "pattern": "^[a-z0-9]+(-[a-z0-9]+)*$"},
        "errors": {"type": "object"},
    },
    "additionalProperties": False,
}


# [nav:anchor ProblemDetails]
class ProblemDetails(TypedDict, total=False):
    """TypedDict for RFC 9457 Problem Details responses."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    errors: dict[str, JsonValue]


# [nav:anchor ProblemDetailsValidationError]
class ProblemDetailsValidationError(Exception):
    """Raised when a Problem Details payload fails schema validation.

    Parameters
    ----------
    message : str
        Human-readable error message describing the validation failure.
    validation_errors : list[str] | None, optional
        Specific constraint violations reported by the validator. Defaults to None.
    """

    def __init__(self, message: str, validation_errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.validation_errors = validation_errors or []


@cache
def _validator() -> Draft202012Validator:
    try:
        Draft202012Validator.check_schema(PROBLEM_DETAILS_SCHEMA)
    except SchemaError as exc:
        msg = f"Invalid Problem Details schema: {exc.message}"
        raise ProblemDetailsValidationError(msg) from exc
    return Draft202012Validator(PROBLEM_DETAILS_SCHEMA)


# [nav:anchor validate_problem_details]
def validate_problem_details(payload: Mapping[str, object]) -> None:
    """Validate a Problem Details payload against the bundled schema.

    Parameters
    ----------
    payload : Mapping[str, object]
        Problem Details payload to validate.

    Raises
    ------
    ProblemDetailsValidationError
        If the payload fails schema validation.
    """
    try:
        _validator().validate(payload)
    except ValidationError as exc:
        errors = [exc.message]
        if exc.absolute_path:
            path_str = ".".join(str(p) for p in exc.absolute_path)
            errors.append(f"at path: {path_str}")
        msg = f"Problem Details validation failed: {'; '.join(errors)}"
        raise ProblemDetailsValidationError(msg, validation_errors=errors) from exc


# [nav:anchor build_problem_details]
def build_problem_details(
    problem_type: str,
    title: str,
    status: int,
    detail: str,
    instance: str,
    *,
    code: str | None = None,
    errors: Mapping[str, JsonValue] | None = None,
) -> ProblemDetails:
    """Build and validate an RFC 9457 Problem Details payload.

    Parameters
    ----------
    problem_type : str
        Type URI identifying the problem class.
    title : str
        Short, human-readable summary.
    status : int
        HTTP status code.
    detail : str
        Explanation specific to this occurrence.
    instance : str
        URI identifying this occurrence.
    code : str | None, optional
        Stable kebab-case error code. Defaults to None.
    errors : Mapping[str, JsonValue] | None, optional
        Structured context for the failure. Defaults to None.

    Returns
    -------
    ProblemDetails
        Validated payload.
    """
    payload: dict[str, object] = {
        "type": problem_type,
        "title": title,
        "status": status,
        "detail": detail,
        "instance": instance,
    }
    if code is not None:
        payload["code"] = code
    if errors:
        payload["errors"] = dict(errors)
    validate_problem_details(payload)
    return cast("ProblemDetails", payload)


# [nav:anchor render_problem]
def render_problem(problem: ProblemDetails | Mapping[str, object]) -> str:
    """Render Problem Details as a compact JSON string.

    Parameters
    ----------
    problem : ProblemDetails | Mapping[str, object]
        Problem Details payload to serialize.

    Returns
    -------
    str
        JSON-encoded string without trailing newline; non-ASCII is preserved.
    """
    return json.dumps(problem, default=str, ensure_ascii=False)
