"""Typed exception hierarchy with Problem Details support.

All psimod exceptions inherit from PsimodError, which provides structured
fields and RFC 9457 Problem Details mapping.

Examples
--------
>>> from psimod_common.errors import OntologyParseError, ErrorCode
>>> try:
...     raise OntologyParseError("Invalid definition format", context={"line_number": 12})
... except OntologyParseError as e:
...     assert e.code == ErrorCode.ONTOLOGY_PARSE_ERROR
...     assert e.http_status == 422
...     details = e.to_problem_details(instance="urn:psimod:load")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from psimod_common.errors.codes import ErrorCode, get_type_uri
from psimod_common.problem_details import build_problem_details

if TYPE_CHECKING:
    from psimod_common.problem_details import JsonValue, ProblemDetails

__all__ = [
    "CatalogLoadError",
    "ConfigurationError",
    "OntologyParseError",
    "PsimodError",
    "PsimodErrorConfig",
    "SettingsError",
]


@dataclass(slots=True)
class PsimodErrorConfig:
    """Configuration options used when instantiating :class:`PsimodError`."""

    code: ErrorCode = ErrorCode.RUNTIME_ERROR
    http_status: int = 500
    log_level: int = logging.ERROR
    cause: Exception | None = None
    context: Mapping[str, object] | None = None


class PsimodError(Exception):
    """Base exception for all psimod errors.

    Provides structured fields (code, http_status, log_level) and RFC 9457
    Problem Details mapping.

    Parameters
    ----------
    message : str
        Human-readable error message.
    config : PsimodErrorConfig | None, optional
        Structured configuration for the error including code, http_status,
        log_level, cause and context. Defaults to None.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode
        Error code enum value.
    http_status : int
        HTTP status code for Problem Details responses.
    log_level : int
        Logging level for error logging.
    context : dict[str, object]
        Additional context dictionary for error details.
    """

    def __init__(self, message: str, *, config: PsimodErrorConfig | None = None) -> None:
        resolved = config or PsimodErrorConfig()
        if not isinstance(resolved.code, ErrorCode):
            msg = "code must be an instance of ErrorCode"
            raise TypeError(msg)
        super().__init__(message)
        self.message = message
        self.code = resolved.code
        self.http_status = resolved.http_status
        self.log_level = resolved.log_level
        self.context = dict(resolved.context) if resolved.context else {}
        if resolved.cause is not None:
            self.__cause__ = resolved.cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Convert to RFC 9457 Problem Details JSON.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying the specific occurrence. Defaults to None.
        title : str | None, optional
            Short summary. Defaults to the exception class name.

        Returns
        -------
        ProblemDetails
            Problem Details object with type, title, status, detail, code,
            instance, and optional errors fields.
        """
        return build_problem_details(
            problem_type=get_type_uri(self.code),
            title=title or self.__class__.__name__,
            status=self.http_status,
            detail=self.message,
            instance=instance or "urn:psimod:error",
            code=self.code.value,
            errors=cast("Mapping[str, JsonValue] | None", self.context or None),
        )

    def __str__(self) -> str:
        """Return formatted error string.

        Returns
        -------
        str
            Formatted error string (e.g., "OntologyParseError[ontology-parse-error]: ...").
        """
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


class OntologyParseError(PsimodError):
    """A recognised OBO field broke its required sub-grammar.

    Raised for malformed ``def:`` quoting, a missing or invalid synonym scope,
    and an ``is_a:`` line without its ``!`` separator. Uses error code
    ONTOLOGY_PARSE_ERROR and HTTP status 422 (Unprocessable Entity).

    Parameters
    ----------
    message : str
        Human-readable error message describing the parsing failure.
    cause : Exception | None, optional
        Underlying exception that caused the parsing failure. Defaults to None.
    context : Mapping[str, object] | None, optional
        Offending ``line_number``, ``line`` and ``field``. Defaults to None.

    Examples
    --------
    >>> raise OntologyParseError("Missing required ! separator in is_a line")
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=PsimodErrorConfig(
                code=ErrorCode.ONTOLOGY_PARSE_ERROR,
                http_status=422,
                cause=cause,
                context=context,
            ),
        )


class CatalogLoadError(PsimodError):
    """The OBO source feeding the catalog could not be read.

    Uses error code CATALOG_LOAD_ERROR and HTTP status 422.

    Parameters
    ----------
    message : str
        Human-readable error message describing the load failure.
    cause : Exception | None, optional
        Underlying I/O or decoding error. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context dictionary for error details. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=PsimodErrorConfig(
                code=ErrorCode.CATALOG_LOAD_ERROR,
                http_status=422,
                cause=cause,
                context=context,
            ),
        )


class ConfigurationError(PsimodError):
    """Error during configuration validation or loading.

    Uses error code CONFIGURATION_ERROR and HTTP status 500 with CRITICAL
    log level.

    Parameters
    ----------
    message : str
        Human-readable error message describing the configuration failure.
    cause : Exception | None, optional
        Underlying exception that caused the configuration failure. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context dictionary. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=PsimodErrorConfig(
                code=ErrorCode.CONFIGURATION_ERROR,
                http_status=500,
                log_level=logging.CRITICAL,
                cause=cause,
                context=context,
            ),
        )


class SettingsError(ConfigurationError):
    """Runtime settings failed validation.

    Parameters
    ----------
    message : str
        Human-readable error message describing the settings validation failure.
    errors : list[dict[str, object]] | None, optional
        Validation error dictionaries with field/issue details. Defaults to None.
    cause : Exception | None, optional
        Underlying exception that caused the validation failure. Defaults to None.
    context : Mapping[str, object] | None, optional
        Additional context dictionary for error details. Defaults to None.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, object]] | None = None,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        merged: dict[str, object] = dict(context or {})
        if errors:
            merged["errors"] = errors
        super().__init__(message, cause=cause, context=merged or None)
