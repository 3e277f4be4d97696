"""Tests for the psimod exception hierarchy and Problem Details."""

from __future__ import annotations

import logging

import pytest

from psimod_common.errors import (
    CatalogLoadError,
    ConfigurationError,
    ErrorCode,
    OntologyParseError,
    PsimodError,
    PsimodErrorConfig,
    SettingsError,
    get_type_uri,
)
from psimod_common.problem_details import (
    ProblemDetailsValidationError,
    build_problem_details,
    render_problem,
    validate_problem_details,
)


class TestErrorCodes:
    """Tests for ErrorCode values and type URIs."""

    def test_codes_are_kebab_case(self) -> None:
        """Every code renders as a kebab-case string."""
        for code in ErrorCode:
            assert str(code) == code.value
            assert code.value == code.value.lower()
            assert "_" not in code.value

    def test_type_uri(self) -> None:
        """Type URIs append the code to the base URI."""
        assert get_type_uri(ErrorCode.CATALOG_LOAD_ERROR) == (
            "https://psimod.dev/problems/catalog-load-error"
        )


class TestExceptions:
    """Tests for the typed exceptions."""

    @pytest.mark.parametrize(
        ("exc_type", "code", "status"),
        [
            (OntologyParseError, ErrorCode.ONTOLOGY_PARSE_ERROR, 422),
            (CatalogLoadError, ErrorCode.CATALOG_LOAD_ERROR, 422),
            (ConfigurationError, ErrorCode.CONFIGURATION_ERROR, 500),
            (SettingsError, ErrorCode.CONFIGURATION_ERROR, 500),
        ],
    )
    def test_code_and_status(self, exc_type: type[PsimodError], code: ErrorCode, status: int) -> None:
        """Each subclass carries its code and HTTP status."""
        error = exc_type("boom")
        assert isinstance(error, PsimodError)
        assert error.code == code
        assert error.http_status == status
        assert error.message == "boom"

    def test_base_defaults(self) -> None:
        """A bare PsimodError is a runtime error logged at ERROR."""
        error = PsimodError("plain")
        assert error.code == ErrorCode.RUNTIME_ERROR
        assert error.http_status == 500
        assert error.log_level == logging.ERROR
        assert error.context == {}

    def test_configuration_errors_are_critical(self) -> None:
        """Configuration failures log at CRITICAL."""
        assert ConfigurationError("bad").log_level == logging.CRITICAL

    def test_rejects_non_enum_code(self) -> None:
        """Codes must be ErrorCode members."""
        with pytest.raises(TypeError):
            PsimodError("x", config=PsimodErrorConfig(code="nope"))  # type: ignore[arg-type]

    def test_str_includes_code_and_cause(self) -> None:
        """The string form names the class, code and cause type."""
        error = CatalogLoadError("cannot read", cause=FileNotFoundError("x"))
        assert str(error) == (
            "CatalogLoadError[catalog-load-error]: cannot read (caused by: FileNotFoundError)"
        )
        assert isinstance(error.__cause__, FileNotFoundError)

    def test_context_is_copied(self) -> None:
        """Mutating the caller's mapping does not change the error."""
        context = {"line_number": 3}
        error = OntologyParseError("bad", context=context)
        context["line_number"] = 99
        assert error.context == {"line_number": 3}

    def test_settings_error_merges_errors(self) -> None:
        """Validation errors land under the errors key of the context."""
        error = SettingsError(
            "invalid", errors=[{"loc": "log_level", "msg": "bad"}], context={"source": "env"}
        )
        assert error.context == {
            "source": "env",
            "errors": [{"loc": "log_level", "msg": "bad"}],
        }


class TestProblemDetails:
    """Tests for Problem Details conversion and validation."""

    def test_to_problem_details(self) -> None:
        """The payload carries type, status, code and context."""
        error = OntologyParseError(
            "Invalid definition format",
            context={"line_number": 12, "field": "def", "line": 'def: "x'},
        )
        details = error.to_problem_details(instance="urn:psimod:test")
        assert details["type"] == "https://psimod.dev/problems/ontology-parse-error"
        assert details["title"] == "OntologyParseError"
        assert details["status"] == 422
        assert details["detail"] == "Invalid definition format"
        assert details["instance"] == "urn:psimod:test"
        assert details["code"] == "ontology-parse-error"
        assert details["errors"] == {"line_number": 12, "field": "def", "line": 'def: "x'}

    def test_defaults_without_context(self) -> None:
        """Without context there is no errors member; instance has a default."""
        details = CatalogLoadError("missing").to_problem_details(title="Load failed")
        assert "errors" not in details
        assert details["instance"] == "urn:psimod:error"
        assert details["title"] == "Load failed"

    def test_invalid_payload_is_rejected(self) -> None:
        """Unknown members and bad statuses fail validation."""
        with pytest.raises(ProblemDetailsValidationError) as excinfo:
            validate_problem_details(
                {"type": "t", "title": "x", "status": 42, "detail": "d", "instance": "i"}
            )
        assert excinfo.value.validation_errors
        with pytest.raises(ProblemDetailsValidationError):
            validate_problem_details(
                {
                    "type": "t",
                    "title": "x",
                    "status": 400,
                    "detail": "d",
                    "instance": "i",
                    "extra": True,
                }
            )

    def test_code_must_be_kebab_case(self) -> None:
        """Codes outside the kebab-case pattern are rejected."""
        with pytest.raises(ProblemDetailsValidationError):
            build_problem_details("t", "x", 400, "d", "i", code="Not_Kebab")

    def test_render_problem(self) -> None:
        """Rendering produces compact JSON and keeps non-ASCII text."""
        problem = build_problem_details("t", "x", 422, "café", "i")
        rendered = render_problem(problem)
        assert rendered.startswith("{")
        assert "café" in rendered
        assert not rendered.endswith("\n")
