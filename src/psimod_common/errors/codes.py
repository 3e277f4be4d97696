"""Error code registry and type URIs for Problem Details.

Codes and URIs are stable identifiers: callers match on them, so values are
never renamed once released.

Examples
--------
>>> from psimod_common.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.ONTOLOGY_PARSE_ERROR)
'https://psimod.dev/problems/ontology-parse-error'
"""

# [nav:section public-api]

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]


# [nav:anchor BASE_TYPE_URI]
BASE_TYPE_URI: Final[str] = "https://psimod.dev/problems"


# [nav:anchor ErrorCode]
class ErrorCode(StrEnum):
    """Stable error codes for psimod exceptions.

    Attributes
    ----------
    ONTOLOGY_PARSE_ERROR
        An OBO line matched a known field but broke that field's grammar.
    CATALOG_LOAD_ERROR
        The OBO source could not be read or decoded.
    CONFIGURATION_ERROR
        Environment configuration failed validation.
    RUNTIME_ERROR
        Fallback code of a bare ``PsimodError``; library code always raises a
        subclass with a specific code.
    """

    ONTOLOGY_PARSE_ERROR = "ontology-parse-error"
    CATALOG_LOAD_ERROR = "catalog-load-error"
    CONFIGURATION_ERROR = "configuration-error"
    RUNTIME_ERROR = "runtime-error"

    def __str__(self) -> str:
        """Return the code value as a string.

        Returns
        -------
        str
            The error code value (e.g., "ontology-parse-error").
        """
        return self.value


# [nav:anchor get_type_uri]
def get_type_uri(code: ErrorCode) -> str:
    """Get the RFC 9457 type URI for an error code.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    str
        Complete type URI (e.g., "https://psimod.dev/problems/catalog-load-error").
    """
    return f"{BASE_TYPE_URI}/{code.value}"
