"""Exception hierarchy and Problem Details support.

Examples
--------
>>> from psimod_common.errors import CatalogLoadError
>>> details = CatalogLoadError("OBO file not found").to_problem_details()
>>> details["type"]
'https://psimod.dev/problems/catalog-load-error'
"""
# [nav:section public-api]

from __future__ import annotations

from psimod_common.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from psimod_common.errors.exceptions import (
    CatalogLoadError,
    ConfigurationError,
    OntologyParseError,
    PsimodError,
    PsimodErrorConfig,
    SettingsError,
)

__all__ = [
    "BASE_TYPE_URI",
    "CatalogLoadError",
    "ConfigurationError",
    "ErrorCode",
    "OntologyParseError",
    "PsimodError",
    "PsimodErrorConfig",
    "SettingsError",
    "get_type_uri",
]
