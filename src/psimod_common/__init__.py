"""Shared infrastructure for the psimod packages: errors, logging, settings."""
# [nav:section public-api]

from __future__ import annotations

# [nav:anchor errors]
# [nav:anchor logging]
# [nav:anchor navmap_types]
# [nav:anchor problem_details]
# [nav:anchor settings]
from psimod_common import errors, logging, navmap_types, problem_details, settings

__all__ = [
    "errors",
    "logging",
    "navmap_types",
    "problem_details",
    "settings",
]
