"""Navigation metadata types attached to public modules as ``__navmap__``."""

# [nav:section public-api]

from __future__ import annotations

from typing import Literal, TypeAlias, TypedDict

__all__ = [
    "ModuleMeta",
    "NavMap",
    "NavSection",
    "Stability",
    "SymbolMeta",
]

# [nav:anchor Stability]
Stability: TypeAlias = Literal[
    "frozen",
    "stable",
    "experimental",
    "internal",
    "deprecated",
]


# [nav:anchor NavSection]
class NavSection(TypedDict):
    """Navigation section metadata grouped by documentation theme."""

    id: str
    title: str
    symbols: list[str]


# [nav:anchor SymbolMeta]
class SymbolMeta(TypedDict, total=False):
    """Symbol metadata for navigation and documentation tooling."""

    owner: str
    since: str
    stability: Stability
    side_effects: list[Literal["none", "fs", "thread"]]
    thread_safety: Literal["reentrant", "threadsafe", "not-threadsafe"]


# [nav:anchor ModuleMeta]
class ModuleMeta(TypedDict, total=False):
    """Module-level metadata surfaced in navigation artefacts."""

    owner: str
    stability: Stability
    since: str


# [nav:anchor NavMap]
class NavMap(TypedDict, total=False):
    """Navigation map metadata captured per module for documentation tooling."""

    title: str
    synopsis: str
    exports: list[str]
    sections: list[NavSection]
    module_meta: ModuleMeta
    symbols: dict[str, SymbolMeta]
