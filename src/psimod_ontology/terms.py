"""Term records produced by the OBO parser.

Hierarchy edges are stored as id sets on each :class:`Term` and resolved
through the catalog index, so a term never holds references to other terms.
"""
# [nav:section public-api]

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from psimod_common.problem_details import JsonValue

__all__ = [
    "Synonym",
    "SynonymScope",
    "Term",
    "Xref",
]


# [nav:anchor SynonymScope]
class SynonymScope(StrEnum):
    """How closely a synonym matches the preferred term name."""

    EXACT = "EXACT"
    BROAD = "BROAD"
    NARROW = "NARROW"
    RELATED = "RELATED"


# [nav:anchor Synonym]
@dataclass(frozen=True, slots=True)
class Synonym:
    """Alternative label for a term.

    Attributes
    ----------
    text : str
        Synonym text, unescaped (e.g. ``"Phospho"``).
    scope : SynonymScope
        Scope qualifier.
    type : str
        Free-form synonym type token (e.g. ``"PSI-MS-label"``).
    xrefs : tuple[str, ...]
        Supporting references from the bracket list.
    """

    text: str
    scope: SynonymScope
    type: str = ""
    xrefs: tuple[str, ...] = ()


# [nav:anchor Xref]
@dataclass(frozen=True, slots=True)
class Xref:
    """Key/value pointer to an external database entry.

    ``value`` is kept verbatim; sub-formats such as ``Unimod:21`` are left to
    consumers.
    """

    database: str
    value: str


# [nav:anchor Term]
@dataclass(slots=True, eq=False)
class Term:
    """A single ``[Term]`` stanza of a PSI-MOD file.

    ``parent_ids`` and ``child_ids`` are empty until the graph linker runs;
    afterwards ``c in p.child_ids`` holds exactly when ``p in c.parent_ids``.
    """

    id: str
    name: str
    definition: str
    definition_xrefs: list[str] = field(default_factory=list)
    synonyms: list[Synonym] = field(default_factory=list)
    xrefs: list[Xref] = field(default_factory=list)
    is_obsolete: bool = False
    comment: str | None = None
    subset: list[str] = field(default_factory=list)
    parent_ids: set[str] = field(default_factory=set)
    child_ids: set[str] = field(default_factory=set)

    def __repr__(self) -> str:
        return f"Term(id={self.id!r}, name={self.name!r})"

    def to_dict(self) -> dict[str, JsonValue]:
        """Return a JSON-serialisable view with edges as sorted id lists."""
        payload: dict[str, JsonValue] = {
            "id": self.id,
            "name": self.name,
            "definition": self.definition,
            "definition_xrefs": list(self.definition_xrefs),
            "synonyms": [
                {
                    "text": synonym.text,
                    "scope": synonym.scope.value,
                    "type": synonym.type,
                    "xrefs": list(synonym.xrefs),
                }
                for synonym in self.synonyms
            ],
            "xrefs": [{"database": xref.database, "value": xref.value} for xref in self.xrefs],
            "is_obsolete": self.is_obsolete,
            "subset": list(self.subset),
            "parents": sorted(self.parent_ids),
            "children": sorted(self.child_ids),
        }
        if self.comment is not None:
            payload["comment"] = self.comment
        return payload
