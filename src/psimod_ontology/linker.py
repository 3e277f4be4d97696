"""Resolve pending ``is_a`` edges into parent/child links between terms."""

# [nav:section public-api]

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from psimod_common.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from psimod_ontology.terms import Term

__all__ = [
    "LinkReport",
    "Linker",
    "PendingEdge",
]

logger = get_logger(__name__)


# [nav:anchor PendingEdge]
@dataclass(frozen=True, slots=True)
class PendingEdge:
    """An ``is_a`` declaration recorded before its parent may exist."""

    child_id: str
    parent_id: str


# [nav:anchor LinkReport]
@dataclass(frozen=True, slots=True)
class LinkReport:
    """Outcome of one linking pass.

    Attributes
    ----------
    linked : int
        Distinct edges added to the graph.
    duplicates : int
        Edges already present (redundant declarations).
    dangling : int
        Edges dropped because the child or parent id is not in the index.
    """

    linked: int = 0
    duplicates: int = 0
    dangling: int = 0


# [nav:anchor Linker]
class Linker:
    """Apply pending edges to the terms of an id index.

    Each edge adds the parent to ``child.parent_ids`` and the child to
    ``parent.child_ids``. Edges naming an id missing from the index are
    dropped without error. Because both sides are sets, application order
    and repeated declarations do not change the resulting graph.

    Parameters
    ----------
    index : Mapping[str, Term]
        Terms keyed by id.
    """

    def __init__(self, index: Mapping[str, Term]) -> None:
        self.index = index

    def link(self, edges: Iterable[PendingEdge]) -> LinkReport:
        """Apply ``edges`` and report how many were linked, repeated or dropped."""
        linked = duplicates = dangling = 0
        for edge in edges:
            child = self.index.get(edge.child_id)
            parent = self.index.get(edge.parent_id)
            if child is None or parent is None:
                dangling += 1
                continue
            if parent.id in child.parent_ids:
                duplicates += 1
                continue
            child.parent_ids.add(parent.id)
            parent.child_ids.add(child.id)
            linked += 1
        report = LinkReport(linked=linked, duplicates=duplicates, dangling=dangling)
        logger.debug(
            "Linked is_a edges",
            extra={
                "operation": "obo_link",
                "linked": report.linked,
                "duplicates": report.duplicates,
                "dangling": report.dangling,
            },
        )
        return report
