"""In-memory catalog of parsed PSI-MOD terms.

The catalog owns the terms of one successful parse and answers the queries
the browsing layer needs: enumeration in file order, lookup by id,
case-insensitive search over names and synonyms, and hierarchy traversal.
"""
# [nav:section public-api]

from __future__ import annotations

from collections import deque
from types import MappingProxyType
from typing import TYPE_CHECKING, Final, Self

from psimod_common.navmap_types import NavMap

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from psimod_common.problem_details import JsonValue
    from psimod_ontology.parser import ParseResult
    from psimod_ontology.terms import Term

__all__ = [
    "OntologyCatalog",
]

__navmap__: Final[NavMap] = {
    "title": "psimod_ontology.catalog",
    "synopsis": "Term store and query surface over one parsed ontology",
    "exports": __all__,
    "sections": [
        {
            "id": "public-api",
            "title": "Public API",
            "symbols": __all__,
        },
    ],
    "module_meta": {
        "owner": "@ontology",
        "stability": "stable",
        "since": "0.1.0",
    },
    "symbols": {
        "OntologyCatalog": {
            "owner": "@ontology",
            "stability": "stable",
            "since": "0.1.0",
            "thread_safety": "reentrant",
        },
    },
}


# [nav:anchor OntologyCatalog]
class OntologyCatalog:
    """Query surface over the terms of a single parse.

    Parameters
    ----------
    terms : Iterable[Term]
        Terms in file order.
    index : Mapping[str, Term] | None, optional
        Id lookup. Built from ``terms`` (last occurrence wins) when omitted.
    data_version : str | None, optional
        Header ``data-version`` of the source file. Defaults to None.
    """

    def __init__(
        self,
        terms: Iterable[Term],
        index: Mapping[str, Term] | None = None,
        data_version: str | None = None,
    ) -> None:
        self._terms: tuple[Term, ...] = tuple(terms)
        if index is None:
            index = {term.id: term for term in self._terms}
        self.index: Mapping[str, Term] = MappingProxyType(dict(index))
        self._data_version = data_version
        self._position = {term.id: position for position, term in enumerate(self._terms)}

    @classmethod
    def from_result(cls, result: ParseResult) -> Self:
        """Wrap a :class:`~psimod_ontology.parser.ParseResult`."""
        return cls(result.terms, result.index, result.data_version)

    @classmethod
    def empty(cls) -> Self:
        """Return the catalog exposed before anything has been loaded."""
        return cls(())

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[Term]:
        return iter(self._terms)

    def __contains__(self, term_id: object) -> bool:
        return term_id in self.index

    @property
    def term_count(self) -> int:
        """Number of emitted terms, duplicates included."""
        return len(self._terms)

    def all_terms(self) -> list[Term]:
        """Return every term in the order it appears in the file."""
        return list(self._terms)

    def by_id(self, term_id: str) -> Term | None:
        """Return the term with ``term_id``, or None when it is unknown."""
        return self.index.get(term_id)

    def data_version(self) -> str | None:
        """Return the ``data-version`` header of the loaded file, if any."""
        return self._data_version

    def search(self, query: str) -> list[Term]:
        """Return terms whose name or any synonym contains ``query``.

        Matching is case-insensitive substring matching. A blank query
        returns all terms. Results keep file order.

        Parameters
        ----------
        query : str
            Text to look for.

        Returns
        -------
        list[Term]
            Matching terms.
        """
        needle = query.strip().lower()
        if not needle:
            return self.all_terms()
        return [
            term
            for term in self._terms
            if needle in term.name.lower()
            or any(needle in synonym.text.lower() for synonym in term.synonyms)
        ]

    def _resolve(self, term_ids: Iterable[str]) -> list[Term]:
        found = [self.index[term_id] for term_id in term_ids if term_id in self.index]
        return sorted(found, key=lambda term: self._position.get(term.id, len(self._terms)))

    def parents(self, term_id: str) -> list[Term]:
        """Return the direct ``is_a`` parents of ``term_id`` in file order."""
        term = self.by_id(term_id)
        return self._resolve(term.parent_ids) if term is not None else []

    def children(self, term_id: str) -> list[Term]:
        """Return the direct ``is_a`` children of ``term_id`` in file order."""
        term = self.by_id(term_id)
        return self._resolve(term.child_ids) if term is not None else []

    def ancestors(self, term_id: str) -> set[str]:
        """Return ids of all transitive parents of ``term_id``.

        Cycles in the source hierarchy are tolerated; the seed id is only
        included if it is its own ancestor.
        """
        term = self.by_id(term_id)
        if term is None:
            return set()
        seen: set[str] = set()
        pending = deque(term.parent_ids)
        while pending:
            current = pending.popleft()
            if current in seen:
                continue
            seen.add(current)
            parent = self.index.get(current)
            if parent is not None:
                pending.extend(parent.parent_ids - seen)
        return seen

    def neighbors(self, term_id: str, depth: int = 1) -> set[str]:
        """Return related term identifiers up to the requested depth.

        Both parent and child edges are followed.

        Parameters
        ----------
        term_id : str
            Term identifier to find neighbors for.
        depth : int, optional
            Maximum number of hops. Defaults to 1.

        Returns
        -------
        set[str]
            Ids reachable within ``depth`` hops, excluding ``term_id``.
        """
        if depth < 1 or term_id not in self.index:
            return set()
        visited = {term_id}
        frontier = {term_id}
        for _ in range(depth):
            next_frontier: set[str] = set()
            for current in frontier:
                term = self.index[current]
                next_frontier |= (term.parent_ids | term.child_ids) - visited
            if not next_frontier:
                break
            visited |= next_frontier
            frontier = next_frontier
        visited.discard(term_id)
        return visited

    def hydrate(self, term_id: str) -> dict[str, JsonValue]:
        """Return a JSON-serialisable view of the term metadata.

        Parameters
        ----------
        term_id : str
            Term identifier to hydrate.

        Returns
        -------
        dict[str, JsonValue]
            Term fields, or an empty dict for an unknown id.
        """
        term = self.by_id(term_id)
        if term is None:
            return {}
        return term.to_dict()
