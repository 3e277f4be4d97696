"""Parse PSI-MOD flavoured OBO text into a linked set of terms.

Parsing runs in two passes. The :class:`RecordAssembler` walks the logical
lines once, turning each complete ``[Term]`` stanza into a :class:`Term`
and collecting ``is_a`` declarations as pending edges. Once every stanza is
known, the :class:`~psimod_ontology.linker.Linker` resolves those edges, so a
child may name a parent declared further down the file.

Examples
--------
>>> result = parse_obo('''
... [Term]
... id: MOD:00001
... name: alkylated residue
... def: "A protein modification that adds an alkyl group." [PubMed:18688235]
... ''')
>>> [term.id for term in result.terms]
['MOD:00001']
"""

# [nav:section public-api]

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from psimod_common.errors import OntologyParseError
from psimod_common.logging import get_logger
from psimod_common.navmap_types import NavMap
from psimod_ontology import fields
from psimod_ontology.lines import TERM_HEADER, LogicalLines, is_stanza_header
from psimod_ontology.linker import Linker, LinkReport, PendingEdge
from psimod_ontology.terms import Synonym, Term, Xref

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

__all__ = [
    "AssemblerState",
    "OboParser",
    "ParseResult",
    "RecordAssembler",
    "parse_data_version",
    "parse_obo",
]

__navmap__: Final[NavMap] = {
    "title": "psimod_ontology.parser",
    "synopsis": "OBO stanza assembly and two-pass is_a linking",
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
        "parse_obo": {
            "owner": "@ontology",
            "stability": "stable",
            "since": "0.1.0",
            "side_effects": ["none"],
            "thread_safety": "reentrant",
        },
    },
}

logger = get_logger(__name__)

_DATA_VERSION_TAG: Final[str] = "data-version:"
_TRAILING_ANNOTATION: Final = re.compile(r"\s!(?:\s.*)?$")


# [nav:anchor AssemblerState]
class AssemblerState(StrEnum):
    """Whether the assembler is between stanzas or inside a ``[Term]``."""

    OUTSIDE = "outside"
    IN_BLOCK = "in_block"


@dataclass(slots=True)
class _TermBuffer:
    id: str | None = None
    name: str | None = None
    definition: str | None = None
    definition_xrefs: list[str] = field(default_factory=list)
    synonyms: list[Synonym] = field(default_factory=list)
    xrefs: list[Xref] = field(default_factory=list)
    is_obsolete: bool = False
    comment: str | None = None
    subset: list[str] = field(default_factory=list)

    def build(self) -> Term | None:
        if not (self.id and self.name and self.definition):
            return None
        return Term(
            id=self.id,
            name=self.name,
            definition=self.definition,
            definition_xrefs=list(self.definition_xrefs),
            synonyms=list(self.synonyms),
            xrefs=list(self.xrefs),
            is_obsolete=self.is_obsolete,
            comment=self.comment,
            subset=list(self.subset),
        )


# [nav:anchor ParseResult]
@dataclass(frozen=True, slots=True)
class ParseResult:
    """Everything one parse produced, handed over as a single unit.

    Attributes
    ----------
    terms : tuple[Term, ...]
        Emitted terms in file order.
    index : Mapping[str, Term]
        Read-only id lookup; for a repeated id the last stanza wins.
    data_version : str | None
        Header ``data-version`` value, if present.
    discarded : int
        ``[Term]`` stanzas dropped for lacking id, name or definition.
    links : LinkReport
        Edge counts from the linking pass.
    """

    terms: tuple[Term, ...]
    index: Mapping[str, Term]
    data_version: str | None = None
    discarded: int = 0
    links: LinkReport = field(default_factory=LinkReport)


# [nav:anchor RecordAssembler]
class RecordAssembler:
    """Line-at-a-time state machine that builds terms from ``[Term]`` stanzas.

    Feed logical lines with :meth:`feed` and call :meth:`finish` at end of
    input. Blank lines never change state. Any other stanza header (for
    example ``[Typedef]``) closes the open stanza and moves the assembler
    outside, where lines are ignored.
    """

    def __init__(self) -> None:
        self.state = AssemblerState.OUTSIDE
        self.terms: list[Term] = []
        self.index: dict[str, Term] = {}
        self.edges: list[PendingEdge] = []
        self.discarded = 0
        self._buffer = _TermBuffer()
        self._handlers: dict[str, Callable[[str], None]] = {
            "id": self._on_id,
            "name": self._on_name,
            "def": self._on_def,
            "synonym": self._on_synonym,
            "xref": self._on_xref,
            "subset": self._on_subset,
            "comment": self._on_comment,
            "is_obsolete": self._on_is_obsolete,
            "is_a": self._on_is_a,
        }

    def feed(self, line_number: int, line: str) -> None:
        """Consume one logical line.

        Raises
        ------
        OntologyParseError
            If a recognised tag breaks its grammar; ``line_number`` is added
            to the error context.
        """
        if not line:
            return
        if line == TERM_HEADER:
            if self.state is AssemblerState.IN_BLOCK:
                self._finalize()
            self._buffer = _TermBuffer()
            self.state = AssemblerState.IN_BLOCK
            return
        if is_stanza_header(line):
            if self.state is AssemblerState.IN_BLOCK:
                self._finalize()
            self.state = AssemblerState.OUTSIDE
            return
        if self.state is AssemblerState.OUTSIDE or line.startswith("!"):
            return
        tag = fields.match_tag(line)
        handler = self._handlers.get(tag) if tag else None
        if handler is None:
            return
        try:
            handler(line)
        except OntologyParseError as exc:
            exc.context.setdefault("line_number", line_number)
            raise

    def finish(self) -> None:
        """Close the stanza still open at end of input."""
        if self.state is AssemblerState.IN_BLOCK:
            self._finalize()
        self.state = AssemblerState.OUTSIDE

    def _finalize(self) -> None:
        term = self._buffer.build()
        self._buffer = _TermBuffer()
        if term is None:
            self.discarded += 1
            return
        if term.id in self.index:
            logger.warning(
                "Duplicate term id; lookup now resolves to the later stanza",
                extra={"operation": "obo_parse", "term_id": term.id},
            )
        self.terms.append(term)
        self.index[term.id] = term

    def _on_id(self, line: str) -> None:
        self._buffer.id = fields.parse_value(line)

    def _on_name(self, line: str) -> None:
        self._buffer.name = fields.parse_value(line)

    def _on_def(self, line: str) -> None:
        self._buffer.definition, self._buffer.definition_xrefs = fields.parse_definition(line)

    def _on_synonym(self, line: str) -> None:
        synonym = fields.parse_synonym(line)
        if synonym is not None:
            self._buffer.synonyms.append(synonym)

    def _on_xref(self, line: str) -> None:
        xref = fields.parse_xref(line)
        if xref is not None:
            self._buffer.xrefs.append(xref)

    def _on_subset(self, line: str) -> None:
        subset = fields.parse_subset(line)
        if subset is not None:
            self._buffer.subset.append(subset)

    def _on_comment(self, line: str) -> None:
        self._buffer.comment = fields.parse_comment(line)

    def _on_is_obsolete(self, line: str) -> None:
        self._buffer.is_obsolete = fields.parse_is_obsolete(line)

    def _on_is_a(self, line: str) -> None:
        parent_id = fields.parse_is_a(line)
        # Bound to the id seen so far; the linker drops it if that id is never emitted.
        if parent_id is not None and self._buffer.id:
            self.edges.append(PendingEdge(self._buffer.id, parent_id))


# [nav:anchor OboParser]
class OboParser:
    """Parse a complete OBO document into a :class:`ParseResult`.

    The parser keeps no state between calls and never mutates its input; a
    failed parse returns nothing and leaves no partial graph behind.
    """

    def parse(self, text: str) -> ParseResult:
        """Parse ``text`` and link its hierarchy.

        Parameters
        ----------
        text : str
            Full contents of an OBO file.

        Returns
        -------
        ParseResult
            Terms, id index and data version.

        Raises
        ------
        OntologyParseError
            On the first line that breaks the grammar of a ``def``,
            ``synonym`` or ``is_a`` tag.
        """
        assembler = RecordAssembler()
        for line_number, line in LogicalLines(text).numbered():
            assembler.feed(line_number, line)
        assembler.finish()

        report = Linker(assembler.index).link(assembler.edges)
        logger.debug(
            "Parsed OBO terms",
            extra={
                "operation": "obo_parse",
                "terms": len(assembler.terms),
                "discarded": assembler.discarded,
            },
        )
        return ParseResult(
            terms=tuple(assembler.terms),
            index=MappingProxyType(assembler.index),
            data_version=parse_data_version(text),
            discarded=assembler.discarded,
            links=report,
        )


# [nav:anchor parse_obo]
def parse_obo(text: str) -> ParseResult:
    """Parse ``text`` with a fresh :class:`OboParser`."""
    return OboParser().parse(text)


# [nav:anchor parse_data_version]
def parse_data_version(text: str) -> str | None:
    """Return the first ``data-version:`` value in ``text``.

    A trailing `` ! comment`` is removed. Stanza structure is not consulted.

    >>> parse_data_version("format-version: 1.2\\ndata-version: 1.031.6 ! comment\\n")
    '1.031.6'
    >>> parse_data_version("format-version: 1.2\\n") is None
    True
    """
    for line in LogicalLines(text):
        if line.startswith(_DATA_VERSION_TAG):
            value = line[len(_DATA_VERSION_TAG) :].strip()
            value = _TRAILING_ANNOTATION.sub("", value).strip()
            return value or None
    return None
