"""PSI-MOD ontology parsing, term catalog and loader."""

from __future__ import annotations

from psimod_ontology import catalog, fields, lines, linker, loader, parser, terms
from psimod_ontology.catalog import OntologyCatalog
from psimod_ontology.loader import LoadState, OntologyLoader, get_ontology_loader
from psimod_ontology.parser import OboParser, ParseResult, parse_data_version, parse_obo
from psimod_ontology.terms import Synonym, SynonymScope, Term, Xref

__all__ = [
    "LoadState",
    "OboParser",
    "OntologyCatalog",
    "OntologyLoader",
    "ParseResult",
    "Synonym",
    "SynonymScope",
    "Term",
    "Xref",
    "catalog",
    "fields",
    "get_ontology_loader",
    "lines",
    "linker",
    "loader",
    "parse_data_version",
    "parse_obo",
    "parser",
    "terms",
]


# [nav:section public-api]
# [nav:anchor catalog]
# [nav:anchor loader]
# [nav:anchor parser]
