"""Per-tag extractors for lines inside a ``[Term]`` stanza.

Each extractor receives the full line (tag included) and returns the parsed
value. Extractors for ``def``, ``synonym`` and ``is_a`` raise
:class:`~psimod_common.errors.OntologyParseError` when the line carries the
tag but breaks its grammar; every other malformation yields ``None`` or an
empty result and is skipped by the caller.
"""
# [nav:section public-api]

from __future__ import annotations

import re
from typing import Final, TypeAlias

from psimod_common.errors import OntologyParseError
from psimod_ontology.terms import Synonym, SynonymScope, Xref

__all__ = [
    "FieldTag",
    "match_tag",
    "parse_comment",
    "parse_definition",
    "parse_is_a",
    "parse_is_obsolete",
    "parse_subset",
    "parse_synonym",
    "parse_value",
    "parse_xref",
    "split_bracket_list",
    "strip_quotes",
    "unescape_quotes",
]

# [nav:anchor FieldTag]
FieldTag: TypeAlias = str

_TAGS: Final[tuple[FieldTag, ...]] = (
    "id",
    "name",
    "def",
    "synonym",
    "xref",
    "subset",
    "comment",
    "is_obsolete",
    "is_a",
    "relationship",
)

_DEF_RE: Final = re.compile(r'^def:\s+"(.*?)"\s*(?:\[(.*)\])?\s*$')
_SYNONYM_RE: Final = re.compile(
    r'^synonym:\s+"(.*?)"(?:\s+([^\s\[]\S*))?(?:\s+([^\s\[]\S*))?\s*(?:\[(.*)\])?\s*$'
)
_TRUE_TOKENS: Final[frozenset[str]] = frozenset({"true", "t", "1"})
_INLINE_COMMENT: Final[str] = " ! "


def _fatal(message: str, *, tag: FieldTag, line: str) -> OntologyParseError:
    return OntologyParseError(message, context={"field": tag, "line": line})


# [nav:anchor match_tag]
def match_tag(line: str) -> FieldTag | None:
    """Return the recognised tag that ``line`` starts with, if any."""
    head, sep, _ = line.partition(":")
    if sep and head in _TAGS:
        return head
    return None


# [nav:anchor unescape_quotes]
def unescape_quotes(text: str) -> str:
    r"""Replace ``\"`` escape sequences with a literal double quote."""
    return text.replace('\\"', '"')


# [nav:anchor split_bracket_list]
def split_bracket_list(content: str | None) -> list[str]:
    """Split the inside of a ``[...]`` reference list on commas.

    >>> split_bracket_list("PubMed:18688235, RESID:AA0016, ")
    ['PubMed:18688235', 'RESID:AA0016']
    """
    if not content:
        return []
    return [token.strip() for token in content.split(",") if token.strip()]


# [nav:anchor strip_quotes]
def strip_quotes(value: str) -> str:
    """Drop a trailing `` ! annotation`` and one pair of matching quotes."""
    bang = value.find(_INLINE_COMMENT)
    if bang >= 0:
        value = value[:bang].strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


# [nav:anchor parse_value]
def parse_value(line: str) -> str:
    """Return the trimmed text after the first colon (``id:`` / ``name:``)."""
    return line.partition(":")[2].strip()


# [nav:anchor parse_definition]
def parse_definition(line: str) -> tuple[str, list[str]]:
    """Parse ``def: "<text>" [ref, ...]`` into text and references.

    Raises
    ------
    OntologyParseError
        If the line lacks a closed, non-empty quoted text.
    """
    match = _DEF_RE.match(line)
    if match is None or not match.group(1):
        raise _fatal(f"Invalid definition format in line: {line}", tag="def", line=line)
    return unescape_quotes(match.group(1)), split_bracket_list(match.group(2))


# [nav:anchor parse_synonym]
def parse_synonym(line: str) -> Synonym | None:
    """Parse ``synonym: "<text>" SCOPE TYPE [ref, ...]``.

    Returns ``None`` when the line does not have the quoted-text shape, or
    when the TYPE token after SCOPE is missing.

    Raises
    ------
    OntologyParseError
        If the text is empty, or SCOPE is missing or not one of
        EXACT/BROAD/NARROW/RELATED (case-sensitive).
    """
    match = _SYNONYM_RE.match(line)
    if match is None:
        return None
    text, scope_token, type_token, refs = match.groups()
    if not text:
        raise _fatal(f"Invalid synonym format in line: {line}", tag="synonym", line=line)
    if scope_token is None:
        raise _fatal(f"Missing synonym scope in line: {line}", tag="synonym", line=line)
    try:
        scope = SynonymScope(scope_token)
    except ValueError as exc:
        raise OntologyParseError(
            f'Invalid scope value "{scope_token}" in line: {line}',
            cause=exc,
            context={"field": "synonym", "line": line},
        ) from exc
    if type_token is None:
        return None
    return Synonym(
        text=unescape_quotes(text),
        scope=scope,
        type=type_token,
        xrefs=tuple(split_bracket_list(refs)),
    )


# [nav:anchor parse_xref]
def parse_xref(line: str) -> Xref | None:
    """Parse ``xref: <database>: <value>``; ``None`` without a database key.

    >>> parse_xref('xref: DiffMono: "79.966331"')
    Xref(database='DiffMono', value='79.966331')
    """
    rest = parse_value(line)
    colon = rest.find(":")
    if colon <= 0:
        return None
    database = rest[:colon].strip()
    value = strip_quotes(rest[colon + 1 :].strip())
    return Xref(database=database, value=value)


# [nav:anchor parse_subset]
def parse_subset(line: str) -> str | None:
    """Return the subset name, or ``None`` for an empty value."""
    return parse_value(line) or None


# [nav:anchor parse_comment]
def parse_comment(line: str) -> str | None:
    """Return the comment text, or ``None`` for an empty value."""
    return parse_value(line) or None


# [nav:anchor parse_is_obsolete]
def parse_is_obsolete(line: str) -> bool:
    """Return True only for ``true``, ``t`` or ``1`` (case-insensitive)."""
    return parse_value(line).lower() in _TRUE_TOKENS


# [nav:anchor parse_is_a]
def parse_is_a(line: str) -> str | None:
    """Return the parent id of ``is_a: <parentId> ! <annotation>``.

    Returns ``None`` when nothing precedes the ``!``.

    Raises
    ------
    OntologyParseError
        If the ``!`` separator is absent.
    """
    rest = parse_value(line)
    if "!" not in rest:
        raise _fatal(f"Missing required ! separator in is_a line: {line}", tag="is_a", line=line)
    tokens = rest.split("!", 1)[0].split()
    return tokens[0] if tokens else None
