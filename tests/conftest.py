"""Shared pytest fixtures for the psimod test-suite.

Provides a small PSI-MOD style OBO document that exercises every
recognised tag, plus helpers for settings isolation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from psimod_common.settings import get_settings
from psimod_ontology.loader import get_ontology_loader

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

SAMPLE_OBO = """\
format-version: 1.2
data-version: 1.031.6 ! PSI-MOD release
date: 03:12:2024 12:00
default-namespace: PSI-MOD

[Term]
id: MOD:00000
name: protein modification
def: "A protein modification is a covalent change to a protein." [PubMed:18688235]
subset: PSI-MOD-slim
comment: Root of the modification hierarchy.

[Term]
id: MOD:00064
name: N6-acetyl-L-lysine
def: "A protein modification that effectively converts an L-lysine residue to N6-acetyl-L-lysine." [PubMed:11125103, RESID:AA0055]
synonym: "AcLys" EXACT PSI-MOD-label []
synonym: "N6-acetyllysine" RELATED RESID-alternate [RESID:AA0055]
xref: DiffAvg: "42.04"
xref: Origin: "K"
xref: Unimod: "Unimod:1" ! Acetyl
subset: PSI-MOD-slim
is_a: MOD:00000 ! protein modification
is_a: MOD:00000 ! protein modification
relationship: has_functional_parent MOD:00037 ! L-lysine residue

[Term]
id: MOD:00078
name: L-citrulline
def: "A protein modification that effectively converts an L-arginine residue to L-citrulline, with a \\"5\\"-like\\" shift." []
synonym: "Cit" EXACT PSI-MOD-label []
xref: Origin: 'R'
is_a: MOD:00000 ! protein modification
is_a: MOD:99999 ! missing parent

[Term]
id: MOD:00001
name: incomplete stanza without definition

[Typedef]
id: has_functional_parent
name: has functional parent
def: "Typedef stanzas are not terms." []
"""


@pytest.fixture
def sample_obo() -> str:
    """Return the shared OBO sample text."""
    return SAMPLE_OBO


@pytest.fixture
def obo_file(tmp_path: Path) -> Path:
    """Write the sample OBO text to a temporary file and return its path."""
    path = tmp_path / "PSI-MOD.obo"
    path.write_text(SAMPLE_OBO, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate cached settings, the global loader and PSIMOD_* env vars."""
    for name in ("PSIMOD_OBO_PATH", "PSIMOD_ENCODING", "PSIMOD_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_ontology_loader.cache_clear()
    yield
    get_settings.cache_clear()
    get_ontology_loader.cache_clear()
