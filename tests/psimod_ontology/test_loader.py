"""Tests for psimod_ontology.loader."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from psimod_common.errors import CatalogLoadError, ErrorCode, OntologyParseError
from psimod_common.settings import load_settings
from psimod_ontology.loader import LoadState, OntologyLoader, get_ontology_loader

if TYPE_CHECKING:
    from pathlib import Path

BROKEN_OBO = '[Term]\nid: MOD:1\nname: broken\ndef: "never closed\n'


class _CountingSource:
    def __init__(self, text: str) -> None:
        self.text = text
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return self.text


class TestLoad:
    """Synchronous loading."""

    def test_initial_state(self) -> None:
        """A fresh loader is uninitialized with an empty catalog."""
        loader = OntologyLoader(source=lambda: "")
        assert loader.state is LoadState.UNINITIALIZED
        assert loader.loaded is False
        assert loader.catalog.all_terms() == []
        assert loader.catalog.search("") == []

    def test_load_from_text(self, sample_obo: str) -> None:
        """Explicit text is parsed and exposed through the catalog."""
        loader = OntologyLoader()
        catalog = loader.load(sample_obo)
        assert loader.state is LoadState.LOADED
        assert loader.loaded is True
        assert catalog is loader.catalog
        assert catalog.term_count == 3
        assert catalog.data_version() == "1.031.6"

    def test_load_is_idempotent(self, sample_obo: str) -> None:
        """A second load returns the same catalog without reading again."""
        source = _CountingSource(sample_obo)
        loader = OntologyLoader(source=source)
        first = loader.load()
        second = loader.load()
        assert first is second
        assert source.calls == 1

    def test_empty_result_is_reloaded(self, sample_obo: str) -> None:
        """A load that produced no terms does not count as loaded."""
        loader = OntologyLoader()
        loader.load("format-version: 1.2\n")
        assert loader.state is LoadState.LOADED
        assert loader.loaded is False
        assert loader.load(sample_obo).term_count == 3

    def test_load_from_settings_path(self, obo_file: Path) -> None:
        """The configured obo_path is read with the configured encoding."""
        loader = OntologyLoader(settings=load_settings(obo_path=obo_file))
        assert [term.id for term in loader.load().all_terms()] == [
            "MOD:00000",
            "MOD:00064",
            "MOD:00078",
        ]

    def test_reset(self, sample_obo: str) -> None:
        """reset drops the catalog and allows a fresh load."""
        source = _CountingSource(sample_obo)
        loader = OntologyLoader(source=source)
        loader.load()
        loader.reset()
        assert loader.state is LoadState.UNINITIALIZED
        assert loader.catalog.term_count == 0
        loader.load()
        assert source.calls == 2

    def test_success_is_logged(self, sample_obo: str, caplog: pytest.LogCaptureFixture) -> None:
        """A successful load emits one structured success record."""
        with caplog.at_level(logging.INFO, logger="psimod_ontology.loader"):
            OntologyLoader().load(sample_obo)
        records = [r for r in caplog.records if r.name == "psimod_ontology.loader"]
        assert len(records) == 1
        record = records[0]
        assert record.__dict__["status"] == "success"
        assert record.__dict__["operation"] == "ontology_load"
        assert record.__dict__["term_count"] == 3
        assert record.__dict__["data_version"] == "1.031.6"


class TestLoadFailures:
    """Failures leave an empty catalog and a recorded error."""

    def test_parse_failure_clears_catalog(self) -> None:
        """A fatal parse error yields zero terms and one recorded error."""
        loader = OntologyLoader()
        with pytest.raises(OntologyParseError) as excinfo:
            loader.load(BROKEN_OBO)
        assert loader.state is LoadState.FAILED
        assert loader.error is excinfo.value
        assert loader.catalog.all_terms() == []
        assert loader.catalog.by_id("MOD:1") is None

    def test_failure_replaces_previous_catalog(self, sample_obo: str) -> None:
        """A failed reload after an empty load leaves nothing stale behind."""
        loader = OntologyLoader()
        loader.load("data-version: 1\n")
        with pytest.raises(OntologyParseError):
            loader.load(BROKEN_OBO)
        assert loader.catalog.data_version() is None
        assert loader.load(sample_obo).term_count == 3
        assert loader.error is None
        assert loader.problem is None

    def test_problem_details_are_recorded(self) -> None:
        """The failure is also available as validated Problem Details."""
        loader = OntologyLoader()
        with pytest.raises(OntologyParseError):
            loader.load(BROKEN_OBO)
        problem = loader.problem
        assert problem is not None
        assert problem["status"] == 422
        assert problem["code"] == ErrorCode.ONTOLOGY_PARSE_ERROR.value
        assert problem["instance"] == "urn:psimod:ontology_load"
        assert problem["errors"]["line_number"] == 4
        assert problem["errors"]["field"] == "def"

    def test_missing_file(self, tmp_path: Path) -> None:
        """An unreadable path becomes a CatalogLoadError."""
        missing = tmp_path / "absent.obo"
        loader = OntologyLoader(settings=load_settings(obo_path=missing))
        with pytest.raises(CatalogLoadError) as excinfo:
            loader.load()
        assert excinfo.value.context["path"] == str(missing)
        assert isinstance(excinfo.value.__cause__, OSError)
        assert loader.state is LoadState.FAILED

    def test_no_source_configured(self) -> None:
        """Without text, source or obo_path there is nothing to load."""
        loader = OntologyLoader(settings=load_settings())
        with pytest.raises(CatalogLoadError, match="No OBO source configured"):
            loader.load()

    def test_wrong_encoding(self, tmp_path: Path) -> None:
        """Bytes that do not decode become a CatalogLoadError."""
        path = tmp_path / "latin.obo"
        path.write_bytes(b'[Term]\nid: MOD:1\nname: caf\xe9\ndef: "x" []\n')
        loader = OntologyLoader(settings=load_settings(obo_path=path))
        with pytest.raises(CatalogLoadError):
            loader.load()

    def test_source_os_error(self) -> None:
        """I/O errors raised by a source callable are wrapped."""

        def source() -> str:
            msg = "disk gone"
            raise OSError(msg)

        with pytest.raises(CatalogLoadError, match="Failed to read OBO source"):
            OntologyLoader(source=source).load()

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failed load emits a structured error record."""
        with (
            caplog.at_level(logging.ERROR, logger="psimod_ontology.loader"),
            pytest.raises(OntologyParseError),
        ):
            OntologyLoader().load(BROKEN_OBO)
        record = next(r for r in caplog.records if r.name == "psimod_ontology.loader")
        assert record.levelno == logging.ERROR
        assert record.__dict__["status"] == "error"
        assert record.__dict__["error_type"] == "OntologyParseError"


class TestAsyncLoad:
    """Off-thread loading."""

    @pytest.mark.asyncio
    async def test_aload(self, sample_obo: str) -> None:
        """aload parses in a worker thread and commits the catalog."""
        loader = OntologyLoader(source=lambda: sample_obo)
        catalog = await loader.aload()
        assert loader.state is LoadState.LOADED
        assert catalog.term_count == 3
        assert await loader.aload() is catalog

    @pytest.mark.asyncio
    async def test_aload_failure(self) -> None:
        """Errors from the worker propagate and leave the loader failed."""
        loader = OntologyLoader()
        with pytest.raises(OntologyParseError):
            await loader.aload(BROKEN_OBO)
        assert loader.state is LoadState.FAILED
        assert loader.catalog.term_count == 0


class TestProcessLoader:
    """The process-wide loader."""

    def test_singleton(self) -> None:
        """get_ontology_loader returns the same instance."""
        assert get_ontology_loader() is get_ontology_loader()

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch, obo_file: Path) -> None:
        """PSIMOD_OBO_PATH configures the process-wide loader."""
        monkeypatch.setenv("PSIMOD_OBO_PATH", str(obo_file))
        catalog = get_ontology_loader().load()
        assert catalog.by_id("MOD:00078") is not None
