"""Ontology ingest and caching helpers.

:class:`OntologyLoader` holds the process-wide catalog and walks it through
``uninitialized -> loading -> loaded | failed``. Loading is idempotent: once
a non-empty catalog is loaded, further calls return it without reparsing.
A failed load clears whatever was loaded before, so callers never see a
stale catalog next to an error.
"""

from __future__ import annotations

import asyncio
import time
from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING, Final, TypeAlias

from psimod_common.errors import CatalogLoadError, PsimodError
from psimod_common.logging import get_logger, with_fields
from psimod_common.settings import OntologySettings, get_settings
from psimod_ontology.catalog import OntologyCatalog
from psimod_ontology.parser import OboParser

if TYPE_CHECKING:
    from collections.abc import Callable

    from psimod_common.navmap_types import NavMap
    from psimod_common.problem_details import ProblemDetails

__all__ = ["LoadState", "OntologyLoader", "TextSource", "get_ontology_loader"]

__navmap__: Final[NavMap] = {
    "title": "psimod_ontology.loader",
    "synopsis": "Ontology ingest and caching helpers",
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
        "stability": "experimental",
        "since": "0.1.0",
    },
    "symbols": {
        "OntologyLoader": {
            "owner": "@ontology",
            "stability": "experimental",
            "since": "0.1.0",
            "side_effects": ["fs", "thread"],
            "thread_safety": "not-threadsafe",
        },
    },
}

logger = get_logger(__name__)

_OPERATION: Final[str] = "ontology_load"

# [nav:anchor TextSource]
TextSource: TypeAlias = "Callable[[], str]"


# [nav:anchor LoadState]
class LoadState(StrEnum):
    """Lifecycle of the loaded catalog."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


# [nav:anchor OntologyLoader]
class OntologyLoader:
    """Load an OBO file once and keep the resulting catalog.

    Parameters
    ----------
    settings : OntologySettings | None, optional
        Where to read the OBO file from. Process settings are used when omitted.
    source : TextSource | None, optional
        Zero-argument callable returning the OBO text; takes precedence over
        ``settings.obo_path``. Defaults to None.
    parser : OboParser | None, optional
        Parser instance. Defaults to a new :class:`OboParser`.

    Notes
    -----
    Overlapping loads against the same loader are the caller's
    responsibility to avoid.
    """

    def __init__(
        self,
        settings: OntologySettings | None = None,
        source: TextSource | None = None,
        parser: OboParser | None = None,
    ) -> None:
        self._settings = settings
        self._source = source
        self._parser = parser or OboParser()
        self._catalog = OntologyCatalog.empty()
        self.state = LoadState.UNINITIALIZED
        self.error: Exception | None = None
        self.problem: ProblemDetails | None = None

    @property
    def catalog(self) -> OntologyCatalog:
        """Current catalog; empty unless the last load succeeded."""
        return self._catalog

    @property
    def loaded(self) -> bool:
        """True when a load succeeded and produced at least one term."""
        return self.state is LoadState.LOADED and len(self._catalog) > 0

    def load(self, text: str | None = None) -> OntologyCatalog:
        """Parse the ontology on the calling thread unless already loaded.

        Parameters
        ----------
        text : str | None, optional
            OBO text to parse. Read from the configured source when omitted.

        Returns
        -------
        OntologyCatalog
            The loaded catalog.

        Raises
        ------
        OntologyParseError
            If the text breaks the OBO grammar.
        CatalogLoadError
            If the source cannot be read.
        """
        if self.loaded:
            return self._catalog
        started = self._begin()
        try:
            catalog = self._build(text)
        except Exception as exc:
            self._fail(exc, started)
            raise
        return self._commit(catalog, started)

    async def aload(self, text: str | None = None) -> OntologyCatalog:
        """Like :meth:`load`, with read, parse and link run in a worker thread.

        The catalog is swapped in only after the worker finishes, so awaiting
        callers observe either the old state or the complete new catalog.
        """
        if self.loaded:
            return self._catalog
        started = self._begin()
        try:
            catalog = await asyncio.to_thread(self._build, text)
        except Exception as exc:
            self._fail(exc, started)
            raise
        return self._commit(catalog, started)

    def reset(self) -> None:
        """Drop the catalog and return to ``uninitialized``."""
        self._catalog = OntologyCatalog.empty()
        self.state = LoadState.UNINITIALIZED
        self.error = None
        self.problem = None

    def _begin(self) -> float:
        self.state = LoadState.LOADING
        self.error = None
        self.problem = None
        return time.monotonic()

    def _build(self, text: str | None) -> OntologyCatalog:
        if text is None:
            text = self._read_source()
        return OntologyCatalog.from_result(self._parser.parse(text))

    def _read_source(self) -> str:
        if self._source is not None:
            try:
                return self._source()
            except (OSError, UnicodeDecodeError) as exc:
                msg = f"Failed to read OBO source: {exc}"
                raise CatalogLoadError(msg, cause=exc) from exc

        settings = self._settings or get_settings()
        path = settings.obo_path
        if path is None:
            msg = "No OBO source configured; set PSIMOD_OBO_PATH or pass a source"
            raise CatalogLoadError(msg)
        try:
            return path.read_text(encoding=settings.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Failed to read OBO file {path}: {exc}"
            raise CatalogLoadError(msg, cause=exc, context={"path": str(path)}) from exc

    def _commit(self, catalog: OntologyCatalog, started: float) -> OntologyCatalog:
        self._catalog = catalog
        self.state = LoadState.LOADED
        with with_fields(logger, operation=_OPERATION) as log:
            log.log_success(
                "Ontology loaded",
                duration_ms=(time.monotonic() - started) * 1000,
                term_count=catalog.term_count,
                data_version=catalog.data_version(),
            )
        return catalog

    def _fail(self, exc: Exception, started: float) -> None:
        self._catalog = OntologyCatalog.empty()
        self.state = LoadState.FAILED
        self.error = exc
        self.problem = (
            exc.to_problem_details(instance=f"urn:psimod:{_OPERATION}")
            if isinstance(exc, PsimodError)
            else None
        )
        with with_fields(logger, operation=_OPERATION) as log:
            log.log_failure(
                "Ontology load failed",
                exception=exc,
                duration_ms=(time.monotonic() - started) * 1000,
            )


# [nav:anchor get_ontology_loader]
@lru_cache(maxsize=1)
def get_ontology_loader() -> OntologyLoader:
    """Return the process-wide loader."""
    return OntologyLoader()
