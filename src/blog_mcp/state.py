"""In-memory view of the latest build, shared by MCP tools and resources."""

import logging
from pathlib import PurePosixPath

from blog_mcp.pipeline import BuildResult, BuildWarning, Document, SiteBuilder, SiteIndex

logger = logging.getLogger(__name__)


class SiteState:
    """Holds the documents and index of the most recent load or build.

    The new index replaces the old one only after a pass has finished, so
    readers never see a half-built index.
    """

    def __init__(self, builder: SiteBuilder):
        self.builder = builder
        self.documents: list[Document] = []
        self.index = SiteIndex()
        self.warnings: list[BuildWarning] = []
        self._by_path: dict[str, Document] = {}

    def refresh(self) -> None:
        """Reload every document and rebuild the index, without writing pages."""
        documents, index, warnings = self.builder.load()
        self._swap(documents, index, warnings)

    def rebuild(self) -> BuildResult:
        """Run a full site build and adopt its result."""
        result = self.builder.build()
        self.apply(result)
        return result

    def apply(self, result: BuildResult) -> None:
        self._swap(result.documents, result.index, result.warnings)

    def get_document(self, path: str) -> Document | None:
        """Look up a document by path, with or without a .md/.html suffix."""
        key = path.strip().lstrip("/")
        if key in self._by_path:
            return self._by_path[key]
        pure = PurePosixPath(key)
        if pure.suffix in (".md", ".markdown", ".html"):
            return self._by_path.get(pure.with_suffix("").as_posix())
        return None

    def _swap(
        self, documents: list[Document], index: SiteIndex, warnings: list[BuildWarning]
    ) -> None:
        self.documents = documents
        self.index = index
        self.warnings = warnings
        self._by_path = {doc.path: doc for doc in documents}
        logger.debug("Site state updated: %d documents", len(documents))
