"""Content store that loads the document set from the filesystem."""

import logging
from pathlib import Path, PurePosixPath

from blog_mcp.pipeline.models import BuildWarning, Document, SourceFile
from blog_mcp.pipeline.parser import FrontmatterError, parse_frontmatter
from blog_mcp.pipeline.walker import compute_hash, walk_content_root

logger = logging.getLogger(__name__)


def document_path(relative_path: str) -> str:
    """Document key for a source: its relative path without the suffix."""
    return PurePosixPath(relative_path).with_suffix("").as_posix()


class ContentStore:
    """
    The set of source documents under a content root.

    The filesystem is always the source of truth. Every call to load() reads
    the whole tree again; nothing is cached between loads.
    """

    def __init__(self, content_root: Path, include_drafts: bool = False):
        """
        Initialize the store.

        Args:
            content_root: Directory holding the Markdown sources
            include_drafts: Keep documents marked ``published: false`` or ``draft: true``
        """
        self.content_root = content_root
        self.include_drafts = include_drafts

    def load(self) -> tuple[list[Document], list[BuildWarning]]:
        """
        Read and parse every source.

        Documents that fail to parse are left out and reported as warnings.
        When two sources map to the same document path, the later one in walk
        order wins.

        Returns:
            Tuple of (documents sorted by path, warnings).
        """
        logger.info("Loading content from %s", self.content_root)
        documents: dict[str, Document] = {}
        warnings: list[BuildWarning] = []

        for source in walk_content_root(self.content_root):
            doc = self._load_file(source, warnings)
            if doc is None:
                continue

            existing = documents.get(doc.path)
            if existing is not None:
                warning = BuildWarning(
                    path=source.relative_path,
                    message=f"duplicate document path '{doc.path}' replaces {existing.source_path}",
                )
                logger.warning("%s", warning)
                warnings.append(warning)
            documents[doc.path] = doc

        logger.info(
            "Loaded %d documents (%d warnings)", len(documents), len(warnings)
        )
        return [documents[path] for path in sorted(documents)], warnings

    def _load_file(self, source: SourceFile, warnings: list[BuildWarning]) -> Document | None:
        """Parse a single source, recording a warning when it is unusable."""
        # Validate path is within the content root (prevent symlink escapes)
        try:
            source.path.resolve().relative_to(self.content_root.resolve())
        except ValueError:
            self._warn(warnings, source, "file resolves outside the content root")
            return None
        except OSError as e:
            self._warn(warnings, source, f"cannot resolve path: {e}")
            return None

        try:
            raw = source.path.read_bytes()
        except OSError as e:
            self._warn(warnings, source, f"cannot read file: {e.strerror or e}")
            return None

        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            self._warn(warnings, source, f"invalid UTF-8 encoding ({e.reason})")
            return None
        # Same newline handling as text-mode reads
        content = content.replace("\r\n", "\n").replace("\r", "\n")

        try:
            metadata, body = parse_frontmatter(content, source.relative_path)
        except FrontmatterError as e:
            self._warn(warnings, source, f"excluded: {e}")
            return None

        if metadata.draft and not self.include_drafts:
            logger.debug("Skipping draft %s", source.relative_path)
            return None

        logger.debug("Parsed %s", source.relative_path)
        return Document(
            path=document_path(source.relative_path),
            source_path=source.relative_path,
            collection=source.collection,
            title=metadata.title,
            date=metadata.date,
            description=metadata.description,
            categories=metadata.categories,
            tags=metadata.tags,
            body=body,
            body_line=metadata.body_line,
            content_hash=compute_hash(raw),
            extra=metadata.extra,
        )

    @staticmethod
    def _warn(warnings: list[BuildWarning], source: SourceFile, message: str) -> None:
        warning = BuildWarning(path=source.relative_path, message=message)
        logger.warning("%s", warning)
        warnings.append(warning)
