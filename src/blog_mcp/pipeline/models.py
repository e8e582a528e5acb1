"""Data models for the publishing pipeline."""

import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path


@dataclass
class SourceFile:
    """A Markdown source discovered under the content root."""

    path: Path  # Absolute path
    relative_path: str  # Posix path relative to the content root
    collection: str  # posts, notes, etc. or "" for root files
    filename: str


@dataclass
class Document:
    """A parsed post or note."""

    path: str  # Relative path without suffix, e.g. "posts/swift-enums"
    source_path: str
    title: str
    date: date
    collection: str = ""
    description: str | None = None
    categories: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)
    body: str = ""
    body_line: int = 1  # Line of the source where the body starts
    content_hash: str = ""
    extra: dict = field(default_factory=dict)

    @property
    def url(self) -> str:
        return f"{self.path}.html"

    def summary(self) -> dict:
        """Metadata view used by listings and the manifest."""
        return {
            "path": self.path,
            "title": self.title,
            "date": self.date.isoformat(),
            "url": self.url,
            "description": self.description,
            "categories": sorted(self.categories),
            "tags": sorted(self.tags),
        }


@dataclass(frozen=True)
class BuildWarning:
    """A non-fatal problem found while building."""

    path: str
    message: str
    line: int | None = None

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.path}:{self.line}: {self.message}"
        return f"{self.path}: {self.message}"


@dataclass
class SiteIndex:
    """Navigable collections derived from the document set.

    Every list is ordered by date descending, ties broken by path.
    """

    categories: dict[str, list[Document]] = field(default_factory=dict)
    tags: dict[str, list[Document]] = field(default_factory=dict)
    archive: dict[int, list[Document]] = field(default_factory=dict)
    feed: list[Document] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Manifest of the index: document paths per label plus the feed."""
        return {
            "categories": {
                label: [doc.path for doc in docs] for label, docs in self.categories.items()
            },
            "tags": {label: [doc.path for doc in docs] for label, docs in self.tags.items()},
            "archive": {
                str(year): [doc.path for doc in docs] for year, docs in self.archive.items()
            },
            "feed": [doc.summary() for doc in self.feed],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True, ensure_ascii=False) + "\n"


@dataclass
class RenderedBody:
    """Display-ready HTML for a document body."""

    html: str
    warnings: list[BuildWarning] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)


@dataclass
class BuildResult:
    """Outcome of a full rebuild."""

    documents: list[Document]
    index: SiteIndex
    warnings: list[BuildWarning] = field(default_factory=list)
    pages: list[str] = field(default_factory=list)
