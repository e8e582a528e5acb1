"""File walker for discovering Markdown sources under the content root."""

import hashlib
from collections.abc import Iterator
from pathlib import Path

from blog_mcp.pipeline.models import SourceFile

MARKDOWN_SUFFIXES = (".md", ".markdown")


def compute_hash(content: bytes) -> str:
    """Compute SHA-256 hash of content."""
    return hashlib.sha256(content).hexdigest()


def _is_skipped(parts: tuple[str, ...]) -> bool:
    # Hidden entries anywhere; underscore only for directories (_site, _drafts)
    if any(part.startswith(".") for part in parts):
        return True
    return any(part.startswith("_") for part in parts[:-1])


def walk_content_root(content_root: Path) -> Iterator[SourceFile]:
    """
    Walk the content root and yield a SourceFile for each Markdown file.

    Files are yielded sorted by relative path so that every build sees the
    same order. Nothing is read here; the store reads each file once.

    Structure expected:
    <content_root>/
    ├── about.md
    ├── posts/
    │   ├── swift-enums.md
    │   └── swift-closures.md
    └── notes/
        └── swiftdata/
            └── model-container.md
    """
    if not content_root.exists():
        return

    candidates = [
        file_path
        for file_path in content_root.rglob("*")
        if file_path.suffix.lower() in MARKDOWN_SUFFIXES and file_path.is_file()
    ]

    for file_path in sorted(candidates, key=lambda p: p.relative_to(content_root).as_posix()):
        relative_parts = file_path.relative_to(content_root).parts
        if _is_skipped(relative_parts):
            continue

        # First directory level, or "" for root files
        collection = relative_parts[0] if len(relative_parts) > 1 else ""

        yield SourceFile(
            path=file_path,
            relative_path=file_path.relative_to(content_root).as_posix(),
            collection=collection,
            filename=file_path.name,
        )
