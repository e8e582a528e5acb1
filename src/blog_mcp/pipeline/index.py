"""Index builder: aggregates documents into navigable collections."""

import re
import unicodedata
from collections.abc import Iterable

from blog_mcp.pipeline.models import Document, SiteIndex


def feed_sort_key(document: Document) -> tuple[int, str]:
    """Newest first; documents sharing a date are ordered by path."""
    return (-document.date.toordinal(), document.path)


def slugify(label: str) -> str:
    """URL-safe page name for a tag or category label."""
    text = unicodedata.normalize("NFKC", label).lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "untitled"


def build_index(documents: Iterable[Document]) -> SiteIndex:
    """
    Build the category index, tag index, yearly archive and feed.

    The result depends only on the set of documents, never on the order they
    are passed in. Lists inherit the feed order because they are filled while
    walking the already-sorted feed.
    """
    feed = sorted(documents, key=feed_sort_key)

    categories: dict[str, list[Document]] = {}
    tags: dict[str, list[Document]] = {}
    archive: dict[int, list[Document]] = {}

    for doc in feed:
        for label in doc.categories:
            categories.setdefault(label, []).append(doc)
        for label in doc.tags:
            tags.setdefault(label, []).append(doc)
        archive.setdefault(doc.date.year, []).append(doc)

    return SiteIndex(
        categories={label: categories[label] for label in sorted(categories)},
        tags={label: tags[label] for label in sorted(tags)},
        archive={year: archive[year] for year in sorted(archive, reverse=True)},
        feed=feed,
    )
