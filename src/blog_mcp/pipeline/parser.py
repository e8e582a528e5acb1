"""Parser for YAML front matter."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime

import yaml

logger = logging.getLogger(__name__)

# Opening "---" on the first line, closing "---" (or YAML's "...") on its own line
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

# Jekyll-style dates that datetime.fromisoformat() rejects
DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)

# Keys with a dedicated field; everything else lands in FrontmatterData.extra
RESERVED_KEYS = {"title", "description", "date", "categories", "category", "tags", "tag"}


class FrontmatterError(ValueError):
    """Raised when a document's required metadata is missing or malformed."""


@dataclass
class FrontmatterData:
    """Parsed front matter."""

    title: str = ""
    date: date | None = None
    description: str | None = None
    categories: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)
    draft: bool = False
    body_line: int = 1
    extra: dict = field(default_factory=dict)


def split_frontmatter(content: str) -> tuple[str | None, str, int]:
    """
    Split raw text into its front matter block and body.

    Returns:
        Tuple of (yaml_text or None, body, body_line) where body_line is the
        1-based line of ``content`` on which the body starts.
    """
    text = content.lstrip("\ufeff")
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return None, text, 1

    rest = text[match.end() :]
    body = rest.lstrip("\r\n")
    skipped = rest[: len(rest) - len(body)]
    body_line = match.group(0).count("\n") + skipped.count("\n") + 1
    return match.group(1), body, body_line


def strip_frontmatter(content: str) -> str:
    """Remove YAML front matter from content."""
    _, body, _ = split_frontmatter(content)
    return body


def parse_date(value: object) -> date:
    """Coerce a front matter date value to a calendar date.

    Raises:
        ValueError: If the value is not a recognizable, valid date.
    """
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    raise ValueError(f"unrecognized date {value!r}")


def parse_labels(*values: object) -> frozenset[str]:
    """Normalize category/tag values into a set of labels.

    Lists are taken item by item. Strings split on commas when they contain
    one, otherwise on whitespace.
    """
    labels: set[str] = set()
    for value in values:
        if value is None:
            continue
        if isinstance(value, str):
            items = value.split(",") if "," in value else value.split()
        elif isinstance(value, (list, tuple, set)):
            items = [str(item) for item in value if item is not None]
        else:
            items = [str(value)]
        labels.update(item.strip() for item in items if item.strip())
    return frozenset(labels)


def _scalar_source(yaml_text: str, key: str) -> str | None:
    """Text of a top-level scalar as written, before YAML resolves its type."""
    node = yaml.compose(yaml_text, Loader=yaml.SafeLoader)
    if not isinstance(node, yaml.MappingNode):
        return None
    for key_node, value_node in node.value:
        if key_node.value == key and isinstance(value_node, yaml.ScalarNode):
            return value_node.value
    return None


def _parse_title(value: object, yaml_text: str) -> str | None:
    if value is None or isinstance(value, (list, dict)):
        return None
    if not isinstance(value, str):
        # Dates, booleans and numbers keep the text as written
        value = _scalar_source(yaml_text, "title") or str(value)
    title = value.strip()
    return title or None


def parse_frontmatter(content: str, file_path: str) -> tuple[FrontmatterData, str]:
    """
    Parse YAML front matter from markdown content.

    Args:
        content: The full markdown content
        file_path: Path relative to the content root, used in log messages

    Returns:
        Tuple of (FrontmatterData, content_without_frontmatter)

    Raises:
        FrontmatterError: If the front matter is absent, is not a YAML mapping,
            or lacks a valid title or date. Every problem is reported at once.
    """
    yaml_text, body, body_line = split_frontmatter(content)
    if yaml_text is None:
        raise FrontmatterError("missing front matter")

    try:
        raw = yaml.safe_load(yaml_text)
    except (yaml.YAMLError, ValueError) as e:
        # PyYAML raises ValueError for impossible timestamps like 2022-02-30
        logger.debug("Invalid YAML front matter in %s: %s", file_path, e)
        raise FrontmatterError(f"invalid YAML front matter: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise FrontmatterError("front matter is not a mapping")

    problems: list[str] = []
    data = FrontmatterData(body_line=body_line)

    if "title" not in raw:
        problems.append("missing required field 'title'")
    else:
        title = _parse_title(raw["title"], yaml_text)
        if title is None:
            problems.append(f"malformed title {raw['title']!r}")
        else:
            data.title = title

    if "date" not in raw or raw["date"] is None:
        problems.append("missing required field 'date'")
    else:
        try:
            data.date = parse_date(raw["date"])
        except ValueError as e:
            problems.append(f"malformed date: {e}")

    if problems:
        raise FrontmatterError("; ".join(problems))

    description = raw.get("description") or raw.get("excerpt")
    if description is not None:
        data.description = str(description).strip() or None

    data.categories = parse_labels(raw.get("categories"), raw.get("category"))
    data.tags = parse_labels(raw.get("tags"), raw.get("tag"))
    data.draft = raw.get("published") is False or raw.get("draft") is True
    data.extra = {key: value for key, value in raw.items() if key not in RESERVED_KEYS}

    return data, body


def serialize_frontmatter(data: FrontmatterData) -> str:
    """Render front matter back to a ``---`` delimited YAML block.

    Labels are written sorted so that the output is stable.
    """
    fm: dict = {"title": data.title}
    if data.description:
        fm["description"] = data.description
    fm["date"] = data.date
    fm["categories"] = sorted(data.categories)
    fm["tags"] = sorted(data.tags)
    fm.update(data.extra)

    yaml_text = yaml.safe_dump(
        fm, allow_unicode=True, sort_keys=False, default_flow_style=False, width=1000
    )
    return f"---\n{yaml_text}---\n"
