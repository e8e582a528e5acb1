"""
Publishing pipeline for blogMCP.

Content store -> front matter parser -> index builder -> renderer -> site writer.
The Markdown sources are the source of truth; everything else is rebuilt from
them on every build.
"""

from blog_mcp.pipeline.index import build_index, feed_sort_key, slugify
from blog_mcp.pipeline.models import (
    BuildResult,
    BuildWarning,
    Document,
    RenderedBody,
    SiteIndex,
    SourceFile,
)
from blog_mcp.pipeline.parser import FrontmatterError, parse_frontmatter, serialize_frontmatter
from blog_mcp.pipeline.renderer import MarkdownRenderer
from blog_mcp.pipeline.site import SiteBuilder
from blog_mcp.pipeline.store import ContentStore
from blog_mcp.pipeline.walker import walk_content_root

__all__ = [
    "BuildResult",
    "BuildWarning",
    "ContentStore",
    "Document",
    "FrontmatterError",
    "MarkdownRenderer",
    "RenderedBody",
    "SiteBuilder",
    "SiteIndex",
    "SourceFile",
    "build_index",
    "feed_sort_key",
    "parse_frontmatter",
    "serialize_frontmatter",
    "slugify",
    "walk_content_root",
]
