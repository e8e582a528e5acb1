"""MCP tools for blogMCP server.

This module defines the tools exposed by the MCP server:
- list_posts: Posts in feed order, filtered by tag, category or year
- read_post: Read a complete post by path, with its rendered HTML
- list_tags / list_categories: Labels with post counts
- rebuild: Run a full site rebuild
"""

from fastmcp import FastMCP

from blog_mcp.state import SiteState


def find_posts(
    state: SiteState,
    tag: str | None = None,
    category: str | None = None,
    year: int | None = None,
    limit: int = 20,
) -> list[dict]:
    """Summaries of matching posts, newest first. Filters combine with AND."""
    docs = state.index.feed
    if tag is not None:
        docs = state.index.tags.get(tag, [])
    if category is not None:
        docs = [doc for doc in docs if category in doc.categories]
    if year is not None:
        docs = [doc for doc in docs if doc.date.year == year]
    if limit > 0:
        docs = docs[:limit]
    return [doc.summary() for doc in docs]


def get_post(state: SiteState, path: str) -> dict:
    """Full post with metadata, Markdown body and rendered HTML."""
    doc = state.get_document(path)
    if doc is None:
        return {
            "path": path,
            "exists": False,
            "metadata": None,
            "content": None,
            "html": None,
            "warnings": [],
            "error": "Post not found",
        }

    rendered = state.builder.renderer.render(doc.body, path=doc.source_path, line_offset=doc.body_line)
    return {
        "path": doc.path,
        "exists": True,
        "metadata": doc.summary(),
        "content": doc.body,
        "html": rendered.html,
        "warnings": [str(w) for w in rendered.warnings],
        "error": None,
    }


def count_labels(labels: dict) -> list[dict]:
    return [{"label": label, "count": len(docs)} for label, docs in labels.items()]


def register_tools(mcp: FastMCP, state: SiteState) -> None:
    """Register all tools with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        state: Site state shared with the resources
    """

    @mcp.tool()
    def list_posts(
        tag: str | None = None,
        category: str | None = None,
        year: int | None = None,
        limit: int = 20,
    ) -> list[dict]:
        """List posts newest first.

        Args:
            tag: Only posts carrying this tag
            category: Only posts in this category
            year: Only posts published in this year
            limit: Maximum number of posts (default: 20, 0 for all)

        Returns:
            List of posts with path, title, date, url, description,
            categories and tags.
        """
        return find_posts(state, tag=tag, category=category, year=year, limit=limit)

    @mcp.tool()
    def read_post(path: str) -> dict:
        """Read a complete post.

        Args:
            path: Post path, e.g. "posts/swift-enums" (".md" or ".html" suffix accepted)

        Returns:
            Post with metadata, Markdown content, rendered html, render
            warnings, exists flag and error message if not found.
        """
        return get_post(state, path)

    @mcp.tool()
    def list_tags() -> list[dict]:
        """List every tag with its number of posts."""
        return count_labels(state.index.tags)

    @mcp.tool()
    def list_categories() -> list[dict]:
        """List every category with its number of posts."""
        return count_labels(state.index.categories)

    @mcp.tool()
    def rebuild() -> dict:
        """Rebuild the whole site from the content directory.

        Returns:
            Counts of documents and pages plus every build warning.
        """
        result = state.rebuild()
        return {
            "documents": len(result.documents),
            "pages": len(result.pages),
            "warnings": [str(w) for w in result.warnings],
        }
