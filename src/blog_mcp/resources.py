"""MCP Resources for blogMCP.

Resources expose the built index as read-only Markdown listings.
"""

from urllib.parse import quote

from blog_mcp.pipeline import Document
from blog_mcp.state import SiteState

LABEL_KINDS = {"tags": "Tag", "categories": "Category"}


def _post_line(doc: Document) -> str:
    line = f"- {doc.date.isoformat()} [{doc.title}]({quote(doc.url)}) (`{doc.path}`)"
    if doc.description:
        line += f": {doc.description}"
    return line + "\n"


def _labels(state: SiteState, kind: str) -> dict[str, list[Document]]:
    if kind not in LABEL_KINDS:
        raise ValueError(f"Unknown label kind '{kind}'")
    return getattr(state.index, kind)


def get_feed_resource(state: SiteState) -> str:
    """Resource: blog://feed

    Every post, newest first.
    """
    feed = state.index.feed
    result_lines = ["# Feed\n\n", f"Total posts: {len(feed)}\n\n"]
    result_lines.extend(_post_line(doc) for doc in feed)
    return "".join(result_lines)


def get_labels_resource(state: SiteState, kind: str) -> str:
    """Resource: blog://tags and blog://categories"""
    labels = _labels(state, kind)
    result_lines = [f"# {LABEL_KINDS[kind]} index\n\n"]
    for label, docs in labels.items():
        post_word = "post" if len(docs) == 1 else "posts"
        result_lines.append(f"- {label} ({len(docs)} {post_word})\n")
    return "".join(result_lines)


def get_label_resource(state: SiteState, kind: str, label: str) -> str:
    """Resource: blog://tags/{tag} and blog://categories/{category}

    Raises:
        ValueError: If no post carries the label.
    """
    labels = _labels(state, kind)
    if label not in labels:
        raise ValueError(f"{LABEL_KINDS[kind]} '{label}' not found")

    result_lines = [f"# {LABEL_KINDS[kind]}: {label}\n\n"]
    result_lines.extend(_post_line(doc) for doc in labels[label])
    return "".join(result_lines)


def register_resources(mcp, state: SiteState):
    """Register all resources with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        state: Site state shared with the tools
    """

    @mcp.resource("blog://feed")
    def feed():
        """All posts, newest first."""
        return get_feed_resource(state)

    @mcp.resource("blog://tags")
    def tags():
        """Every tag with its post count."""
        return get_labels_resource(state, "tags")

    @mcp.resource("blog://categories")
    def categories():
        """Every category with its post count."""
        return get_labels_resource(state, "categories")

    @mcp.resource("blog://tags/{tag}")
    def tag_detail(tag: str):
        """Posts carrying a tag."""
        return get_label_resource(state, "tags", tag)

    @mcp.resource("blog://categories/{category}")
    def category_detail(category: str):
        """Posts in a category."""
        return get_label_resource(state, "categories", category)
