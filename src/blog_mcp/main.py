"""Main entry point for blogMCP: build the site, optionally serve it over MCP."""

import argparse
import logging
import sys
from pathlib import Path

from fastmcp import FastMCP

from blog_mcp.config import Config, get_config
from blog_mcp.pipeline import SiteBuilder
from blog_mcp.resources import register_resources
from blog_mcp.state import SiteState
from blog_mcp.tools import register_tools

logger = logging.getLogger(__name__)


def create_server(config: Config | None = None, state: SiteState | None = None) -> FastMCP:
    """Create and configure the MCP server with all components.

    Args:
        config: Configuration instance. Defaults to the global get_config().
        state: Already loaded site state. Loaded from the content root if omitted.
    """
    if config is None:
        config = get_config()

    mcp = FastMCP(
        name="blogMCP",
        instructions=(
            "blogMCP provides read access to a blog of long-form posts and notes. "
            "Use list_posts to browse by tag, category or year, read_post to read a "
            "post, or the blog:// resources for the feed and label listings."
        ),
    )

    if state is None:
        logger.info("Loading site from %s", config.content_root)
        state = SiteState(SiteBuilder(config))
        state.refresh()

    logger.info("Registering resources...")
    register_resources(mcp, state)

    logger.info("Registering tools...")
    register_tools(mcp, state)

    logger.info("Server configured successfully")
    return mcp


def main() -> None:
    """Main function - builds the site and optionally starts the MCP server."""
    parser = argparse.ArgumentParser(description="blogMCP - static blog builder and MCP server")
    parser.add_argument("--content", type=Path, help="Content directory (overrides BLOG_CONTENT_ROOT)")
    parser.add_argument("--output", type=Path, help="Output directory (overrides BLOG_OUTPUT_DIR)")
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the MCP server after building",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when the build emits warnings",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    # Configure logging here to avoid side effects on import
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = Config.from_env(content_root=args.content, output_dir=args.output)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    logger.info("=" * 50)
    logger.info("blogMCP starting...")
    logger.info("  CONTENT: %s", config.content_root)
    logger.info("  OUTPUT:  %s", config.output_dir)
    logger.info("  DRAFTS:  %s", "included" if config.include_drafts else "skipped")
    logger.info("=" * 50)

    try:
        builder = SiteBuilder(config)
        result = builder.build()

        if args.serve:
            state = SiteState(builder)
            state.apply(result)
            mcp = create_server(config, state)
            logger.info("Starting MCP server on port %s...", config.port)
            mcp.run(transport="sse", host="0.0.0.0", port=config.port)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception:
        logger.exception("Build error")
        sys.exit(1)

    if args.strict and result.warnings:
        logger.error("Build emitted %d warnings (strict mode)", len(result.warnings))
        sys.exit(1)


if __name__ == "__main__":
    main()
