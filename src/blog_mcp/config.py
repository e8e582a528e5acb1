"""Configuration module for blogMCP.

Loads configuration from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path


def _parse_int(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"Invalid {name} value '{value}': {e}") from e


def _parse_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class Config:
    """Application configuration."""

    content_root: Path
    output_dir: Path
    site_title: str
    feed_limit: int
    include_drafts: bool
    port: int

    @classmethod
    def from_env(
        cls,
        content_root: Path | None = None,
        output_dir: Path | None = None,
    ) -> "Config":
        """Load configuration from environment variables.

        Args:
            content_root: If provided, overrides BLOG_CONTENT_ROOT.
            output_dir: If provided, overrides BLOG_OUTPUT_DIR.
        """
        if content_root is None:
            content_root = Path(os.getenv("BLOG_CONTENT_ROOT", "content"))
        content_root = content_root.expanduser()

        if output_dir is None:
            output_dir = Path(os.getenv("BLOG_OUTPUT_DIR", "_site"))
        output_dir = output_dir.expanduser()

        feed_limit = _parse_int("BLOG_FEED_LIMIT", "20")
        if feed_limit < 0:
            raise ValueError(f"Feed limit must be >= 0, got {feed_limit}")

        port = _parse_int("BLOG_PORT", "8080")
        if not 1 <= port <= 65535:
            raise ValueError(f"Invalid BLOG_PORT value '{port}': Port must be between 1 and 65535")

        return cls(
            content_root=content_root,
            output_dir=output_dir,
            site_title=os.getenv("BLOG_TITLE", "Blog"),
            feed_limit=feed_limit,
            include_drafts=_parse_bool("BLOG_INCLUDE_DRAFTS"),
            port=port,
        )


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
