"""Tests for main module."""

import logging
import sys

import pytest

from blog_mcp.config import Config, reset_config
from blog_mcp.main import create_server, main


def _write_post(content_root, name: str, front_matter: str) -> None:
    posts = content_root / "posts"
    posts.mkdir(parents=True, exist_ok=True)
    (posts / name).write_text(f"---\n{front_matter}\n---\n\nBody\n", encoding="utf-8")


def test_create_server(tmp_path, monkeypatch, caplog):
    """Test create_server loads the site and registers all components."""
    content_root = tmp_path / "content"
    _write_post(content_root, "enums.md", "title: Enums\ndate: 2022-03-01\ntags: [swift]")

    monkeypatch.setenv("BLOG_CONTENT_ROOT", str(content_root))
    monkeypatch.setenv("BLOG_OUTPUT_DIR", str(tmp_path / "_site"))
    config = Config.from_env()

    with caplog.at_level(logging.INFO):
        mcp = create_server(config)

    assert mcp is not None
    assert mcp.name == "blogMCP"

    log_messages = [record.message for record in caplog.records]
    assert any("Loading site from" in msg for msg in log_messages)
    assert any("Registering resources" in msg for msg in log_messages)
    assert any("Registering tools" in msg for msg in log_messages)
    assert any("Server configured successfully" in msg for msg in log_messages)
    # Loading for the server never writes pages
    assert not (tmp_path / "_site").exists()


def test_main_builds_site(tmp_path, monkeypatch):
    """Test the CLI builds the site and exits normally."""
    content_root = tmp_path / "content"
    output_dir = tmp_path / "_site"
    _write_post(content_root, "enums.md", "title: Enums\ndate: 2022-03-01")

    monkeypatch.setattr(
        sys, "argv", ["blog-mcp", "--content", str(content_root), "--output", str(output_dir)]
    )
    main()

    assert (output_dir / "posts" / "enums.html").exists()
    assert (output_dir / "index.json").exists()


def test_main_strict_fails_on_warnings(tmp_path, monkeypatch):
    """Test --strict turns build warnings into a failing exit status."""
    content_root = tmp_path / "content"
    _write_post(content_root, "undated.md", "title: Undated")

    monkeypatch.setattr(
        sys,
        "argv",
        ["blog-mcp", "--content", str(content_root), "--output", str(tmp_path / "_site"), "--strict"],
    )
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 1


def test_main_invalid_config(tmp_path, monkeypatch):
    """Test invalid configuration exits with status 1."""
    monkeypatch.setenv("BLOG_FEED_LIMIT", "-1")
    monkeypatch.setattr(sys, "argv", ["blog-mcp", "--content", str(tmp_path)])
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 1


def test_create_server_uses_global_config(tmp_path, monkeypatch, caplog):
    """Test create_server falls back to the environment configuration."""
    content_root = tmp_path / "content"
    _write_post(content_root, "enums.md", "title: Enums\ndate: 2022-03-01")
    monkeypatch.setenv("BLOG_CONTENT_ROOT", str(content_root))
    reset_config()

    try:
        with caplog.at_level(logging.INFO):
            mcp = create_server()
    finally:
        reset_config()

    assert mcp.name == "blogMCP"
    assert any(str(content_root) in record.message for record in caplog.records)
