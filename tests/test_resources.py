"""Tests for MCP resources."""

from pathlib import Path

import pytest

from blog_mcp.config import Config
from blog_mcp.pipeline import SiteBuilder
from blog_mcp.resources import get_feed_resource, get_label_resource, get_labels_resource
from blog_mcp.state import SiteState


@pytest.fixture
def state(tmp_path: Path) -> SiteState:
    config = Config(
        content_root=Path(__file__).parent / "fixtures" / "content",
        output_dir=tmp_path / "_site",
        site_title="Swift Notes",
        feed_limit=20,
        include_drafts=False,
        port=8080,
    )
    state = SiteState(SiteBuilder(config))
    state.refresh()
    return state


class TestFeedResource:
    def test_lists_every_post(self, state: SiteState):
        result = get_feed_resource(state)
        assert result.startswith("# Feed\n")
        assert "Total posts: 5" in result
        assert "- 2022-03-01 [Swift Enums: More Than a List of Cases](posts/swift-enums.html)" in result

    def test_newest_first(self, state: SiteState):
        result = get_feed_resource(state)
        assert result.index("ModelContainer") < result.index("Control Flow")

    def test_includes_description(self, state: SiteState):
        result = get_feed_resource(state)
        assert "Structured Concurrency](posts/concurrency.html) (`posts/concurrency`): async/await" in result


class TestLabelsResource:
    def test_tags(self, state: SiteState):
        result = get_labels_resource(state, "tags")
        assert "# Tag index" in result
        assert "- swift (4 posts)" in result
        assert "- enums (1 post)" in result

    def test_categories(self, state: SiteState):
        result = get_labels_resource(state, "categories")
        assert "- Swift (4 posts)" in result

    def test_unknown_kind(self, state: SiteState):
        with pytest.raises(ValueError, match="Unknown label kind"):
            get_labels_resource(state, "authors")


class TestLabelResource:
    def test_tag_detail(self, state: SiteState):
        result = get_label_resource(state, "tags", "enums")
        assert result.startswith("# Tag: enums")
        assert "posts/swift-enums.html" in result
        assert "posts/swift-closures.html" not in result

    def test_category_detail(self, state: SiteState):
        result = get_label_resource(state, "categories", "SwiftData")
        assert "ModelContainer" in result

    def test_unknown_label(self, state: SiteState):
        with pytest.raises(ValueError, match="Tag 'kotlin' not found"):
            get_label_resource(state, "tags", "kotlin")
