"""Tests for the content store."""

import logging
from datetime import date
from pathlib import Path

import pytest

from blog_mcp.pipeline.store import ContentStore, document_path
from blog_mcp.pipeline.walker import compute_hash


@pytest.fixture
def content_root() -> Path:
    return Path(__file__).parent.parent / "fixtures" / "content"


def _write_post(root: Path, relative: str, front_matter: str, body: str = "Body") -> None:
    target = root / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(f"---\n{front_matter}\n---\n{body}", encoding="utf-8")


class TestDocumentPath:
    def test_strips_suffix(self):
        assert document_path("posts/swift-enums.md") == "posts/swift-enums"

    def test_keeps_nested_directories(self):
        assert document_path("notes/swiftdata/model-container.markdown") == (
            "notes/swiftdata/model-container"
        )


class TestContentStoreLoad:
    def test_loads_valid_documents(self, content_root: Path):
        documents, _ = ContentStore(content_root).load()
        assert [d.path for d in documents] == [
            "notes/swiftdata/model-container",
            "posts/concurrency",
            "posts/control-flow",
            "posts/swift-closures",
            "posts/swift-enums",
        ]

    def test_document_fields(self, content_root: Path):
        documents, _ = ContentStore(content_root).load()
        doc = next(d for d in documents if d.path == "posts/swift-enums")

        assert doc.source_path == "posts/swift-enums.md"
        assert doc.collection == "posts"
        assert doc.title == "Swift Enums: More Than a List of Cases"
        assert doc.date == date(2022, 3, 1)
        assert doc.tags == frozenset({"swift", "enums"})
        assert doc.categories == frozenset({"Swift"})
        assert doc.url == "posts/swift-enums.html"
        assert doc.body.startswith("Enums in Swift")
        assert doc.body_line == 9

    def test_missing_date_is_excluded_with_warning(self, content_root: Path, caplog):
        with caplog.at_level(logging.WARNING):
            documents, warnings = ContentStore(content_root).load()

        assert "posts/missing-date" not in {d.path for d in documents}
        assert len(warnings) == 1
        assert warnings[0].path == "posts/missing-date.md"
        assert "date" in warnings[0].message
        assert any("posts/missing-date.md" in r.message for r in caplog.records)

    def test_drafts_skipped_by_default(self, content_root: Path):
        documents, warnings = ContentStore(content_root).load()
        assert "posts/unpublished" not in {d.path for d in documents}
        assert all(w.path != "posts/unpublished.md" for w in warnings)

    def test_drafts_included_on_request(self, content_root: Path):
        documents, _ = ContentStore(content_root, include_drafts=True).load()
        assert "posts/unpublished" in {d.path for d in documents}

    def test_duplicate_path_later_wins(self, tmp_path: Path, caplog):
        _write_post(tmp_path, "posts/enums.markdown", "title: Old\ndate: 2022-03-01")
        _write_post(tmp_path, "posts/enums.md", "title: New\ndate: 2022-03-02")

        with caplog.at_level(logging.WARNING):
            documents, warnings = ContentStore(tmp_path).load()

        assert len(documents) == 1
        assert documents[0].title == "New"
        assert documents[0].source_path == "posts/enums.md"
        assert len(warnings) == 1
        assert "duplicate document path" in warnings[0].message
        assert any("duplicate" in r.message for r in caplog.records)

    def test_invalid_utf8_is_reported(self, tmp_path: Path):
        (tmp_path / "posts").mkdir()
        (tmp_path / "posts" / "latin1.md").write_bytes(b"---\ntitle: caf\xe9\n---\n")

        documents, warnings = ContentStore(tmp_path).load()

        assert documents == []
        assert warnings[0].path == "posts/latin1.md"
        assert "UTF-8" in warnings[0].message

    def test_symlink_outside_root_is_skipped(self, tmp_path: Path):
        outside = tmp_path / "outside.md"
        outside.write_text("---\ntitle: Outside\ndate: 2022-03-01\n---\nBody")
        root = tmp_path / "content"
        root.mkdir()
        (root / "link.md").symlink_to(outside)

        documents, warnings = ContentStore(root).load()

        assert documents == []
        assert "outside the content root" in warnings[0].message

    def test_empty_root(self, tmp_path: Path):
        assert ContentStore(tmp_path / "missing").load() == ([], [])

    def test_load_is_repeatable(self, content_root: Path):
        store = ContentStore(content_root)
        first, _ = store.load()
        second, _ = store.load()
        assert first == second

    def test_unreadable_file_is_reported(self, tmp_path: Path, monkeypatch):
        _write_post(tmp_path, "posts/locked.md", "title: Locked\ndate: 2022-03-01")
        _write_post(tmp_path, "posts/open.md", "title: Open\ndate: 2022-03-02")
        read_bytes = Path.read_bytes

        def guarded_read_bytes(self):
            if self.name == "locked.md":
                raise PermissionError(13, "Permission denied")
            return read_bytes(self)

        monkeypatch.setattr(Path, "read_bytes", guarded_read_bytes)
        documents, warnings = ContentStore(tmp_path).load()

        assert [d.path for d in documents] == ["posts/open"]
        assert len(warnings) == 1
        assert warnings[0].path == "posts/locked.md"
        assert warnings[0].message == "cannot read file: Permission denied"

    def test_content_hash_covers_source_bytes(self, tmp_path: Path):
        _write_post(tmp_path, "posts/enums.md", "title: Enums\ndate: 2022-03-01")
        documents, _ = ContentStore(tmp_path).load()
        raw = (tmp_path / "posts" / "enums.md").read_bytes()
        assert documents[0].content_hash == compute_hash(raw)

    def test_windows_line_endings(self, tmp_path: Path):
        (tmp_path / "crlf.md").write_bytes(b"---\r\ntitle: CRLF\r\ndate: 2022-03-01\r\n---\r\nBody\r\n")
        documents, warnings = ContentStore(tmp_path).load()
        assert warnings == []
        assert documents[0].title == "CRLF"
        assert documents[0].body == "Body\n"
