"""Site builder: the full read, parse, index, render and write pass."""

import logging
import re
import shutil
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from blog_mcp.config import Config
from blog_mcp.pipeline.index import build_index, slugify
from blog_mcp.pipeline.models import BuildResult, BuildWarning, Document, SiteIndex
from blog_mcp.pipeline.renderer import MarkdownRenderer
from blog_mcp.pipeline.store import ContentStore

logger = logging.getLogger(__name__)

MANIFEST_NAME = "index.json"

# Pages the builder writes itself; documents may not claim them
RESERVED_PAGE_PATTERN = re.compile(r"^(?:index|(?:tags|categories)/[^/]+|archive/\d+)\.html$")


class SiteBuilder:
    """
    Builds the static site from the content root.

    A full rebuild is the only operation: every build reads all sources,
    rebuilds the indexes from scratch and rewrites the output directory.

    Usage:
        builder = SiteBuilder(config)
        result = builder.build()
    """

    def __init__(
        self,
        config: Config,
        renderer: MarkdownRenderer | None = None,
        templates_dir: Path | None = None,
    ):
        """
        Initialize the builder.

        Args:
            config: Configuration with content root, output dir and site options.
            renderer: Markdown renderer. Defaults to MarkdownRenderer().
            templates_dir: Path to the Jinja2 templates.
                          Defaults to ./templates relative to this file.
        """
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.config = config
        self.store = ContentStore(config.content_root, include_drafts=config.include_drafts)
        self.renderer = renderer or MarkdownRenderer()
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "jinja2"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["slugify"] = slugify

    def load(self) -> tuple[list[Document], SiteIndex, list[BuildWarning]]:
        """Load documents and build the index without writing anything.

        Documents whose page would overwrite a generated listing are left out
        of every index and reported.
        """
        loaded, warnings = self.store.load()
        documents = []
        for doc in loaded:
            if RESERVED_PAGE_PATTERN.match(doc.url):
                warning = BuildWarning(
                    path=doc.source_path,
                    message=f"excluded: page '{doc.url}' is reserved for a generated listing",
                )
                logger.warning("%s", warning)
                warnings.append(warning)
                continue
            documents.append(doc)
        return documents, build_index(documents), warnings

    def build(self) -> BuildResult:
        """
        Run a full rebuild and write every page.

        Returns:
            BuildResult with the documents, index, warnings and written pages.

        Raises:
            ValueError: If the output directory holds files this builder did not write.
        """
        documents, index, warnings = self.load()
        output_dir = self.config.output_dir
        self._prepare_output(output_dir)

        pages: list[str] = []

        for doc in index.feed:
            rendered = self.renderer.render(doc.body, path=doc.source_path, line_offset=doc.body_line)
            for warning in rendered.warnings:
                logger.warning("%s", warning)
            warnings.extend(rendered.warnings)
            self._write(
                pages,
                doc.url,
                "post.html.jinja2",
                doc=doc,
                body=rendered.html,
                languages=rendered.languages,
            )

        limit = self.config.feed_limit
        self._write(
            pages,
            "index.html",
            "listing.html.jinja2",
            heading=self.config.site_title,
            docs=index.feed[:limit] if limit else index.feed,
        )

        warnings.extend(self._write_label_pages(pages, "tags", "Tag", index.tags))
        warnings.extend(self._write_label_pages(pages, "categories", "Category", index.categories))

        for year, docs in index.archive.items():
            self._write(
                pages, f"archive/{year}.html", "listing.html.jinja2", heading=str(year), docs=docs
            )

        (output_dir / MANIFEST_NAME).write_text(index.to_json(), encoding="utf-8")
        pages.append(MANIFEST_NAME)

        logger.info(
            "Build complete: %d documents, %d pages, %d warnings",
            len(documents),
            len(pages),
            len(warnings),
        )
        return BuildResult(documents=documents, index=index, warnings=warnings, pages=pages)

    def _prepare_output(self, output_dir: Path) -> None:
        """Empty the output directory, refusing to touch one we did not build."""
        if output_dir.exists():
            if any(output_dir.iterdir()) and not (output_dir / MANIFEST_NAME).exists():
                raise ValueError(
                    f"Output directory {output_dir} is not empty and has no {MANIFEST_NAME}"
                )
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)

    def _write(self, pages: list[str], relative: str, template_name: str, **context) -> None:
        depth = relative.count("/")
        template = self.env.get_template(template_name)
        html = template.render(
            site_title=self.config.site_title,
            root="../" * depth,
            **context,
        )

        target = self.config.output_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
        if relative not in pages:
            pages.append(relative)

    def _write_label_pages(
        self,
        pages: list[str],
        kind: str,
        title: str,
        labels: dict[str, list[Document]],
    ) -> list[BuildWarning]:
        """Write one listing per label plus the ``<kind>/index.html`` overview."""
        warnings: list[BuildWarning] = []
        owners: dict[str, str] = {}
        entries = []

        for label, docs in labels.items():
            slug = slugify(label)
            if slug in owners:
                warning = BuildWarning(
                    path=f"{kind}/{slug}.html",
                    message=f"{title.lower()} '{label}' replaces '{owners[slug]}' (same page name)",
                )
                logger.warning("%s", warning)
                warnings.append(warning)
            owners[slug] = label
            entries.append({"label": label, "url": f"{slug}.html", "count": len(docs)})
            self._write(
                pages,
                f"{kind}/{slug}.html",
                "listing.html.jinja2",
                heading=f"{title}: {label}",
                docs=docs,
            )

        self._write(pages, f"{kind}/index.html", "labels.html.jinja2", heading=title, entries=entries)
        return warnings
