"""Renderer that turns Markdown bodies into display-ready HTML.

Broken elements never abort rendering. An unterminated code fence or a
malformed link is replaced by a visible warning marker, reported as a
BuildWarning, and the rest of the body renders normally.
"""

import html
import logging
import re

import markdown

from blog_mcp.pipeline.models import BuildWarning, RenderedBody

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists", "toc"]

# Python-Markdown only recognizes fences at the start of a line
FENCE_PATTERN = re.compile(r"^(?P<marker>`{3,}|~{3,})(?P<info>.*)$")

# Info strings accepted by the fenced_code extension: {attrs}, or an
# optional (.)lang followed by an optional hl_lines="..."
FENCE_INFO_PATTERN = re.compile(
    r"[ ]*(?:\{(?P<attrs>[^\n]*)\}"
    r"|(?:\.?(?P<lang>[\w#.+-]*)[ ]*)?(?:hl_lines=(?P<quot>[\"'])(?P<hl_lines>.*?)(?P=quot)[ ]*)?)"
)

ATTR_CLASS_PATTERN = re.compile(r"(?:^|\s)\.(?P<name>[^\s}]+)")

LIST_ITEM_PATTERN = re.compile(r"^ {0,3}(?:[*+-]|\d+\.)[ \t]")

INLINE_CODE_PATTERN = re.compile(r"(`+)(.+?)\1")

# [text]( or [text][ ; images share the syntax
LINK_START_PATTERN = re.compile(r"(?<!\\)!?\[(?P<text>[^\[\]]*)\](?P<kind>[(\[])")

REFERENCE_DEFINITION_PATTERN = re.compile(r"^ {0,3}\[(?P<ref>[^\]]+)\]:[ \t]*\S", re.MULTILINE)

WARNING_CLASS = "render-warning"


def _normalize_reference(ref: str) -> str:
    return " ".join(ref.split()).lower()


def _mask_inline_code(line: str) -> str:
    """Blank out inline code spans, keeping character offsets intact."""
    return INLINE_CODE_PATTERN.sub(lambda m: "\x00" * len(m.group(0)), line)


def _find_closing_paren(text: str, start: int) -> int | None:
    depth = 1
    i = start
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _indent_width(line: str) -> int:
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip(" "))


def _fence_language(info: re.Match) -> str | None:
    if info.group("attrs") is not None:
        first = ATTR_CLASS_PATTERN.search(info.group("attrs"))
        return first.group("name") if first else None
    return info.group("lang") or None


def warning_marker_inline(problem: str, text: str) -> str:
    return (
        f'<span class="{WARNING_CLASS}" title="{html.escape(problem)}">'
        f"&#9888; {html.escape(text)}</span>"
    )


def warning_marker_block(problem: str) -> str:
    return f'<div class="{WARNING_CLASS}">&#9888; {html.escape(problem)}</div>'


class MarkdownRenderer:
    """
    Renders document bodies with Python-Markdown.

    Code fences keep their language tag as ``class="language-<tag>"`` on the
    ``<code>`` element for client-side highlighting.

    Usage:
        renderer = MarkdownRenderer()
        rendered = renderer.render(document.body, path=document.source_path)
    """

    def __init__(self, extensions: list[str] | None = None):
        self._md = markdown.Markdown(extensions=extensions or MARKDOWN_EXTENSIONS)

    def render(self, body: str, path: str = "", line_offset: int = 1) -> RenderedBody:
        """
        Render a Markdown body.

        Args:
            body: Markdown text without front matter
            path: Source path used to label warnings
            line_offset: Source line on which ``body`` starts

        Returns:
            RenderedBody with the HTML, any warnings and the fence languages.
        """
        warnings: list[BuildWarning] = []
        languages: list[str] = []
        definitions = {
            _normalize_reference(m.group("ref"))
            for m in REFERENCE_DEFINITION_PATTERN.finditer(body)
        }

        out: list[str] = []
        open_marker: str | None = None
        open_index = 0
        open_line = 0
        # Indented code follows a blank line and needs one more level inside lists
        previous_blank = True
        in_indented_code = False
        in_list = False

        for i, line in enumerate(body.split("\n")):
            lineno = line_offset + i

            if open_marker is not None:
                match = FENCE_PATTERN.match(line)
                if match and match.group("marker") == open_marker and not match.group("info").strip(" "):
                    open_marker = None
                    previous_blank = False
                out.append(line)
                continue

            if not line.strip():
                previous_blank = True
                out.append(line)
                continue

            width = _indent_width(line)
            if width >= (8 if in_list else 4) and (in_indented_code or previous_blank):
                in_indented_code = True
                previous_blank = False
                out.append(line)
                continue
            in_indented_code = False

            match = FENCE_PATTERN.match(line)
            # A backtick run followed by more backticks is inline code, not a fence
            if match and not (match.group("marker")[0] == "`" and "`" in match.group("info")):
                open_marker = match.group("marker")
                open_index = len(out)
                open_line = lineno
                out.append(self._open_fence(match, lineno, path, languages, warnings))
                continue

            if LIST_ITEM_PATTERN.match(line):
                in_list = True
            elif width == 0 and previous_blank:
                in_list = False
            previous_blank = False

            out.append(self._check_links(line, lineno, path, definitions, warnings))

        if open_marker is not None:
            problem = f"unterminated code fence opened on line {open_line}"
            warnings.append(BuildWarning(path=path, message="unterminated code fence", line=open_line))
            out[open_index:open_index] = ["", warning_marker_block(problem), ""]
            out.append(open_marker)

        for warning in warnings:
            logger.debug("Render warning: %s", warning)

        rendered = self._md.reset().convert("\n".join(out))
        return RenderedBody(html=rendered, warnings=warnings, languages=languages)

    def _open_fence(
        self,
        match: re.Match,
        lineno: int,
        path: str,
        languages: list[str],
        warnings: list[BuildWarning],
    ) -> str:
        """Record the fence language and return the opening line to render.

        An info string that fenced_code would reject is reported and cut down
        to its leading language word, so the block still renders as code.
        """
        marker = match.group("marker")
        line = match.group(0)
        info = FENCE_INFO_PATTERN.fullmatch(match.group("info"))
        if info is not None:
            language = _fence_language(info)
        else:
            raw_info = match.group("info").strip()
            warnings.append(
                BuildWarning(
                    path=path, message=f"unsupported code fence info '{raw_info}'", line=lineno
                )
            )
            words = raw_info.split()
            first = FENCE_INFO_PATTERN.fullmatch(words[0]) if words else None
            language = first.group("lang") if first and first.group("attrs") is None else None
            line = marker + (language or "")

        if language and language not in languages:
            languages.append(language)
        return line

    def _check_links(
        self,
        line: str,
        lineno: int,
        path: str,
        definitions: set[str],
        warnings: list[BuildWarning],
    ) -> str:
        """Replace malformed links on a prose line with warning markers."""
        masked = _mask_inline_code(line)
        pieces: list[str] = []
        pos = 0

        for match in LINK_START_PATTERN.finditer(masked):
            if match.start() < pos:
                continue

            text = line[match.start("text") : match.end("text")]
            if match.group("kind") == "(":
                close = _find_closing_paren(masked, match.end())
                if close is None:
                    problem, end = "unclosed link", len(line)
                elif not line[match.end() : close].strip():
                    problem, end = "empty link target", close + 1
                else:
                    continue
            else:
                close = masked.find("]", match.end())
                if close == -1:
                    problem, end = "unclosed link reference", len(line)
                else:
                    # [text][] falls back to the text as reference
                    ref = line[match.end() : close] or text
                    if _normalize_reference(ref) in definitions:
                        continue
                    problem, end = f"undefined link reference '{ref}'", close + 1

            warnings.append(BuildWarning(path=path, message=problem, line=lineno))
            pieces.append(line[pos : match.start()])
            pieces.append(warning_marker_inline(problem, text))
            pos = end

        if not pieces:
            return line
        pieces.append(line[pos:])
        return "".join(pieces)
