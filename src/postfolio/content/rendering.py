"""Markdown to HTML rendering and excerpt extraction."""

from __future__ import annotations

import html
import re

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.preprocessors import Preprocessor
from pygments.formatters import HtmlFormatter

DEFAULT_EXTENSIONS = ["fenced_code", "codehilite", "tables", "footnotes", "sane_lists", "toc"]
EXTENSION_CONFIGS = {
    "codehilite": {"css_class": "highlight", "guess_lang": False},
}
HIGHLIGHT_CSS_CLASS = "highlight"
ELLIPSIS = "…"

_FENCE_RE = re.compile(r"^(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_INLINE_MATH_RE = r"(?<![\\$\w])\$(?=[^\s$])([^$\n]*?[^\s$\\])\$(?![\d$])"

_TAG_RE = re.compile(r"<[^>]+>")
_BLOCK_TAG_RE = re.compile(
    r"</?(?:p|div|li|ul|ol|h[1-6]|br|hr|pre|blockquote|table|thead|tbody|tr|td|th|dl|dt|dd)\b[^>]*>",
    re.IGNORECASE,
)
_FOOTNOTES_RE = re.compile(r'<div class="footnote">.*?</div>', re.DOTALL)
_FOOTNOTE_REF_RE = re.compile(r'<sup id="fnref[^"]*">.*?</sup>', re.DOTALL)
_MATH_DISPLAY_RE = re.compile(r'<div class="math math-display">.*?</div>', re.DOTALL)
_MATH_INLINE_RE = re.compile(r'<span class="math math-inline">\\\((.*?)\\\)</span>', re.DOTALL)
_TRAILING_WORD_RE = re.compile(r"\s*\S+$")


# ---------------------------------------------------------------------------
# Math
# ---------------------------------------------------------------------------


def _display_math(tex_lines: list[str]) -> str:
    tex = html.escape("\n".join(tex_lines).strip())
    return f'<div class="math math-display">\\[{tex}\\]</div>'


def _closes_fence(line: str, fence: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= len(fence) and set(stripped) == {fence[0]}


class _FencedMathPreprocessor(Preprocessor):
    """Stash ```` ```math ```` fences before fenced code sees them.

    Other fences are passed through untouched, so a math fence quoted
    inside a code block stays code.
    """

    def run(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        fence: str | None = None
        opening = ""
        tex_lines: list[str] | None = None
        for line in lines:
            if fence is None:
                match = _FENCE_RE.match(line)
                if match:
                    fence = match.group("fence")
                    if match.group("info").strip().lower() == "math":
                        opening = line
                        tex_lines = []
                        continue
                out.append(line)
                continue
            if _closes_fence(line, fence):
                fence = None
                if tex_lines is not None:
                    out.extend(["", self.md.htmlStash.store(_display_math(tex_lines)), ""])
                    tex_lines = None
                    continue
                out.append(line)
                continue
            if tex_lines is not None:
                tex_lines.append(line)
            else:
                out.append(line)
        if tex_lines is not None:
            out.append(opening)
            out.extend(tex_lines)
        return out


class _DisplayMathPreprocessor(Preprocessor):
    """Stash ``$$`` fenced blocks as KaTeX-ready divs.

    Runs after fenced code so ``$$`` inside code blocks is left alone.
    An unterminated block is emitted unchanged.
    """

    def run(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        tex_lines: list[str] | None = None
        for line in lines:
            if line.strip() == "$$":
                if tex_lines is None:
                    tex_lines = []
                    continue
                out.extend(["", self.md.htmlStash.store(_display_math(tex_lines)), ""])
                tex_lines = None
                continue
            if tex_lines is not None:
                tex_lines.append(line)
            else:
                out.append(line)
        if tex_lines is not None:
            out.append("$$")
            out.extend(tex_lines)
        return out


class _InlineMathProcessor(InlineProcessor):
    """``$...$`` to a stashed span, ahead of escapes and emphasis."""

    def handleMatch(self, m: re.Match[str], data: str):  # noqa: N802
        tex = html.escape(m.group(1))
        placeholder = self.md.htmlStash.store(f'<span class="math math-inline">\\({tex}\\)</span>')
        return placeholder, m.start(0), m.end(0)


class MathExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802
        md.preprocessors.register(_FencedMathPreprocessor(md), "fenced_math", 26)
        md.preprocessors.register(_DisplayMathPreprocessor(md), "display_math", 24)
        # Below backticks (190) so code spans win, above escapes (180).
        md.inlinePatterns.register(_InlineMathProcessor(_INLINE_MATH_RE, md), "inline_math", 185)


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class MarkdownRenderer:
    """Converts post bodies to HTML with a reusable Markdown instance."""

    def __init__(self, extensions: list[str | Extension] | None = None) -> None:
        exts: list[str | Extension] = list(extensions or DEFAULT_EXTENSIONS)
        exts.append(MathExtension())
        self._md = markdown.Markdown(
            extensions=exts, extension_configs=EXTENSION_CONFIGS, output_format="html"
        )

    def render(self, body: str) -> str:
        """Render a markdown body to an HTML fragment."""
        self._md.reset()
        return self._md.convert(body)


def highlight_css(style: str) -> str:
    """Pygments rules for highlighted code blocks in the given style."""
    return HtmlFormatter(style=style).get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")


# ---------------------------------------------------------------------------
# Excerpts
# ---------------------------------------------------------------------------


def html_to_text(fragment: str) -> str:
    """Strip tags from rendered HTML, leaving collapsed plain text.

    Footnotes and display math are dropped first; they read as noise in
    a preview. Block tags become whitespace, inline tags vanish so
    punctuation stays attached to the word before it.
    """
    fragment = _FOOTNOTES_RE.sub(" ", fragment)
    fragment = _FOOTNOTE_REF_RE.sub("", fragment)
    fragment = _MATH_DISPLAY_RE.sub(" ", fragment)
    fragment = _MATH_INLINE_RE.sub(r"\1", fragment)
    fragment = _BLOCK_TAG_RE.sub(" ", fragment)
    text = html.unescape(_TAG_RE.sub("", fragment))
    return " ".join(text.split())


def prune(text: str, length: int, ellipsis: str = ELLIPSIS) -> str:
    """Shorten text to at most ``length`` characters on a word boundary.

    The ellipsis is appended only when something was cut. A single word
    longer than ``length`` is hard-cut.
    """
    if len(text) <= length:
        return text

    cut = text[: length + 1]
    if cut[-1].isalnum():
        cut = _TRAILING_WORD_RE.sub("", cut)
    else:
        cut = cut[:-1].rstrip()
    if not cut:
        cut = text[:length]
    return cut.rstrip(" ,;:") + ellipsis


def make_excerpt(rendered_html: str, length: int) -> str:
    """Build the plain-text preview shown on the posts index."""
    return prune(html_to_text(rendered_html), length)
