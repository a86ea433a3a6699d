"""Content sources: discover markdown posts and answer page queries.

Templates only ever talk to a :class:`ContentSource`. The markdown
adapter reads files from disk; the in-memory source serves documents
that were built elsewhere.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, overload

from postfolio.content.frontmatter import (
    parse_date,
    parse_path,
    parse_tags,
    parse_title,
    split_frontmatter,
)
from postfolio.content.models import Document, PostsQuery, SinglePostQuery, TrustedHtml
from postfolio.content.rendering import MarkdownRenderer, make_excerpt
from postfolio.errors import DuplicatePathError, FrontmatterError, PostNotFoundError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")


class ContentSource(Protocol):
    """Query interface consumed by page templates."""

    @overload
    def query(self, spec: PostsQuery) -> list[Document]: ...

    @overload
    def query(self, spec: SinglePostQuery) -> Document: ...

    def query(self, spec: PostsQuery | SinglePostQuery) -> list[Document] | Document: ...


# ---------------------------------------------------------------------------
# Ordering and selection
# ---------------------------------------------------------------------------


def sort_posts(documents: Iterable[Document]) -> list[Document]:
    """Order documents newest first.

    The sort is stable, so equal dates keep their input order. Undated
    documents go after every dated one.
    """
    docs = list(documents)
    dated = sorted((d for d in docs if d.date is not None), key=lambda d: d.date, reverse=True)
    undated = [d for d in docs if d.date is None]
    return dated + undated


def listed_posts(documents: Iterable[Document]) -> list[Document]:
    """Drop documents without a title, keeping order."""
    kept: list[Document] = []
    for doc in documents:
        if doc.has_title:
            kept.append(doc)
        else:
            logger.debug("Skipping untitled post %s in listing", doc.path)
    return kept


def document_id(relative_path: Path) -> str:
    """Stable identifier for a post, derived from its location."""
    return hashlib.sha1(relative_path.as_posix().encode("utf-8")).hexdigest()[:16]


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class _IndexedSource:
    """Shared query logic over a fixed list of documents."""

    def __init__(self, documents: Iterable[Document]) -> None:
        self._documents: list[Document] = []
        self._by_path: dict[str, Document] = {}
        for doc in documents:
            existing = self._by_path.get(doc.path)
            if existing is not None:
                raise DuplicatePathError(doc.path, existing.source_path, doc.source_path)
            self._by_path[doc.path] = doc
            self._documents.append(doc)

    @property
    def documents(self) -> list[Document]:
        """All documents in discovery order."""
        return list(self._documents)

    @overload
    def query(self, spec: PostsQuery) -> list[Document]: ...

    @overload
    def query(self, spec: SinglePostQuery) -> Document: ...

    def query(self, spec: PostsQuery | SinglePostQuery) -> list[Document] | Document:
        """Run a posts or single-post query.

        Raises:
            PostNotFoundError: If a single-post query matches nothing.
            TypeError: For an unknown query type.
        """
        if isinstance(spec, PostsQuery):
            return sort_posts(self._documents)
        if isinstance(spec, SinglePostQuery):
            doc = self._by_path.get(spec.path)
            if doc is None:
                raise PostNotFoundError(spec.path)
            return doc
        raise TypeError(f"Unsupported query: {type(spec).__name__}")


class InMemoryContentSource(_IndexedSource):
    """Content source over documents that are already built."""


class MarkdownContentSource(_IndexedSource):
    """Content source backed by a directory of markdown files.

    Files are discovered recursively and read once, at construction.
    Any malformed post aborts loading.
    """

    def __init__(
        self,
        content_dir: Path,
        *,
        excerpt_length: int = 250,
        renderer: MarkdownRenderer | None = None,
    ) -> None:
        self.content_dir = content_dir
        self.excerpt_length = excerpt_length
        self._renderer = renderer or MarkdownRenderer()
        super().__init__(self._load())

    def _discover(self) -> list[Path]:
        if not self.content_dir.exists():
            logger.warning("Content directory does not exist: %s", self.content_dir)
            return []
        return sorted(
            p for p in self.content_dir.rglob("*")
            if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES
        )

    def _load(self) -> list[Document]:
        documents = [self._parse_file(path) for path in self._discover()]
        logger.info("Loaded %d post(s) from %s", len(documents), self.content_dir)
        return documents

    def _parse_file(self, path: Path) -> Document:
        """Parse and render a single markdown post."""
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FrontmatterError(path, f"could not read file: {exc}") from exc

        metadata, body = split_frontmatter(text, path)
        rendered = self._renderer.render(body)

        return Document(
            id=document_id(path.relative_to(self.content_dir)),
            title=parse_title(metadata),
            date=parse_date(metadata, path),
            path=parse_path(metadata, path),
            excerpt=make_excerpt(rendered, self.excerpt_length),
            html=TrustedHtml(source=rendered),
            tags=parse_tags(metadata),
            source_path=path,
        )
