"""Post content: front-matter parsing, markdown rendering, and queries.

Reads markdown posts at build time and exposes them to page templates
through the :class:`ContentSource` query interface.
"""

from postfolio.content.models import Document, PostsQuery, SinglePostQuery, TrustedHtml
from postfolio.content.rendering import MarkdownRenderer, make_excerpt, prune
from postfolio.content.source import (
    ContentSource,
    InMemoryContentSource,
    MarkdownContentSource,
    listed_posts,
    sort_posts,
)

__all__ = [
    "ContentSource",
    "Document",
    "InMemoryContentSource",
    "MarkdownContentSource",
    "MarkdownRenderer",
    "PostsQuery",
    "SinglePostQuery",
    "TrustedHtml",
    "listed_posts",
    "make_excerpt",
    "prune",
    "sort_posts",
]
