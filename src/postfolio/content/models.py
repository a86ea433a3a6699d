"""Pure data models for post content.

All Pydantic models live here. No I/O, no markdown parsing.
Services import from this module; this module only imports from
stdlib, third-party packages, and postfolio.config.
"""

from __future__ import annotations

import datetime
from pathlib import Path

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field

from postfolio.config import DEFAULT_DATE_FORMAT

# ---------------------------------------------------------------------------
# Trusted HTML
# ---------------------------------------------------------------------------


class TrustedHtml(BaseModel):
    """Rendered markdown HTML that is injected into pages without escaping.

    Deliberately does not implement ``__html__``: Jinja would escape it
    like any other value. Templates must call :meth:`unwrap` at the point
    where raw HTML is inserted, so every injection site is greppable.
    """

    model_config = ConfigDict(frozen=True)

    source: str = ""

    def unwrap(self) -> Markup:
        """Return the HTML as markup that templates will not escape."""
        return Markup(self.source)

    def __str__(self) -> str:
        return self.source


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class Document(BaseModel):
    """A markdown post after parsing and rendering. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    date: datetime.date | None = None
    path: str
    excerpt: str = ""
    html: TrustedHtml = Field(default_factory=TrustedHtml)
    tags: list[str] = Field(default_factory=list)
    source_path: Path = Path(".")

    @property
    def has_title(self) -> bool:
        return bool(self.title.strip())

    def formatted_date(self, fmt: str = DEFAULT_DATE_FORMAT) -> str:
        """Format the post date, e.g. ``"March 01, 2021"``; empty if undated."""
        if self.date is None:
            return ""
        return self.date.strftime(fmt)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class PostsQuery(BaseModel):
    """Every document, newest first."""

    model_config = ConfigDict(frozen=True)


class SinglePostQuery(BaseModel):
    """Exactly one document, looked up by its route."""

    model_config = ConfigDict(frozen=True)

    path: str
