"""Jinja-backed page rendering.

Templates live in ``postfolio/site/templates``. ``layout.html`` is the
chrome every page extends; ``section.html`` adds the titled wrapper used
by the posts, contact and projects pages.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from postfolio.config import PostfolioConfig
from postfolio.content.models import Document
from postfolio.content.source import listed_posts
from postfolio.site.components import nav_entries, section_title


def create_environment() -> Environment:
    """Jinja environment over the packaged templates."""
    return Environment(
        loader=PackageLoader("postfolio.site", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class SiteRenderer:
    """Renders each page type to a complete HTML document."""

    def __init__(self, config: PostfolioConfig, env: Environment | None = None) -> None:
        self.config = config
        self.env = env or create_environment()
        self.nav = nav_entries(config.chrome)

    def _render(self, template_name: str, **context: Any) -> str:
        base: dict[str, Any] = {
            "site": self.config.site,
            "chrome": self.config.chrome,
            "nav": self.nav,
            "assets": self.config.assets,
            "date_format": self.config.content.date_format,
            "body": Markup(""),
        }
        base.update(context)
        return self.env.get_template(template_name).render(**base)

    # ── Components ───────────────────────────────────────────────

    def layout(self, children: Markup | str, *, title: str | None = None) -> str:
        """Wrap content in the page chrome.

        Plain strings are escaped; pass ``Markup`` for pre-rendered HTML.
        """
        return self._render(
            "layout.html",
            page_title=title if title is not None else self.config.site.title,
            body=children,
        )

    def section(self, name: str, children: Markup | str = "") -> str:
        """Layout plus a heading, divider and the given children."""
        return self._render(
            "section.html",
            page_title=section_title(self.config.site.name, name),
            name=name,
            body=children,
        )

    # ── Pages ────────────────────────────────────────────────────

    def home(self) -> str:
        return self._render("home.html", page_title=self.config.site.title)

    def posts_index(self, posts: list[Document]) -> str:
        """Preview list for the given posts, which arrive already sorted.

        Untitled posts are dropped here, not by the content source.
        """
        return self._render(
            "posts.html",
            page_title=section_title(self.config.site.name, "Posts"),
            name="Posts",
            posts=listed_posts(posts),
        )

    def contact(self) -> str:
        return self._render(
            "contact.html",
            page_title=section_title(self.config.site.name, "Contact"),
            name="Contact",
            contact=self.config.contact,
        )

    def projects(self) -> str:
        return self._render(
            "projects.html",
            page_title=section_title(self.config.site.name, "Projects"),
            name="Projects",
            projects=self.config.projects,
        )

    def blog_post(self, post: Document) -> str:
        """Full post page; the body HTML is inserted verbatim."""
        return self._render(
            "blog_post.html",
            page_title=section_title(self.config.site.name, post.title),
            post=post,
        )
