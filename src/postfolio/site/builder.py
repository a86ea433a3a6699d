"""Site build pipeline — content source → rendered pages → output tree.

Every page is rendered in memory before anything is written, so a
failing query (unknown post path, malformed post) leaves the previous
output untouched.
"""

from __future__ import annotations

import logging
import shutil
from importlib import resources
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field

from postfolio.config import PostfolioConfig
from postfolio.content.models import Document, PostsQuery, SinglePostQuery
from postfolio.content.rendering import highlight_css
from postfolio.content.source import ContentSource, MarkdownContentSource, listed_posts
from postfolio.core import atomic_write
from postfolio.errors import ConfigError, ContentError, MissingAssetError
from postfolio.site.components import CONTACT_ROUTE, HOME_ROUTE, POSTS_ROUTE, PROJECTS_ROUTE
from postfolio.site.renderer import SiteRenderer

logger = logging.getLogger(__name__)

STYLESHEET_PATH = "styles/global.css"


class Page(BaseModel):
    """One rendered route."""

    route: str
    html: str

    def output_path(self, output_dir: Path) -> Path:
        return route_output_path(output_dir, self.route)


class BuildReport(BaseModel):
    """Summary of a completed build."""

    output_dir: Path
    routes: list[str] = Field(default_factory=list)
    written: list[Path] = Field(default_factory=list)
    post_count: int = 0
    listed_count: int = 0

    @property
    def untitled_count(self) -> int:
        return self.post_count - self.listed_count


def route_output_path(output_dir: Path, route: str) -> Path:
    """Map a route to its ``index.html`` file under the output directory.

    Raises:
        ContentError: If the route is relative or escapes the output root.
    """
    if not route.startswith("/"):
        raise ContentError(f"Route {route!r} must start with '/'")
    parts = [p for p in PurePosixPath(route).parts if p != "/"]
    if any(p in ("..", ".") for p in parts):
        raise ContentError(f"Route {route!r} must not contain '.' or '..' segments")
    return output_dir.joinpath(*parts, "index.html")


class SiteBuilder:
    """Builds the whole static site for one site root.

    Args:
        config: Site configuration.
        root: Directory that relative config paths are resolved against.
        source: Content source to query. Defaults to the markdown
            directory named in the config.
    """

    def __init__(
        self,
        config: PostfolioConfig,
        root: Path = Path("."),
        source: ContentSource | None = None,
    ) -> None:
        self.config = config
        self.root = root
        self.renderer = SiteRenderer(config)
        self._source = source

    @property
    def source(self) -> ContentSource:
        if self._source is None:
            self._source = MarkdownContentSource(
                self.config.content_dir(self.root),
                excerpt_length=self.config.content.excerpt_length,
            )
        return self._source

    @property
    def output_dir(self) -> Path:
        return self.config.output_dir(self.root)

    # ── Routes ───────────────────────────────────────────────────

    def static_routes(self) -> list[str]:
        routes = [HOME_ROUTE, POSTS_ROUTE, CONTACT_ROUTE]
        if self.config.chrome.show_projects_link:
            routes.append(PROJECTS_ROUTE)
        return routes

    def routes(self) -> list[str]:
        """Every route the build produces, static pages first."""
        posts = self.source.query(PostsQuery())
        return self.static_routes() + [doc.path for doc in posts]

    # ── Rendering ────────────────────────────────────────────────

    def render_pages(self) -> list[Page]:
        """Render every page in memory.

        Raises:
            ContentError: If a post collides with a fixed page or a
                single-post query misses.
        """
        posts = self.source.query(PostsQuery())
        reserved = set(self.static_routes())
        for doc in posts:
            if doc.path in reserved:
                raise ContentError(
                    f"Post {doc.source_path} uses reserved route {doc.path!r}"
                )

        pages = [
            Page(route=HOME_ROUTE, html=self.renderer.home()),
            Page(route=POSTS_ROUTE, html=self.renderer.posts_index(posts)),
            Page(route=CONTACT_ROUTE, html=self.renderer.contact()),
        ]
        if self.config.chrome.show_projects_link:
            pages.append(Page(route=PROJECTS_ROUTE, html=self.renderer.projects()))

        for doc in posts:
            pages.append(self.render_post(doc.path))
        return pages

    def render_post(self, path: str) -> Page:
        """Render the page for one post route.

        Raises:
            PostNotFoundError: If no post has this path.
        """
        post: Document = self.source.query(SinglePostQuery(path=path))
        return Page(route=post.path, html=self.renderer.blog_post(post))

    # ── Assets ───────────────────────────────────────────────────

    def required_assets(self) -> list[Path]:
        static_dir = self.config.static_dir(self.root)
        assets = [static_dir / self.config.assets.profile_photo]
        if self.config.chrome.show_icon:
            assets.append(static_dir / self.config.assets.site_icon)
        return assets

    def check_assets(self) -> None:
        """Raise MissingAssetError for the first referenced asset not on disk."""
        for asset in self.required_assets():
            if not asset.is_file():
                raise MissingAssetError(asset)

    def _copy_static(self, output_dir: Path) -> None:
        static_dir = self.config.static_dir(self.root)
        if static_dir.is_dir():
            shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)
            logger.info("Copied static assets from %s", static_dir)

    def _write_stylesheet(self, output_dir: Path) -> Path:
        css = resources.files("postfolio.site").joinpath("assets", "global.css").read_text(
            encoding="utf-8"
        )
        css += "\n" + highlight_css(self.config.content.code_style) + "\n"
        target = output_dir / STYLESHEET_PATH
        atomic_write(target, css)
        return target

    # ── Build ────────────────────────────────────────────────────

    def check_clean_target(self) -> None:
        """Refuse to clean an output directory that holds site sources.

        Raises:
            ConfigError: If the output directory is, or contains, the site
                root, the content directory or the static directory.
        """
        output_dir = self.output_dir.resolve()
        sources = {
            "site root": self.root,
            "content directory": self.config.content_dir(self.root),
            "static directory": self.config.static_dir(self.root),
        }
        for label, source in sources.items():
            if source.resolve().is_relative_to(output_dir):
                raise ConfigError(
                    f"Refusing to clean {self.output_dir}: it contains the {label} ({source})"
                )

    def build(self, *, clean: bool = False) -> BuildReport:
        """Render and write the full site.

        Args:
            clean: Remove the output directory before writing.

        Returns:
            A report of the routes and files written.
        """
        if clean:
            self.check_clean_target()
        self.check_assets()
        pages = self.render_pages()
        posts = self.source.query(PostsQuery())

        output_dir = self.output_dir
        if clean and output_dir.exists():
            logger.info("Cleaning %s", output_dir)
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._copy_static(output_dir)
        written = [self._write_stylesheet(output_dir)]
        for page in pages:
            target = page.output_path(output_dir)
            atomic_write(target, page.html)
            logger.debug("Wrote %s -> %s", page.route, target)
            written.append(target)

        report = BuildReport(
            output_dir=output_dir,
            routes=[p.route for p in pages],
            written=written,
            post_count=len(posts),
            listed_count=len(listed_posts(posts)),
        )
        logger.info("Built %d page(s) into %s", len(pages), output_dir)
        return report
