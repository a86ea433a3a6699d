"""Exceptions raised while loading content and building the site.

Every error here is fatal for a build: the CLI reports it and exits
non-zero, and no partial page is written for the failing route.
"""

from __future__ import annotations

from pathlib import Path


class PostfolioError(Exception):
    """Base error for postfolio."""


class ConfigError(PostfolioError):
    """Configuration could not be validated."""


class ContentError(PostfolioError):
    """Base error for markdown content problems."""


class FrontmatterError(ContentError):
    """A post's front-matter is missing, malformed, or breaks the contract."""

    def __init__(self, source: Path | str, reason: str) -> None:
        self.source = Path(source)
        self.reason = reason
        super().__init__(f"{self.source}: {reason}")


class DuplicatePathError(ContentError):
    """Two posts declare the same route."""

    def __init__(self, path: str, first: Path, second: Path) -> None:
        self.path = path
        self.first = first
        self.second = second
        super().__init__(f"Duplicate post path {path!r} in {first} and {second}")


class PostNotFoundError(ContentError):
    """A single-post query matched no document."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No post found for path {path!r}")


class MissingAssetError(PostfolioError):
    """A static asset referenced by the site does not exist."""

    def __init__(self, asset: Path) -> None:
        self.asset = asset
        super().__init__(f"Missing static asset: {asset}")
