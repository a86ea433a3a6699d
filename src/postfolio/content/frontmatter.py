"""Front-matter parsing for markdown posts.

A post starts with a ``---`` delimited YAML block declaring at least
``title``, ``date`` and ``path``; everything after the closing
delimiter is the markdown body.
"""

from __future__ import annotations

import datetime
import re
from pathlib import Path
from typing import Any

import yaml

from postfolio.errors import FrontmatterError

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?", re.DOTALL | re.MULTILINE)


def split_frontmatter(text: str, source: Path | str = "<string>") -> tuple[dict[str, Any], str]:
    """Split markdown text into its front-matter mapping and body.

    Args:
        text: Full file contents.
        source: File the text came from, used in error messages.

    Returns:
        ``(metadata, body)``.

    Raises:
        FrontmatterError: If the block is missing, is not valid YAML,
            or does not hold a mapping.
    """
    text = text.lstrip("\ufeff")
    match = FRONTMATTER_RE.match(text)
    if not match:
        raise FrontmatterError(source, "missing '---' front-matter block")

    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(source, f"invalid YAML front-matter: {exc}") from exc

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise FrontmatterError(source, "front-matter must be a mapping")

    return metadata, text[match.end():]


def parse_title(metadata: dict[str, Any]) -> str:
    """Return the title as a string; missing or null titles become empty."""
    value = metadata.get("title")
    if value is None:
        return ""
    return str(value).strip()


def parse_date(metadata: dict[str, Any], source: Path | str = "<string>") -> datetime.date | None:
    """Return the post date, or None when the key is absent.

    YAML already turns ``2021-03-01`` into a date; quoted values and
    full timestamps are parsed here.

    Raises:
        FrontmatterError: If the value is present but not a date.
    """
    value = metadata.get("date")
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    raw = str(value).strip()
    try:
        return datetime.datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise FrontmatterError(source, f"unparseable date {raw!r}") from exc


def parse_path(metadata: dict[str, Any], source: Path | str = "<string>") -> str:
    """Return the post route, normalised to end with ``/``.

    Raises:
        FrontmatterError: If the path is missing or does not start with ``/``.
    """
    value = metadata.get("path")
    raw = "" if value is None else str(value).strip()
    if not raw:
        raise FrontmatterError(source, "missing 'path' in front-matter")
    if not raw.startswith("/"):
        raise FrontmatterError(source, f"path {raw!r} must start with '/'")
    if not raw.endswith("/"):
        raw += "/"
    return raw


def parse_tags(metadata: dict[str, Any]) -> list[str]:
    """Return tags as a list of strings; a single scalar becomes one tag."""
    value = metadata.get("tags")
    if value is None:
        return []
    if isinstance(value, list):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return [str(value).strip()]
