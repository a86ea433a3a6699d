"""Unified configuration loaded from .postfolio.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from postfolio.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".postfolio.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
    Path.home() / ".config" / "postfolio",
]

DEFAULT_DATE_FORMAT = "%B %d, %Y"
DEFAULT_ACCENT_COLOR = "#1d3557"
DEFAULT_CODE_STYLE = "monokai"


class ChromeStyle(StrEnum):
    """Markup flavours for the page header."""

    PANEL = "panel"
    PLAIN = "plain"


class SiteSectionConfig(BaseModel):
    """[site] section."""

    name: str = "jdalzatec"
    title: str = "jdalzatec's blog"
    author: str = "Juan David Alzate Cardona"
    bio: str = (
        "I am a Physics Engineer, highly passionate in computational physics. "
        "I am also an amateur programmer with a high interest in Data Science."
    )
    accent_color: str = DEFAULT_ACCENT_COLOR


class ChromeConfig(BaseModel):
    """[chrome] section — header variant shared by every page."""

    show_icon: bool = False
    show_projects_link: bool = False
    chrome_style: ChromeStyle = ChromeStyle.PANEL


class ContentSectionConfig(BaseModel):
    """[content] section."""

    directory: str = "content/posts"
    excerpt_length: int = 250
    date_format: str = DEFAULT_DATE_FORMAT
    code_style: str = DEFAULT_CODE_STYLE

    @field_validator("excerpt_length")
    @classmethod
    def _positive_length(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("excerpt_length must be positive")
        return value

    @field_validator("code_style")
    @classmethod
    def _known_style(cls, value: str) -> str:
        try:
            get_style_by_name(value)
        except ClassNotFound as exc:
            raise ValueError(f"unknown Pygments style {value!r}") from exc
        return value


class OutputConfig(BaseModel):
    """[output] section."""

    directory: str = "public"


class AssetsConfig(BaseModel):
    """[assets] section. Asset paths are relative to ``static_dir``."""

    static_dir: str = "static"
    site_icon: str = "images/icon.png"
    profile_photo: str = "images/profile.jpg"


class ContactConfig(BaseModel):
    """[contact] section."""

    email: str = "jdalzatec@gmail.com"
    profile_url: str = "http://github.com/jdalzatec/"
    profile_label: str = "Github"


class ProjectConfig(BaseModel):
    """Single project shown on the projects page."""

    name: str
    description: str = ""
    url: str = ""


class PostfolioConfig(BaseModel):
    """Top-level configuration model for a site build."""

    site: SiteSectionConfig = Field(default_factory=SiteSectionConfig)
    chrome: ChromeConfig = Field(default_factory=ChromeConfig)
    content: ContentSectionConfig = Field(default_factory=ContentSectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    contact: ContactConfig = Field(default_factory=ContactConfig)
    projects: list[ProjectConfig] = Field(default_factory=list)

    def content_dir(self, root: Path) -> Path:
        """Resolve the markdown content directory against a site root."""
        return _resolve(root, self.content.directory)

    def output_dir(self, root: Path) -> Path:
        """Resolve the output directory against a site root."""
        return _resolve(root, self.output.directory)

    def static_dir(self, root: Path) -> Path:
        """Resolve the static assets directory against a site root."""
        return _resolve(root, self.assets.static_dir)


def _resolve(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def load_config(path: str | Path | None = None) -> PostfolioConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .postfolio.toml in CWD
    3. ~/.config/postfolio/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged PostfolioConfig.

    Raises:
        ConfigError: If the file parses but does not match the schema.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        global_config = Path.home() / ".config" / "postfolio" / "config.toml"
        if not data and global_config.exists():
            data = _load_toml(global_config)
            logger.info("Loaded config from %s", global_config)

    config = _validate(data) if data else PostfolioConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: PostfolioConfig, **cli_kwargs: object) -> PostfolioConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, e.g. ``content_directory``,
            ``output_directory``, ``show_projects_link``.

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "site_name": ("site", "name"),
        "content_directory": ("content", "directory"),
        "output_directory": ("output", "directory"),
        "static_directory": ("assets", "static_dir"),
        "show_icon": ("chrome", "show_icon"),
        "show_projects_link": ("chrome", "show_projects_link"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = str(value) if isinstance(value, Path) else value

    return _validate(data)


def _validate(data: dict[str, object]) -> PostfolioConfig:
    try:
        return PostfolioConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PostfolioConfig) -> PostfolioConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "POSTFOLIO_SITE_NAME": ("site", "name"),
        "POSTFOLIO_CONTENT_DIR": ("content", "directory"),
        "POSTFOLIO_OUTPUT_DIR": ("output", "directory"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    # Boolean toggles
    for env_var, field in [
        ("POSTFOLIO_SHOW_PROJECTS", "show_projects_link"),
        ("POSTFOLIO_SHOW_ICON", "show_icon"),
    ]:
        raw = os.environ.get(env_var)
        if raw is not None:
            data["chrome"][field] = raw.lower() in ("true", "1", "yes")

    return _validate(data)
