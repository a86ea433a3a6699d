"""Page chrome pieces shared by every template: navigation and titles."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from postfolio.config import ChromeConfig

HOME_ROUTE = "/"
POSTS_ROUTE = "/posts/"
PROJECTS_ROUTE = "/projects/"
CONTACT_ROUTE = "/contact/"


class NavEntry(BaseModel):
    """A header navigation link."""

    model_config = ConfigDict(frozen=True)

    label: str
    route: str


def nav_entries(chrome: ChromeConfig) -> list[NavEntry]:
    """Header links, in display order, for a chrome configuration."""
    entries = [NavEntry(label="Posts", route=POSTS_ROUTE)]
    if chrome.show_projects_link:
        entries.append(NavEntry(label="Projects", route=PROJECTS_ROUTE))
    entries.append(NavEntry(label="Contact", route=CONTACT_ROUTE))
    return entries


def section_title(site_name: str, name: str) -> str:
    """Page title used by Section and post pages."""
    return f"{site_name} - {name}"
