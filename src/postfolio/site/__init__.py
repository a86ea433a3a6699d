"""Page templates and the build pipeline that writes the static site."""

from postfolio.site.builder import BuildReport, Page, SiteBuilder, route_output_path
from postfolio.site.components import NavEntry, nav_entries, section_title
from postfolio.site.renderer import SiteRenderer, create_environment

__all__ = [
    "BuildReport",
    "NavEntry",
    "Page",
    "SiteBuilder",
    "SiteRenderer",
    "create_environment",
    "nav_entries",
    "route_output_path",
    "section_title",
]
