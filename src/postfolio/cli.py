"""CLI interface for postfolio."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from postfolio.config import CONFIG_FILENAME, PostfolioConfig, load_config, merge_cli_overrides
from postfolio.content.models import PostsQuery
from postfolio.errors import PostfolioError
from postfolio.site.builder import SiteBuilder

app = typer.Typer(
    name="postfolio",
    help="Build a static blog and portfolio site from markdown posts.",
)

console = Console()

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Site root; relative paths in the config resolve against it.",
        file_okay=False,
        dir_okay=True,
    ),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help=f"Config file. Defaults to <root>/{CONFIG_FILENAME}."),
]
ContentOption = Annotated[
    Optional[Path],
    typer.Option("--content", help="Directory of markdown posts."),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Directory to write the site into."),
]
ProjectsOption = Annotated[
    Optional[bool],
    typer.Option(
        "--projects/--no-projects",
        help="Show the Projects link and page.",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", help="Show debug logging."),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from postfolio import __version__

        console.print(f"postfolio {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """postfolio - static blog and portfolio generator."""
    pass


def _configure_logging(verbose: bool) -> None:
    pkg_logger = logging.getLogger("postfolio")
    pkg_logger.handlers = [RichHandler(console=console, show_path=False)]
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    pkg_logger.propagate = False


def _load(
    root: Path,
    config_path: Path | None,
    content: Path | None,
    output: Path | None,
    projects: bool | None,
) -> PostfolioConfig:
    if config_path is None and (root / CONFIG_FILENAME).exists():
        config_path = root / CONFIG_FILENAME
    config = load_config(config_path)
    return merge_cli_overrides(
        config,
        content_directory=content,
        output_directory=output,
        show_projects_link=projects,
    )


@app.command()
def build(
    root: RootOption = Path("."),
    config_path: ConfigOption = None,
    content: ContentOption = None,
    output: OutputOption = None,
    projects: ProjectsOption = None,
    clean: Annotated[
        bool,
        typer.Option("--clean", help="Delete the output directory before writing."),
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Render every page and write the static site."""
    _configure_logging(verbose)
    try:
        config = _load(root, config_path, content, output, projects)
        report = SiteBuilder(config, root=root).build(clean=clean)
    except PostfolioError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    console.print(
        f"[green]Built {len(report.routes)} page(s)[/green] into {report.output_dir}"
    )
    console.print(f"  - posts: {report.post_count} ({report.listed_count} listed)")
    if report.untitled_count:
        console.print(
            f"  - [yellow]{report.untitled_count} untitled post(s) hidden from the listing[/yellow]"
        )


@app.command()
def posts(
    root: RootOption = Path("."),
    config_path: ConfigOption = None,
    content: ContentOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List posts in the order the posts page shows them."""
    _configure_logging(verbose)
    try:
        config = _load(root, config_path, content, None, None)
        documents = SiteBuilder(config, root=root).source.query(PostsQuery())
    except PostfolioError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if not documents:
        console.print("[yellow]No posts found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Posts")
    table.add_column("Date")
    table.add_column("Title")
    table.add_column("Path")
    for doc in documents:
        title = doc.title if doc.has_title else "[dim](untitled, not listed)[/dim]"
        table.add_row(doc.formatted_date(config.content.date_format), title, doc.path)
    console.print(table)


@app.command()
def routes(
    root: RootOption = Path("."),
    config_path: ConfigOption = None,
    content: ContentOption = None,
    projects: ProjectsOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print every route the build would produce."""
    _configure_logging(verbose)
    try:
        config = _load(root, config_path, content, None, projects)
        all_routes = SiteBuilder(config, root=root).routes()
    except PostfolioError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    for route in all_routes:
        console.print(route, highlight=False)


if __name__ == "__main__":
    app()
