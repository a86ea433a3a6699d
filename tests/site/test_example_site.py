"""End-to-end build of the bundled example site."""

from pathlib import Path

import pytest

from postfolio.config import load_config, merge_cli_overrides
from postfolio.site.builder import SiteBuilder

EXAMPLE_ROOT = Path(__file__).resolve().parents[2] / "example"


@pytest.fixture
def builder(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> SiteBuilder:
    for var in ("POSTFOLIO_CONTENT_DIR", "POSTFOLIO_OUTPUT_DIR", "POSTFOLIO_SHOW_ICON"):
        monkeypatch.delenv(var, raising=False)
    config = load_config(EXAMPLE_ROOT / ".postfolio.toml")
    config = merge_cli_overrides(config, output_directory=tmp_path / "public")
    return SiteBuilder(config, root=EXAMPLE_ROOT)


def test_builds_all_routes(builder: SiteBuilder):
    report = builder.build()
    assert report.routes == [
        "/",
        "/posts/",
        "/contact/",
        "/posts/draft/",
        "/posts/ising-model/",
        "/posts/hello-world/",
    ]
    assert report.listed_count == 2


def test_math_and_code_rendered(builder: SiteBuilder):
    builder.build()
    html = (builder.output_dir / "posts" / "ising-model" / "index.html").read_text(encoding="utf-8")
    assert 'class="math math-display"' in html
    assert '<div class="highlight">' in html
    assert 'class="math math-inline"' in html
    assert 'id="site-icon"' in html


def test_posts_page_lists_titled_posts(builder: SiteBuilder):
    builder.build()
    html = (builder.output_dir / "posts" / "index.html").read_text(encoding="utf-8")
    assert html.index("The Ising model with Metropolis") < html.index("Hello world")
    assert "/posts/draft/" not in html
