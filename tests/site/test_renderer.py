"""Tests for page rendering (layout, section, and page templates)."""

from datetime import date

import pytest
from markupsafe import Markup

from postfolio.config import ChromeConfig, ChromeStyle, PostfolioConfig, ProjectConfig
from postfolio.content.models import Document, TrustedHtml
from postfolio.site.components import nav_entries, section_title
from postfolio.site.renderer import SiteRenderer


def _config(**chrome) -> PostfolioConfig:
    return PostfolioConfig(chrome=ChromeConfig(**chrome))


def _doc(title: str, day: date, path: str, html: str = "<p>Body</p>", excerpt: str = "") -> Document:
    return Document(
        id=path,
        title=title,
        date=day,
        path=path,
        excerpt=excerpt,
        html=TrustedHtml(source=html),
    )


class TestNavEntries:
    def test_default_links(self):
        entries = nav_entries(ChromeConfig())
        assert [(e.label, e.route) for e in entries] == [
            ("Posts", "/posts/"),
            ("Contact", "/contact/"),
        ]

    def test_projects_toggle(self):
        entries = nav_entries(ChromeConfig(show_projects_link=True))
        assert [e.label for e in entries] == ["Posts", "Projects", "Contact"]


class TestLayout:
    def test_wraps_children(self):
        html = SiteRenderer(_config()).layout(Markup("<main>kid</main>"))
        assert "<main>kid</main>" in html
        assert 'id="top-panel"' in html
        assert "jdalzatec&#39;s blog" in html

    def test_escapes_plain_children(self):
        html = SiteRenderer(_config()).layout("<script>x</script>")
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html

    def test_nav_links(self):
        html = SiteRenderer(_config()).layout("")
        assert '<a href="/posts/">Posts</a>' in html
        assert '<a href="/contact/">Contact</a>' in html
        assert "/projects/" not in html

    def test_projects_link_when_enabled(self):
        html = SiteRenderer(_config(show_projects_link=True)).layout("")
        assert '<a href="/projects/">Projects</a>' in html

    def test_icon_hidden_by_default(self):
        html = SiteRenderer(_config()).layout("")
        assert 'id="site-icon"' not in html

    def test_icon_shown(self):
        html = SiteRenderer(_config(show_icon=True)).layout("")
        assert 'id="site-icon"' in html
        assert 'src="/images/icon.png"' in html

    def test_plain_chrome(self):
        html = SiteRenderer(_config(chrome_style=ChromeStyle.PLAIN)).layout("")
        assert 'id="top-panel"' not in html
        assert "<header>" in html

    def test_accent_color(self):
        html = SiteRenderer(_config()).layout("")
        assert "color: #1d3557" in html

    def test_default_title(self):
        html = SiteRenderer(_config()).layout("", title="Custom")
        assert "<title>Custom</title>" in html


class TestSection:
    @pytest.mark.parametrize("name", ["Contact", "Posts", "Some Thing", ""])
    def test_title(self, name: str):
        html = SiteRenderer(_config()).section(name)
        assert f"<title>{section_title('jdalzatec', name)}</title>" in html
        assert f"<title>jdalzatec - {name}</title>" in html

    def test_heading_and_divider(self):
        html = SiteRenderer(_config()).section("About", Markup("<p>child</p>"))
        heading = html.index("<h1>About</h1>")
        divider = html.index("<hr>")
        child = html.index("<p>child</p>")
        assert heading < divider < child

    def test_empty_name_renders_empty_heading(self):
        html = SiteRenderer(_config()).section("")
        assert "<h1></h1>" in html

    def test_uses_site_name(self):
        config = PostfolioConfig.model_validate({"site": {"name": "me"}})
        html = SiteRenderer(config).section("Contact")
        assert "<title>me - Contact</title>" in html


class TestPostsIndex:
    def test_scenario_filters_and_keeps_order(self):
        posts = [
            _doc("", date(2021, 6, 1), "/posts/untitled/"),
            _doc("B", date(2021, 3, 1), "/posts/b/"),
            _doc("A", date(2021, 1, 1), "/posts/a/"),
        ]
        html = SiteRenderer(_config()).posts_index(posts)

        assert html.count('class="blog-post-preview"') == 2
        assert html.index('href="/posts/b/"') < html.index('href="/posts/a/"')
        assert "/posts/untitled/" not in html

    def test_preview_contents(self):
        post = _doc("Hello", date(2021, 3, 1), "/posts/hello/", excerpt="Short excerpt.")
        html = SiteRenderer(_config()).posts_index([post])

        assert '<h1><a href="/posts/hello/">Hello</a></h1>' in html
        assert "<h2>March 01, 2021</h2>" in html
        assert "<p>Short excerpt.</p>" in html

    def test_empty_list_renders_wrapper(self):
        html = SiteRenderer(_config()).posts_index([])
        assert '<div class="blog-posts">' in html
        assert "blog-post-preview" not in html

    def test_excerpt_escaped(self):
        post = _doc("T", date(2021, 3, 1), "/posts/t/", excerpt="a < b")
        html = SiteRenderer(_config()).posts_index([post])
        assert "a &lt; b" in html

    def test_title(self):
        html = SiteRenderer(_config()).posts_index([])
        assert "<title>jdalzatec - Posts</title>" in html


class TestBlogPost:
    def test_html_verbatim(self):
        body = '<h2 id="x">Heading</h2>\n<p>Math <code>a &lt; b</code> &amp; more</p>'
        post = _doc("My Post", date(2021, 3, 1), "/posts/my-post/", html=body)
        html = SiteRenderer(_config()).blog_post(post)

        assert body in html
        assert "<h2>My Post</h2>" in html
        assert "<p>March 01, 2021</p>" in html
        assert "<title>jdalzatec - My Post</title>" in html

    def test_title_escaped_but_body_not(self):
        post = _doc("<i>T</i>", date(2021, 3, 1), "/posts/t/", html="<i>raw</i>")
        html = SiteRenderer(_config()).blog_post(post)
        assert "&lt;i&gt;T&lt;/i&gt;" in html
        assert "<i>raw</i>" in html


class TestStaticPages:
    def test_home(self):
        html = SiteRenderer(_config()).home()
        assert "Nice to meet you !" in html
        assert 'src="/images/profile.jpg"' in html
        assert "Juan David Alzate Cardona" in html

    def test_contact(self):
        html = SiteRenderer(_config()).contact()
        assert '<a target="_" href="mailto:jdalzatec@gmail.com">jdalzatec@gmail.com</a>' in html
        assert '<a target="_" href="http://github.com/jdalzatec/">Github</a>' in html
        assert "<title>jdalzatec - Contact</title>" in html

    def test_projects(self):
        config = PostfolioConfig(
            projects=[
                ProjectConfig(name="vegas", description="Atomistic simulations", url="https://example.org/vegas"),
                ProjectConfig(name="notes"),
            ]
        )
        html = SiteRenderer(config).projects()
        assert '<a target="_" href="https://example.org/vegas">vegas</a>' in html
        assert "<p>Atomistic simulations</p>" in html
        assert "notes" in html
