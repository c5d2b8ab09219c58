"""Template handler tests.

These tests verify:
- jinja-template nodes render with their parameters and global parameters
- globalParameters is resolved once and shared by every page
- prettyHTML switches between prettified and minified output
- Missing fields and templates fail the pass
- Absolute and parent-relative template paths load
"""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import TemplateNotFound

from sitebuild_core import ConfigResolver, MissingFieldError, TemplateHandler


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    (tmp_path / "page.html").write_text(
        "<html>\n<body>\n<h1>{{ title }}</h1>\n<p>{{ global.siteName }}</p>\n</body>\n</html>\n"
    )
    (tmp_path / "partials").mkdir()
    (tmp_path / "partials" / "banner.html").write_text("<div>{{ text }}</div>\r\n")
    (tmp_path / "with_banner.html").write_text(
        "<main>{{ global.banner | safe }}</main>\n"
    )
    return tmp_path


@pytest.fixture
def template_resolver(template_dir: Path) -> ConfigResolver:
    resolver = ConfigResolver()
    resolver.register_type("jinja-template", TemplateHandler(template_dir))
    return resolver


def page(title: str, template: str = "page.html") -> dict:
    return {"type": "jinja-template", "template": template, "parameters": {"title": title}}


class TestTemplateHandler:
    """Tests for TemplateHandler rendering."""

    @pytest.mark.asyncio
    async def test_renders_minified(self, template_resolver: ConfigResolver):
        root = {"globalParameters": {"siteName": "Example"}, "pages": {"index.html": page("Home")}}

        result = await template_resolver.process(root, (), root, "site.yaml")

        assert result["pages"]["index.html"] == (
            "<html><body><h1>Home</h1><p>Example</p></body></html>"
        )

    @pytest.mark.asyncio
    async def test_strips_carriage_returns(self, template_resolver: ConfigResolver):
        root = {
            "pages": {
                "a.html": {
                    "type": "jinja-template",
                    "template": "partials/banner.html",
                    "parameters": {"text": "hi"},
                }
            }
        }

        result = await template_resolver.process(root)

        assert result["pages"]["a.html"] == "<div>hi</div>"

    @pytest.mark.asyncio
    async def test_pretty_html(self, template_resolver: ConfigResolver):
        root = {
            "prettyHTML": True,
            "globalParameters": {"siteName": "Example"},
            "pages": {"index.html": page("Home")},
        }

        result = await template_resolver.process(root)
        html = result["pages"]["index.html"]

        assert "\n" in html
        assert "<h1>" in html
        assert "Home" in html

    @pytest.mark.asyncio
    async def test_escapes_parameters(self, template_resolver: ConfigResolver):
        root = {"pages": {"index.html": page("A & B")}}

        result = await template_resolver.process(root)

        assert "<h1>A &amp; B</h1>" in result["pages"]["index.html"]

    @pytest.mark.asyncio
    async def test_without_global_parameters(self, template_resolver: ConfigResolver):
        root = {"pages": {"index.html": page("Home")}}

        result = await template_resolver.process(root)

        assert "<h1>Home</h1><p></p>" in result["pages"]["index.html"]

    @pytest.mark.asyncio
    async def test_global_parameters_resolved_once(self, template_resolver: ConfigResolver):
        calls = []

        def site_name(node, *_):
            calls.append(1)
            return node["value"]

        template_resolver.register_type("site-name", site_name)
        root = {
            "globalParameters": {"siteName": {"type": "site-name", "value": "Shared"}},
            "pages": {f"p{i}.html": page(f"P{i}") for i in range(5)},
        }

        result = await template_resolver.process(root, (), root, "site.yaml")

        assert len(calls) == 1
        assert result["globalParameters"] == {"siteName": "Shared"}
        for html in result["pages"].values():
            assert "<p>Shared</p>" in html

    @pytest.mark.asyncio
    async def test_template_inside_global_parameters(self, template_resolver: ConfigResolver):
        root = {
            "globalParameters": {
                "banner": {
                    "type": "jinja-template",
                    "template": "partials/banner.html",
                    "parameters": {"text": "Welcome"},
                }
            },
            "pages": {"index.html": {"type": "jinja-template", "template": "with_banner.html"}},
        }

        result = await template_resolver.process(root)

        assert result["pages"]["index.html"] == "<main><div>Welcome</div></main>"

    @pytest.mark.asyncio
    async def test_parameters_resolved_before_render(self, template_resolver: ConfigResolver):
        template_resolver.register_type("upper", lambda node, *_: node["text"].upper())
        root = {
            "pages": {
                "index.html": {
                    "type": "jinja-template",
                    "template": "page.html",
                    "parameters": {"title": {"type": "upper", "text": "loud"}},
                }
            }
        }

        result = await template_resolver.process(root)

        assert "<h1>LOUD</h1>" in result["pages"]["index.html"]

    @pytest.mark.asyncio
    async def test_missing_template_field(self, template_resolver: ConfigResolver):
        root = {"pages": {"index.html": {"type": "jinja-template"}}}

        with pytest.raises(MissingFieldError) as exc_info:
            await template_resolver.process(root, (), root, "site.yaml")

        message = str(exc_info.value)
        assert '"jinja-template"' in message
        assert '"template"' in message
        assert '["pages", "index.html"]' in message
        assert "site.yaml" in message

    @pytest.mark.asyncio
    async def test_missing_template_file(self, template_resolver: ConfigResolver):
        root = {"pages": {"index.html": page("Home", template="nope.html")}}

        with pytest.raises(TemplateNotFound):
            await template_resolver.process(root)

    @pytest.mark.asyncio
    async def test_missing_field_names_registered_tag(self, template_dir: Path):
        resolver = ConfigResolver()
        resolver.register_type("pug-template", TemplateHandler(template_dir))
        root = {"pages": {"index.html": {"type": "pug-template"}}}

        with pytest.raises(MissingFieldError) as exc_info:
            await resolver.process(root, (), root, "site.yaml")

        assert exc_info.value.type_tag == "pug-template"
        assert '"pug-template"' in str(exc_info.value)


class TestTemplatePaths:
    """Tests for locating templates outside the source directory."""

    @pytest.mark.asyncio
    async def test_absolute_template_path(self, template_dir: Path):
        resolver = ConfigResolver()
        resolver.register_type("jinja-template", TemplateHandler(template_dir / "partials"))
        root = {"pages": {"index.html": page("Home", template=str(template_dir / "page.html"))}}

        result = await resolver.process(root)

        assert "<h1>Home</h1>" in result["pages"]["index.html"]

    @pytest.mark.asyncio
    async def test_parent_relative_template_path(self, template_dir: Path):
        resolver = ConfigResolver()
        resolver.register_type("jinja-template", TemplateHandler(template_dir / "partials"))
        root = {"pages": {"index.html": page("Up", template="../page.html")}}

        result = await resolver.process(root)

        assert "<h1>Up</h1>" in result["pages"]["index.html"]

    @pytest.mark.asyncio
    async def test_include_resolves_against_source_dir(self, template_dir: Path):
        (template_dir / "partials" / "wrapper.html").write_text(
            '<section>{% include "partials/banner.html" %}</section>'
        )
        resolver = ConfigResolver()
        resolver.register_type("jinja-template", TemplateHandler(template_dir))
        root = {
            "pages": {
                "index.html": {
                    "type": "jinja-template",
                    "template": "partials/wrapper.html",
                    "parameters": {"text": "inner"},
                }
            }
        }

        result = await resolver.process(root)

        assert result["pages"]["index.html"] == "<section><div>inner</div></section>"
