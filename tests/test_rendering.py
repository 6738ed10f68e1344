"""Tests for rendering/ - template and JSON renderers."""

import json

import pytest

from refdoc.exceptions import TemplateError
from refdoc.reference import ReferenceFactory
from refdoc.reference_list import ReferenceList
from refdoc.rendering import JsonRenderer, TemplateRenderer


@pytest.fixture
def template_dir(tmp_path):
    root = tmp_path / "templates"
    root.mkdir()
    (root / "reference-item.html").write_text(
        "<h3>$signature_name</h3><p>$summary</p>\n", encoding="utf-8"
    )
    (root / "class.html").write_text(
        "<h2>$type $signature_name</h2>\n<!-- subrender:methods -->", encoding="utf-8"
    )
    (root / "hook-list.html").write_text(
        "<h1>$heading</h1>\n<!-- subrender:references -->", encoding="utf-8"
    )
    return root


@pytest.fixture
def renderer(template_dir):
    return TemplateRenderer(template_dir, ".html")


class TestTemplateRenderer:
    """File templates with placeholders."""

    def test_substitution(self, renderer):
        output = renderer.render("reference-item", {"summary": "Hi", "signature": {"name": "f"}})
        assert output == "<h3>f</h3><p>Hi</p>\n"

    def test_unknown_placeholders_kept(self, renderer):
        output = renderer.render("reference-item", {"summary": "Hi"})
        assert "$signature_name" in output

    def test_missing_template(self, renderer):
        assert renderer.render("nope", {"summary": "x"}) == ""

    def test_unreadable_template(self, renderer, template_dir):
        (template_dir / "binary.html").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(TemplateError):
            renderer.render("binary", {})

    def test_context_flattening(self):
        context = TemplateRenderer.context(
            {"callable": True, "start_line": 4, "return": {}, "signature": {"name": "f", "args": []},
             "deprecated": None}
        )
        assert context == {"callable": "true", "start_line": "4", "signature_name": "f", "deprecated": ""}


class TestReferenceRendering:
    """Rendering references through a factory."""

    def test_default_template(self, store, renderer):
        factory = ReferenceFactory(store, renderer=renderer)
        assert factory.resolve(1).render() == "<h3>get_the_title</h3><p>Retrieve post title.</p>\n"

    def test_subrender_methods(self, store, renderer):
        factory = ReferenceFactory(store, renderer=renderer)
        output = factory.resolve(4).render("class")
        assert output == (
            "<h2>class WP_Query</h2>\n"
            "<!-- subrender:methods -->\n"
            "<h3>WP_Query::get_posts</h3><p></p>\n"
            "<h3>WP_Query::query</h3><p></p>\n"
        )

    def test_subrender_list_members(self, store, renderer):
        factory = ReferenceFactory(store, renderer=renderer)
        refs = ReferenceList(factory, {"type": "hook"}, meta={"heading": "Hooks"})
        output = refs.render("hook-list")
        assert output.startswith("<h1>Hooks</h1>\n<!-- subrender:references -->\n<h3>the_title</h3>")

    def test_default_renderer_from_config(self, store, template_dir):
        from refdoc.config import RefdocConfig

        factory = ReferenceFactory(store, RefdocConfig(template_dir=str(template_dir)))
        assert isinstance(factory.renderer, TemplateRenderer)
        assert factory.resolve(3).render().startswith("<h3>the_title</h3>")


class TestJsonRenderer:
    """JSON output."""

    def test_reference(self, store):
        factory = ReferenceFactory(store, renderer=JsonRenderer())
        data = json.loads(factory.resolve(1).render())
        assert data["signature"]["name"] == "get_the_title"
        assert "reference" not in data

    def test_list(self, store):
        factory = ReferenceFactory(store, renderer=JsonRenderer(indent=None))
        data = json.loads(ReferenceList(factory, [1, 3], meta={"page": 2}).render("any"))
        assert data["page"] == 2
        assert [r["signature"]["name"] for r in data["references"]] == ["get_the_title", "the_title"]
