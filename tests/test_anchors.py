"""
Tests for Markdown rendering and heading anchors.
"""

import markdown

from pagesmith.anchors import HeadingAnchorExtension, unique_id
from pagesmith.content import anchor_slugify
from pagesmith.render import create_markdown, render_markdown


def render(text):
    return render_markdown(create_markdown(), text)


class TestHeadingAnchors:
    """Test ids and permalinks on rendered headings."""

    def test_level_two_heading(self):
        """Test: h2 gets a slug id and a permalink before the text."""
        result = render("## Hello, World!")
        assert 'id="h-hello-world"' in result
        assert 'class="heading-anchor"' in result
        assert 'href="#h-hello-world"' in result
        assert 'aria-hidden="true"' in result
        assert result.index(">#</a>") < result.index("Hello, World!")

    def test_level_one_untouched(self):
        """Test: h1 headings are below the anchor level."""
        result = render("# Title")
        assert "id=" not in result
        assert "heading-anchor" not in result

    def test_deeper_levels(self):
        """Test: h3 to h6 get anchors too."""
        result = render("### Three\n\n###### Six")
        assert 'id="h-three"' in result
        assert 'id="h-six"' in result

    def test_duplicate_headings(self):
        """Test: Repeated headings in one document get unique ids."""
        result = render("## Intro\n\n## Intro\n\n## Intro")
        assert 'id="h-intro"' in result
        assert 'id="h-intro-1"' in result
        assert 'id="h-intro-2"' in result

    def test_inline_markup_in_heading(self):
        """Test: Only the heading text is used for the slug."""
        result = render("## Using *emphasis*")
        assert 'id="h-using-emphasis"' in result
        assert "<em>emphasis</em>" in result

    def test_ids_reset_between_documents(self):
        """Test: Reusing the parser does not leak used ids."""
        md = create_markdown()
        render_markdown(md, "## Intro")
        assert 'id="h-intro"' in render_markdown(md, "## Intro")

    def test_permalink_after(self):
        """Test: The permalink can follow the heading text."""
        md = markdown.Markdown(
            extensions=[HeadingAnchorExtension(slugify=anchor_slugify, permalink_before=False)]
        )
        result = md.convert("## Tail")
        assert result.index("Tail") < result.index(">#</a>")

    def test_custom_level_and_symbol(self):
        """Test: Level and symbol are configurable."""
        md = markdown.Markdown(
            extensions=[HeadingAnchorExtension(slugify=anchor_slugify, level=1, permalink_symbol="¶")]
        )
        result = md.convert("# Top")
        assert 'id="h-top"' in result
        assert ">¶</a>" in result

    def test_unique_id(self):
        """Test: Suffixes count up from one."""
        used = {"h-a", "h-a-1"}
        assert unique_id("h-a", used) == "h-a-2"
        assert unique_id("h-b", used) == "h-b"
        assert {"h-a-2", "h-b"} <= used


class TestMarkdownOptions:
    """Test the Markdown library options."""

    def test_soft_breaks(self):
        """Test: Single newlines become line breaks."""
        assert "<br />" in render("line one\nline two")

    def test_typographer(self):
        """Test: Straight quotes become curly quotes."""
        result = render('He said "hi"')
        assert "&ldquo;" in result
        assert "&rdquo;" in result

    def test_raw_html_passthrough(self):
        """Test: Embedded HTML blocks are kept."""
        result = render('<div class="box">raw</div>\n\nText')
        assert '<div class="box">raw</div>' in result

    def test_fenced_code(self):
        """Test: Fenced code blocks render as pre/code."""
        result = render("```\nprint('x')\n```")
        assert "<pre><code>" in result
