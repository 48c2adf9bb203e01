"""
Tests for front matter, metadata coercion and discovery.
"""

import datetime as dt

import pytest

from pagesmith.content import build_document, categorize, load_documents, parse_front_matter
from pagesmith.documents import Category, Document, DocumentData


class TestCategorize:
    """Test category assignment from source paths."""

    @pytest.mark.parametrize(
        "path, category",
        [
            ("posts/hello.md", Category.POST),
            ("posts/2024/deep/hello.md", Category.POST),
            ("drafts/wip.md", Category.DRAFT),
            ("drafts/nested/wip.md", Category.DRAFT),
            ("notes/quick.md", Category.NOTE),
            ("notes/archive/old.md", Category.PAGE),
            ("index.md", Category.PAGE),
            ("about/team.md", Category.PAGE),
            ("posts/image.png", Category.PAGE),
            ("posts.md", Category.PAGE),
        ],
    )
    def test_categories(self, path, category):
        """Test: Paths map onto the closed set of categories."""
        assert categorize(path) is category


class TestFrontMatter:
    """Test front matter parsing."""

    def test_no_front_matter(self):
        """Test: Plain text is returned unchanged."""
        meta, body = parse_front_matter("# Title\n\nBody")
        assert meta == {}
        assert body == "# Title\n\nBody"

    def test_unterminated_front_matter(self):
        """Test: A missing closing fence leaves the text alone."""
        meta, body = parse_front_matter("---\ntitle: x\nbody")
        assert meta == {}
        assert body.startswith("---")

    def test_values_and_tags(self):
        """Test: Keys are lower-cased, quotes stripped and tags split."""
        meta, body = parse_front_matter(
            '\ufeff---\nTitle: "Hello: world"\ntags: [nav, featured]\n# comment\nnavorder: 2\n---\nBody text'
        )
        assert meta == {"title": "Hello: world", "tags": ["nav", "featured"], "navorder": "2"}
        assert body == "Body text"


class TestDocumentData:
    """Test metadata defaults and coercion."""

    def test_defaults(self):
        """Test: Missing metadata becomes falsy defaults."""
        data = DocumentData.from_meta({})
        assert data.navorder == 0
        assert data.date is None
        assert data.draft is False
        assert data.featured is False
        assert data.permalink is None
        assert data.extra == {}

    def test_coercion(self):
        """Test: String values become typed fields."""
        data = DocumentData.from_meta(
            {
                "title": "Hi",
                "navorder": "3",
                "date": "2024-06-01",
                "draft": "true",
                "featured": "yes",
                "permalink": "/hi/",
                "layout": "page",
                "summary": "extra field",
            }
        )
        assert data.title == "Hi"
        assert data.navorder == 3
        assert data.date == dt.datetime(2024, 6, 1)
        assert data.draft is True
        assert data.featured is True
        assert data.permalink == "/hi/"
        assert data.layout == "page"
        assert data.extra == {"summary": "extra field"}

    def test_malformed_values_fall_back(self):
        """Test: Wrong-typed values never raise."""
        data = DocumentData.from_meta(
            {"navorder": "first", "date": "someday", "draft": "maybe", "featured": None}
        )
        assert data.navorder == 0
        assert data.date is None
        assert data.draft is False
        assert data.featured is False

    @pytest.mark.parametrize("value", ["false", "False", "no", "off", False])
    def test_permalink_opt_out(self, value):
        """Test: Boolean-ish false values disable the permalink."""
        assert DocumentData.from_meta({"permalink": value}).permalink is False

    def test_timezone_dates_normalised(self):
        """Test: Aware timestamps become naive UTC so they compare with plain dates."""
        data = DocumentData.from_meta({"date": "2024-01-01T10:00:00+02:00"})
        assert data.date == dt.datetime(2024, 1, 1, 8, 0)

    @pytest.mark.parametrize("value", ["2024-01-01T10:00:00Z", "2024-01-01T10:00:00z"])
    def test_zulu_suffix(self, value):
        """Test: A trailing Z reads as UTC."""
        assert DocumentData.from_meta({"date": value}).date == dt.datetime(2024, 1, 1, 10, 0)

    @pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", float("nan"), float("inf")])
    def test_non_finite_navorder(self, value):
        """Test: Values that cannot be ordered fall back to zero."""
        assert DocumentData.from_meta({"navorder": value}).navorder == 0

    def test_document_defaults(self):
        """Test: A bare document is a page without tags."""
        document = Document(path="page.md")
        assert document.category is Category.PAGE
        assert document.tags == frozenset()
        assert document.date is None
        assert document.title == "page"


class TestDiscovery:
    """Test loading documents from disk."""

    def test_build_document(self):
        """Test: Front matter, tags and category land on the document."""
        document = build_document("posts/a.md", "---\ntags: nav, misc\ndate: 2023-01-01\n---\nHello")
        assert document.category is Category.POST
        assert document.tags == frozenset({"nav", "misc"})
        assert document.date == dt.datetime(2023, 1, 1)
        assert document.content == "Hello"

    def test_load_documents_sorted(self, tmp_path):
        """Test: Documents are discovered in sorted path order."""
        for rel in ["notes/b.md", "posts/a.md", "index.md", "notes/a.md", "layouts/x.md"]:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("body", encoding="utf-8")
        (tmp_path / "robots.txt").write_text("", encoding="utf-8")

        documents = load_documents(tmp_path, exclude=tmp_path / "layouts")
        assert [doc.path for doc in documents] == ["index.md", "notes/a.md", "notes/b.md", "posts/a.md"]
        assert [doc.category for doc in documents] == [
            Category.PAGE,
            Category.NOTE,
            Category.NOTE,
            Category.POST,
        ]
