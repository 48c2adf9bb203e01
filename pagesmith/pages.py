from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Iterable, Optional

import markdown

from .documents import Category, Document
from .errors import BuildError, LayoutError
from .render import Layout, apply_layout, create_markdown, render_markdown, render_template, write_text
from .transform import html_transform

logger = logging.getLogger(__name__)

DATE_FMT = "%Y-%m-%d"
DEFAULT_LAYOUTS = {
    Category.POST: "post",
    Category.DRAFT: "post",
    Category.NOTE: "note",
    Category.PAGE: "page",
}


def output_path_for(document: Document) -> Optional[str]:
    """Where a document is written, relative to the output directory.

    ``None`` means the document opted out with ``permalink: false``.
    """
    permalink = document.data.permalink
    if permalink is False:
        return None
    if isinstance(permalink, str):
        path = permalink.lstrip("/")
        if not path or path.endswith("/"):
            path += "index.html"
        return path
    stem = document.path[:-3] if document.path.endswith(".md") else document.path
    if stem == "index" or stem.endswith("/index"):
        return f"{stem}.html"
    return f"{stem}/index.html"


def url_for(output_path: str) -> str:
    url = f"/{output_path}"
    if url.endswith("/index.html"):
        url = url[: -len("index.html")]
    return url


def root_for(output_path: str) -> str:
    depth = output_path.count("/")
    return "/".join([".."] * depth) if depth else "."


def is_written(document: Document, is_production: bool) -> bool:
    """Whether a build writes ``document``; listings only link to written pages."""
    if output_path_for(document) is None:
        return False
    return not (document.data.draft and is_production)


def build_link_list(
    documents: Iterable[Document],
    root: str,
    css_class: str,
    is_production: bool,
) -> str:
    items = []
    for document in documents:
        if not is_written(document, is_production):
            continue
        title = html.escape(document.title)
        date_html = ""
        if document.date is not None:
            date_html = f' <time datetime="{document.date.isoformat()}">{document.date.strftime(DATE_FMT)}</time>'
        items.append(f'<li><a href="{root}{url_for(output_path_for(document))}">{title}</a>{date_html}</li>')
    body = "".join(items) if items else "<li>Nothing here yet.</li>"
    return f'<ul class="{css_class}">{body}</ul>'


def build_listings(
    collections: dict[str, tuple[Document, ...]],
    root: str,
    is_production: bool,
) -> dict[str, str]:
    listings = {
        f"collection.{name}": build_link_list(items, root, f"collection collection-{name}", is_production)
        for name, items in collections.items()
    }
    listings["nav"] = build_link_list(collections.get("nav", ()), root, "nav-list", is_production)
    return listings


def render_document(
    document: Document,
    md: markdown.Markdown,
    layouts: dict[str, Layout],
    collections: dict[str, tuple[Document, ...]],
    site_name: str,
    is_production: bool,
) -> str:
    alias = document.data.layout or DEFAULT_LAYOUTS[document.category]
    if alias not in layouts:
        raise LayoutError(document.path, alias)
    output_path = output_path_for(document) or ""
    root = root_for(output_path)
    listings = build_listings(collections, root, is_production)
    # Listings go into the source so a placeholder on its own line becomes a raw HTML block.
    body = render_markdown(md, render_template(document.content, **listings))
    return apply_layout(
        layouts,
        alias,
        content=body,
        title=html.escape(document.title),
        date=document.date.strftime(DATE_FMT) if document.date else "",
        url=url_for(output_path) if output_path else "",
        site_name=html.escape(site_name),
        root=root,
        **listings,
    )


def resolve_target(output_dir: Path, output_path: str, document: Document) -> Path:
    target = (output_dir / output_path).resolve()
    if not target.is_relative_to(output_dir.resolve()):
        raise BuildError(f"Permalink of {document.path} points outside the output directory: {output_path}")
    return target


def build_pages(
    documents: list[Document],
    collections: dict[str, tuple[Document, ...]],
    layouts: dict[str, Layout],
    output_dir: Path,
    site_name: str,
    is_production: bool,
) -> list[str]:
    md = create_markdown()
    written: dict[str, str] = {}
    for document in documents:
        if not is_written(document, is_production):
            logger.debug("Skipping %s: permalink disabled or draft", document.path)
            continue
        output_path = output_path_for(document)
        target = resolve_target(output_dir, output_path, document)
        if output_path in written:
            raise BuildError(
                f"Output conflict: {document.path} and {written[output_path]} both write {output_path}"
            )
        html_doc = render_document(document, md, layouts, collections, site_name, is_production)
        html_doc = html_transform(html_doc, output_path, is_production)
        write_text(target, html_doc)
        written[output_path] = document.path
    return list(written)
