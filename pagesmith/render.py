from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import NamedTuple, Optional

import markdown

from .anchors import HeadingAnchorExtension
from .content import anchor_slugify
from .errors import BuildError

logger = logging.getLogger(__name__)

LAYOUT_ALIASES = {
    "base": "base.html",
    "page": "page.html",
    "post": "post.html",
    "note": "note.html",
}
PARENT_LAYOUT_RE = re.compile(r"^layout:\s*(?P<alias>[\w-]+)\s*$")

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "nl2br", "smarty"]


class Layout(NamedTuple):
    template: str
    parent: Optional[str]


def create_markdown() -> markdown.Markdown:
    # Raw HTML passes through by default; nl2br keeps soft breaks and smarty
    # handles typographic quotes and dashes.
    return markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS
        + [
            HeadingAnchorExtension(
                slugify=anchor_slugify,
                level=2,
                permalink_symbol="#",
                permalink_class="heading-anchor",
                permalink_before=True,
            )
        ],
    )


def render_markdown(md: markdown.Markdown, text: str) -> str:
    try:
        return md.convert(text)
    finally:
        md.reset()


def render_template(template: str, **context: str) -> str:
    output = template
    late_keys = {"content"}
    for key, value in context.items():
        if key in late_keys:
            continue
        output = output.replace(f"{{{{{key}}}}}", value)
    for key in late_keys:
        if key in context:
            output = output.replace(f"{{{{{key}}}}}", context[key])
    return output


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def parse_layout(text: str) -> Layout:
    first, _, rest = text.partition("\n")
    match = PARENT_LAYOUT_RE.match(first.strip())
    if match:
        return Layout(rest, match.group("alias"))
    return Layout(text, None)


def load_layouts(layouts_dir: Path) -> dict[str, Layout]:
    layouts = {}
    for alias, filename in LAYOUT_ALIASES.items():
        path = layouts_dir / filename
        if path.exists():
            layouts[alias] = parse_layout(read_template(path))
    logger.debug("Loaded layouts: %s", ", ".join(sorted(layouts)))
    return layouts


def apply_layout(layouts: dict[str, Layout], alias: str, **context: str) -> str:
    """Render ``alias`` and then each parent layout around it."""
    seen = []
    while alias:
        if alias in seen:
            raise BuildError(f"Layout cycle: {' -> '.join(seen + [alias])}")
        if alias not in layouts:
            raise BuildError(f"Layout not found: {alias}")
        seen.append(alias)
        layout = layouts[alias]
        context["content"] = render_template(layout.template, **context)
        alias = layout.parent
    return context["content"]


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def copy_passthrough(input_dir: Path, output_dir: Path, entries: list[str]) -> list[str]:
    copied = []
    for entry in entries:
        source = input_dir / entry
        if not source.exists():
            logger.debug("Passthrough entry missing: %s", entry)
            continue
        dest = output_dir / entry
        if source.is_dir():
            if dest.exists():
                shutil.rmtree(dest)
            shutil.copytree(source, dest)
        else:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
        copied.append(entry)
    return copied
