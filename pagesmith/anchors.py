from __future__ import annotations

import html
import logging
import re
from typing import Callable

import xml.etree.ElementTree as etree
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import ETX, HTML_PLACEHOLDER_RE, STX

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^h([1-6])$")
TAG_RE = re.compile(r"<[^>]+>")
# Backslash-escaped characters are held as STX + code point + ETX until unescaped.
ESCAPED_RE = re.compile(f"{STX}([0-9]+){ETX}")


def unique_id(slug: str, used_ids: set) -> str:
    candidate = slug
    counter = 1
    while candidate in used_ids:
        candidate = f"{slug}-{counter}"
        counter += 1
    used_ids.add(candidate)
    return candidate


class HeadingAnchorProcessor(Treeprocessor):
    def __init__(
        self,
        md,
        slugify: Callable[[str], str],
        level: int,
        permalink_symbol: str,
        permalink_class: str,
        permalink_before: bool,
    ):
        super().__init__(md)
        self.slugify = slugify
        self.level = level
        self.permalink_symbol = permalink_symbol
        self.permalink_class = permalink_class
        self.permalink_before = permalink_before

    def run(self, root):
        used_ids = {el.get("id") for el in root.iter() if el.get("id")}
        for el in [el for el in root.iter() if self.wants_anchor(el)]:
            anchor_id = el.get("id")
            if not anchor_id:
                anchor_id = unique_id(self.slugify(self.heading_text(el)), used_ids)
                el.set("id", anchor_id)
            self.add_permalink(el, anchor_id)
            logger.debug("Heading anchor %s", anchor_id)

    def wants_anchor(self, el) -> bool:
        if not isinstance(el.tag, str):
            return False
        match = HEADING_RE.match(el.tag)
        return bool(match) and int(match.group(1)) >= self.level

    def heading_text(self, el) -> str:
        text = "".join(el.itertext())
        text = HTML_PLACEHOLDER_RE.sub(self.stashed_text, text)
        text = ESCAPED_RE.sub(lambda m: chr(int(m.group(1))), text)
        return html.unescape(text)

    def stashed_text(self, match: re.Match) -> str:
        raw = self.md.htmlStash.rawHtmlBlocks[int(match.group(1))]
        if not isinstance(raw, str):
            raw = "".join(raw.itertext())
        return TAG_RE.sub("", raw)

    def add_permalink(self, el, anchor_id: str) -> None:
        link = etree.Element("a")
        link.set("class", self.permalink_class)
        link.set("href", f"#{anchor_id}")
        link.set("aria-hidden", "true")
        link.text = self.permalink_symbol
        if self.permalink_before:
            link.tail = f" {el.text or ''}"
            el.text = None
            el.insert(0, link)
            return
        if len(el):
            el[-1].tail = f"{el[-1].tail or ''} "
        else:
            el.text = f"{el.text or ''} "
        el.append(link)


class HeadingAnchorExtension(Extension):
    def __init__(
        self,
        slugify: Callable[[str], str],
        level: int = 2,
        permalink_symbol: str = "#",
        permalink_class: str = "heading-anchor",
        permalink_before: bool = True,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.slugify = slugify
        self.level = level
        self.permalink_symbol = permalink_symbol
        self.permalink_class = permalink_class
        self.permalink_before = permalink_before

    def extendMarkdown(self, md):
        # Runs after the inline processor so heading text is final.
        md.treeprocessors.register(
            HeadingAnchorProcessor(
                md,
                self.slugify,
                self.level,
                self.permalink_symbol,
                self.permalink_class,
                self.permalink_before,
            ),
            "heading_anchor",
            5,
        )
