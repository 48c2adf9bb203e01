from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from .documents import Category, Document, DocumentData

logger = logging.getLogger(__name__)

ANCHOR_PUNCTUATION_RE = re.compile(r"[.,/#!$%^&*;:{}=_`~()]")
# ECMAScript WhiteSpace and LineTerminator, which differ from Python's str.isspace().
JS_WHITESPACE = "\t\n\v\f\r \xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
WHITESPACE_RE = re.compile(f"[{JS_WHITESPACE}]+")
TRIM_RE = re.compile(f"\\A[{JS_WHITESPACE}]+|[{JS_WHITESPACE}]+\\Z")
# Characters left alone by URI-component encoding.
URI_COMPONENT_SAFE = "-_.!~*'()"
CATEGORY_DIRS = {"posts": Category.POST, "drafts": Category.DRAFT}


def anchor_slugify(text: str, separator: Optional[str] = None) -> str:
    """Turn heading text into a percent-encoded anchor id.

    ``separator`` is accepted for compatibility with Python-Markdown's slugify
    hook and ignored; whitespace always becomes a hyphen.
    """
    text = TRIM_RE.sub("", str(text)).lower()
    text = ANCHOR_PUNCTUATION_RE.sub("", text)
    text = WHITESPACE_RE.sub("-", text)
    return quote(f"h-{text}", safe=URI_COMPONENT_SAFE, errors="surrogatepass")


def parse_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        items = [item.strip().strip("'\"") for item in inner.split(",")]
    else:
        items = [item.strip() for item in value.split(",")]
    return [item for item in items if item]


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    meta = {}
    for line in lines[1:end]:
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip().lower()
        value = value.strip()
        if key == "tags":
            meta[key] = parse_list(value)
        else:
            meta[key] = value.strip("'\"")
    body = "\n".join(lines[end + 1 :])
    return meta, body


def categorize(rel_path: str) -> Category:
    """Assign a category from a POSIX path relative to the input directory."""
    parts = rel_path.split("/")
    if not parts[-1].endswith(".md"):
        return Category.PAGE
    if len(parts) >= 2 and parts[0] in CATEGORY_DIRS:
        return CATEGORY_DIRS[parts[0]]
    # Notes are only picked up directly under notes/, not in subfolders.
    if len(parts) == 2 and parts[0] == "notes":
        return Category.NOTE
    return Category.PAGE


def build_document(rel_path: str, text: str) -> Document:
    meta, body = parse_front_matter(text)
    tags = meta.get("tags") or []
    return Document(
        path=rel_path,
        category=categorize(rel_path),
        tags=frozenset(tags),
        data=DocumentData.from_meta(meta),
        content=body,
    )


def load_documents(input_dir: Path, exclude: Optional[Path] = None) -> list[Document]:
    """Read every Markdown file under ``input_dir`` in sorted path order."""
    documents = []
    for md_file in sorted(input_dir.rglob("*.md"), key=lambda p: p.as_posix()):
        if exclude is not None and md_file.is_relative_to(exclude):
            continue
        rel = md_file.relative_to(input_dir).as_posix()
        document = build_document(rel, md_file.read_text(encoding="utf-8"))
        logger.debug("Discovered %s as %s", rel, document.category.value)
        documents.append(document)
    return documents
