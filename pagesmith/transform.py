"""Post-render rewriting of emitted HTML."""

from __future__ import annotations

import logging
import re
from typing import Optional

import htmlmin

from .errors import MinifyError

logger = logging.getLogger(__name__)

DOCTYPE_RE = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)
SHORT_DOCTYPE = "<!doctype html>"
HTMLMIN_OPTS = {
    "remove_comments": True,
    "remove_empty_space": True,
}


def minify_html(content: str) -> str:
    content = DOCTYPE_RE.sub(SHORT_DOCTYPE, content, count=1)
    return htmlmin.minify(content, **HTMLMIN_OPTS)


def html_transform(content: str, output_path: Optional[str], is_production: bool) -> str:
    """Minify ``content`` when it is written to an ``.html`` path in production.

    Everything else passes through untouched, so local builds stay readable.
    """
    if not (output_path and str(output_path).endswith(".html") and is_production):
        return content
    try:
        minified = minify_html(content)
    except Exception as exc:
        raise MinifyError(str(output_path), exc) from exc
    logger.debug("Minified %s: %d -> %d bytes", output_path, len(content), len(minified))
    return minified
