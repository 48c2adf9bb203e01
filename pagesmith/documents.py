from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, field
from typing import Optional, Union

from .utils import parse_bool, parse_float

FALSE_WORDS = {"false", "no", "off"}
KNOWN_KEYS = {"title", "navorder", "date", "draft", "featured", "permalink", "layout", "tags"}


class Category(enum.Enum):
    POST = "post"
    DRAFT = "draft"
    NOTE = "note"
    PAGE = "page"


def parse_permalink(value: object) -> Union[str, bool, None]:
    """Return ``False`` for an explicit opt-out, the permalink string, or ``None``."""
    if value is None:
        return None
    if value is False:
        return False
    text = str(value).strip()
    if not text:
        return None
    if text.lower() in FALSE_WORDS:
        return False
    return text


def naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: object) -> Optional[dt.datetime]:
    if isinstance(value, dt.datetime):
        return naive_utc(value)
    if isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time())
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    # fromisoformat only accepts a "Z" suffix from Python 3.11 on.
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return naive_utc(dt.datetime.fromisoformat(text))
    except ValueError:
        pass
    try:
        return dt.datetime.combine(dt.date.fromisoformat(text), dt.time())
    except ValueError:
        return None


@dataclass(frozen=True)
class DocumentData:
    title: Optional[str] = None
    navorder: float = 0
    date: Optional[dt.datetime] = None
    draft: bool = False
    featured: bool = False
    permalink: Union[str, bool, None] = None
    layout: Optional[str] = None
    extra: dict = field(default_factory=dict, hash=False)

    @classmethod
    def from_meta(cls, meta: dict) -> "DocumentData":
        """Build the record from raw front matter, coercing bad values to defaults."""
        title = meta.get("title")
        layout = meta.get("layout")
        return cls(
            title=str(title).strip() if title else None,
            navorder=parse_float(meta.get("navorder"), 0),
            date=parse_timestamp(meta.get("date")),
            draft=parse_bool(meta.get("draft")),
            featured=parse_bool(meta.get("featured")),
            permalink=parse_permalink(meta.get("permalink")),
            layout=str(layout).strip() if layout else None,
            extra={key: value for key, value in meta.items() if key not in KNOWN_KEYS},
        )


@dataclass(frozen=True)
class Document:
    path: str
    category: Category = Category.PAGE
    tags: frozenset = frozenset()
    data: DocumentData = field(default_factory=DocumentData)
    content: str = ""

    @property
    def date(self) -> Optional[dt.datetime]:
        return self.data.date

    @property
    def title(self) -> str:
        if self.data.title:
            return self.data.title
        stem = self.path.rsplit("/", 1)[-1]
        return stem[:-3] if stem.endswith(".md") else stem
