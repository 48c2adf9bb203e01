"""Collection derivation: which documents are listed where, and in what order.

Every function here is pure. Selection runs first, ordering second, and the
production flag is always passed in by the caller.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, NamedTuple

from .documents import Category, Document

logger = logging.getLogger(__name__)

NAV_TAG = "nav"
POST_CATEGORIES = {Category.POST, Category.DRAFT}


class CollectionStage(NamedTuple):
    name: str
    select: Callable[[list[Document], bool], list[Document]]
    order: Callable[[list[Document]], list[Document]]


def is_listed(document: Document, is_production: bool) -> bool:
    if document.data.permalink is False:
        return False
    return not (document.data.draft and is_production)


def select_nav(docs: Iterable[Document], is_production: bool = False) -> list[Document]:
    return [doc for doc in docs if NAV_TAG in doc.tags]


def select_posts(docs: Iterable[Document], is_production: bool) -> list[Document]:
    return [doc for doc in docs if doc.category in POST_CATEGORIES and is_listed(doc, is_production)]


def select_featured(docs: Iterable[Document], is_production: bool = False) -> list[Document]:
    return [doc for doc in docs if doc.category is Category.POST and doc.data.featured]


def select_notes(docs: Iterable[Document], is_production: bool = False) -> list[Document]:
    return [doc for doc in docs if doc.category is Category.NOTE]


def order_by_navorder(docs: list[Document]) -> list[Document]:
    return sorted(docs, key=lambda doc: doc.data.navorder)


def order_by_date_desc(docs: list[Document]) -> list[Document]:
    # Negated index keeps equal dates in input order under reverse=True.
    dated = [doc for doc in docs if doc.date is not None]
    undated = [doc for doc in docs if doc.date is None]
    indexed = sorted(enumerate(dated), key=lambda item: (item[1].date, -item[0]), reverse=True)
    return [doc for _, doc in indexed] + undated


def keep_order(docs: list[Document]) -> list[Document]:
    return list(docs)


def reverse_order(docs: list[Document]) -> list[Document]:
    return docs[::-1]


def nav_collection(docs: Iterable[Document]) -> tuple[Document, ...]:
    return tuple(order_by_navorder(select_nav(docs)))


def posts_collection(docs: Iterable[Document], is_production: bool) -> tuple[Document, ...]:
    return tuple(keep_order(select_posts(docs, is_production)))


def featured_collection(docs: Iterable[Document]) -> tuple[Document, ...]:
    return tuple(order_by_date_desc(select_featured(docs)))


def notes_collection(docs: Iterable[Document]) -> tuple[Document, ...]:
    return tuple(reverse_order(select_notes(docs)))


COLLECTIONS: tuple[CollectionStage, ...] = (
    CollectionStage("nav", select_nav, order_by_navorder),
    CollectionStage("posts", select_posts, keep_order),
    CollectionStage("featured", select_featured, order_by_date_desc),
    CollectionStage("notes", select_notes, reverse_order),
)


def build_collections(
    docs: Iterable[Document],
    is_production: bool,
    stages: Iterable[CollectionStage] = COLLECTIONS,
) -> dict[str, tuple[Document, ...]]:
    docs = list(docs)
    collections = {}
    for stage in stages:
        items = tuple(stage.order(stage.select(docs, is_production)))
        logger.debug("Collection %s: %d documents", stage.name, len(items))
        collections[stage.name] = items
    return collections
