"""FAQ catalog: article models, JSON loading, listing and ranked search.

The catalog is loaded once from a JSON document of the form
``{"articles": [{"title", "content", "slug", "category": {...},
"subcategory": {...}}, ...]}`` before the bot starts polling, and is never
mutated afterwards, so all queries are lock-free.

Search ranking: +2 when the title contains the query, +1 when the content
does (both case-insensitive). Articles scoring 0 are dropped; the rest are
ordered by score descending, then title ascending, and deduplicated by slug
keeping the best-ranked instance.

Key class: KnowledgeBase.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class KnowledgeBaseError(ValueError):
    """Raised when the knowledge base document is missing or malformed."""


@dataclass(frozen=True)
class Category:
    slug: str
    title: str
    description: str | None = None


@dataclass(frozen=True)
class Subcategory:
    slug: str
    title: str
    description: str | None = None


@dataclass(frozen=True)
class Article:
    title: str
    content: str
    slug: str
    category: Category
    subcategory: Subcategory | None = None


def _parse_section(raw: Any, kind: str, index: int) -> dict[str, Any]:
    if not isinstance(raw, dict) or not raw.get("slug"):
        raise KnowledgeBaseError(f"Article #{index}: {kind} must have a slug")
    return raw


def _parse_article(raw: Any, index: int) -> Article:
    if not isinstance(raw, dict):
        raise KnowledgeBaseError(f"Article #{index} is not an object")
    slug = str(raw.get("slug") or "").strip()
    if not slug:
        raise KnowledgeBaseError(f"Article #{index} has no slug")

    cat = _parse_section(raw.get("category"), "category", index)
    category = Category(
        slug=str(cat["slug"]),
        title=str(cat.get("title") or cat["slug"]),
        description=cat.get("description"),
    )

    subcategory = None
    if raw.get("subcategory") is not None:
        sub = _parse_section(raw["subcategory"], "subcategory", index)
        subcategory = Subcategory(
            slug=str(sub["slug"]),
            title=str(sub.get("title") or sub["slug"]),
            description=sub.get("description"),
        )

    return Article(
        title=str(raw.get("title") or ""),
        content=str(raw.get("content") or ""),
        slug=slug,
        category=category,
        subcategory=subcategory,
    )


class KnowledgeBase:
    """Immutable in-memory FAQ catalog."""

    def __init__(self, articles: list[Article]) -> None:
        self._articles: tuple[Article, ...] = tuple(articles)
        self._by_slug: dict[str, Article] = {}
        for article in self._articles:
            self._by_slug.setdefault(article.slug.lower(), article)

    @classmethod
    def from_dict(cls, data: Any) -> "KnowledgeBase":
        if not isinstance(data, dict) or not isinstance(data.get("articles"), list):
            raise KnowledgeBaseError("Knowledge base must contain an 'articles' list")
        return cls([_parse_article(raw, i) for i, raw in enumerate(data["articles"])])

    @classmethod
    def load(cls, path: str | Path) -> "KnowledgeBase":
        """Load the catalog from a JSON file."""
        path = Path(path)
        if not path.is_file():
            raise KnowledgeBaseError(f"Knowledge base file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise KnowledgeBaseError(f"Invalid JSON in {path}: {e}") from e

        kb = cls.from_dict(data)
        logger.info("Knowledge base loaded from %s: %d articles", path, len(kb))
        return kb

    def __len__(self) -> int:
        return len(self._articles)

    @property
    def articles(self) -> tuple[Article, ...]:
        return self._articles

    # --- Lookups ---

    def get_by_slug(self, slug: str) -> Article | None:
        article = self._by_slug.get(slug.lower())
        if article is None:
            logger.warning("Article not found by slug: %s", slug)
        return article

    def get_category(self, slug: str) -> Category | None:
        for article in self._articles:
            if article.category.slug == slug:
                return article.category
        return None

    def get_subcategory(self, slug: str) -> Subcategory | None:
        for article in self._articles:
            if article.subcategory is not None and article.subcategory.slug == slug:
                return article.subcategory
        return None

    def list_categories(self) -> list[Category]:
        seen: dict[str, Category] = {}
        for article in self._articles:
            seen.setdefault(article.category.slug, article.category)
        return sorted(seen.values(), key=lambda c: c.title)

    def list_subcategories(self, category_slug: str) -> list[Subcategory]:
        seen: dict[str, Subcategory] = {}
        for article in self._articles:
            if article.category.slug == category_slug and article.subcategory:
                seen.setdefault(article.subcategory.slug, article.subcategory)
        return sorted(seen.values(), key=lambda s: s.title)

    def list_articles(self, subcategory_slug: str) -> list[Article]:
        articles = [
            a
            for a in self._articles
            if a.subcategory is not None and a.subcategory.slug == subcategory_slug
        ]
        return sorted(articles, key=lambda a: a.title)

    # --- Search ---

    def search(self, query: str, limit: int | None = None) -> list[Article]:
        """Ranked substring search over titles and contents."""
        q = query.strip().lower()
        if not q:
            return []

        scored: list[tuple[int, Article]] = []
        for article in self._articles:
            score = (2 if q in article.title.lower() else 0) + (
                1 if q in article.content.lower() else 0
            )
            if score > 0:
                scored.append((score, article))
        scored.sort(key=lambda item: (-item[0], item[1].title))

        results: list[Article] = []
        seen: set[str] = set()
        for _, article in scored:
            if article.slug in seen:
                continue
            seen.add(article.slug)
            results.append(article)
        if limit is not None:
            results = results[:limit]

        logger.info("Search query: %r, found: %d", query, len(results))
        return results
