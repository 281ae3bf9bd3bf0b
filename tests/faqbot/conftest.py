"""Shared fixtures for faqbot unit tests.

Provides an article factory, a small two-category catalog, a mock publisher
and fresh state stores (never shared between tests).
"""

from unittest.mock import AsyncMock

import pytest

from faqbot.handlers.publisher import ResponsePublisher
from faqbot.knowledge_base import Article, Category, KnowledgeBase, Subcategory
from faqbot.search_state import SearchModeStore, SearchStateStore
from faqbot.slug_mapping import SlugMapper

PAYMENTS = Category("payments", "Payments")
ACCOUNT = Category("account", "Account")
CARDS = Subcategory("cards", "Cards")
REFUNDS = Subcategory("refunds", "Refunds")
LOGIN = Subcategory("login", "Login")


@pytest.fixture
def make_article():
    """Factory: build an Article with sensible defaults."""

    def _make(
        slug: str,
        title: str = "",
        content: str = "",
        *,
        category: Category = PAYMENTS,
        subcategory: Subcategory | None = CARDS,
    ) -> Article:
        return Article(
            title=title or slug.title(),
            content=content,
            slug=slug,
            category=category,
            subcategory=subcategory,
        )

    return _make


@pytest.fixture
def kb(make_article) -> KnowledgeBase:
    return KnowledgeBase(
        [
            make_article("pay-by-card", "Pay by Card", "Visa and Mastercard."),
            make_article("card-limits", "Card limits", "Daily card limits."),
            make_article(
                "refund-time", "Refund time", "Refunds take 5 days.", subcategory=REFUNDS
            ),
            make_article(
                "reset-password",
                "Reset password",
                "Use the login page.",
                category=ACCOUNT,
                subcategory=LOGIN,
            ),
        ]
    )


@pytest.fixture
def publisher() -> AsyncMock:
    return AsyncMock(spec=ResponsePublisher)


@pytest.fixture
def slugs() -> SlugMapper:
    return SlugMapper()


@pytest.fixture
def search_state() -> SearchStateStore:
    return SearchStateStore(max_entries=100)


@pytest.fixture
def search_mode() -> SearchModeStore:
    return SearchModeStore(max_entries=100)
