"""Tests for callback payload encoding and decoding."""

import pytest

from faqbot.handlers.callback_data import (
    CB_MAIN_MENU,
    MAX_CALLBACK_BYTES,
    PayloadError,
    Rate,
    ShowArticle,
    Simple,
    WithParent,
    WithSearchCursor,
    back_target,
    category_data,
    fit_callback_data,
    parse_category,
    parse_rate,
    parse_search_restore,
    parse_show_article,
    parse_subcategory,
    rate_data,
    search_restore_data,
    show_article_data,
    subcategory_data,
)


class TestShowArticle:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            pytest.param("show_art:AAA", ShowArticle("AAA", Simple()), id="simple"),
            pytest.param(
                "show_art:AAA:BBB", ShowArticle("AAA", WithParent("BBB")), id="parent"
            ),
            pytest.param(
                "show_art:AAA:search:6",
                ShowArticle("AAA", WithSearchCursor(6)),
                id="search",
            ),
        ],
    )
    def test_decode_variants(self, data: str, expected: ShowArticle) -> None:
        assert parse_show_article(data) == expected

    @pytest.mark.parametrize(
        "data",
        [
            pytest.param("show_art:", id="no-token"),
            pytest.param("show_art:AAA:search:abc", id="bad-count"),
            pytest.param("show_art:AAA:search:-1", id="negative-count"),
            pytest.param("show_art:AAA:search:²", id="superscript-digit"),
            pytest.param("show_art:AAA:search", id="missing-count"),
            pytest.param("show_art:AAA:BBB:CCC", id="too-many-parts"),
        ],
    )
    def test_malformed(self, data: str) -> None:
        with pytest.raises(PayloadError):
            parse_show_article(data)

    def test_encode(self) -> None:
        assert show_article_data("AAA", Simple()) == "show_art:AAA"
        assert show_article_data("AAA", WithParent("BBB")) == "show_art:AAA:BBB"
        assert show_article_data("AAA", WithSearchCursor(12)) == "show_art:AAA:search:12"


class TestRate:
    def test_decode(self) -> None:
        assert parse_rate("rate:up:AAA") == Rate("up", "AAA", Simple())
        assert parse_rate("rate:down:AAA:BBB") == Rate("down", "AAA", WithParent("BBB"))
        assert parse_rate("rate:up:AAA:search:3") == Rate(
            "up", "AAA", WithSearchCursor(3)
        )

    def test_encode_mirrors_show_article(self) -> None:
        assert rate_data("down", "AAA", WithSearchCursor(3)) == "rate:down:AAA:search:3"
        assert rate_data("up", "AAA", WithParent("BBB")) == "rate:up:AAA:BBB"

    @pytest.mark.parametrize("data", ["rate:up", "rate:sideways:AAA", "rate:"])
    def test_malformed(self, data: str) -> None:
        with pytest.raises(PayloadError):
            parse_rate(data)


class TestNavigationPayloads:
    def test_category(self) -> None:
        assert parse_category(category_data("CAT")) == "CAT"
        with pytest.raises(PayloadError):
            parse_category("cat:")

    def test_subcategory(self) -> None:
        assert subcategory_data("SUB") == "sub:SUB"
        assert parse_subcategory("sub:SUB") == ("SUB", None)
        assert parse_subcategory(subcategory_data("SUB", "CAT")) == ("SUB", "CAT")
        with pytest.raises(PayloadError):
            parse_subcategory("sub:A:B:C")

    def test_search_restore(self) -> None:
        assert search_restore_data(6) == "search:6"
        assert parse_search_restore("search:0") == 0
        with pytest.raises(PayloadError):
            parse_search_restore("search:six")

    @pytest.mark.parametrize(
        ("origin", "expected"),
        [
            pytest.param(Simple(), CB_MAIN_MENU, id="simple"),
            pytest.param(WithParent("SUB"), "sub:SUB", id="parent"),
            pytest.param(WithSearchCursor(6), "search:6", id="search"),
        ],
    )
    def test_back_target(self, origin, expected: str) -> None:
        assert back_target(origin) == expected


class TestFitCallbackData:
    def test_short_unchanged(self) -> None:
        assert fit_callback_data("main_menu") == "main_menu"

    def test_long_ascii_truncated(self) -> None:
        assert fit_callback_data("x" * 100) == "x" * MAX_CALLBACK_BYTES

    def test_multibyte_cut_at_char_boundary(self) -> None:
        data = "cat:" + "я" * 40  # 4 + 80 bytes
        fitted = fit_callback_data(data)
        assert len(fitted.encode("utf-8")) <= MAX_CALLBACK_BYTES
        assert fitted == "cat:" + "я" * 30

    def test_literal_args_are_fitted(self) -> None:
        assert len(category_data("y" * 80).encode("utf-8")) == MAX_CALLBACK_BYTES
