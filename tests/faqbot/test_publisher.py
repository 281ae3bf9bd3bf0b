"""Tests for TelegramPublisher edit/send fallbacks and markup building."""

from unittest.mock import AsyncMock

import pytest
from telegram.constants import ParseMode
from telegram.error import BadRequest, RetryAfter, TimedOut

from faqbot.handlers.publisher import TelegramPublisher, build_markup
from faqbot.handlers.response import Button, Context, Response

EDITABLE = Context(chat_id=5, message_id=42, callback_query_id="cbq")
FRESH = Context(chat_id=5)


@pytest.fixture
def bot() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def tg(bot) -> TelegramPublisher:
    return TelegramPublisher(bot)


class TestBuildMarkup:
    def test_none_keyboard(self) -> None:
        assert build_markup(None) is None

    def test_rows_and_fitted_payloads(self) -> None:
        markup = build_markup(
            [
                [Button("A", "cat:" + "x" * 80), Button("B", "ignore")],
                [Button("C", "main_menu")],
            ]
        )
        rows = markup.inline_keyboard
        assert [len(r) for r in rows] == [2, 1]
        assert rows[0][0].callback_data == "cat:" + "x" * 60
        assert rows[1][0].text == "C"


class TestPublish:
    async def test_edit_in_place(self, bot, tg) -> None:
        response = Response("<b>hi</b>", [[Button("A", "ignore")]], edit=True)
        await tg.publish(EDITABLE, response)

        bot.edit_message_text.assert_called_once()
        call = bot.edit_message_text.call_args
        assert call.args[0] == "<b>hi</b>"
        assert call.kwargs["parse_mode"] == ParseMode.HTML
        assert call.kwargs["message_id"] == 42
        bot.send_message.assert_not_called()

    async def test_send_when_not_editing(self, bot, tg) -> None:
        await tg.publish(EDITABLE, Response("hi"))

        bot.edit_message_text.assert_not_called()
        bot.send_message.assert_called_once()
        call = bot.send_message.call_args
        assert call.kwargs["chat_id"] == 5
        assert call.kwargs["reply_markup"] is None

    async def test_send_when_no_target_message(self, bot, tg) -> None:
        await tg.publish(FRESH, Response("hi", edit=True))
        bot.edit_message_text.assert_not_called()
        bot.send_message.assert_called_once()

    async def test_not_modified_is_noop(self, bot, tg) -> None:
        bot.edit_message_text.side_effect = BadRequest(
            "Message is not modified: specified new message content and reply "
            "markup are exactly the same"
        )
        await tg.publish(EDITABLE, Response("hi", edit=True))
        bot.send_message.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            pytest.param("Message can't be edited", id="uneditable"),
            pytest.param("Message to edit not found", id="gone"),
        ],
    )
    async def test_falls_back_to_send(self, bot, tg, error: str) -> None:
        bot.edit_message_text.side_effect = BadRequest(error)
        await tg.publish(EDITABLE, Response("hi", edit=True))
        bot.send_message.assert_called_once()

    async def test_parse_error_retries_edit_as_plain_text(self, bot, tg) -> None:
        bot.edit_message_text.side_effect = [
            BadRequest("Can't parse entities: unsupported start tag"),
            None,
        ]
        await tg.publish(EDITABLE, Response("<x>", edit=True))

        assert bot.edit_message_text.call_count == 2
        assert "parse_mode" not in bot.edit_message_text.call_args.kwargs
        bot.send_message.assert_not_called()

    async def test_parse_error_retries_send_as_plain_text(self, bot, tg) -> None:
        bot.send_message.side_effect = [BadRequest("Can't parse entities"), None]
        await tg.publish(FRESH, Response("<x>"))

        assert bot.send_message.call_count == 2
        assert "parse_mode" not in bot.send_message.call_args.kwargs

    async def test_other_bad_request_propagates(self, bot, tg) -> None:
        bot.edit_message_text.side_effect = BadRequest("Chat not found")
        with pytest.raises(BadRequest):
            await tg.publish(EDITABLE, Response("hi", edit=True))

    async def test_retry_after_propagates(self, bot, tg) -> None:
        bot.edit_message_text.side_effect = RetryAfter(5)
        with pytest.raises(RetryAfter):
            await tg.publish(EDITABLE, Response("hi", edit=True))
        bot.send_message.assert_not_called()


class TestEditReplyMarkup:
    async def test_replaces_buttons(self, bot, tg) -> None:
        await tg.edit_reply_markup(5, 42, [[Button("A", "ignore")]])
        call = bot.edit_message_reply_markup.call_args
        assert call.kwargs["message_id"] == 42
        assert call.kwargs["reply_markup"].inline_keyboard[0][0].text == "A"

    @pytest.mark.parametrize(
        "error", ["Message is not modified", "Message to edit not found"]
    )
    async def test_absorbed_outcomes(self, bot, tg, error: str) -> None:
        bot.edit_message_reply_markup.side_effect = BadRequest(error)
        await tg.edit_reply_markup(5, 42, [])

    async def test_other_errors_propagate(self, bot, tg) -> None:
        bot.edit_message_reply_markup.side_effect = BadRequest("Chat not found")
        with pytest.raises(BadRequest):
            await tg.edit_reply_markup(5, 42, [])


class TestAnswerAndDelete:
    async def test_answer_with_toast(self, bot, tg) -> None:
        await tg.answer_callback("cbq", "Invalid data")
        bot.answer_callback_query.assert_called_once_with("cbq", text="Invalid data")

    async def test_answer_errors_swallowed(self, bot, tg) -> None:
        bot.answer_callback_query.side_effect = BadRequest("Query is too old")
        await tg.answer_callback("cbq")

    async def test_answer_timeout_swallowed(self, bot, tg) -> None:
        bot.answer_callback_query.side_effect = TimedOut()
        await tg.answer_callback("cbq")

    async def test_delete(self, bot, tg) -> None:
        await tg.delete_message(5, 42)
        bot.delete_message.assert_called_once_with(chat_id=5, message_id=42)

    async def test_delete_bad_request_swallowed(self, bot, tg) -> None:
        bot.delete_message.side_effect = BadRequest("Message to delete not found")
        await tg.delete_message(5, 42)
