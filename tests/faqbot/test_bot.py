"""Tests for Application wiring and the run_bot bootstrap."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from telegram import Update
from telegram.ext import TypeHandler

from faqbot.bot import DISPATCHER_KEY, create_bot, error_handler, post_init
from faqbot.handlers.dispatcher import Dispatcher
from faqbot.main import _ShortNameFilter, run_bot


class TestCreateBot:
    def test_registers_dispatcher_and_handlers(self, kb) -> None:
        application = create_bot(kb)

        assert isinstance(application.bot_data[DISPATCHER_KEY], Dispatcher)
        handlers = application.handlers[0]
        assert len(handlers) == 1
        assert isinstance(handlers[0], TypeHandler)
        assert application.error_handlers

    async def test_post_init_sets_menu_commands(self) -> None:
        application = MagicMock()
        application.bot.set_my_commands = AsyncMock()

        await post_init(application)

        commands = application.bot.set_my_commands.call_args.args[0]
        assert [c.command for c in commands] == ["start", "search"]

    async def test_error_handler_logs(self, caplog) -> None:
        context = MagicMock()
        context.error = RuntimeError("boom")
        update = MagicMock(spec=Update)
        update.update_id = 99

        with caplog.at_level(logging.ERROR, logger="faqbot.bot"):
            await error_handler(update, context)

        assert "99" in caplog.text


class TestRunBot:
    def test_missing_knowledge_base_exits(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setattr("faqbot.config.config.kb_file", tmp_path / "missing.json")
        with patch("faqbot.main.setup_logging"), patch("faqbot.bot.create_bot") as mock:
            with pytest.raises(SystemExit) as exc:
                run_bot()
        assert exc.value.code == 1
        mock.assert_not_called()


class TestShortNameFilter:
    @pytest.mark.parametrize(
        ("name", "short"),
        [
            ("faqbot.handlers.dispatcher", "dispatcher"),
            ("faqbot.slug_mapping", "slug_mapping"),
            ("telegram.ext.Application", "telegram.ext.Applica"),
        ],
    )
    def test_strips_prefixes(self, name: str, short: str) -> None:
        record = logging.LogRecord(name, logging.INFO, "", 0, "msg", None, None)
        assert _ShortNameFilter().filter(record) is True
        assert record.short_name == short
