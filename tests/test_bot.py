"""Tests for the Telegram message glue."""

import asyncio
from types import SimpleNamespace

import pytest

from coffee_fund.bot import handler as bot_handler


class FakeTelegramMessage:
    def __init__(self, text):
        self.text = text
        self.replies: list[str] = []

    async def reply_text(self, text):
        self.replies.append(text)


def _update(text, user_id=1001, full_name="Alice"):
    return SimpleNamespace(
        message=FakeTelegramMessage(text),
        effective_user=SimpleNamespace(id=user_id, full_name=full_name),
    )


@pytest.fixture
def context():
    return SimpleNamespace(bot=SimpleNamespace(username="CoffeeBot"))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("/stats@CoffeeBot", "/stats"),
        ("/stats", "/stats"),
        ("coffee@CoffeeBot", "coffee@CoffeeBot"),
        ("/stats@OtherBot", "/stats@OtherBot"),
        ("/stats@coffeebot", "/stats"),
        ("/list@COFFEEBOT", "/list"),
    ],
)
def test_strip_bot_mention(text, expected):
    assert bot_handler._strip_bot_mention(text, "CoffeeBot") == expected


def test_handle_message_replies_once_per_response(monkeypatch, handler, context):
    monkeypatch.setattr(bot_handler, "get_message_handler", lambda: handler)
    update = _update("/coffee@CoffeeBot")

    asyncio.run(bot_handler.handle_message(update, context))

    assert update.message.replies == [
        "Recorded Coffee",
        "Current stats:\n**- Alice (- 1.20)**",
    ]


def test_handle_message_uses_telegram_id(monkeypatch, handler, context):
    monkeypatch.setattr(bot_handler, "get_message_handler", lambda: handler)
    asyncio.run(bot_handler.handle_message(_update("2", user_id=7, full_name="Bob"), context))
    update = _update("/stats", user_id=8, full_name="Carol")

    asyncio.run(bot_handler.handle_message(update, context))

    assert update.message.replies == ["Current stats:\n- Bob (2.-)"]
