from loguru import logger
from telegram import Update
from telegram.ext import Application, ContextTypes, MessageHandler as TelegramMessageHandler, filters

from coffee_fund.config import get_settings
from coffee_fund.deps import get_message_handler
from coffee_fund.models.schemas import Message, User

settings = get_settings()


def _strip_bot_mention(text: str, bot_username: str | None) -> str:
    """Turn ``/stats@CoffeeBot`` into ``/stats`` for commands sent in groups."""
    if bot_username:
        suffix = f"@{bot_username}"
        if text.startswith("/") and text.lower().endswith(suffix.lower()):
            return text[: -len(suffix)]
    return text


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle every text message, commands included."""
    if update.message is None or update.effective_user is None:
        return

    tg_user = update.effective_user
    text = _strip_bot_mention(update.message.text, context.bot.username)
    logger.info("Telegram message from {}: {}", tg_user.id, text)

    message = Message(
        sender=User(id=str(tg_user.id), name=tg_user.full_name),
        contents=text,
    )
    for response in get_message_handler().handle_message(message):
        await update.message.reply_text(response.contents)


def build_bot_app() -> Application:
    """Build and return the Telegram bot application."""
    app = Application.builder().token(settings.telegram_bot_token).build()
    app.add_handler(TelegramMessageHandler(filters.TEXT, handle_message))
    return app
