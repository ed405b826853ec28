import sys
from pathlib import Path

from fastapi import FastAPI, Request, Response
from loguru import logger

from coffee_fund.api.routes import router
from coffee_fund.config import get_settings
from coffee_fund.db.loader import load_products
from coffee_fund.deps import get_database, get_product_repo
from coffee_fund.errors import CatalogLoadError, StorageError

settings = get_settings()

# Configure loguru
logger.remove()
logger.add(sys.stderr, level=settings.log_level, format="{time:HH:mm:ss} | {level:<7} | {message}")

app = FastAPI(title="Coffee Fund", version="0.1.0")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("{} {}", request.method, request.url.path)
    response: Response = await call_next(request)
    logger.info("→ {}", response.status_code)
    return response


app.include_router(router)


@app.on_event("startup")
async def startup():
    """Load the product catalog and start the Telegram bot."""
    if Path(settings.products_path).exists():
        try:
            load_products(settings.products_path, get_product_repo())
        except (CatalogLoadError, StorageError) as e:
            logger.error("Product catalog not loaded: {}", e)
    else:
        logger.warning("Products file {} not found, keeping stored catalog", settings.products_path)

    if not settings.telegram_bot_token:
        logger.warning("TELEGRAM_BOT_TOKEN not set — bot will not start")
        return

    from coffee_fund.bot.handler import build_bot_app

    bot_app = build_bot_app()
    app.state.bot = bot_app

    await bot_app.initialize()
    await bot_app.start()
    await bot_app.updater.start_polling(drop_pending_updates=True)
    logger.info("Telegram bot started (polling)")


@app.on_event("shutdown")
async def shutdown():
    """Stop the Telegram bot and close the database."""
    bot_app = getattr(app.state, "bot", None)
    if bot_app:
        await bot_app.updater.stop()
        await bot_app.stop()
        await bot_app.shutdown()
        logger.info("Telegram bot stopped")
    get_database().close()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
