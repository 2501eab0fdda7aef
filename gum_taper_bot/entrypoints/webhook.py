"""Webhook entrypoint for GumTaperBot.

Hosts that expect a web process listening on the PORT env var get an aiohttp
web server that hands Telegram webhooks to the aiogram 3 dispatcher.
"""
from __future__ import annotations

import os
import logging

from aiohttp import web
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

from gum_taper_bot.entrypoints import bot_main  # re-use configured bot, dispatcher & scheduler

logger = logging.getLogger(__name__)

BASE_URL = os.getenv("BASE_URL")  # e.g. https://my-bot.example.com
if not BASE_URL:
    raise RuntimeError("BASE_URL env variable not set")

WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET", "gtbotsecret")

bot = bot_main.bot
dp = bot_main.dp

app = web.Application()


async def on_startup(app: web.Application):
    await bot.set_webhook(f"{BASE_URL}/webhook", secret_token=WEBHOOK_SECRET)
    # start the scheduler and reinstall reminders for an existing profile
    await bot_main.startup()
    logger.info("Webhook set and scheduler started")


async def on_cleanup(app: web.Application):
    await bot.delete_webhook()
    if bot_main.scheduler.running:
        bot_main.scheduler.shutdown(wait=False)

# Register aiogram request handler
SimpleRequestHandler(dispatcher=dp, bot=bot, secret_token=WEBHOOK_SECRET).register(app, path="/webhook")

# Apply aiogram middlewares to aiohttp app
setup_application(app, dp, bot=bot)

app.on_startup.append(on_startup)
app.on_cleanup.append(on_cleanup)

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8080))
    web.run_app(app, host="0.0.0.0", port=port)
