#!/usr/bin/env python3
"""
Point the Telegram bot at the webhook and register its commands.
Usage: python scripts/setup_telegram_bot.py <webhook_url>

Reads TELEGRAM_BOT_TOKEN (and optional TELEGRAM_WEBHOOK_SECRET) from the
environment or .env.
"""

import asyncio
import sys

from paperbot.config import settings
from paperbot.services.telegram_service import TelegramService

BOT_COMMANDS = [("start", "Начать работу с ботом")]


async def setup(webhook_url: str) -> bool:
    telegram = TelegramService(settings.telegram_bot_token, timeout=settings.telegram_timeout_seconds)

    print(f"🔄 Setting webhook to: {webhook_url}")
    result = await telegram.set_webhook(webhook_url, secret_token=settings.telegram_webhook_secret or None)
    if not result.get("ok"):
        print(f"❌ Failed to set webhook: {result.get('description') or result.get('error')}")
        return False
    print("✅ Webhook set")

    result = await telegram.set_my_commands(BOT_COMMANDS)
    print("✅ Commands set" if result.get("ok") else f"⚠️ Commands not set: {result.get('description')}")

    result = await telegram.set_chat_menu_button()
    print("✅ Menu button set" if result.get("ok") else f"⚠️ Menu button not set: {result.get('description')}")

    info = await telegram.get_webhook_info()
    if info.get("ok"):
        details = info.get("result", {})
        print(f"📡 URL: {details.get('url') or '(not set)'}")
        print(f"   Pending updates: {details.get('pending_update_count', 0)}")
        if details.get("last_error_message"):
            print(f"   ⚠️ Last error: {details['last_error_message']}")
    return True


def main():
    if not settings.telegram_bot_token:
        print("Missing TELEGRAM_BOT_TOKEN env var", file=sys.stderr)
        sys.exit(1)
    if len(sys.argv) < 2:
        print("Usage: python scripts/setup_telegram_bot.py <webhook_url>")
        sys.exit(1)

    ok = asyncio.run(setup(sys.argv[1]))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
