from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from paperbot.logging_config import get_logger

logger = get_logger("telegram_service")

DEFAULT_LABEL_LIMIT = 60


@dataclass(frozen=True)
class Button:
    label: str
    callback_token: str


def truncate_label(label: str, limit: int = DEFAULT_LABEL_LIMIT) -> str:
    return label[:limit]


def build_inline_keyboard(buttons: Sequence[Button], label_limit: int = DEFAULT_LABEL_LIMIT) -> dict:
    """One button per row; labels cut to what Telegram displays."""
    return {
        "inline_keyboard": [
            [{"text": truncate_label(button.label, label_limit), "callback_data": button.callback_token}]
            for button in buttons
        ]
    }


class TelegramService:
    """Async client for the Telegram Bot API."""

    BASE_URL = "https://api.telegram.org/bot{token}"

    def __init__(
        self,
        bot_token: str,
        timeout: float = 30.0,
        label_limit: int = DEFAULT_LABEL_LIMIT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.bot_token = bot_token
        self.base_url = self.BASE_URL.format(token=bot_token)
        self.timeout = timeout
        self.label_limit = label_limit
        self._transport = transport

    async def _make_request(self, method: str, data: Optional[dict] = None) -> dict:
        """Make request to Telegram API. Never raises."""
        url = f"{self.base_url}/{method}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=data or {})
                result = response.json()
        except Exception as e:
            logger.error(f"Telegram API error: {method}: {e}")
            return {"ok": False, "error": str(e)}

        if not result.get("ok"):
            logger.warning(
                f"Telegram API call {method} rejected",
                extra={"context": {"description": result.get("description"), "status": response.status_code}},
            )
        return result

    async def send_message(
        self,
        chat_id: int | str,
        text: str,
        reply_markup: Optional[dict] = None,
        parse_mode: str = "HTML",
    ) -> dict:
        """Send message to Telegram chat."""
        data = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
        }
        if reply_markup:
            data["reply_markup"] = reply_markup

        return await self._make_request("sendMessage", data)

    async def send_buttons(self, chat_id: int | str, text: str, buttons: Sequence[Button]) -> dict:
        """Send message with one inline button per row."""
        return await self.send_message(
            chat_id, text, reply_markup=build_inline_keyboard(buttons, self.label_limit)
        )

    async def answer_callback(self, callback_query_id: str, text: Optional[str] = None) -> dict:
        """Acknowledge a button press so the client stops its spinner."""
        data = {"callback_query_id": callback_query_id}
        if text:
            data["text"] = text
        return await self._make_request("answerCallbackQuery", data)

    async def send_location(self, chat_id: int | str, latitude: float, longitude: float) -> dict:
        return await self._make_request(
            "sendLocation", {"chat_id": chat_id, "latitude": latitude, "longitude": longitude}
        )

    async def set_webhook(self, url: str, secret_token: Optional[str] = None) -> dict:
        data = {"url": url, "allowed_updates": ["message", "callback_query"]}
        if secret_token:
            data["secret_token"] = secret_token
        return await self._make_request("setWebhook", data)

    async def get_webhook_info(self) -> dict:
        return await self._make_request("getWebhookInfo")

    async def set_my_commands(self, commands: Sequence[tuple[str, str]]) -> dict:
        return await self._make_request(
            "setMyCommands",
            {"commands": [{"command": command, "description": description} for command, description in commands]},
        )

    async def set_chat_menu_button(self) -> dict:
        return await self._make_request("setChatMenuButton", {"menu_button": {"type": "commands"}})
