import json

import httpx
import pytest

from paperbot.services.telegram_service import Button, TelegramService, build_inline_keyboard, truncate_label


def recording_service(calls: list, reply: dict | None = None, status_code: int = 200, **kwargs) -> TelegramService:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.url.path, json.loads(request.content)))
        return httpx.Response(status_code, json=reply if reply is not None else {"ok": True, "result": {}})

    return TelegramService("123:abc", transport=httpx.MockTransport(handler), **kwargs)


class TestKeyboard:
    def test_truncate_label(self):
        assert truncate_label("abcdef", 4) == "abcd"
        assert truncate_label("abc", 4) == "abc"

    def test_one_button_per_row(self):
        keyboard = build_inline_keyboard([Button("A", "select_0"), Button("B", "select_1")])
        assert keyboard == {
            "inline_keyboard": [
                [{"text": "A", "callback_data": "select_0"}],
                [{"text": "B", "callback_data": "select_1"}],
            ]
        }

    def test_labels_are_truncated(self):
        keyboard = build_inline_keyboard([Button("X" * 100, "select_0")], label_limit=60)
        assert len(keyboard["inline_keyboard"][0][0]["text"]) == 60


class TestTelegramService:
    @pytest.mark.asyncio
    async def test_send_message_payload(self):
        calls = []
        result = await recording_service(calls).send_message(42, "<b>hi</b>")

        assert result["ok"] is True
        path, payload = calls[0]
        assert path.endswith("/sendMessage")
        assert payload == {"chat_id": 42, "text": "<b>hi</b>", "parse_mode": "HTML"}

    @pytest.mark.asyncio
    async def test_send_buttons_uses_label_limit(self):
        calls = []
        service = recording_service(calls, label_limit=5)
        await service.send_buttons(42, "Pick", [Button("CAFE DONO (Sugar)", "select_0")])

        markup = calls[0][1]["reply_markup"]
        assert markup["inline_keyboard"][0][0] == {"text": "CAFE ", "callback_data": "select_0"}

    @pytest.mark.asyncio
    async def test_answer_callback(self):
        calls = []
        await recording_service(calls).answer_callback("cb-1")
        assert calls[0][0].endswith("/answerCallbackQuery")
        assert calls[0][1] == {"callback_query_id": "cb-1"}

    @pytest.mark.asyncio
    async def test_send_location(self):
        calls = []
        await recording_service(calls).send_location(42, 41.31, 69.28)
        assert calls[0][1] == {"chat_id": 42, "latitude": 41.31, "longitude": 69.28}

    @pytest.mark.asyncio
    async def test_set_webhook_with_secret(self):
        calls = []
        await recording_service(calls).set_webhook("https://example.com/telegram-webhook", secret_token="s3cret")
        assert calls[0][1] == {
            "url": "https://example.com/telegram-webhook",
            "allowed_updates": ["message", "callback_query"],
            "secret_token": "s3cret",
        }

    @pytest.mark.asyncio
    async def test_set_my_commands(self):
        calls = []
        await recording_service(calls).set_my_commands([("start", "Начать")])
        assert calls[0][1] == {"commands": [{"command": "start", "description": "Начать"}]}

    @pytest.mark.asyncio
    async def test_rejected_call_is_returned(self):
        calls = []
        reply = {"ok": False, "description": "Bad Request: chat not found"}
        result = await recording_service(calls, reply=reply, status_code=400).send_message(1, "x")
        assert result == reply

    @pytest.mark.asyncio
    async def test_network_error_never_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        service = TelegramService("123:abc", transport=httpx.MockTransport(handler))
        result = await service.send_message(1, "x")

        assert result["ok"] is False
        assert "timed out" in result["error"]
