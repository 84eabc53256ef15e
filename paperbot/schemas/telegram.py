from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class _SentByUser(BaseModel):
    """Telegram objects whose sender arrives under the reserved key ``from``."""

    model_config = ConfigDict(populate_by_name=True)

    def __init__(self, **data):
        if "from" in data:
            data["from_user"] = data.pop("from")
        super().__init__(**data)


class TelegramUser(BaseModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None


class TelegramChat(BaseModel):
    id: int
    type: str  # private, group, supergroup, channel
    title: Optional[str] = None
    username: Optional[str] = None


class TelegramMessage(_SentByUser):
    message_id: int
    date: int
    chat: TelegramChat
    from_user: Optional[TelegramUser] = None
    text: Optional[str] = None
    reply_to_message: Optional[Any] = None


class TelegramCallbackQuery(_SentByUser):
    id: str
    from_user: TelegramUser
    message: Optional[TelegramMessage] = None
    data: Optional[str] = None  # callback_data of the pressed button

    @property
    def chat_id(self) -> int:
        # Buttons on very old messages arrive without the message
        return self.message.chat.id if self.message else self.from_user.id


class TelegramUpdate(BaseModel):
    update_id: int
    message: Optional[TelegramMessage] = None
    edited_message: Optional[TelegramMessage] = None
    callback_query: Optional[TelegramCallbackQuery] = None


class TelegramWebhookResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    state: Optional[str] = None
