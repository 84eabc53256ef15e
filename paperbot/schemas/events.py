"""Inbound bot events, decoupled from the Telegram update shape."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from paperbot.schemas.telegram import TelegramUpdate


class CommandEvent(BaseModel):
    kind: Literal["command"] = "command"
    user_id: int
    chat_id: int
    text: str

    @property
    def command(self) -> str:
        # "/start@PaperBot payload" -> "/start"
        return self.text.split()[0].split("@")[0].lower()


class TextEvent(BaseModel):
    kind: Literal["text"] = "text"
    user_id: int
    chat_id: int
    text: str


class CallbackEvent(BaseModel):
    kind: Literal["callback"] = "callback"
    user_id: int
    chat_id: int
    token: str
    callback_id: Optional[str] = None


InboundEvent = Annotated[Union[CommandEvent, TextEvent, CallbackEvent], Field(discriminator="kind")]


class MalformedEventError(Exception):
    """Update is addressed to the bot but lacks a required field."""

    def __init__(self, message: str, chat_id: Optional[int] = None, callback_id: Optional[str] = None):
        self.message = message
        self.chat_id = chat_id
        self.callback_id = callback_id
        super().__init__(message)


def event_from_update(update: TelegramUpdate) -> Optional[InboundEvent]:
    """Translate a Telegram update into an inbound event.

    Returns None for updates the bot does not react to (edits, service
    messages from other bots). Raises MalformedEventError when the update
    is meant for the bot but cannot be handled.
    """
    if update.callback_query:
        callback = update.callback_query
        if not callback.data:
            raise MalformedEventError("Callback without data", chat_id=callback.chat_id, callback_id=callback.id)
        return CallbackEvent(
            user_id=callback.from_user.id,
            chat_id=callback.chat_id,
            token=callback.data,
            callback_id=callback.id,
        )

    message = update.message
    if message is None:
        return None

    if message.from_user is None:
        raise MalformedEventError("Message without sender", chat_id=message.chat.id)
    if message.from_user.is_bot:
        return None

    text = (message.text or "").strip()
    if not text:
        raise MalformedEventError("Message without text", chat_id=message.chat.id)

    if text.startswith("/"):
        return CommandEvent(user_id=message.from_user.id, chat_id=message.chat.id, text=text)
    return TextEvent(user_id=message.from_user.id, chat_id=message.chat.id, text=text)
