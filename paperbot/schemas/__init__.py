from paperbot.schemas.events import (
    CallbackEvent,
    CommandEvent,
    InboundEvent,
    MalformedEventError,
    TextEvent,
    event_from_update,
)
from paperbot.schemas.telegram import TelegramUpdate, TelegramWebhookResponse

__all__ = [
    "CallbackEvent",
    "CommandEvent",
    "InboundEvent",
    "MalformedEventError",
    "TextEvent",
    "event_from_update",
    "TelegramUpdate",
    "TelegramWebhookResponse",
]
