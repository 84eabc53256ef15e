import hmac
import json
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from pydantic import ValidationError

from paperbot.config import settings
from paperbot.dependencies import get_bot_service
from paperbot.logging_config import get_logger
from paperbot.schemas.events import MalformedEventError, event_from_update
from paperbot.schemas.telegram import TelegramUpdate, TelegramWebhookResponse
from paperbot.services.bot_service import PaperBotService

logger = get_logger("telegram_webhook")

router = APIRouter()


async def parse_telegram_update(request: Request) -> Optional[dict]:
    """
    Parse Telegram update with tolerant decoding to avoid utf-8 crashes.
    Returns dict or None.
    """
    try:
        return await request.json()
    except Exception as e:
        logger.warning(f"Standard request.json() failed: {e}, fallback decoding")

    raw = await request.body()
    for enc in ("utf-8", "latin-1"):
        try:
            return json.loads(raw.decode(enc, errors="replace"))
        except ValueError:
            continue

    logger.error("Failed to decode Telegram webhook payload after fallbacks")
    return None


def verify_secret(provided: Optional[str]) -> None:
    expected = settings.telegram_webhook_secret
    if not expected:
        return
    if not provided or not hmac.compare_digest(provided, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid webhook secret")


@router.post("/telegram-webhook", response_model=TelegramWebhookResponse)
async def handle_telegram_webhook(
    request: Request,
    bot: PaperBotService = Depends(get_bot_service),
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
):
    """
    Handle Telegram webhook updates:
    - /start and the entry button -> restaurant search dialogue
    - free text -> fuzzy search over clients
    - callback queries (button clicks) -> pick one of the found clients

    Telegram retries any non-2xx answer, so failures are reported in the body.
    """
    verify_secret(x_telegram_bot_api_secret_token)

    body = await parse_telegram_update(request)
    if not isinstance(body, dict):
        return TelegramWebhookResponse(success=False, message="Invalid telegram payload")

    try:
        update = TelegramUpdate(**body)
    except ValidationError as e:
        logger.warning(f"Unexpected telegram update shape: {e.error_count()} errors")
        return TelegramWebhookResponse(success=False, message="Invalid telegram update")

    try:
        try:
            event = event_from_update(update)
        except MalformedEventError as e:
            outcome = await bot.handle_malformed(e)
            return TelegramWebhookResponse(success=False, message=outcome.outcome)

        if event is None:
            return TelegramWebhookResponse(success=True, message="No actionable content")

        outcome = await bot.handle_event(event)
        return TelegramWebhookResponse(success=True, message=outcome.outcome, state=outcome.state.value)

    except Exception as e:
        logger.error(f"Telegram webhook error: {e}", exc_info=True)
        return TelegramWebhookResponse(success=False, message=str(e))
