"""Notification endpoints called by the dashboard."""

from fastapi import APIRouter, Depends, HTTPException, status

from paperbot.config import settings
from paperbot.dependencies import get_telegram_service
from paperbot.logging_config import get_logger
from paperbot.schemas.notifications import (
    LocationRequest,
    LocationResponse,
    LowPaperAlertRequest,
    LowPaperSummaryRequest,
    NotificationSummary,
)
from paperbot.services.notification_service import (
    fan_out,
    format_low_paper_alert,
    format_low_paper_summary,
    send_restaurant_location,
)
from paperbot.services.telegram_service import TelegramService

logger = get_logger("notifications")

router = APIRouter()


def _recipients(requested: list[int]) -> list[int]:
    chat_ids = requested or settings.admin_chat_ids
    if not chat_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing or invalid adminChatIds array")
    return chat_ids


def _require_bot_token() -> None:
    if not settings.telegram_bot_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Telegram bot token not configured",
        )


@router.post("/send-low-paper-alert", response_model=NotificationSummary)
async def send_low_paper_alert(
    request: LowPaperAlertRequest,
    telegram: TelegramService = Depends(get_telegram_service),
):
    if not (request.client.restaurant or request.client.name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing or invalid client data")
    chat_ids = _recipients(request.admin_chat_ids)
    _require_bot_token()

    text = format_low_paper_alert(request.client.display_name, request.paper_remaining)
    summary = await fan_out(telegram, chat_ids, text, timeout=settings.send_timeout_seconds)
    logger.info(
        f"Low paper alert sent: {summary.successful_notifications}/{summary.total_admins} admins notified",
        extra={"context": {"client": request.client.display_name, "notify_when": request.notify_when}},
    )
    return summary


@router.post("/send-low-paper-summary", response_model=NotificationSummary)
async def send_low_paper_summary(
    request: LowPaperSummaryRequest,
    telegram: TelegramService = Depends(get_telegram_service),
):
    chat_ids = _recipients(request.admin_chat_ids)
    _require_bot_token()

    text = format_low_paper_summary(request.clients)
    return await fan_out(telegram, chat_ids, text, timeout=settings.send_timeout_seconds)


@router.post("/send-location", response_model=LocationResponse)
async def send_location(
    request: LocationRequest,
    telegram: TelegramService = Depends(get_telegram_service),
):
    _require_bot_token()

    sent, error = await send_restaurant_location(
        telegram, request.chat_id, request.restaurant_name, request.latitude, request.longitude
    )
    if not sent:
        logger.error(f"Failed to send location: {error}", extra={"context": {"chat_id": request.chat_id}})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error)
    return LocationResponse(success=True, message="Location sent successfully")
