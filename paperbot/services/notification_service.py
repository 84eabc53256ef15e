"""Low-paper notifications for administrators."""

import asyncio
from datetime import datetime
from html import escape
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from paperbot.logging_config import get_logger
from paperbot.schemas.notifications import AlertClient, DeliveryResult, NotificationSummary
from paperbot.services.telegram_service import TelegramService

logger = get_logger("notification_service")

LOCAL_TZ = ZoneInfo("Asia/Tashkent")


def _local_now(now: Optional[datetime] = None) -> datetime:
    return (now or datetime.now(LOCAL_TZ)).astimezone(LOCAL_TZ)


def format_low_paper_alert(client_name: str, paper_remaining: float, now: Optional[datetime] = None) -> str:
    stamp = _local_now(now).strftime("%d.%m.%Y, %H:%M")
    return (
        "🚨 <b>ВНИМАНИЕ! Заканчивается бумага</b>\n\n"
        f"🏪 <b>Ресторан:</b> {escape(client_name)}\n"
        f"📦 <b>Остаток бумаги:</b> {paper_remaining:g} кг\n\n"
        f"🕐 <b>Дата:</b> {stamp}\n\n"
        "<i>Необходимо пополнить запасы бумаги!</i>"
    )


def format_low_paper_summary(clients: Sequence[AlertClient], now: Optional[datetime] = None) -> str:
    stamp = _local_now(now).strftime("%d.%m.%Y")
    lines = [
        "📋 <b>Сводка по клиентам с малым количеством бумаги</b>",
        "",
        f"📅 <b>Дата:</b> {stamp}",
        "",
    ]
    for client in clients:
        remaining = client.paper_remaining if client.paper_remaining is not None else 0.0
        lines.append(f"• {escape(client.display_name)}: {remaining:.2f} кг")
    lines += ["", f"<i>Всего клиентов: {len(clients)}</i>"]
    return "\n".join(lines)


async def _deliver(telegram: TelegramService, chat_id: int, text: str, timeout: float) -> DeliveryResult:
    try:
        response = await asyncio.wait_for(telegram.send_message(chat_id, text), timeout=timeout)
    except Exception as e:
        return DeliveryResult(chat_id=chat_id, success=False, error=str(e) or type(e).__name__)

    if response.get("ok"):
        return DeliveryResult(chat_id=chat_id, success=True)
    error = response.get("description") or response.get("error") or "Unknown Telegram API error"
    return DeliveryResult(chat_id=chat_id, success=False, error=error)


async def fan_out(
    telegram: TelegramService,
    chat_ids: Sequence[int],
    text: str,
    timeout: float = 15.0,
) -> NotificationSummary:
    """Send ``text`` to every chat concurrently and report each outcome.

    A failed or timed-out delivery is recorded and does not cancel the others.
    """
    outcomes = await asyncio.gather(
        *(_deliver(telegram, chat_id, text, timeout) for chat_id in chat_ids),
        return_exceptions=True,
    )

    results = []
    for chat_id, outcome in zip(chat_ids, outcomes):
        if isinstance(outcome, BaseException):
            outcome = DeliveryResult(chat_id=chat_id, success=False, error=str(outcome))
        if not outcome.success:
            logger.warning(f"Notification to {chat_id} failed: {outcome.error}")
        results.append(outcome)

    successful = sum(1 for result in results if result.success)
    logger.info(
        f"Notifications sent: {successful}/{len(chat_ids)}",
        extra={"context": {"total": len(chat_ids), "successful": successful}},
    )
    return NotificationSummary(
        message=f"Sent to {successful} out of {len(chat_ids)} admins",
        total_admins=len(chat_ids),
        successful_notifications=successful,
        results=results,
    )


async def send_restaurant_location(
    telegram: TelegramService,
    chat_id: int,
    restaurant_name: str,
    latitude: float,
    longitude: float,
) -> tuple[bool, Optional[str]]:
    """Send a map pin, then the restaurant name under it."""
    location = await telegram.send_location(chat_id, latitude, longitude)
    if not location.get("ok"):
        return False, f"Location send failed: {location.get('description') or location.get('error')}"

    text = await telegram.send_message(chat_id, f"📍 Ресторан: {escape(restaurant_name)} ⬆️")
    if not text.get("ok"):
        return False, f"Text send failed: {text.get('description') or text.get('error')}"
    return True, None
