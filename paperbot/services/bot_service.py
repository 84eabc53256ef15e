"""Restaurant paper lookup dialogue.

A user presses the entry button, types a restaurant name, and either gets
the paper report right away or picks the right client from a list of
buttons. Dialogue state lives in a SessionStore keyed by Telegram user id.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from paperbot.logging_config import bind_logger, get_logger
from paperbot.models import ClientView
from paperbot.schemas.events import CallbackEvent, CommandEvent, InboundEvent, MalformedEventError, TextEvent
from paperbot.services.document_store import DocumentStore
from paperbot.services.fuzzy_search import flatten_groups, group_candidates, search_clients
from paperbot.services.paper_info_service import PaperInfoService
from paperbot.services.session_store import Session, SessionStore
from paperbot.services.state_machine import SessionState, begin_search, present_choices, reset, resolve
from paperbot.services.telegram_service import Button, TelegramService

logger = get_logger("bot_service")

ENTRY_LABEL = "📄 Узнать бумагу"
ENTRY_TOKEN = "check_paper"
SELECT_PREFIX = "select_"
START_COMMAND = "/start"

WELCOME_TEXT = (
    "👋 Добро пожаловать!\n\n"
    "Используйте кнопку <b>«Узнать бумагу»</b> для проверки остатков бумаги в ресторане."
)
ASK_RESTAURANT_TEXT = "🔍 Пожалуйста, введите название ресторана:"
NOT_FOUND_TEXT = "❌ Ресторан не найден. Попробуйте еще раз или проверьте правильность написания."
CHOOSE_TEXT = "📋 Найдено несколько вариантов. Выберите нужный:"
SESSION_EXPIRED_TEXT = "❌ Сессия истекла. Пожалуйста, начните сначала."
UNAVAILABLE_TEXT = "⚠️ Не удалось получить список ресторанов. Попробуйте позже."
HELP_TEXT = "ℹ️ Нажмите <b>«Узнать бумагу»</b> или отправьте /start, чтобы начать."

ENTRY_BUTTON = Button(label=ENTRY_LABEL, callback_token=ENTRY_TOKEN)


class SessionExpiredError(Exception):
    def __init__(self, user_id: int, index: Optional[int] = None):
        self.user_id = user_id
        self.index = index
        super().__init__(f"No pending selection {index} for user {user_id}")


@dataclass
class BotOutcome:
    outcome: str
    state: SessionState


def parse_selection(token: str) -> Optional[int]:
    """``select_3`` -> 3; None for anything else."""
    if not token.startswith(SELECT_PREFIX):
        return None
    raw = token[len(SELECT_PREFIX):]
    return int(raw) if raw.isdecimal() else None


class PaperBotService:
    def __init__(
        self,
        documents: DocumentStore,
        sessions: SessionStore,
        telegram: TelegramService,
        paper_info: Optional[PaperInfoService] = None,
        store_timeout: float = 10.0,
    ):
        self.documents = documents
        self.sessions = sessions
        self.telegram = telegram
        self.paper_info = paper_info or PaperInfoService(documents)
        self.store_timeout = store_timeout

    async def handle_event(self, event: InboundEvent) -> BotOutcome:
        log = bind_logger(logger, user_id=event.user_id, kind=event.kind)
        session = await self.sessions.get(event.user_id) or Session.idle()
        log.debug(f"Handling event in state {session.state.value}")

        if isinstance(event, CallbackEvent):
            if event.callback_id:
                await self.telegram.answer_callback(event.callback_id)
            return await self._handle_callback(event, session, log)

        if isinstance(event, CommandEvent):
            if event.command == START_COMMAND:
                return await self._handle_start(event)
            return await self._handle_help(event, session)

        if event.text == ENTRY_LABEL:
            return await self._handle_entry(event, session)
        if session.state in (SessionState.AWAITING_QUERY, SessionState.AWAITING_SELECTION):
            return await self._handle_query(event, session, log)
        return await self._handle_help(event, session)

    async def handle_malformed(self, error: MalformedEventError) -> BotOutcome:
        """Guide the user without touching their session."""
        logger.info(f"Malformed update: {error.message}", extra={"context": {"chat_id": error.chat_id}})
        if error.callback_id:
            await self.telegram.answer_callback(error.callback_id)
        if error.chat_id is not None:
            await self.telegram.send_message(error.chat_id, HELP_TEXT)
        return BotOutcome("malformed", SessionState.IDLE)

    async def _handle_start(self, event: CommandEvent) -> BotOutcome:
        await self.sessions.delete(event.user_id)
        await self.telegram.send_buttons(event.chat_id, WELCOME_TEXT, [ENTRY_BUTTON])
        return BotOutcome("welcome", SessionState.IDLE)

    async def _handle_help(self, event: InboundEvent, session: Session) -> BotOutcome:
        await self.telegram.send_buttons(event.chat_id, HELP_TEXT, [ENTRY_BUTTON])
        return BotOutcome("help", session.state)

    async def _handle_entry(self, event: InboundEvent, session: Session) -> BotOutcome:
        state = begin_search(session.state)
        await self.sessions.set(event.user_id, Session(state=state))
        await self.telegram.send_message(event.chat_id, ASK_RESTAURANT_TEXT)
        return BotOutcome("prompt", state)

    async def _handle_callback(self, event: CallbackEvent, session: Session, log) -> BotOutcome:
        if event.token == ENTRY_TOKEN:
            return await self._handle_entry(event, session)

        index = parse_selection(event.token)
        if index is None:
            log.warning(f"Unknown callback token: {event.token}")
            return await self._handle_help(event, session)

        try:
            client = self._pending_client(event.user_id, session, index)
        except SessionExpiredError as e:
            log.info(str(e), context={"state": session.state.value})
            await self.sessions.delete(event.user_id)
            await self.telegram.send_buttons(event.chat_id, SESSION_EXPIRED_TEXT, [ENTRY_BUTTON])
            return BotOutcome("expired", reset(session.state))

        return await self._send_report(event, session.state, client)

    def _pending_client(self, user_id: int, session: Session, index: int) -> ClientView:
        client = session.pick(index)
        if client is None:
            raise SessionExpiredError(user_id, index)
        return client

    async def _handle_query(self, event: TextEvent, session: Session, log) -> BotOutcome:
        state = begin_search(session.state)

        try:
            documents = await asyncio.wait_for(self.documents.fetch_all("clients"), timeout=self.store_timeout)
        except Exception as e:
            log.error(f"Client listing failed: {e!r}")
            await self.sessions.delete(event.user_id)
            await self.telegram.send_message(event.chat_id, UNAVAILABLE_TEXT)
            return BotOutcome("unavailable", reset(state))

        clients = [ClientView.from_document(doc) for doc in documents]
        results = search_clients(clients, event.text)
        log.info(
            f"Search returned {len(results)} of {len(clients)} clients",
            context={"query": event.text},
        )

        if not results:
            # Keep waiting for a name so the user can simply retry
            await self.sessions.set(event.user_id, Session(state=state))
            await self.telegram.send_message(event.chat_id, NOT_FOUND_TEXT)
            return BotOutcome("not_found", state)

        groups = group_candidates(results)
        if len(groups) == 1 and len(results) == 1:
            return await self._send_report(event, state, results[0])

        pending = flatten_groups(groups)
        labels = await self.paper_info.build_choice_labels(pending)
        buttons = [Button(label=label, callback_token=f"{SELECT_PREFIX}{index}") for index, label in enumerate(labels)]

        state = present_choices(state)
        await self.sessions.set(event.user_id, Session.awaiting_selection(pending))
        await self.telegram.send_buttons(event.chat_id, CHOOSE_TEXT, buttons)
        return BotOutcome("choices", state)

    async def _send_report(self, event: InboundEvent, state: SessionState, client: ClientView) -> BotOutcome:
        message = await self.paper_info.format_paper_info(client)
        await self.telegram.send_message(event.chat_id, message)
        await self.sessions.delete(event.user_id)
        return BotOutcome("found", resolve(state))
