"""Process-wide service instances, injected into routes with ``Depends``."""

from functools import lru_cache

from paperbot.config import settings
from paperbot.services.bot_service import PaperBotService
from paperbot.services.document_store import DocumentStore, FirestoreRestStore
from paperbot.services.paper_info_service import PaperInfoService
from paperbot.services.session_store import InMemorySessionStore, SessionStore
from paperbot.services.telegram_service import TelegramService


@lru_cache
def get_document_store() -> DocumentStore:
    return FirestoreRestStore(
        project_id=settings.firestore_project_id,
        api_key=settings.firestore_api_key,
        page_size=settings.firestore_page_size,
        timeout=settings.store_timeout_seconds,
    )


@lru_cache
def get_session_store() -> SessionStore:
    return InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)


@lru_cache
def get_telegram_service() -> TelegramService:
    return TelegramService(
        settings.telegram_bot_token,
        timeout=settings.telegram_timeout_seconds,
        label_limit=settings.button_label_limit,
    )


@lru_cache
def get_bot_service() -> PaperBotService:
    documents = get_document_store()
    return PaperBotService(
        documents=documents,
        sessions=get_session_store(),
        telegram=get_telegram_service(),
        paper_info=PaperInfoService(
            documents,
            lookup_timeout=settings.lookup_timeout_seconds,
            label_limit=settings.button_label_limit,
        ),
        store_timeout=settings.store_timeout_seconds,
    )
