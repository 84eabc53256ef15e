from typing import Optional

import pytest

from paperbot.services.document_store import DocumentStore, StoreError
from paperbot.services.session_store import InMemorySessionStore
from paperbot.services.telegram_service import TelegramService


class FakeDocumentStore(DocumentStore):
    """In-memory collections; ``fail`` names collections that raise StoreError."""

    def __init__(self, collections: Optional[dict] = None, subcollections: Optional[dict] = None, fail=()):
        self.collections = collections or {}
        self.subcollections = subcollections or {}
        self.fail = set(fail)
        self.calls = []

    def _check(self, name: str) -> None:
        if name in self.fail:
            raise StoreError(f"{name} unavailable")

    async def fetch_all(self, collection):
        self.calls.append(("fetch_all", collection))
        self._check(collection)
        return [dict(doc) for doc in self.collections.get(collection, [])]

    async def fetch_subcollection(self, parent_id, name, parent_collection="clients"):
        self.calls.append(("fetch_subcollection", parent_id, name))
        self._check(name)
        return [dict(doc) for doc in self.subcollections.get((parent_id, name), [])]

    async def get_by_id(self, collection, doc_id):
        self.calls.append(("get_by_id", collection, doc_id))
        self._check(collection)
        for doc in self.collections.get(collection, []):
            if doc.get("id") == doc_id:
                return dict(doc)
        return None


class FakeTelegram(TelegramService):
    """Records outgoing calls instead of talking to Telegram."""

    def __init__(self, ok: bool = True):
        super().__init__("test-token")
        self.ok = ok
        self.sent = []

    async def _make_request(self, method, data=None):
        self.sent.append((method, data or {}))
        if self.ok:
            return {"ok": True, "result": {}}
        return {"ok": False, "description": "Forbidden: bot was blocked by the user"}

    def messages(self):
        return [data for method, data in self.sent if method == "sendMessage"]

    def last_text(self) -> str:
        return self.messages()[-1]["text"]

    def last_buttons(self) -> list[dict]:
        markup = self.messages()[-1].get("reply_markup") or {"inline_keyboard": []}
        return [row[0] for row in markup["inline_keyboard"]]


CLIENTS = [
    {"id": "c1", "name": "Cafe Dono", "orgName": "Dono LLC", "productID_2": "p1", "packageID": "k1"},
    {"id": "c2", "name": "Tea House Lotus", "productID_2": "p2", "packageID": "k1"},
    {"id": "c3", "name": "Cafe Dolce", "productID_2": "p1", "packageID": "k2"},
    {"id": "c4", "name": "Кафе Доно", "productID_2": "p1"},
]

CATALOG = {
    "products": [{"id": "p1", "productName": "Сахар белый"}, {"id": "p2", "productName": "Сахар тростниковый"}],
    "packageTypes": [{"id": "k1", "type": "Стик"}, {"id": "k2", "type": "Сашет"}],
    "productTypes": [
        {"id": "t1", "productID_2": "p1", "packageID": "k1", "gramm": 5},
        {"id": "t2", "productID_2": "p2", "packageID": "k1", "gramm": 4},
    ],
}


@pytest.fixture
def document_store():
    return FakeDocumentStore(
        collections={"clients": CLIENTS, **CATALOG},
        subcollections={
            ("c1", "paperRolls"): [
                {"id": "r1", "paperRemaining": 12.5},
                {"id": "r2", "paperRemaining": 0},
                {"id": "r3", "paperRemaining": "7.25"},
            ],
        },
    )


@pytest.fixture
def telegram():
    return FakeTelegram()


@pytest.fixture
def session_store():
    return InMemorySessionStore(ttl_seconds=900)
