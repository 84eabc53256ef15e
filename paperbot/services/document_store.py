"""Read-only access to the client document database.

The bot only needs collection scans, sub-collection scans and lookups by id.
``FirestoreRestStore`` serves them from the Firestore REST API.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from paperbot.logging_config import get_logger

logger = get_logger("document_store")


class StoreError(Exception):
    """The document store could not answer (network, status or payload)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DocumentStore(ABC):
    @abstractmethod
    async def fetch_all(self, collection: str) -> list[dict]:
        ...

    @abstractmethod
    async def fetch_subcollection(
        self, parent_id: str, name: str, parent_collection: str = "clients"
    ) -> list[dict]:
        ...

    @abstractmethod
    async def get_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        ...


def decode_value(value: dict) -> Any:
    """Convert one Firestore typed value to a plain Python value."""
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "booleanValue" in value:
        return value["booleanValue"]
    if "nullValue" in value:
        return None
    if "timestampValue" in value:
        return value["timestampValue"]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        point = value["geoPointValue"]
        return {"latitude": point.get("latitude", 0.0), "longitude": point.get("longitude", 0.0)}
    if "mapValue" in value:
        return {key: decode_value(item) for key, item in value["mapValue"].get("fields", {}).items()}
    if "arrayValue" in value:
        return [decode_value(item) for item in value["arrayValue"].get("values", [])]
    return None


def decode_document(doc: dict) -> dict:
    """Flatten a Firestore document; ``id`` is the last segment of its name."""
    data = {key: decode_value(value) for key, value in (doc.get("fields") or {}).items()}
    name = doc.get("name") or ""
    data["id"] = name.rsplit("/", 1)[-1]
    return data


class FirestoreRestStore(DocumentStore):
    """Firestore REST client (``documents`` endpoints, API-key auth)."""

    BASE_URL = "https://firestore.googleapis.com/v1/projects/{project}/databases/(default)/documents"

    def __init__(
        self,
        project_id: str,
        api_key: str,
        page_size: int = 300,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.project_id = project_id
        self.api_key = api_key
        self.page_size = page_size
        self.timeout = timeout
        self.base_url = self.BASE_URL.format(project=project_id)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get(self, client: httpx.AsyncClient, path: str, params: dict) -> Optional[dict]:
        url = f"{self.base_url}/{path}"
        try:
            response = await client.get(url, params={"key": self.api_key, **params})
        except httpx.HTTPError as e:
            raise StoreError(f"Firestore request failed for {path}: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise StoreError(
                f"Firestore returned {response.status_code} for {path}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Firestore returned invalid JSON for {path}") from e

    async def _list(self, path: str) -> list[dict]:
        documents: list[dict] = []
        page_token: Optional[str] = None
        async with self._client() as client:
            while True:
                params: dict[str, Any] = {"pageSize": self.page_size}
                if page_token:
                    params["pageToken"] = page_token
                data = await self._get(client, path, params) or {}
                documents.extend(decode_document(doc) for doc in data.get("documents", []))
                page_token = data.get("nextPageToken")
                if not page_token:
                    break

        logger.debug(f"Fetched {len(documents)} documents from {path}")
        return documents

    async def fetch_all(self, collection: str) -> list[dict]:
        return await self._list(collection)

    async def fetch_subcollection(
        self, parent_id: str, name: str, parent_collection: str = "clients"
    ) -> list[dict]:
        return await self._list(f"{parent_collection}/{parent_id}/{name}")

    async def get_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        async with self._client() as client:
            data = await self._get(client, f"{collection}/{doc_id}", {})
        return decode_document(data) if data else None
