"""Paper inventory message for one client.

Each piece of the message comes from its own store lookup. Lookups run
concurrently, each under a timeout, and a failed lookup is replaced by a
placeholder instead of failing the whole message.
"""

import asyncio
from collections import Counter
from html import escape
from typing import Awaitable, Optional, TypeVar

from paperbot.logging_config import get_logger
from paperbot.models import ClientView, PaperRoll, ProductTypeRule
from paperbot.services.document_store import DocumentStore
from paperbot.services.result import Result
from paperbot.services.telegram_service import DEFAULT_LABEL_LIMIT, truncate_label

logger = get_logger("paper_info_service")

T = TypeVar("T")

NOT_SPECIFIED = "Не указан"
UNIQUE_DESIGN = "unique"


def format_kg(weight: float) -> str:
    return f"{weight:.2f} кг"


class PaperInfoService:
    def __init__(
        self,
        documents: DocumentStore,
        lookup_timeout: float = 8.0,
        label_limit: int = DEFAULT_LABEL_LIMIT,
    ):
        self.documents = documents
        self.lookup_timeout = lookup_timeout
        self.label_limit = label_limit

    async def _guarded(self, lookup: Awaitable[T], code: str, client_id: str) -> Result[T]:
        try:
            value = await asyncio.wait_for(lookup, timeout=self.lookup_timeout)
        except Exception as e:
            logger.warning(
                f"Lookup {code} failed: {e!r}",
                extra={"context": {"client_id": client_id, "lookup": code}},
            )
            return Result.from_exception(e, code)
        return Result.success(value)

    async def product_name(self, product_id: str) -> Optional[str]:
        if not product_id:
            return None
        doc = await self.documents.get_by_id("products", product_id)
        return (doc or {}).get("productName") or None

    async def package_type(self, package_id: str) -> Optional[str]:
        if not package_id:
            return None
        doc = await self.documents.get_by_id("packageTypes", package_id)
        return (doc or {}).get("type") or None

    async def gramm_for(self, client: ClientView) -> Optional[str]:
        """Own value for unique designs, else the first matching product-type rule."""
        if client.design_type == UNIQUE_DESIGN and client.gramm:
            return client.gramm
        if not (client.product_id or client.package_id):
            return None

        for doc in await self.documents.fetch_all("productTypes"):
            rule = ProductTypeRule.from_document(doc)
            if rule.applies_to(client):
                return rule.gramm
        return None

    async def paper_rolls(self, client: ClientView) -> list[PaperRoll]:
        docs = await self.documents.fetch_subcollection(client.id, "paperRolls")
        rolls = [PaperRoll.from_document(doc) for doc in docs]
        return [roll for roll in rolls if roll is not None]

    async def format_paper_info(self, client: ClientView) -> str:
        product, package, gramm, rolls = await asyncio.gather(
            self._guarded(self.product_name(client.product_id), "product", client.id),
            self._guarded(self.package_type(client.package_id), "package", client.id),
            self._guarded(self.gramm_for(client), "gramm", client.id),
            self._guarded(self.paper_rolls(client), "rolls", client.id),
        )

        product_name = product.unwrap_or(None) or NOT_SPECIFIED
        package_name = package.unwrap_or(None) or NOT_SPECIFIED
        gramm_value = gramm.unwrap_or(None)
        roll_list = rolls.unwrap_or([])

        lines = [
            "📋 <b>Информация о бумаге</b>",
            "",
            f"🏢 <b>Ресторан:</b> {escape(client.display_name)}",
        ]
        if client.org_name:
            lines.append(f"<b>Организация:</b> {escape(client.org_name)}")

        product_line = f"📦 <b>Продукт:</b> {escape(product_name)}"
        if gramm_value:
            product_line += f" ({escape(gramm_value)} гр)"
        lines += ["", product_line, f"  {escape(package_name)}", "", "🧻 <b>Рулоны бумаги:</b>"]

        if not rolls.ok:
            lines.append("  ⚠️ Данные о рулонах недоступны")
        elif not roll_list:
            lines.append("  ⚠️ Нет доступных рулонов")
        else:
            for index, roll in enumerate(roll_list, start=1):
                lines.append(f"  • Рулон {index}: <b>{format_kg(roll.weight)}</b>")

        total = sum(roll.weight for roll in roll_list)
        lines += ["", f"🔢 <b>ИТОГО:</b> <b>{format_kg(total)}</b>"]
        return "\n".join(lines)

    async def _label_details(self, client: ClientView) -> str:
        if not client.product_id:
            return ""
        product, package = await asyncio.gather(
            self._guarded(self.product_name(client.product_id), "product", client.id),
            self._guarded(self.package_type(client.package_id), "package", client.id),
        )
        return " ".join(part for part in (product.unwrap_or(None), package.unwrap_or(None)) if part)

    @staticmethod
    def _compose_label(client: ClientView, details: str, with_branch: bool = False) -> str:
        label = client.display_name.upper()
        if with_branch and client.branch_name and client.branch_name != client.name:
            label = f"{label} · {client.branch_name}"
        if details:
            label = f"{label} ({details})"
        return label

    async def build_choice_label(self, client: ClientView) -> str:
        """Button text: upper-cased name plus product and package when known."""
        details = await self._label_details(client)
        return truncate_label(self._compose_label(client, details), self.label_limit)

    async def build_choice_labels(self, clients: list[ClientView]) -> list[str]:
        """Labels for a choice list; branches sharing one label get their branch name."""
        details = await asyncio.gather(*(self._label_details(client) for client in clients))
        plain = [self._compose_label(client, detail) for client, detail in zip(clients, details)]
        counts = Counter(plain)
        labels = [
            self._compose_label(client, detail, with_branch=counts[label] > 1)
            for client, detail, label in zip(clients, details, plain)
        ]
        return [truncate_label(label, self.label_limit) for label in labels]
