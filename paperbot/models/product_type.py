from dataclasses import dataclass
from typing import Any, Mapping

from paperbot.models.client import ClientView


@dataclass(frozen=True)
class ProductTypeRule:
    """Weight (gramm) shared by every client of a product + package pair."""

    product_id: str
    package_id: str
    gramm: str

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ProductTypeRule":
        gramm = doc.get("gramm")
        return cls(
            product_id=str(doc.get("productID_2") or ""),
            package_id=str(doc.get("packageID") or ""),
            gramm="" if gramm in (None, "") else str(gramm),
        )

    def applies_to(self, client: ClientView) -> bool:
        # A client without an id on one side matches any rule on that side
        matches_product = not client.product_id or self.product_id == client.product_id
        matches_package = not client.package_id or self.package_id == client.package_id
        return matches_product and matches_package and bool(self.gramm)
