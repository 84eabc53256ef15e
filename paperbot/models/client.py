from dataclasses import dataclass
from typing import Any, Mapping, Optional

NOT_SPECIFIED_NAME = "Не указано"


def _first(doc: Mapping[str, Any], *keys: str) -> Optional[Any]:
    for key in keys:
        value = doc.get(key)
        if value not in (None, ""):
            return value
    return None


def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class ClientView:
    """Canonical client record used for matching and formatting.

    Built from a raw store document by :meth:`from_document`; the legacy
    aliases (``restaurant``, ``organization``, ``productId``) are resolved
    here and nowhere else.
    """

    id: str
    name: str = ""
    org_name: str = ""
    legal_name: str = ""
    branch_name: str = ""
    product_id: str = ""
    package_id: str = ""
    design_type: str = ""
    gramm: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ClientView":
        return cls(
            id=_as_text(doc.get("id")),
            name=_as_text(_first(doc, "name", "restaurant")),
            org_name=_as_text(_first(doc, "orgName", "organization")),
            legal_name=_as_text(doc.get("legalName")),
            branch_name=_as_text(_first(doc, "restaurant", "branchName")),
            product_id=_as_text(_first(doc, "productID_2", "productId")),
            package_id=_as_text(doc.get("packageID")),
            design_type=_as_text(doc.get("designType")),
            gramm=_as_text(doc.get("gramm")),
        )

    @property
    def display_name(self) -> str:
        return self.name or NOT_SPECIFIED_NAME

    @property
    def group_key(self) -> tuple[str, str]:
        """Branch records of one restaurant and product share this key."""
        return self.display_name, self.product_id or "default"


CLIENT_SEARCH_FIELDS = ("name", "org_name", "legal_name", "branch_name")
