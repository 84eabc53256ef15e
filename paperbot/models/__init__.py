from paperbot.models.client import CLIENT_SEARCH_FIELDS, ClientView
from paperbot.models.paper_roll import PaperRoll
from paperbot.models.product_type import ProductTypeRule

__all__ = [
    "ClientView",
    "CLIENT_SEARCH_FIELDS",
    "PaperRoll",
    "ProductTypeRule",
]
