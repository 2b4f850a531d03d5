# storefront/data/catalog.py
from decimal import Decimal
from typing import List

from storefront.domain.schemas import CatalogItem


PRODUCTS = {
    "M001": CatalogItem(id="M001", name="Laptop Pro", description="High-performance laptop",
                        regular_price=Decimal("1200.00"), sale_price=Decimal("1000.00")),
    "M002": CatalogItem(id="M002", name="Mechanical Keyboard", description="RGB gaming keyboard",
                        regular_price=Decimal("80.00"), sale_price=Decimal("0.00")),
    "M003": CatalogItem(id="M003", name="Wireless Mouse", description="Ergonomic wireless mouse",
                        regular_price=Decimal("35.00"), sale_price=Decimal("25.00")),
    "M004": CatalogItem(id="M004", name="USB-C Hub", description="Multi-port adapter",
                        regular_price=Decimal("50.00"), sale_price=Decimal("0.00")),
    "M005": CatalogItem(id="M005", name="External SSD 1TB", description="Portable solid state drive",
                        regular_price=Decimal("150.00"), sale_price=Decimal("130.00")),
}


class Catalog:
    """Staly katalog produktow, lookup po id bez rozrozniania wielkosci liter."""

    def __init__(self, products: dict | None = None):
        source = products if products is not None else PRODUCTS
        self._products = {key.upper(): item for key, item in source.items()}

    def all(self) -> List[CatalogItem]:
        return list(self._products.values())

    def get(self, item_id: str) -> CatalogItem | None:
        return self._products.get(item_id.strip().upper())
