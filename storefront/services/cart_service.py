from typing import Dict, Any

from storefront.data.catalog import Catalog
from storefront.domain.errors import CheckoutStateError, InvalidQuantityError, UnknownItemError
from storefront.domain.schemas import CatalogItem
from storefront.services.session_service import SessionService, ShoppingSession
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use case'y koszyka sesji.
    commands (add, remove) modyfikuja koszyk
    query (get) tylko odczyt
    """

    def __init__(self, catalog: Catalog, sessions: SessionService):
        self.catalog = catalog
        self.sessions = sessions

    #query
    def get_cart(self, session_id: str) -> Dict[str, Any]:
        session = self.sessions.get_session(session_id)
        ledger = session.ledger

        #dict przeksztalcany w jsona
        return {
            "session_id": session.session_id,
            "items": [
                {
                    "item_id": line.item.id,
                    "name": line.item.name,
                    "quantity": line.quantity,
                    "unit_price": line.item.effective_price,
                    "line_total": line.line_total,
                }
                for line in ledger.lines()
            ],
            "subtotal": ledger.subtotal(),
            "tax": ledger.tax_amount(),
            "total": ledger.total(),
        }

    #commands
    def add_product(self, session_id: str, item_id: str, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise InvalidQuantityError("Ilosc musi byc wieksza niz 0")

        session = self._editable_session(session_id)
        item = self._find_item(item_id)

        logger.info(
            f"Dodaje {quantity}x {item.id} do koszyka sesji {session_id} "
            f"(bylo {session.ledger.quantity_of(item.id)})"
        )
        session.ledger.add_line(item, quantity)
        return self.get_cart(session_id)

    def remove_product(self, session_id: str, item_id: str, quantity: int | None = None) -> Dict[str, Any]:
        """quantity=None usuwa cala pozycje."""
        if quantity is not None and quantity <= 0:
            raise InvalidQuantityError("Ilosc musi byc wieksza niz 0")

        session = self._editable_session(session_id)
        item = self._find_item(item_id)

        current = session.ledger.quantity_of(item.id)
        if current == 0:
            logger.info(f"Produktu {item.id} nie ma w koszyku sesji {session_id}")
            return self.get_cart(session_id)

        session.ledger.remove_line(item, current if quantity is None else quantity)
        logger.info(f"Usunieto {item.id} z koszyka sesji {session_id}, zostalo {session.ledger.quantity_of(item.id)}")
        return self.get_cart(session_id)

    def _editable_session(self, session_id: str) -> ShoppingSession:
        session = self.sessions.get_session(session_id)
        # total checkoutu jest zamrozony - koszyk nie moze sie zmieniac w trakcie
        if session.checkout_in_progress:
            raise CheckoutStateError("Koszyk nie moze byc modyfikowany w trakcie checkoutu")
        return session

    def _find_item(self, item_id: str) -> CatalogItem:
        item = self.catalog.get(item_id)
        if not item:
            raise UnknownItemError(f"Produkt {item_id} nie istnieje")
        return item
