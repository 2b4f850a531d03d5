# storefront/domain/ledger.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from storefront.domain.schemas import CatalogItem, OrderLine
from storefront.utils.settings import TAX_RATE

CENT = Decimal("0.01")


@dataclass
class CartLine:
    item: CatalogItem
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.item.effective_price * self.quantity


class PricingLedger:
    """
    Koszyk jednej sesji zakupowej.
    Klucz to id produktu (nie obiekt), kolejnosc dodawania zachowana.
    Wyczyszczenie to jedyny sposob zeby niepusty koszyk znow byl pusty.
    """

    def __init__(self, tax_rate: Decimal = TAX_RATE):
        self.tax_rate = Decimal(tax_rate)
        self._lines: Dict[str, CartLine] = {}

    def add_line(self, item: CatalogItem, quantity: int) -> None:
        if quantity <= 0:
            return

        line = self._lines.get(item.id)
        if line:
            line.quantity += quantity
        else:
            self._lines[item.id] = CartLine(item=item, quantity=quantity)

    def remove_line(self, item: CatalogItem, quantity: int) -> None:
        line = self._lines.get(item.id)
        if line is None or quantity <= 0:
            return

        if quantity >= line.quantity:
            del self._lines[item.id]
        else:
            line.quantity -= quantity

    def quantity_of(self, item_id: str) -> int:
        line = self._lines.get(item_id)
        return line.quantity if line else 0

    def lines(self) -> List[CartLine]:
        #kopie, zeby nikt nie modyfikowal ilosci z zewnatrz
        return [CartLine(item=l.item, quantity=l.quantity) for l in self._lines.values()]

    def order_lines(self) -> List[OrderLine]:
        return [OrderLine(item_id=l.item.id, quantity=l.quantity) for l in self._lines.values()]

    def subtotal(self) -> Decimal:
        return sum((l.line_total for l in self._lines.values()), Decimal("0.00"))

    def tax_amount(self) -> Decimal:
        return (self.subtotal() * self.tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)

    def total(self) -> Decimal:
        return self.subtotal() + self.tax_amount()

    def is_empty(self) -> bool:
        return not self._lines

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)
