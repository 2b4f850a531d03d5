# storefront/repos/order_repo.py
from typing import List

from storefront.domain.schemas import OrderRecord
from storefront.repos.snapshot_store import SnapshotStore


class OrderRepo:
    def __init__(self, store: SnapshotStore[OrderRecord]):
        self.store = store
        self._orders: List[OrderRecord] = store.load()

    def create_order(self, order: OrderRecord) -> bool:
        """Dopisuje zamowienie i zapisuje cala kolekcje. False = blad zapisu (zamowienie zostaje w pamieci)."""
        self._orders.append(order)
        return self.store.save(self._orders)

    def get_order(self, order_id: str) -> OrderRecord | None:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None

    def has_order_id(self, order_id: str) -> bool:
        return self.get_order(order_id) is not None

    def list_for_customer(self, customer_id: str) -> List[OrderRecord]:
        return [o for o in self._orders if o.customer_id == customer_id]

    def all(self) -> List[OrderRecord]:
        return list(self._orders)
