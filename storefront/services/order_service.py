# storefront/services/order_service.py
from typing import List

from storefront.domain.schemas import OrderRecord
from storefront.repos.order_repo import OrderRepo


class OrderService:
    """
    Serwis odpowiedzialny za podglad zamowien.
    Tworzenie zamowien jest w CheckoutService.
    """

    def __init__(self, orders: OrderRepo):
        self.repo = orders

    def list_orders(self, customer_id: str) -> List[OrderRecord]:
        """
        Use Case: Historia zamowien klienta, najnowsze pierwsze.
        """
        orders = self.repo.list_for_customer(customer_id)
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def get_order(self, order_id: str, customer_id: str) -> OrderRecord:
        """
        Use Case: Pobranie zamowienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise ValueError("Zamowienie nie istnieje")

        if order.customer_id != customer_id:
            raise PermissionError("Brak dostepu do zamowienia")

        return order
