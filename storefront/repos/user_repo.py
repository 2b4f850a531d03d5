# storefront/repos/user_repo.py
from typing import List

from storefront.domain.schemas import CustomerAccount
from storefront.repos.snapshot_store import SnapshotStore


class CustomerRepo:
    """
    Kolekcja klientow w pamieci, wczytana raz ze store.
    Po kazdej zmianie cala kolekcja jest zapisywana z powrotem.
    """

    def __init__(self, store: SnapshotStore[CustomerAccount]):
        self.store = store
        self._customers: List[CustomerAccount] = store.load()

    def get_customer(self, customer_id: str) -> CustomerAccount | None:
        for customer in self._customers:
            if customer.id == customer_id:
                return customer
        return None

    def is_id_available(self, customer_id: str) -> bool:
        return self.get_customer(customer_id) is None

    def all(self) -> List[CustomerAccount]:
        return list(self._customers)

    def save_customer(self, customer: CustomerAccount) -> bool:
        #upsert po id - podmiana rekordu zamiast dopisywania duplikatu
        for idx, existing in enumerate(self._customers):
            if existing.id == customer.id:
                self._customers[idx] = customer
                break
        else:
            self._customers.append(customer)
        return self.store.save(self._customers)

    def update_card(self, customer_id: str, card_identifier: str) -> bool:
        customer = self.get_customer(customer_id)
        if not customer:
            raise ValueError(f"Klient {customer_id} nie istnieje")
        customer.card_identifier = card_identifier
        return self.store.save(self._customers)
