"""
Fixtures wspolne dla testow: tymczasowe bazy sqlite, repozytoria,
deterministyczne bramki platnicze i klient HTTP.
"""

import random
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.api import create_app, deps
from storefront.data.catalog import Catalog
from storefront.domain.ledger import PricingLedger
from storefront.domain.schemas import CatalogItem, CustomerAccount, OrderRecord
from storefront.repos.order_repo import OrderRepo
from storefront.repos.snapshot_store import SnapshotStore
from storefront.repos.user_repo import CustomerRepo
from storefront.services.checkout_service import CheckoutService
from storefront.services.payment_gateway import PaymentGateway
from storefront.services.session_service import SessionService

CUSTOMER_ID = "alice"
CUSTOMER_CARD = "4111111111111111"
CUSTOMER_PASSWORD = "Secret#1"
CUSTOMER_ANSWER = "Smith"


class ScriptedRandom(random.Random):
    """random() zwraca kolejne wartosci ze skryptu, potem zwykle losowanie."""

    def __init__(self, draws, seed: int = 7):
        super().__init__(seed)
        self._draws = list(draws)

    def random(self) -> float:
        if self._draws:
            return self._draws.pop(0)
        return super().random()


class SpyGateway(PaymentGateway):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def charge(self, card_identifier, amount):
        self.calls.append((card_identifier, amount))
        return super().charge(card_identifier, amount)


def approving_gateway() -> SpyGateway:
    return SpyGateway(rng=random.Random(1), decline_rate=0.0)


def declining_gateway() -> SpyGateway:
    return SpyGateway(rng=random.Random(1), decline_rate=1.0)


@pytest.fixture
def item_a():
    # efektywna cena 10.00 (promocja)
    return CatalogItem(
        id="A", name="Item A", description="test item",
        regular_price=Decimal("12.00"), sale_price=Decimal("10.00"),
    )


@pytest.fixture
def item_b():
    return CatalogItem(id="B", name="Item B", regular_price=Decimal("5.50"))


@pytest.fixture
def ledger():
    return PricingLedger()


@pytest.fixture
def customers_url(tmp_path):
    return f"sqlite:///{tmp_path / 'customers.db'}"


@pytest.fixture
def orders_url(tmp_path):
    return f"sqlite:///{tmp_path / 'orders.db'}"


@pytest.fixture
def customer_store(customers_url):
    store = SnapshotStore(CustomerAccount, customers_url, "customers", write_attempts=1)
    yield store
    store.close()


@pytest.fixture
def order_store(orders_url):
    store = SnapshotStore(OrderRecord, orders_url, "orders", write_attempts=1)
    yield store
    store.close()


@pytest.fixture
def customers(customer_store):
    repo = CustomerRepo(customer_store)
    repo.save_customer(
        CustomerAccount(
            id=CUSTOMER_ID,
            password=CUSTOMER_PASSWORD,
            name="Alice",
            address="1 Main St",
            card_identifier=CUSTOMER_CARD,
            security_answer=CUSTOMER_ANSWER,
        )
    )
    return repo


@pytest.fixture
def orders(order_store):
    return OrderRepo(order_store)


@pytest.fixture
def make_checkout(ledger, customers, orders):
    def _make(gateway=None, customer_id=CUSTOMER_ID, **kwargs):
        return CheckoutService(
            ledger=ledger,
            customer_id=customer_id,
            customers=customers,
            orders=orders,
            gateway=gateway or approving_gateway(),
            **kwargs,
        )

    return _make


@pytest.fixture
def gateway():
    return approving_gateway()


@pytest.fixture
def app(customers, orders, gateway):
    app = create_app()
    sessions = SessionService()
    catalog = Catalog()

    app.dependency_overrides[deps.get_customer_repo] = lambda: customers
    app.dependency_overrides[deps.get_order_repo] = lambda: orders
    app.dependency_overrides[deps.get_sessions] = lambda: sessions
    app.dependency_overrides[deps.get_catalog] = lambda: catalog
    app.dependency_overrides[deps.get_payment_gateway] = lambda: gateway
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
