# storefront/api/deps.py
from functools import lru_cache

from storefront.data.catalog import Catalog
from storefront.domain.schemas import CustomerAccount, OrderRecord
from storefront.repos.order_repo import OrderRepo
from storefront.repos.snapshot_store import SnapshotStore
from storefront.repos.user_repo import CustomerRepo
from storefront.services.payment_gateway import PaymentGateway
from storefront.services.session_service import SessionService
from storefront.utils.settings import CUSTOMERS_DB_URL, ORDERS_DB_URL

#singletony na proces - jedna sesja, jeden proces, brak wspolbieznych zapisow


@lru_cache
def get_catalog() -> Catalog:
    return Catalog()


@lru_cache
def get_customer_repo() -> CustomerRepo:
    return CustomerRepo(SnapshotStore(CustomerAccount, CUSTOMERS_DB_URL, "customers"))


@lru_cache
def get_order_repo() -> OrderRepo:
    return OrderRepo(SnapshotStore(OrderRecord, ORDERS_DB_URL, "orders"))


@lru_cache
def get_sessions() -> SessionService:
    return SessionService()


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return PaymentGateway()
