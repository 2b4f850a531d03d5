# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_order_repo, get_sessions
from storefront.domain.errors import AuthenticationError, SessionNotFound
from storefront.domain.schemas import OrderRecord
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_service import OrderService
from storefront.services.session_service import SessionService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(orders: OrderRepo = Depends(get_order_repo)) -> OrderService:
    return OrderService(orders)


def _customer_id(sessions: SessionService, session_id: str) -> str:
    try:
        return sessions.require_customer(session_id).customer_id
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.get("/{session_id}", response_model=List[OrderRecord])
def list_orders(
    session_id: str,
    sessions: SessionService = Depends(get_sessions),
    svc: OrderService = Depends(get_service),
):
    """
    Historia zamowien zalogowanego klienta, najnowsze pierwsze.
    """
    return svc.list_orders(_customer_id(sessions, session_id))


@router.get("/{session_id}/{order_id}", response_model=OrderRecord)
def get_order(
    session_id: str,
    order_id: str,
    sessions: SessionService = Depends(get_sessions),
    svc: OrderService = Depends(get_service),
):
    """
    Pobiera szczegoly zamowienia.
    """
    try:
        return svc.get_order(order_id, _customer_id(sessions, session_id))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
