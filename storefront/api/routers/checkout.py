# storefront/api/routers/checkout.py
from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_customer_repo, get_order_repo, get_payment_gateway, get_sessions
from storefront.domain.errors import (
    AuthenticationError,
    CheckoutStateError,
    SessionNotFound,
    UserInputError,
)
from storefront.domain.schemas import DeliveryIn, DeliveryOptionOut, PaymentIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import CustomerRepo
from storefront.services.checkout_service import CheckoutStatus
from storefront.services.payment_gateway import PaymentGateway
from storefront.services.session_service import SessionService

router = APIRouter(prefix="/checkout", tags=["checkout"])


def _run(step: Callable[[], CheckoutStatus]) -> CheckoutStatus:
    #wspolne mapowanie wyjatkow domenowych na HTTP
    try:
        return step()
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except CheckoutStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UserInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{session_id}/start", response_model=CheckoutStatus)
def start_checkout(
    session_id: str,
    sessions: SessionService = Depends(get_sessions),
    customers: CustomerRepo = Depends(get_customer_repo),
    orders: OrderRepo = Depends(get_order_repo),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Rozpoczyna checkout z koszyka sesji.
    Pusty koszyk -> 400, nic sie nie zmienia.
    """
    return _run(lambda: sessions.begin_checkout(session_id, customers, orders, gateway).status())


@router.get("/{session_id}", response_model=CheckoutStatus)
def get_checkout(session_id: str, sessions: SessionService = Depends(get_sessions)):
    return _run(lambda: sessions.get_checkout(session_id).status())


@router.get("/{session_id}/delivery", response_model=List[DeliveryOptionOut])
def delivery_options(session_id: str, sessions: SessionService = Depends(get_sessions)):
    try:
        return sessions.get_checkout(session_id).delivery_options()
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except CheckoutStateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/{session_id}/delivery", response_model=CheckoutStatus)
def select_delivery(session_id: str, payload: DeliveryIn, sessions: SessionService = Depends(get_sessions)):
    return _run(lambda: sessions.get_checkout(session_id).select_delivery(payload.method))


@router.post("/{session_id}/payment", response_model=CheckoutStatus)
def attempt_payment(session_id: str, payload: PaymentIn, sessions: SessionService = Depends(get_sessions)):
    """
    Jedna proba platnosci. Po odrzuceniu kolejna proba wymaga nowej karty
    (card_identifier), ktora jest od razu zapisywana na koncie klienta.
    """
    def step() -> CheckoutStatus:
        checkout = sessions.get_checkout(session_id)
        if payload.card_identifier is not None:
            return checkout.retry_with_card(payload.card_identifier)
        return checkout.attempt_payment()

    return _run(step)


@router.post("/{session_id}/abort", response_model=CheckoutStatus)
def abort_checkout(session_id: str, sessions: SessionService = Depends(get_sessions)):
    return _run(lambda: sessions.get_checkout(session_id).abort())
