#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import get_catalog, get_sessions
from storefront.data.catalog import Catalog
from storefront.domain.errors import CheckoutStateError, SessionNotFound, UserInputError
from storefront.domain.schemas import CartOut, ItemIn
from storefront.services.cart_service import CartService
from storefront.services.session_service import SessionService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(
    catalog: Catalog = Depends(get_catalog),
    sessions: SessionService = Depends(get_sessions),
) -> CartService:
    return CartService(catalog=catalog, sessions=sessions)


@router.get("/{session_id}", response_model=CartOut)
def get_cart(session_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.get_cart(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{session_id}/items", response_model=CartOut)
def add_item(session_id: str, payload: ItemIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_product(session_id, payload.item_id, payload.quantity)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CheckoutStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UserInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{session_id}/items/{item_id}", response_model=CartOut)
def remove_item(
    session_id: str,
    item_id: str,
    quantity: int | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.remove_product(session_id, item_id, quantity)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CheckoutStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UserInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
