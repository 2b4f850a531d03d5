# storefront/api/routers/sessions.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_customer_repo, get_sessions
from storefront.domain.errors import AuthenticationError, CheckoutStateError, SessionNotFound
from storefront.domain.schemas import LoginIn, SessionOut
from storefront.repos.user_repo import CustomerRepo
from storefront.services.session_service import SessionService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/", response_model=SessionOut, status_code=201)
def open_session(sessions: SessionService = Depends(get_sessions)):
    session = sessions.open_session()
    return SessionOut(session_id=session.session_id)


@router.post("/{session_id}/login", response_model=SessionOut)
def login(
    session_id: str,
    payload: LoginIn,
    sessions: SessionService = Depends(get_sessions),
    customers: CustomerRepo = Depends(get_customer_repo),
):
    service = UserService(customers)
    try:
        sessions.get_session(session_id)
        customer = service.authenticate(payload.customer_id, payload.password, payload.security_answer)
        session = sessions.login(session_id, customer)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except CheckoutStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return SessionOut(session_id=session.session_id, customer_id=session.customer_id)


@router.post("/{session_id}/logout", status_code=204)
def logout(session_id: str, sessions: SessionService = Depends(get_sessions)):
    try:
        sessions.logout(session_id)
    except SessionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
