# storefront/services/session_service.py
import uuid
from dataclasses import dataclass, field
from typing import Dict

from storefront.domain.errors import AuthenticationError, CheckoutStateError, SessionNotFound
from storefront.domain.ledger import PricingLedger
from storefront.domain.schemas import CustomerAccount
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import CustomerRepo
from storefront.services.checkout_service import CheckoutService
from storefront.services.payment_gateway import PaymentGateway
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ShoppingSession:
    session_id: str
    ledger: PricingLedger = field(default_factory=PricingLedger)
    customer_id: str | None = None
    checkout: CheckoutService | None = None

    @property
    def checkout_in_progress(self) -> bool:
        return self.checkout is not None and not self.checkout.finished


class SessionService:
    """
    Sesje zakupowe w pamieci procesu - jeden koszyk na sesje.
    Mozna przegladac i dodawac do koszyka przed logowaniem,
    koszyk przechodzi do sesji zalogowanej. Wylogowanie czysci koszyk.
    """

    def __init__(self):
        self._sessions: Dict[str, ShoppingSession] = {}

    def open_session(self) -> ShoppingSession:
        session = ShoppingSession(session_id=uuid.uuid4().hex)
        self._sessions[session.session_id] = session
        logger.info(f"Nowa sesja {session.session_id}")
        return session

    def get_session(self, session_id: str) -> ShoppingSession:
        session = self._sessions.get(session_id)
        if not session:
            raise SessionNotFound("Sesja nie istnieje")
        return session

    def login(self, session_id: str, customer: CustomerAccount) -> ShoppingSession:
        session = self.get_session(session_id)
        if session.customer_id is not None and session.customer_id != customer.id:
            #koszyk i checkout naleza do zalogowanego klienta - najpierw wylogowanie
            raise CheckoutStateError(f"Sesja {session_id} nalezy do innego klienta, wymagane wylogowanie")
        session.customer_id = customer.id
        logger.info(f"Sesja {session_id} nalezy do klienta {customer.id}, pozycji w koszyku: {len(session.ledger)}")
        return session

    def require_customer(self, session_id: str) -> ShoppingSession:
        session = self.get_session(session_id)
        if session.customer_id is None:
            raise AuthenticationError("Wymagane logowanie")
        return session

    def logout(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if not session:
            raise SessionNotFound("Sesja nie istnieje")
        session.ledger.clear()
        session.checkout = None
        logger.info(f"Klient {session.customer_id} wylogowany, sesja {session_id} zamknieta")

    # =====================================================
    # CHECKOUT
    # =====================================================
    def begin_checkout(
        self,
        session_id: str,
        customers: CustomerRepo,
        orders: OrderRepo,
        gateway: PaymentGateway,
    ) -> CheckoutService:
        session = self.require_customer(session_id)

        if session.checkout_in_progress:
            raise CheckoutStateError("Checkout w tej sesji juz trwa")

        checkout = CheckoutService(
            ledger=session.ledger,
            customer_id=session.customer_id,
            customers=customers,
            orders=orders,
            gateway=gateway,
        )
        #pusty koszyk -> wyjatek, checkout nie jest podpinany do sesji
        checkout.start()
        session.checkout = checkout
        return checkout

    def get_checkout(self, session_id: str) -> CheckoutService:
        session = self.require_customer(session_id)
        if session.checkout is None:
            raise CheckoutStateError("Brak rozpoczetego checkoutu")
        return session.checkout
