# storefront/services/checkout_service.py
import uuid
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel

from storefront.domain.errors import CheckoutStateError, EmptyCartError, UserInputError
from storefront.domain.ledger import PricingLedger
from storefront.domain.schemas import (
    ChargeResult,
    DeliveryMethod,
    DeliveryOptionOut,
    OrderRecord,
)
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import CustomerRepo
from storefront.services.payment_gateway import PaymentGateway
from storefront.utils.settings import MAIL_DELIVERY_FEE, MAX_PAYMENT_ATTEMPTS
from storefront.utils.logging import get_logger, mask_card

logger = get_logger(__name__)


class CheckoutState(str, Enum):
    START = "START"
    DELIVERY_SELECT = "DELIVERY_SELECT"
    PAYMENT_ATTEMPT = "PAYMENT_ATTEMPT"
    COMMITTED = "COMMITTED"
    ABORTED = "ABORTED"


class AbortReason(str, Enum):
    USER_ABORT = "USER_ABORT"
    MAX_ATTEMPTS = "MAX_ATTEMPTS"


class CheckoutStatus(BaseModel):
    """Widok stanu checkoutu zwracany po kazdym kroku."""

    state: CheckoutState
    customer_id: str
    subtotal: Decimal
    tax: Decimal
    delivery_method: DeliveryMethod | None = None
    delivery_fee: Decimal | None = None
    running_total: Decimal | None = None
    card: str | None = None
    attempts_used: int = 0
    attempts_left: int
    awaiting_card: bool = False
    last_decline_reason: str | None = None
    abort_reason: AbortReason | None = None
    order: OrderRecord | None = None
    order_saved: bool | None = None


class CheckoutService:
    """
    Maszyna stanow checkoutu:
    START -> DELIVERY_SELECT -> PAYMENT_ATTEMPT -> COMMITTED
    ABORTED osiagalny z DELIVERY_SELECT i PAYMENT_ATTEMPT.

    Koszyk jest albo nietkniety (kazde wyjscie bez commitu),
    albo pusty (tylko po commicie). Jedna instancja = jeden checkout.
    """

    def __init__(
        self,
        ledger: PricingLedger,
        customer_id: str,
        customers: CustomerRepo,
        orders: OrderRepo,
        gateway: PaymentGateway,
        mail_fee: Decimal = MAIL_DELIVERY_FEE,
        max_attempts: int = MAX_PAYMENT_ATTEMPTS,
    ):
        self.ledger = ledger
        self.customer_id = customer_id
        self.customers = customers
        self.orders = orders
        self.gateway = gateway
        self.mail_fee = Decimal(mail_fee)
        self.max_attempts = max(1, int(max_attempts))

        self.state = CheckoutState.START
        self.card: str | None = None
        self.delivery_method: DeliveryMethod | None = None
        self.delivery_fee: Decimal | None = None
        self.running_total: Decimal | None = None
        self.attempts = 0
        self.awaiting_card = False
        self.last_decline_reason: str | None = None
        self.abort_reason: AbortReason | None = None
        self.order: OrderRecord | None = None
        self.order_saved: bool | None = None

        # wartosci zamrozone przy wyborze dostawy
        self._subtotal: Decimal | None = None
        self._tax: Decimal | None = None

    # =====================================================
    # QUERY
    # =====================================================
    def delivery_options(self) -> List[DeliveryOptionOut]:
        return [
            DeliveryOptionOut(method=DeliveryMethod.MAIL, label=DeliveryMethod.MAIL.label, fee=self.mail_fee),
            DeliveryOptionOut(method=DeliveryMethod.PICKUP, label=DeliveryMethod.PICKUP.label, fee=Decimal("0.00")),
        ]

    @property
    def attempts_left(self) -> int:
        return self.max_attempts - self.attempts

    @property
    def finished(self) -> bool:
        return self.state in (CheckoutState.COMMITTED, CheckoutState.ABORTED)

    def status(self) -> CheckoutStatus:
        return CheckoutStatus(
            state=self.state,
            customer_id=self.customer_id,
            subtotal=self._subtotal if self._subtotal is not None else self.ledger.subtotal(),
            tax=self._tax if self._tax is not None else self.ledger.tax_amount(),
            delivery_method=self.delivery_method,
            delivery_fee=self.delivery_fee,
            running_total=self.running_total,
            card=mask_card(self.card) if self.card is not None else None,
            attempts_used=self.attempts,
            attempts_left=self.attempts_left,
            awaiting_card=self.awaiting_card,
            last_decline_reason=self.last_decline_reason,
            abort_reason=self.abort_reason,
            order=self.order,
            order_saved=self.order_saved,
        )

    # =====================================================
    # COMMANDS
    # =====================================================
    def start(self) -> CheckoutStatus:
        """
        Use Case: Rozpoczecie checkoutu.
        Pusty koszyk -> EmptyCartError, stan zostaje START, bramka nie jest wolana.
        """
        self._require(CheckoutState.START)

        if self.ledger.is_empty():
            logger.warning(f"Klient {self.customer_id} probuje zlozyc zamowienie z pustym koszykiem")
            raise EmptyCartError("Nie mozna zlozyc zamowienia z pustym koszykiem")

        customer = self.customers.get_customer(self.customer_id)
        if not customer:
            raise PermissionError(f"Klient {self.customer_id} nie istnieje")

        self.card = customer.card_identifier
        self.state = CheckoutState.DELIVERY_SELECT

        logger.info(
            f"Checkout klienta {self.customer_id} rozpoczety, "
            f"{len(self.ledger)} pozycji, total {self.ledger.total()}"
        )
        return self.status()

    def select_delivery(self, method: DeliveryMethod) -> CheckoutStatus:
        self._require(CheckoutState.DELIVERY_SELECT)

        method = DeliveryMethod(method)
        fee = self.mail_fee if method is DeliveryMethod.MAIL else Decimal("0.00")

        # total zamrozony na cala sekwencje prob platnosci (takze po zmianie karty)
        self._subtotal = self.ledger.subtotal()
        self._tax = self.ledger.tax_amount()
        self.delivery_method = method
        self.delivery_fee = fee
        self.running_total = self.ledger.total() + fee
        self.state = CheckoutState.PAYMENT_ATTEMPT

        logger.info(
            f"Dostawa {method.label} (oplata {fee}), do zaplaty {self.running_total}"
        )
        return self.status()

    def attempt_payment(self) -> CheckoutStatus:
        """
        Use Case: Jedna proba platnosci.

        - akceptacja -> commit zamowienia
        - odrzucenie i zostaly proby -> czekamy na nowa karte albo abort
        - odrzucenie przy ostatniej probie -> ABORTED (MAX_ATTEMPTS), koszyk nietkniety
        """
        self._require(CheckoutState.PAYMENT_ATTEMPT)

        if self.awaiting_card:
            raise CheckoutStateError("Platnosc odrzucona - podaj nowa karte albo przerwij zamowienie")

        self.attempts += 1
        result: ChargeResult = self.gateway.charge(self.card, self.running_total)

        if result.approved:
            self.last_decline_reason = None
            self._commit(result.authorization_token)
            return self.status()

        self.last_decline_reason = result.reason
        logger.info(
            f"Platnosc klienta {self.customer_id} odrzucona ({result.reason}), "
            f"proba {self.attempts}/{self.max_attempts}"
        )

        if self.attempts >= self.max_attempts:
            self.state = CheckoutState.ABORTED
            self.abort_reason = AbortReason.MAX_ATTEMPTS
            logger.warning(
                f"Osiagnieto limit prob platnosci dla klienta {self.customer_id}, "
                f"zamowienie anulowane, koszyk nietkniety"
            )
        else:
            self.awaiting_card = True

        return self.status()

    def replace_card(self, card_identifier: str) -> CheckoutStatus:
        """Nowa karta po odrzuceniu - od razu zapisywana na koncie klienta."""
        self._require(CheckoutState.PAYMENT_ATTEMPT)

        if not self.awaiting_card:
            raise CheckoutStateError("Zmiana karty mozliwa tylko po odrzuconej platnosci")

        card = (card_identifier or "").strip()
        if not card:
            raise UserInputError("Numer karty nie moze byc pusty")

        saved = self.customers.update_card(self.customer_id, card)
        if not saved:
            logger.error(f"Nie zapisano nowej karty klienta {self.customer_id}, uzywam jej w tej sesji")

        self.card = card
        self.awaiting_card = False
        logger.info(f"Klient {self.customer_id} podal nowa karte {mask_card(card)}")
        return self.status()

    def retry_with_card(self, card_identifier: str) -> CheckoutStatus:
        self.replace_card(card_identifier)
        return self.attempt_payment()

    def abort(self) -> CheckoutStatus:
        self._require(CheckoutState.DELIVERY_SELECT, CheckoutState.PAYMENT_ATTEMPT)

        self.state = CheckoutState.ABORTED
        self.abort_reason = AbortReason.USER_ABORT
        self.awaiting_card = False
        logger.info(f"Klient {self.customer_id} przerwal zamowienie, koszyk nie zostal wyczyszczony")
        return self.status()

    # =====================================================
    # INTERNAL
    # =====================================================
    def _commit(self, authorization_token: str) -> None:
        draft = OrderRecord(
            order_id=self._new_order_id(),
            customer_id=self.customer_id,
            items=self.ledger.order_lines(),
            total_amount=self.running_total,
            delivery_method=self.delivery_method,
            delivery_fee=self.delivery_fee,
        )
        order = draft.with_authorization(authorization_token)

        self.order_saved = self.orders.create_order(order)
        if not self.order_saved:
            # brak kompensacji - zamowienie uznane za zlozone w tej sesji
            logger.error(f"Zamowienie {order.order_id} nie zostalo zapisane trwale, pozostaje w pamieci")

        self.order = order
        self.ledger.clear()
        self.state = CheckoutState.COMMITTED

        logger.info(
            f"Zamowienie {order.order_id} zlozone przez {self.customer_id}, "
            f"total {order.total_amount}, autoryzacja {order.authorization_token}"
        )

    def _new_order_id(self) -> str:
        while True:
            order_id = f"ORD-{uuid.uuid4().hex[:8].upper()}"
            if not self.orders.has_order_id(order_id):
                return order_id

    def _require(self, *states: CheckoutState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise CheckoutStateError(
                f"Operacja niedozwolona w stanie {self.state.value} (wymagany: {allowed})"
            )
