# storefront/services/payment_gateway.py
import random
from decimal import Decimal

from storefront.domain.schemas import ChargeApproved, ChargeDeclined, ChargeResult
from storefront.utils.settings import PAYMENT_DECLINE_RATE, PAYMENT_SEED
from storefront.utils.logging import get_logger, mask_card

logger = get_logger(__name__)

INVALID_CARD_MARKER = "invalid"
INVALID_CARD_REASON = "invalid card format"
GATEWAY_DECLINE_REASON = "insufficient funds / gateway error"


class PaymentGateway:
    """
    Symulacja zewnetrznego platnika (bank) - zadnej prawdziwej sieci platniczej.

    Polityka, po kolei:
    1. pusta karta albo zawiera "invalid" -> odrzucenie (zly format)
    2. z prawdopodobienstwem decline_rate -> odrzucenie (brak srodkow / blad bramki)
    3. w przeciwnym razie akceptacja z 4-cyfrowym tokenem autoryzacji
    """

    def __init__(self, rng: random.Random | None = None, decline_rate: float = PAYMENT_DECLINE_RATE):
        if not 0.0 <= decline_rate <= 1.0:
            raise ValueError("decline_rate musi byc w przedziale [0, 1]")
        # wstrzykiwane zrodlo losowosci, z seedem testy sa deterministyczne
        self.rng = rng or random.Random(PAYMENT_SEED)
        self.decline_rate = decline_rate

    def charge(self, card_identifier: str | None, amount: Decimal) -> ChargeResult:
        logger.info(f"Obciazenie karty {mask_card(card_identifier)} kwota {amount}")

        if not card_identifier or not card_identifier.strip() or INVALID_CARD_MARKER in card_identifier:
            logger.info("Bank odrzucil: niepoprawny format karty")
            return ChargeDeclined(reason=INVALID_CARD_REASON)

        if self.rng.random() < self.decline_rate:
            logger.info("Bank odrzucil: brak srodkow lub blad bramki")
            return ChargeDeclined(reason=GATEWAY_DECLINE_REASON)

        token = f"{self.rng.randrange(10000):04d}"
        logger.info(f"Bank zaakceptowal, autoryzacja {token}")
        return ChargeApproved(authorization_token=token)
