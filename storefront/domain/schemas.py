# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, computed_field
from typing import Annotated, List, Literal, Union
from decimal import Decimal
from datetime import datetime, timezone
from enum import Enum


ORDER_ID_PATTERN = r"^ORD-[A-Z0-9]{8}$"
AUTH_TOKEN_PATTERN = r"^\d{4}$"

SECURITY_QUESTIONS = (
    "What is your mother's maiden name?",
    "What was your first pet's name?",
    "What is your favorite book?",
)


# =====================================================
# RECORDS (domena + persystencja)
# =====================================================
class CatalogItem(BaseModel):
    """Produkt z katalogu - niezmienny, tworzony raz przy starcie."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    regular_price: Decimal = Field(..., ge=0)
    sale_price: Decimal = Decimal("0.00")

    @computed_field
    @property
    def on_sale(self) -> bool:
        # 0 albo >= regular_price oznacza brak promocji
        return Decimal("0") < self.sale_price < self.regular_price

    @computed_field
    @property
    def effective_price(self) -> Decimal:
        return self.sale_price if self.on_sale else self.regular_price


class DeliveryMethod(str, Enum):
    MAIL = "MAIL"
    PICKUP = "PICKUP"

    @property
    def label(self) -> str:
        return "Mail Delivery" if self is DeliveryMethod.MAIL else "In-store Pickup"


class OrderLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str
    quantity: int = Field(..., gt=0)


class OrderRecord(BaseModel):
    """
    Zamowienie - snapshot koszyka w momencie commitu.
    Jedyna zmiana po utworzeniu to przypisanie tokenu autoryzacji (przed zapisem).
    """

    model_config = ConfigDict(frozen=True)

    order_id: str = Field(..., pattern=ORDER_ID_PATTERN)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    customer_id: str
    items: List[OrderLine]
    total_amount: Decimal
    delivery_method: DeliveryMethod
    delivery_fee: Decimal
    authorization_token: str | None = Field(default=None, pattern=AUTH_TOKEN_PATTERN)

    def with_authorization(self, token: str) -> "OrderRecord":
        if self.authorization_token is not None:
            raise ValueError(f"Zamowienie {self.order_id} ma juz token autoryzacji")
        return self.model_validate(
            {**self.model_dump(), "authorization_token": token}
        )


class CustomerAccount(BaseModel):
    """Konto klienta. Karta moze zostac nadpisana podczas checkoutu."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1)
    password: str
    name: str = ""
    address: str = ""
    card_identifier: str = ""
    security_question: str = SECURITY_QUESTIONS[0]
    security_answer: str = ""

    def check_password(self, password: str) -> bool:
        return self.password == password

    def check_security_answer(self, answer: str) -> bool:
        return self.security_answer.casefold() == answer.casefold()


# =====================================================
# PAYMENT GATEWAY RESULTS
# =====================================================
class ChargeApproved(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["approved"] = "approved"
    authorization_token: str = Field(..., pattern=AUTH_TOKEN_PATTERN)

    @property
    def approved(self) -> bool:
        return True


class ChargeDeclined(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["declined"] = "declined"
    reason: str

    @property
    def approved(self) -> bool:
        return False


ChargeResult = Annotated[Union[ChargeApproved, ChargeDeclined], Field(discriminator="status")]


# =====================================================
# API SCHEMAS
# =====================================================
class CustomerCreate(BaseModel):
    """Schema dla rejestracji klienta."""

    id: str = Field(..., min_length=1, max_length=64, description="ID klienta (login)")
    password: str = Field(..., description="Min. 6 znakow, cyfra, znak specjalny, wielka litera")
    name: str = Field(..., min_length=1, max_length=100)
    address: str = Field("", max_length=200)
    card_identifier: str = Field(..., description="Numer karty - tylko cyfry")
    security_question: int = Field(1, ge=1, le=len(SECURITY_QUESTIONS))
    security_answer: str = Field(..., min_length=1)


class CustomerRead(BaseModel):
    """Schema dla klienta (response) - bez hasla i odpowiedzi."""

    id: str
    name: str
    address: str
    security_question: str

    model_config = ConfigDict(from_attributes=True)


class LoginIn(BaseModel):
    customer_id: str
    password: str
    security_answer: str


class SessionOut(BaseModel):
    session_id: str
    customer_id: str | None = None


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    item_id: str = Field(..., min_length=1)
    quantity: int


class CartLineOut(BaseModel):
    item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    session_id: str
    items: List[CartLineOut]
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class DeliveryOptionOut(BaseModel):
    method: DeliveryMethod
    label: str
    fee: Decimal


class DeliveryIn(BaseModel):
    method: DeliveryMethod


class PaymentIn(BaseModel):
    """
    Opcjonalnie nowa karta - tylko po odrzuceniu platnosci.
    Karta podana przy pierwszej probie (przed odrzuceniem) -> 409.
    """

    card_identifier: str | None = None
