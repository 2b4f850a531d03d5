from storefront.domain.errors import AuthenticationError, RegistrationError
from storefront.domain.schemas import SECURITY_QUESTIONS, CustomerAccount, CustomerCreate, CustomerRead
from storefront.repos.user_repo import CustomerRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PASSWORD_MIN_LENGTH = 6
PASSWORD_SPECIALS = "@#$%&*"


def is_valid_password(password: str) -> bool:
    #min 6 znakow, cyfra, znak specjalny i wielka litera
    if len(password) < PASSWORD_MIN_LENGTH:
        return False
    has_digit = any(c.isdigit() for c in password)
    has_special = any(c in PASSWORD_SPECIALS for c in password)
    has_upper = any(c.isupper() for c in password)
    return has_digit and has_special and has_upper


class UserService:
    def __init__(self, customers: CustomerRepo):
        self.repo = customers

    def create_user(self, payload: CustomerCreate) -> CustomerRead:
        customer_id = payload.id.strip()

        if not self.repo.is_id_available(customer_id):
            raise RegistrationError("Klient o takim ID juz istnieje")

        if not is_valid_password(payload.password):
            raise RegistrationError(
                "Haslo musi miec min. 6 znakow, cyfre, znak specjalny (@, #, $, %, &, *) i wielka litere"
            )

        if not payload.card_identifier.isdigit():
            raise RegistrationError("Numer karty moze zawierac tylko cyfry")

        customer = CustomerAccount(
            id=customer_id,
            password=payload.password,
            name=payload.name,
            address=payload.address,
            card_identifier=payload.card_identifier,
            security_question=SECURITY_QUESTIONS[payload.security_question - 1],
            security_answer=payload.security_answer,
        )

        if not self.repo.save_customer(customer):
            logger.error(f"Konto {customer_id} utworzone tylko w pamieci - zapis nieudany")

        logger.info(f"Utworzono konto klienta {customer_id}")
        return CustomerRead.model_validate(customer)

    def get_user(self, customer_id: str) -> CustomerRead:
        customer = self.repo.get_customer(customer_id)
        if not customer:
            raise ValueError("Klient nie istnieje")
        return CustomerRead.model_validate(customer)

    def authenticate(self, customer_id: str, password: str, security_answer: str) -> CustomerAccount:
        """
        Use Case: Logowanie.
        Haslo porownywane dokladnie, odpowiedz na pytanie bez wielkosci liter.
        """
        customer = self.repo.get_customer(customer_id)

        if not customer:
            logger.info(f"Nieudane logowanie - brak konta {customer_id}")
            raise AuthenticationError("Brak konta o takim ID")

        if not customer.check_password(password):
            logger.info(f"Nieudane logowanie {customer_id} - zle haslo")
            raise AuthenticationError("Niepoprawne haslo")

        if not customer.check_security_answer(security_answer):
            logger.info(f"Nieudane logowanie {customer_id} - zla odpowiedz na pytanie")
            raise AuthenticationError("Niepoprawna odpowiedz na pytanie bezpieczenstwa")

        logger.info(f"Klient {customer_id} zalogowany")
        return customer
