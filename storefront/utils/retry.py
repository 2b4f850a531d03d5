# storefront/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.utils.settings import STORE_WRITE_ATTEMPTS


def db_retry(attempts: int | None = None):
    #np. "database is locked" w sqlite - przejsciowe, warto ponowic
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or STORE_WRITE_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(OperationalError),
    )
