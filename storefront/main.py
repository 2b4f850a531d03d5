# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.utils.settings import CUSTOMERS_DB_URL, ORDERS_DB_URL, HOST, PORT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# tabele snapshotow tworzone leniwie przy pierwszym zapisie
logger.info(f"Klienci: {CUSTOMERS_DB_URL}")
logger.info(f"Zamowienia: {ORDERS_DB_URL}")

app = create_app()


def run() -> None:
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
