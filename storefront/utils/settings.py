# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

# kazdy rodzaj rekordow ma osobna lokalizacje (osobna baza)
CUSTOMERS_DB_URL = os.getenv("CUSTOMERS_DB_URL", "sqlite:///data/customers.db")
ORDERS_DB_URL = os.getenv("ORDERS_DB_URL", "sqlite:///data/orders.db")

TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.08"))
MAIL_DELIVERY_FEE = Decimal(os.getenv("MAIL_DELIVERY_FEE", "3.00"))
MAX_PAYMENT_ATTEMPTS = int(os.getenv("MAX_PAYMENT_ATTEMPTS", 3))

PAYMENT_DECLINE_RATE = float(os.getenv("PAYMENT_DECLINE_RATE", 0.2))
PAYMENT_SEED = int(os.getenv("PAYMENT_SEED")) if os.getenv("PAYMENT_SEED") else None

STORE_WRITE_ATTEMPTS = int(os.getenv("STORE_WRITE_ATTEMPTS", 3))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
