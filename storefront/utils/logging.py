# storefront/utils/logging.py
import logging
import sys

from storefront.utils.settings import LOG_LEVEL

_ROOT = "storefront"
_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT)
    #jeden handler na caly pakiet, moduly dziedzicza przez propagate
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(LOG_LEVEL)
    return root


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)


def mask_card(card: str | None) -> str:
    """Do logow - tylko 4 ostatnie znaki karty."""
    if not card:
        return "<brak>"
    return "*" * max(len(card) - 4, 0) + card[-4:]
