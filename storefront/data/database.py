# storefront/data/database.py
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def sqlite_file(url: str) -> Path | None:
    """Sciezka pliku bazy sqlite albo None (inny backend, :memory:)."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        return Path(parsed.database).expanduser()
    return None


def ensure_location(url: str) -> None:
    #sqlite nie tworzy katalogow sam, wolane tylko przed zapisem
    path = sqlite_file(url)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)


def create_engine_for(url: str) -> Engine:
    """Engine dla jednej lokalizacji (jeden rodzaj rekordow = jedna baza). Nie dotyka dysku."""
    return create_engine(url)


def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
