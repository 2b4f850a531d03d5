# storefront/repos/snapshot_store.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterable, List, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import SQLAlchemyError

from storefront.data.database import Base, create_engine_for, ensure_location, session_factory, sqlite_file
from storefront.data.models.snapshot import SnapshotModel
from storefront.domain.errors import PersistenceFailure
from storefront.utils.logging import get_logger
from storefront.utils.retry import db_retry

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class SnapshotStatus(str, Enum):
    MISSING = "MISSING"          # nic jeszcze nie zapisano
    LOADED = "LOADED"
    CORRUPT = "CORRUPT"          # zapisany ksztalt nie pasuje do typu rekordu
    UNREADABLE = "UNREADABLE"    # blad IO / bazy


@dataclass
class Snapshot(Generic[T]):
    records: List[T] = field(default_factory=list)
    status: SnapshotStatus = SnapshotStatus.MISSING


class SnapshotStore(Generic[T]):
    """
    Trwala kolekcja rekordow jednego rodzaju.

    - save nadpisuje caly snapshot w jednej transakcji (last write wins)
    - load nigdy nie rzuca, w razie problemu zwraca pusta liste
    - kazdy rodzaj rekordow ma swoja lokalizacje, brak transakcji miedzy nimi
    """

    def __init__(
        self,
        record_type: Type[T],
        url: str,
        collection: str,
        write_attempts: int | None = None,
    ):
        self.record_type = record_type
        self.url = url
        self.collection = collection
        self._adapter = TypeAdapter(List[record_type])
        self._engine = create_engine_for(url)
        self._session = session_factory(self._engine)
        self._write_attempts = write_attempts

    #query
    def read(self) -> Snapshot[T]:
        location = self._location_status()
        if location is SnapshotStatus.UNREADABLE:
            logger.error(f"Lokalizacja snapshotu '{self.collection}' niedostepna: {self.url}")
            return Snapshot(status=location)
        if location is SnapshotStatus.MISSING:
            logger.info(f"Brak snapshotu '{self.collection}' w {self.url}")
            return Snapshot(status=location)

        try:
            if not inspect(self._engine).has_table(SnapshotModel.__tablename__):
                logger.info(f"Brak snapshotu '{self.collection}' w {self.url}")
                return Snapshot(status=SnapshotStatus.MISSING)

            with self._session() as db:
                row = db.execute(
                    select(SnapshotModel).where(SnapshotModel.collection == self.collection)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Nie mozna odczytac snapshotu '{self.collection}' z {self.url}: {e}")
            return Snapshot(status=SnapshotStatus.UNREADABLE)

        if row is None:
            logger.info(f"Brak snapshotu '{self.collection}' w {self.url}")
            return Snapshot(status=SnapshotStatus.MISSING)

        try:
            records = self._adapter.validate_json(row.payload)
        except ValidationError as e:
            logger.warning(
                f"Snapshot '{self.collection}' nie pasuje do {self.record_type.__name__} "
                f"({e.error_count()} bledow) - zwracam pusta kolekcje"
            )
            return Snapshot(status=SnapshotStatus.CORRUPT)

        logger.info(f"Wczytano {len(records)} rekordow '{self.collection}'")
        return Snapshot(records=records, status=SnapshotStatus.LOADED)

    def load(self) -> List[T]:
        return self.read().records

    #command
    def save(self, records: Iterable[T]) -> bool:
        """
        Nadpisuje snapshot cala kolekcja.
        Blad zapisu jest logowany i nie wychodzi do wywolujacego -
        kolekcja w pamieci pozostaje zrodlem prawdy do konca procesu.
        """
        items = list(records)
        payload = self._adapter.dump_json(items).decode("utf-8")

        try:
            self._write(payload, len(items))
        except PersistenceFailure as e:
            logger.error(str(e))
            return False

        logger.info(f"Zapisano {len(items)} rekordow '{self.collection}'")
        return True

    def _location_status(self) -> SnapshotStatus | None:
        """
        Stan katalogu bazy przed polaczeniem (sqlite tworzy plik, ale nie katalogi).
        None - katalog istnieje, MISSING - jeszcze nic nie zapisano,
        UNREADABLE - na sciezce stoi plik albo brak dostepu.
        """
        path = sqlite_file(self.url)
        try:
            if path is None or path.parent.is_dir():
                return None
            existing = next((p for p in path.parents if p.exists()), None)
            if existing is None or existing.is_dir():
                return SnapshotStatus.MISSING
        except OSError as e:
            logger.error(f"Nie mozna sprawdzic lokalizacji {self.url}: {e}")
        return SnapshotStatus.UNREADABLE

    def _write(self, payload: str, count: int) -> None:
        try:
            ensure_location(self.url)
        except OSError as e:
            raise PersistenceFailure(
                f"Zapis snapshotu '{self.collection}' do {self.url} nieudany: {e}"
            ) from e

        write = db_retry(self._write_attempts)(self._write_once)
        try:
            write(payload, count)
        except SQLAlchemyError as e:
            raise PersistenceFailure(
                f"Zapis snapshotu '{self.collection}' do {self.url} nieudany: {e}"
            ) from e

    def _write_once(self, payload: str, count: int) -> None:
        Base.metadata.create_all(self._engine, tables=[SnapshotModel.__table__])

        # delete + insert w jednej transakcji
        with self._session() as db, db.begin():
            db.execute(delete(SnapshotModel).where(SnapshotModel.collection == self.collection))
            db.add(SnapshotModel(collection=self.collection, payload=payload, record_count=count))

    def close(self) -> None:
        self._engine.dispose()
