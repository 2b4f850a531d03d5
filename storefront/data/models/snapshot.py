from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime, timezone

from storefront.data.database import Base


class SnapshotModel(Base):
    """Jeden wiersz = cala kolekcja rekordow jednego rodzaju (JSON)."""

    __tablename__ = "snapshots"

    id = Column(Integer, primary_key=True)
    collection = Column(String, nullable=False, unique=True)

    payload = Column(Text, nullable=False)
    record_count = Column(Integer, nullable=False, default=0)
    saved_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
