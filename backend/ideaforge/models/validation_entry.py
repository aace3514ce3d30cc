import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.types import TypeDecorator, CHAR

from ..database import Base


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses CHAR(36) to store UUIDs as strings, compatible with all backends
    including SQLite.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return uuid.UUID(value)
        return value


class ValidationEntry(Base):
    __tablename__ = "validation_entries"

    # Insertion order; the history is listed and evicted by this column.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(GUID(), unique=True, index=True, nullable=False, default=uuid.uuid4)
    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Camel-cased JSON exactly as the client sent it
    form_data_json = Column(Text, nullable=False)
    analysis_result_json = Column(Text, nullable=True, default=None)


class HistoryPointer(Base):
    """Named pointer into the history; only ``latest`` is used."""

    __tablename__ = "history_pointers"

    name = Column(String, primary_key=True)
    entry_id = Column(GUID(), nullable=True)
