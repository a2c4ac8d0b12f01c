import uuid
from datetime import timezone

from sqlalchemy import Column, String, Uuid, JSON, DateTime
from sqlalchemy.types import TypeDecorator
from shared.database import Base


class UTCDateTime(TypeDecorator):
    """Timestamp stored and returned as UTC; naive input is taken as UTC.

    SQLite keeps no offset, so values are converted to the UTC instant
    before they are written and tagged with UTC when they are read.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Event(Base):
    __tablename__ = "events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    source = Column(String(255), nullable=False, index=True)
    event_type = Column(String(100), nullable=False, index=True)
    occurred_at = Column(UTCDateTime(), nullable=False, index=True)
    # "metadata" is reserved on declarative classes
    metadata_ = Column("metadata", JSON, nullable=True)
