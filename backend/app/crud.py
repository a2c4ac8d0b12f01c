import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.models import Event
from backend.app import schemas

logger = logging.getLogger(__name__)

RECENT_EVENTS_LIMIT = 20


class EventStoreError(Exception):
    """A store failure, carrying the message shown to the client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def record_event(db: Session, event_in: schemas.EventCreate) -> Event:
    event = Event(
        source=event_in.source,
        event_type=event_in.event_type,
        occurred_at=event_in.occurred_at,
        metadata_=event_in.metadata,
    )
    try:
        db.add(event)
        db.commit()
        db.refresh(event)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving event to database: {e}")
        raise EventStoreError("Failed to save event") from e

    return event


def list_recent_events(db: Session):
    try:
        return db.query(Event).order_by(
            Event.occurred_at.desc()
        ).limit(RECENT_EVENTS_LIMIT).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching recent events: {e}")
        raise EventStoreError("Failed to fetch events") from e


def get_summary_stats(db: Session) -> schemas.SummaryStats:
    # Four separate queries, not one snapshot; concurrent writes may skew them.
    try:
        total_events = db.query(func.count(Event.id)).scalar()

        events_today = db.query(func.count(Event.id)).filter(
            func.date(Event.occurred_at) == func.current_date()
        ).scalar()

        active_sources = db.query(
            func.count(func.distinct(Event.source))
        ).scalar()

        top_row = db.query(
            Event.event_type,
            func.count(Event.id).label("count")
        ).group_by(
            Event.event_type
        ).order_by(
            func.count(Event.id).desc()
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching summary stats: {e}")
        raise EventStoreError("Failed to fetch summary stats") from e

    return schemas.SummaryStats(
        total_events=total_events or 0,
        events_today=events_today or 0,
        active_sources=active_sources or 0,
        top_event=top_row.event_type if top_row else None,
    )


def get_daily_stats(db: Session):
    day = func.date(Event.occurred_at)
    try:
        return db.query(
            Event.source,
            day.label("day"),
            func.count(Event.id).label("count")
        ).group_by(
            Event.source, day
        ).order_by(
            day.asc(), Event.source.asc()
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching daily stats: {e}")
        raise EventStoreError("Failed to fetch daily stats") from e


def get_top_event_types(db: Session):
    try:
        return db.query(
            Event.event_type,
            func.count(Event.id).label("event_count")
        ).group_by(
            Event.event_type
        ).order_by(
            func.count(Event.id).desc()
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching top event types: {e}")
        raise EventStoreError("Failed to fetch top event types") from e
