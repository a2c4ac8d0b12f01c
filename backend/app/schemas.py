from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from datetime import datetime
from uuid import UUID
from typing import List, Any, Optional


class EventCreate(BaseModel):
    source: Optional[str] = None
    event_type: Optional[str] = None
    occurred_at: Optional[datetime] = None
    metadata: Any = None


class EventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    source: str
    event_type: str
    occurred_at: datetime
    metadata: Any = Field(
        default=None,
        validation_alias=AliasChoices("metadata_", "metadata"),
    )


class SummaryStats(BaseModel):
    total_events: int
    events_today: int
    active_sources: int
    top_event: Optional[str] = None


class DailyStatItem(BaseModel):
    source: str
    day: str
    count: int


class TopEventTypeItem(BaseModel):
    event_type: str
    event_count: int


class ErrorResponse(BaseModel):
    error: str


class DashboardData(BaseModel):
    summary: SummaryStats
    daily: List[DailyStatItem]
    top: List[TopEventTypeItem]
    recent: List[EventRead]
