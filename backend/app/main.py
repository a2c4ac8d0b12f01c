import logging
from typing import List

import uvicorn
from fastapi import FastAPI, Depends, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app import crud, schemas
from backend.app.dashboard import render_dashboard, render_error
from backend.app.request_log import RequestLogMiddleware
from shared.config import settings
from shared.database import get_db, engine, ping, Base

# One handler on the package logger; crud, main and request_log propagate to it.
app_logger = logging.getLogger("backend")
app_logger.setLevel(settings.LOG_LEVEL)

formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
app_logger.addHandler(console_handler)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Log API",
    description="API for recording events and reading recent events and statistics",
    version="1.0.0",
)

app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.STATIC_DIR.is_dir():
    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")


@app.on_event("startup")
async def startup_event():
    try:
        Base.metadata.create_all(bind=engine)
        now = ping(engine)
        logger.info(f"Database connected: {now}")
    except SQLAlchemyError as e:
        logger.error(f"Database connection error: {e}")


@app.exception_handler(crud.EventStoreError)
async def event_store_error_handler(request: Request, exc: crud.EventStoreError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # A body the store could not take is reported like any other failed save.
    if request.method == "POST" and request.url.path == "/api/events":
        logger.error(f"Rejected event payload: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to save event"},
        )
    return await request_validation_exception_handler(request, exc)


def _daily_items(rows) -> List[schemas.DailyStatItem]:
    return [
        schemas.DailyStatItem(source=row.source, day=str(row.day), count=row.count)
        for row in rows
    ]


def _top_items(rows) -> List[schemas.TopEventTypeItem]:
    return [
        schemas.TopEventTypeItem(event_type=row.event_type, event_count=row.event_count)
        for row in rows
    ]


@app.get("/", response_class=HTMLResponse)
def dashboard(db: Session = Depends(get_db)):
    """
    Render the dashboard.

    Combines the summary, top event types, daily stats and recent events
    into one server-rendered page.
    """
    try:
        data = schemas.DashboardData(
            summary=crud.get_summary_stats(db),
            top=_top_items(crud.get_top_event_types(db)),
            daily=_daily_items(crud.get_daily_stats(db)),
            recent=[schemas.EventRead.model_validate(e) for e in crud.list_recent_events(db)],
        )
    except crud.EventStoreError as e:
        return HTMLResponse(render_error(e.message), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return HTMLResponse(render_dashboard(data))


@app.post(
    "/api/events",
    response_model=schemas.EventRead,
    status_code=status.HTTP_201_CREATED,
    responses={500: {"model": schemas.ErrorResponse}},
)
def record_event(event: schemas.EventCreate, db: Session = Depends(get_db)):
    """
    Record a single event.

    Fields are passed to the store as given; a field the store requires but
    the body omits makes the insert fail with a 500.
    """
    return crud.record_event(db, event)


@app.get(
    "/api/events",
    response_model=List[schemas.EventRead],
    responses={500: {"model": schemas.ErrorResponse}},
)
def list_events(db: Session = Depends(get_db)):
    """Return the most recent events, newest first."""
    return crud.list_recent_events(db)


@app.get(
    "/api/stats/summary",
    response_model=schemas.SummaryStats,
    responses={500: {"model": schemas.ErrorResponse}},
)
def get_summary(db: Session = Depends(get_db)):
    return crud.get_summary_stats(db)


@app.get(
    "/api/stats/daily",
    response_model=List[schemas.DailyStatItem],
    responses={500: {"model": schemas.ErrorResponse}},
)
def get_daily(db: Session = Depends(get_db)):
    """
    Get per-source, per-day event counts.

    Sorted by day ascending, then by source.
    """
    return _daily_items(crud.get_daily_stats(db))


@app.get(
    "/api/stats/top",
    response_model=List[schemas.TopEventTypeItem],
    responses={500: {"model": schemas.ErrorResponse}},
)
def get_top(db: Session = Depends(get_db)):
    """Get every event type with its count, most frequent first."""
    return _top_items(crud.get_top_event_types(db))


@app.get("/health")
def health_check():
    return {"status": "healthy"}


def serve():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    serve()
