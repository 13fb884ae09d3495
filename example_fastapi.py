"""
Pagewalk with FastAPI Example

Demonstrates page-numbered browsing of a MongoDB collection behind a REST API.

Features covered:
- FastAPI integration
- Record models with browsing Settings
- One engine per browsing session
- Search, filters and date ranges
- Exception handling

Run with:
  pip install uvicorn
  uvicorn example_fastapi:app --reload

Then visit: http://localhost:8000/docs
"""

from datetime import date
from typing import Optional

from fastapi import Depends, FastAPI, Header

from pagewalk import (
    CursorFeed,
    EngineRegistry,
    Filter,
    MongoCollectionSource,
    PaginationEngine,
    QuerySpec,
    Record,
    between_dates,
    enable_tracing,
)
from pagewalk.integrations.fastapi import (
    BrowseParams,
    PageViewResponse,
    browse,
    init_app,
    register_exception_handlers,
)


# ============================================================================
# 1. DEFINE RECORDS
# ============================================================================


class Enrollee(Record):
    """A pre-enrollment submission."""

    name: str
    email: str
    strand: str
    status: str = "pending"
    createdAt: str

    class Settings:
        collection = "enrollees"
        order_by = "-createdAt"
        search_fields = ("name", "email")
        page_size = 10


class AuditLog(Record):
    """An entry in the activity log."""

    action: str
    description: str
    timestamp: str

    class Settings:
        collection = "logs"
        order_by = "-timestamp"
        search_fields = ("description",)


# ============================================================================
# 2. APP SETUP
# ============================================================================


app = FastAPI(title="Pagewalk Example API", version="0.1.0")
init_app(app, "mongodb://localhost:27017/pagewalk_demo", serverSelectionTimeoutMS=5000)
register_exception_handlers(app)
enable_tracing(slow_query_ms=200.0)

enrollees = EngineRegistry(
    lambda: PaginationEngine(MongoCollectionSource.for_record(Enrollee)),
    max_sessions=500,
)


# ============================================================================
# 3. ENDPOINTS
# ============================================================================


@app.get("/enrollees", tags=["Enrollees"])
async def list_enrollees(
    params: BrowseParams = Depends(),
    strand: Optional[str] = None,
    x_session_id: str = Header(...),
) -> PageViewResponse[Enrollee]:
    """Browse enrollees newest first. Pass the same session id to page forward."""
    spec = QuerySpec.for_record(Enrollee)
    if strand:
        spec = spec.with_filters(Filter("strand", "==", strand))
    state = await browse(enrollees.get(x_session_id), spec, params)
    return PageViewResponse[Enrollee].from_state(state)


@app.delete("/enrollees/sessions/{session_id}", tags=["Enrollees"])
async def end_session(session_id: str):
    enrollees.discard(session_id)
    return {"closed": session_id}


@app.get("/logs", tags=["Logs"])
async def list_logs(start: date, end: date, q: str = "", batches: int = 1):
    """Load ``batches`` batches of activity between two dates."""
    spec = QuerySpec.for_record(AuditLog, search_term=q)
    spec = spec.with_filters(*between_dates("timestamp", start, end))
    feed = CursorFeed(MongoCollectionSource.for_record(AuditLog), spec)
    state = await feed.reset()
    for _ in range(batches - 1):
        if not state.has_more:
            break
        state = await feed.load_more()
    return {"items": state.items, "has_more": state.has_more, "error": state.error}


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok"}
