from __future__ import annotations

import json
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pagewalk.core.engine import PaginationEngine
from pagewalk.core.query import QuerySpec, SortDirection
from pagewalk.sources.connection import connect, disconnect
from pagewalk.utils.exceptions import NavigationError, NotConnected, PagewalkError, TransportError
from pagewalk.utils.pagination import EngineState, page_links

T = TypeVar("T")

MAX_PAGE_SIZE = 100


class DocumentJSONResponse(JSONResponse):
    """JSONResponse that also renders ObjectId and datetime values.

    Lets endpoints return raw stored documents without a response model.
    """

    def render(self, content: Any) -> bytes:
        def default_handler(obj: Any) -> Any:
            if isinstance(obj, ObjectId):
                return str(obj)
            if isinstance(obj, (datetime, date)):
                return obj.isoformat()
            if isinstance(obj, BaseModel):
                return obj.model_dump(mode="json", by_alias=False)
            raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

        return json.dumps(content, default=default_handler, separators=(",", ":")).encode("utf-8")


def init_app(app: Any, uri: str, alias: str = "default", **client_options: Any) -> Any:
    """Wire a FastAPI app to a MongoDB connection.

    Sets up:
    - connect/disconnect in the app lifespan
    - DocumentJSONResponse as the default response class

    Args:
        app: FastAPI application instance
        uri: MongoDB connection URI
        alias: Connection alias sources look up (default: "default")
        **client_options: Passed through to ``AsyncMongoClient``
    """
    app.default_response_class = DocumentJSONResponse

    original_lifespan = getattr(app, "router", app).lifespan_context

    @asynccontextmanager
    async def lifespan(a: Any):
        await connect(uri, alias=alias, **client_options)
        try:
            if original_lifespan is not None:
                async with original_lifespan(a) as state:
                    yield state
            else:
                yield
        finally:
            await disconnect(alias)

    app.router.lifespan_context = lifespan
    return app


def register_exception_handlers(app: Any) -> None:
    """Map pagewalk exceptions raised in endpoints to HTTP responses."""

    @app.exception_handler(NotConnected)
    async def not_connected_handler(request: Any, exc: NotConnected):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(TransportError)
    async def transport_error_handler(request: Any, exc: TransportError):
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(NavigationError)
    async def navigation_error_handler(request: Any, exc: NavigationError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(PagewalkError)
    async def pagewalk_error_handler(request: Any, exc: PagewalkError):
        return JSONResponse(status_code=500, content={"detail": str(exc)})


class BrowseParams:
    """FastAPI dependency for page-numbered browsing parameters."""

    def __init__(self, page: int = 1, size: Optional[int] = None, q: str = "", order: Optional[str] = None):
        self.page = max(1, page)
        self.size = min(max(1, size), MAX_PAGE_SIZE) if size is not None else None
        self.q = q
        self.order = order or None

    def apply(self, spec: QuerySpec) -> QuerySpec:
        """Return ``spec`` with this request's search term and, if given, page size and order.

        ``order`` names the order field, prefixed with ``-`` for descending.
        """
        spec = replace(spec, page_size=self.size or spec.page_size, search_term=self.q)
        if self.order:
            if self.order.startswith("-"):
                spec = spec.with_order(self.order[1:], SortDirection.DESCENDING)
            else:
                spec = spec.with_order(self.order, SortDirection.ASCENDING)
        return spec


async def browse(engine: PaginationEngine[T], spec: QuerySpec, params: BrowseParams) -> EngineState[T]:
    """Bring a session's engine to the requested query and page.

    Pages past the session's cursor frontier come back with ``error`` set,
    exactly as the engine reports them.
    """
    state = await engine.configure(params.apply(spec))
    if params.page != state.current_page:
        state = await engine.go_to_page(params.page)
    return state


class PageViewResponse(BaseModel, Generic[T]):
    """Serialized engine state for API endpoints."""

    data: list[T]
    loading: bool
    error: Optional[str] = None
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_previous_page: bool
    showing: str
    page_links: list[Optional[int]]

    @classmethod
    def from_state(cls, state: EngineState) -> PageViewResponse:
        return cls(
            data=state.items,
            loading=state.loading,
            error=state.error,
            current_page=state.current_page,
            total_pages=state.total_pages,
            total_items=state.total_items,
            has_next_page=state.has_next_page,
            has_previous_page=state.has_previous_page,
            showing=str(state.item_range),
            page_links=page_links(state.current_page, state.total_pages),
        )
