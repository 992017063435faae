from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Response
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.log import configure_logging
from app.models import (
    FilterSet,
    HealthResponse,
    PageRequest,
    ResultsView,
    SessionCreated,
)
from app.services.controller import PageOutOfRangeError, SearchController
from app.services.openlibrary import OpenLibraryClient
from app.services.presenter import render
from app.services.sessions import SessionStore

STATIC_DIR = Path(__file__).parent / "static"

sessions: SessionStore | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global sessions
    configure_logging(settings.log_level)
    client = OpenLibraryClient()
    sessions = SessionStore(
        client,
        ttl_seconds=settings.session_ttl_seconds,
        max_sessions=settings.max_sessions,
        search_url=settings.search_url,
        page_size=settings.page_size,
        debounce_seconds=settings.debounce_seconds,
        max_result_index=settings.max_result_index,
    )
    yield
    sessions.close_all()
    sessions = None
    await client.aclose()


app = FastAPI(title="Book Finder", version="0.1.0", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


def _controller(session_id: str) -> SearchController:
    assert sessions is not None
    try:
        return sessions.get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="healthy", version="0.1.0")


@app.post("/sessions", response_model=SessionCreated, status_code=201)
async def open_session():
    assert sessions is not None
    return SessionCreated(session_id=sessions.create())


@app.get("/sessions/{session_id}", response_model=ResultsView)
async def get_results(session_id: str, wait: bool = False):
    controller = _controller(session_id)
    if wait:
        await controller.wait()
    return render(controller)


@app.post("/sessions/{session_id}/search", response_model=ResultsView)
async def submit_search(session_id: str, filters: FilterSet):
    controller = _controller(session_id)
    controller.search(filters)
    return render(controller)


@app.post("/sessions/{session_id}/page", response_model=ResultsView)
async def change_page(session_id: str, request: PageRequest):
    controller = _controller(session_id)
    try:
        controller.set_page(request.page)
    except PageOutOfRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return render(controller)


@app.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str):
    _controller(session_id)
    assert sessions is not None
    sessions.close(session_id)
    return Response(status_code=204)
