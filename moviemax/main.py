"""FastAPI entrypoint exposing catalog browsing sessions and movie details."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from functools import partial

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from moviemax.core.config import get_settings
from moviemax.core.logging_config import configure_logging
from moviemax.services.browsing import CatalogSession
from moviemax.services.errors import CatalogError, ConfigurationError, DecodeError, TransportError
from moviemax.services.http import fetch, fetch_image
from moviemax.services.models import CatalogEntry, MovieDetail, build_image_url
from moviemax.services.tmdb import DetailManager, Fetcher
from moviemax.sessions import SessionRegistry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and share one HTTP connection pool while serving."""

    configure_logging()
    async with httpx.AsyncClient(timeout=get_settings().http_timeout) as client:
        app.state.http_client = client
        yield
    app.state.http_client = None


app = FastAPI(title="MovieMax Catalog", lifespan=lifespan)
registry = SessionRegistry(max_sessions=get_settings().max_sessions)


class EntryResponse(BaseModel):
    id: int
    title: str
    release_date: str
    year: int | None = None
    poster_url: str | None = None


class SessionResponse(BaseModel):
    session_id: str
    page: int = Field(..., description="Next page that will be requested")
    entries: list[EntryResponse] = Field(default_factory=list)


class PageResponse(BaseModel):
    session_id: str
    page: int
    new_entries: list[EntryResponse]
    error: str | None = None


class QueryRequest(BaseModel):
    query: str = Field("", description="Title substring to search for")


class MoviesResponse(BaseModel):
    session_id: str
    page: int
    query: str
    searching: bool
    entries: list[EntryResponse]


class DetailResponse(BaseModel):
    id: int
    title: str
    vote_average: float
    vote_count: int
    revenue: int
    formatted_revenue: str
    runtime_minutes: int | None = None
    formatted_duration: str
    overview: str
    backdrop_url: str | None = None


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    return getattr(request.app.state, "http_client", None)


def get_fetcher(client: httpx.AsyncClient | None = Depends(get_http_client)) -> Fetcher:
    return partial(fetch, client=client, timeout=get_settings().http_timeout)


def get_registry() -> SessionRegistry:
    return registry


@app.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(
    fetcher: Fetcher = Depends(get_fetcher),
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    session_id, session = sessions.create(fetch=fetcher)
    return SessionResponse(session_id=session_id, page=session.page)


@app.post("/sessions/{session_id}/pages", response_model=PageResponse)
async def load_next_page(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> PageResponse:
    """Load the next catalog page; list failures are reported, not raised."""

    session = _require_session(sessions, session_id)
    if session.loading:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A page is already loading for this session.",
        )
    new_entries = await session.load_next_page()
    return PageResponse(
        session_id=session_id,
        page=session.page,
        new_entries=[_entry_to_response(entry) for entry in new_entries],
        error=str(session.last_error) if session.last_error else None,
    )


@app.get("/sessions/{session_id}/movies", response_model=MoviesResponse)
def list_session_movies(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> MoviesResponse:
    """Return the entries visible under the session's current search."""

    session = _require_session(sessions, session_id)
    return _session_movies(session_id, session)


@app.put("/sessions/{session_id}/query", response_model=MoviesResponse)
def set_session_query(
    session_id: str,
    payload: QueryRequest,
    sessions: SessionRegistry = Depends(get_registry),
) -> MoviesResponse:
    """Replace the search query; an empty query shows the whole working set."""

    session = _require_session(sessions, session_id)
    session.set_query(payload.query)
    return _session_movies(session_id, session)


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> Response:
    if not sessions.delete(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown session.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/movies/{movie_id}", response_model=DetailResponse)
async def get_movie_details(
    movie_id: int,
    fetcher: Fetcher = Depends(get_fetcher),
) -> DetailResponse:
    outcome: asyncio.Future[MovieDetail] = asyncio.get_running_loop().create_future()
    manager = DetailManager(
        fetch=fetcher,
        on_success=outcome.set_result,
        on_failure=outcome.set_exception,
    )
    await manager.fetch_details(movie_id)
    try:
        movie = await outcome
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="TMDB_API_KEY is not configured.",
        ) from exc
    except TransportError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not reach the movie catalog: {exc}",
        ) from exc
    except DecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The movie catalog returned an unexpected response.",
        ) from exc
    except CatalogError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Loading the movie failed.",
        ) from exc
    return _detail_to_response(movie_id, movie)


@app.get("/images/{path:path}")
async def get_image(
    path: str,
    client: httpx.AsyncClient | None = Depends(get_http_client),
) -> Response:
    url = build_image_url(path)
    content = await fetch_image(url, client=client) if url else None
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image unavailable.")
    return Response(content=content, media_type="application/octet-stream")


def _require_session(sessions: SessionRegistry, session_id: str) -> CatalogSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown session.")
    return session


def _session_movies(session_id: str, session: CatalogSession) -> MoviesResponse:
    return MoviesResponse(
        session_id=session_id,
        page=session.page,
        query=session.query,
        searching=session.search.active,
        entries=[_entry_to_response(entry) for entry in session.visible_entries],
    )


def _entry_to_response(entry: CatalogEntry) -> EntryResponse:
    return EntryResponse(
        id=entry.id,
        title=entry.title,
        release_date=entry.release_date,
        year=entry.year,
        poster_url=entry.poster_url,
    )


def _detail_to_response(movie_id: int, movie: MovieDetail) -> DetailResponse:
    return DetailResponse(
        id=movie_id,
        title=movie.title,
        vote_average=movie.vote_average,
        vote_count=movie.vote_count,
        revenue=movie.revenue,
        formatted_revenue=movie.formatted_revenue,
        runtime_minutes=movie.runtime_minutes,
        formatted_duration=movie.formatted_duration,
        overview=movie.overview,
        backdrop_url=movie.backdrop_url,
    )
