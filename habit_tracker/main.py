"""
Entry point for the Habit Tracker FastAPI application.

This module defines the JSON API for creating and listing habits,
recording daily completion entries and reading the rolling 30-day
progress series, and serves the single-page frontend under `/`. A
MongoDB-backed store is created on startup from the `MONGO_URI`
environment variable and handed to the services through FastAPI
dependencies, which tests override with an in-memory store.
"""

import asyncio
import contextlib
import logging
import os
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import FileResponse, JSONResponse

from .config import load_settings
from .errors import StoreUnavailable
from .repository import HabitStore, MongoStore
from .schemas import EntryCreate, EntryRead, HabitCreate, HabitRead, ProgressPoint
from .services import EntryService, HabitService, ProgressAggregator

logger = logging.getLogger(__name__)


def get_store_backend() -> HabitStore:
    """Factory that returns the configured store implementation."""
    settings = load_settings()
    return MongoStore(settings.mongo_uri, db_name=settings.db_name)


app = FastAPI(title="Habit Tracker API")


async def check_store_connection(store: HabitStore) -> None:
    """Ping the store once and log the outcome; a failure is not fatal."""
    try:
        await store.ping()
        logger.info("MongoDB connected")
    except StoreUnavailable:
        logger.exception("MongoDB connection failed")


@app.on_event("startup")
async def startup_event() -> None:
    """Initialize the store on startup."""
    app.state.store = get_store_backend()
    # Requests are served while the ping waits on server selection.
    app.state.store_check = asyncio.create_task(check_store_connection(app.state.store))


@app.on_event("shutdown")
async def shutdown_event() -> None:
    task = getattr(app.state, "store_check", None)
    if task is not None and not task.done():
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
    store = getattr(app.state, "store", None)
    if store is not None:
        store.close()


def get_store() -> HabitStore:
    """Dependency to retrieve the store instance."""
    return app.state.store


def get_habit_service(store: HabitStore = Depends(get_store)) -> HabitService:
    return HabitService(store)


def get_entry_service(store: HabitStore = Depends(get_store)) -> EntryService:
    return EntryService(store)


def get_progress_aggregator(store: HabitStore = Depends(get_store)) -> ProgressAggregator:
    return ProgressAggregator(store)


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Store unavailable"})


@app.get("/", response_class=FileResponse)
async def serve_frontend() -> FileResponse:
    """Serve the main HTML file for the frontend."""
    frontend_path = os.path.join(os.path.dirname(__file__), "frontend", "index.html")
    return FileResponse(frontend_path)


@app.get("/api/habits", response_model=List[HabitRead])
async def list_habits(service: HabitService = Depends(get_habit_service)) -> List[HabitRead]:
    """Return all habits."""
    return await service.list_habits()


@app.post("/api/habits", response_model=HabitRead)
async def create_habit(
    habit: HabitCreate, service: HabitService = Depends(get_habit_service)
) -> HabitRead:
    """Create a new habit."""
    return await service.create_habit(habit)


@app.post("/api/entries", response_model=EntryRead)
async def record_entry(
    entry: EntryCreate, service: EntryService = Depends(get_entry_service)
) -> EntryRead:
    """Mark a habit as completed or not completed on a given date."""
    return await service.record_entry(entry)


@app.get("/api/progress", response_model=List[ProgressPoint])
async def get_progress(
    as_of: Optional[date] = Query(None, alias="asOf"),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> List[ProgressPoint]:
    """Completion percentage for each of the last 30 days, oldest first."""
    try:
        return await aggregator.compute_progress(as_of)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
