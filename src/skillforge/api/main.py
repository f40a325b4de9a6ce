"""FastAPI application entry point for the SkillForge API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skillforge.api.routes import (
    ai,
    goals,
    health,
    interviews,
    notifications,
    profile,
    progress,
    roadmaps,
)
from skillforge.services.data_service import (
    InterviewSaveError,
    InvalidUpdateError,
    PersistenceError,
    RecordNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize the database and the shared service objects on startup."""
    from skillforge.ai.gateway import ContentGateway
    from skillforge.data.db import init_db
    from skillforge.services.data_service import build_data_service

    init_db()
    if getattr(app.state, "data_service", None) is None:
        app.state.data_service = build_data_service()
    if getattr(app.state, "gateway", None) is None:
        app.state.gateway = ContentGateway()
    yield


app = FastAPI(
    title="SkillForge API",
    description="Career goals, AI learning roadmaps, mock interviews and progress analytics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RecordNotFoundError)
async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidUpdateError)
async def invalid_update_handler(request: Request, exc: InvalidUpdateError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "The change could not be saved. Please try again."},
    )


@app.exception_handler(InterviewSaveError)
async def interview_save_error_handler(request: Request, exc: InterviewSaveError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


app.include_router(health.router)
app.include_router(goals.router, prefix="/api")
app.include_router(roadmaps.router, prefix="/api")
app.include_router(interviews.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")
app.include_router(profile.router, prefix="/api")
app.include_router(progress.router, prefix="/api")
app.include_router(ai.router, prefix="/api")


def main() -> None:
    """Start the development server."""
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "skillforge.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
