"""Main application with health, session and run history endpoints."""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import structlog
import uvicorn
from fastapi import Body, FastAPI, HTTPException, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .archive import RunArchive
from .config import Settings, settings
from .errors import ArchiveCorrupted, PermissionDenied
from .logging import setup_logging
from .models import (
    FixResult,
    MotionResult,
    RunDetail,
    RunSummary,
    SessionStatus,
    StartRequest,
    StopResult,
)
from .session import SessionController
from .sources import PushLocationSource, PushMotionSource, StaticPermission
from .storage import FileStore

logger = structlog.get_logger(__name__)


def build_controller(config: Settings) -> SessionController:
    """Wire the archive and in-process sources for the HTTP service."""
    archive = RunArchive(
        FileStore(config.archive_dir),
        key=config.archive_key,
        step_length_m=config.step_length_m,
    )
    return SessionController(
        archive,
        motion_source=PushMotionSource(),
        location_source=PushLocationSource(),
        permissions=StaticPermission(True),
        settings=config,
    )


# Global controller instance
controller: SessionController = build_controller(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    setup_logging(settings.service_name, settings)
    logger.info("Pedometer service starting", archive_dir=settings.archive_dir)

    yield

    # Shutdown: an active walk is archived rather than lost
    if controller.active:
        controller.stop()
    logger.info("Pedometer service stopped")


app = FastAPI(
    title="Pedometer",
    description="Counts steps from accelerometer data and archives walking sessions",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ArchiveCorrupted)
async def archive_corrupted_handler(request, exc: ArchiveCorrupted):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/healthz")
async def liveness():
    """Liveness probe endpoint."""
    return {"status": "alive"}


@app.get("/readyz")
async def readiness():
    """Readiness probe endpoint; requires a readable archive."""
    try:
        controller.archive.list()
    except ArchiveCorrupted:
        return Response(
            content='{"status": "not ready"}',
            status_code=503,
            media_type="application/json",
        )
    return {"status": "ready"}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/session", response_model=SessionStatus)
async def session_status():
    return controller.status()


@app.post("/session/start", response_model=SessionStatus)
async def start_session(payload: Optional[StartRequest] = None):
    """Start tracking with the permission answer the client obtained."""
    payload = payload or StartRequest()
    try:
        await controller.start(StaticPermission(payload.permission_granted))
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=str(e))
    return controller.status()


@app.post("/session/stop", response_model=StopResult)
async def stop_session():
    run = controller.stop()
    return StopResult(archived=run is not None, run=run)


@app.post("/session/motion", response_model=MotionResult)
async def ingest_motion(event: Dict[str, Any] = Body(...)):
    """Push one device motion event to the active session, if any."""
    before = controller.step_count
    delivered = controller.motion_source.push(event) > 0
    steps = controller.step_count
    return MotionResult(delivered=delivered, step=steps > before, steps=steps)


@app.post("/session/location", response_model=FixResult)
async def ingest_location(fix: Dict[str, Any] = Body(...)):
    """Push one location fix to the active session, if any."""
    delivered = controller.location_source.push(fix) > 0
    session = controller.session
    return FixResult(delivered=delivered, points=len(session.path) if session else 0)


@app.get("/runs", response_model=List[RunSummary])
async def list_runs():
    """Run history, most recent first."""
    return controller.archive.summaries()


@app.get("/runs/{run_id}", response_model=RunDetail)
async def get_run(run_id: int):
    detail = controller.archive.detail(run_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Run not found")
    return detail


@app.delete("/runs/{run_id}", status_code=204)
async def delete_run(run_id: int):
    controller.archive.delete(run_id)
    return Response(status_code=204)


if __name__ == "__main__":
    uvicorn.run(
        "pedometer.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
