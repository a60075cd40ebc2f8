"""
FastAPI Backend dla edytora mapy gildii.

Endpoints:
    GET    /api/health               - health check
    GET    /api/terrains             - paleta terenów
    GET    /api/map                  - statystyki i teren każdego hexa
    GET    /api/map/cells/{q}/{r}    - teren hexa
    PUT    /api/map/cells/{q}/{r}    - zmiana terenu hexa
    DELETE /api/map                  - reset mapy
    GET    /api/route/{q}/{r}        - trasa z obozu do hexa
    GET    /api/layout               - pozycje i wierzchołki hexów w pikselach
    GET    /api/journal              - dziennik operacji (?q=&r= dla jednego hexa)
    GET    /api/snapshot             - eksport snapshotu
    POST   /api/snapshot             - import snapshotu

Błędy mapy:
    InvalidCoordinate  -> 422
    InvariantViolation -> 409
    MalformedSnapshot  -> 400
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from guild_map.core.errors import InvalidCoordinate, InvariantViolation, MalformedSnapshot
from api.routers import hex_map
from api.routers import snapshot
from api.state import get_session

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events."""
    session = get_session()
    logger.info("Guild Map API starting (radius=%d, %d cells)", session.radius, session.stats()["cells"])
    yield
    logger.info("Guild Map API shutting down")


app = FastAPI(
    title="Guild Map API",
    description="Hex map editor with route planning from the camp",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS - allow all origins (including file://)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(hex_map.router, prefix="/api", tags=["Map"])
app.include_router(snapshot.router, prefix="/api", tags=["Snapshot"])


# ═══════════════════════════════════════════════════════════════════════════
# ERROR HANDLERS
# ═══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(InvalidCoordinate)
async def invalid_coordinate_handler(request: Request, exc: InvalidCoordinate):
    return _error(422, exc)


@app.exception_handler(InvariantViolation)
async def invariant_violation_handler(request: Request, exc: InvariantViolation):
    return _error(409, exc)


@app.exception_handler(MalformedSnapshot)
async def malformed_snapshot_handler(request: Request, exc: MalformedSnapshot):
    return _error(400, exc)


@app.get("/api/health")
def health():
    """API health check."""
    return {"status": "healthy"}
