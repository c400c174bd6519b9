"""
EventSentinel Main Application
==============================

FastAPI entry point for the venue simulation engine.

The simulation clock runs as an asyncio task inside the service; every
request handler runs on the same event loop, and the engine's lock
serializes operator commands with ticks.

Endpoints:
    GET    /                               - Service information
    GET    /health                         - Liveness probe
    GET    /ready                          - Readiness probe (clock running?)
    GET    /metrics                        - Engine and clock metrics
    GET    /snapshot                       - Full engine output
    GET    /agents/{agent_id}              - One agent
    POST   /agents/{agent_id}/watchlist    - Toggle operator watchlist flag
    POST   /agents/{agent_id}/select       - Select agent for inspection
    POST   /predictions/{id}/acknowledge   - Acknowledge a prediction
    DELETE /predictions/{id}               - Dismiss a prediction
    POST   /commands                       - Apply a typed operator command
    WS     /ws/snapshot                    - Snapshot stream, one per tick
"""

import asyncio
import logging
import os
import signal
import threading
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Body, FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from event_sentinel.config import settings
from event_sentinel.engine import SimulationEngine
from event_sentinel.models.commands import OperatorCommand


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

# Shutdown flag
_shutdown_flag: bool = False

_engine: Optional[SimulationEngine] = None
_clock_task: Optional[asyncio.Task] = None

_startup_time: float = 0.0
_is_ready: bool = False
_last_tick_at: float = 0.0

# Error counters
_tick_error_count: int = 0

_command_adapter = TypeAdapter(OperatorCommand)


# =============================================================================
# Getters
# =============================================================================

def get_engine() -> Optional[SimulationEngine]:
    return _engine

def is_ready() -> bool:
    return _is_ready


# =============================================================================
# Signal Handlers
# =============================================================================

def _handle_sigterm(signum, frame):
    """Handle SIGTERM for graceful shutdown."""
    global _shutdown_flag
    logger.info("Received SIGTERM, initiating graceful shutdown...")
    _shutdown_flag = True


# =============================================================================
# Simulation Clock
# =============================================================================

async def run_clock() -> None:
    """Tick the engine at the configured wall-clock interval."""
    global _is_ready, _tick_error_count, _last_tick_at

    if _engine is None:
        logger.error("Simulation clock not initialized")
        return

    interval = settings.simulation.tick_interval_seconds
    logger.info(f"Simulation clock started: interval={interval}s")
    _is_ready = True

    while not _shutdown_flag:
        try:
            started = time.time()
            _engine.tick()
            _last_tick_at = time.time()

            elapsed = _last_tick_at - started
            if elapsed > interval:
                logger.warning(f"Tick took {elapsed * 1000:.1f}ms (> interval {interval}s)")
            await asyncio.sleep(max(0.0, interval - elapsed))

        except asyncio.CancelledError:
            logger.info("Simulation clock cancelled")
            break
        except Exception as e:
            _tick_error_count += 1
            logger.error(f"Tick error: {e}")
            await asyncio.sleep(interval)

    _is_ready = False
    logger.info("Simulation clock stopped")


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager with graceful shutdown."""
    global _engine, _clock_task, _startup_time, _shutdown_flag

    # Signal handlers can only be installed from the main thread
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, _handle_sigterm)

    # Startup
    _startup_time = time.time()
    _shutdown_flag = False
    logger.info(f"Starting {settings.agent.name} {settings.agent.version}")

    port = int(os.environ.get("PORT", settings.server.port))
    logger.info(f"Configured port: {port}")

    _engine = SimulationEngine.from_settings(settings)

    _clock_task = asyncio.create_task(
        run_clock(),
        name="simulation_clock",
    )

    logger.info("All components started")

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    _shutdown_flag = True

    if _clock_task:
        _clock_task.cancel()
        try:
            await _clock_task
        except asyncio.CancelledError:
            pass

    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="EventSentinel",
    description="Venue crowd-risk simulation engine",
    version=settings.agent.version,
    lifespan=lifespan,
)


def _not_ready() -> JSONResponse:
    return JSONResponse({"error": "Engine not initialized"}, status_code=503)


def _not_found(kind: str, identifier: str) -> JSONResponse:
    return JSONResponse({"error": f"Unknown {kind}: {identifier}"}, status_code=404)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "EventSentinel",
        "version": settings.agent.version,
        "name": settings.agent.name,
        "status": "running",
        "agent_count": settings.simulation.agent_count,
        "tick_interval_seconds": settings.simulation.tick_interval_seconds,
        "eviction_policy": settings.predictions.eviction_policy,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/ready")
async def ready() -> JSONResponse:
    """
    Readiness probe - is the clock ticking?

    Returns 200 once the engine is seeded and the clock task is running,
    503 otherwise.
    """
    engine = get_engine()
    engine_ready = engine is not None

    if engine_ready and _is_ready:
        return JSONResponse({
            "status": "ready",
            "engine_initialized": True,
            "clock_running": True,
            "ticks": engine.state.tick,
        })
    return JSONResponse(
        {
            "status": "not_ready",
            "engine_initialized": engine_ready,
            "clock_running": _is_ready,
        },
        status_code=503,
    )


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Detailed metrics for observability."""
    engine = get_engine()
    engine_metrics = engine.get_metrics() if engine else {}

    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "tick_errors": _tick_error_count,
        "seconds_since_last_tick": (
            round(time.time() - _last_tick_at, 3) if _last_tick_at else None
        ),
        **engine_metrics,
    })


@app.get("/snapshot")
async def snapshot(analytics: bool = True) -> JSONResponse:
    """Full engine output: agents, predictions, feed, analytics."""
    engine = get_engine()
    if engine is None:
        return _not_ready()
    return JSONResponse(engine.snapshot(include_analytics=analytics).model_dump(mode="json"))


@app.get("/agents/{agent_id}")
async def get_agent(agent_id: str) -> JSONResponse:
    """Get one agent, including derived risk fields."""
    engine = get_engine()
    if engine is None:
        return _not_ready()

    agent = engine.get_agent(agent_id)
    if agent is None:
        return _not_found("agent", agent_id)
    return JSONResponse(agent.model_dump(mode="json"))


@app.post("/agents/{agent_id}/watchlist")
async def toggle_watchlist(agent_id: str) -> JSONResponse:
    """Toggle the operator watchlist flag on an agent."""
    engine = get_engine()
    if engine is None:
        return _not_ready()

    if not engine.toggle_watchlist(agent_id):
        return _not_found("agent", agent_id)

    agent = engine.get_agent(agent_id)
    return JSONResponse({
        "agent_id": agent_id,
        "is_flagged_by_operator": agent.session.is_flagged_by_operator,
        "risk_score": agent.risk_score,
        "risk_tier": agent.risk_tier.value,
    })


@app.post("/agents/{agent_id}/select")
async def select_agent(agent_id: str) -> JSONResponse:
    """Select an agent for inspection (view state only)."""
    engine = get_engine()
    if engine is None:
        return _not_ready()

    if not engine.select_agent(agent_id):
        return _not_found("agent", agent_id)
    return JSONResponse({"selected_agent_id": agent_id})


@app.post("/predictions/{prediction_id}/acknowledge")
async def acknowledge_prediction(prediction_id: str) -> JSONResponse:
    """Acknowledge a live prediction, keeping it in the queue."""
    engine = get_engine()
    if engine is None:
        return _not_ready()

    if not engine.acknowledge_prediction(prediction_id):
        return _not_found("prediction", prediction_id)
    return JSONResponse({"prediction_id": prediction_id, "acknowledged": True})


@app.delete("/predictions/{prediction_id}")
async def dismiss_prediction(prediction_id: str) -> JSONResponse:
    """Dismiss a live prediction."""
    engine = get_engine()
    if engine is None:
        return _not_ready()

    if not engine.dismiss_prediction(prediction_id):
        return _not_found("prediction", prediction_id)
    return JSONResponse({"prediction_id": prediction_id, "dismissed": True})


@app.post("/commands")
async def post_command(payload: dict = Body(...)) -> JSONResponse:
    """
    Apply a typed operator command.

    Body: {"type": "toggle_watchlist", "agent_id": "fan-1042"} or any
    other OperatorCommand variant.
    """
    engine = get_engine()
    if engine is None:
        return _not_ready()

    try:
        command = _command_adapter.validate_python(payload)
    except ValidationError as e:
        return JSONResponse(
            {"error": "Invalid command", "detail": e.errors(include_url=False, include_context=False)},
            status_code=422,
        )

    applied = engine.apply(command)
    return JSONResponse(
        {"type": command.type, "applied": applied},
        status_code=200 if applied else 404,
    )


# =============================================================================
# WebSocket Endpoints
# =============================================================================

@app.websocket("/ws/snapshot")
async def snapshot_stream(websocket: WebSocket) -> None:
    """WebSocket endpoint streaming one snapshot per tick."""
    await websocket.accept()
    logger.info("Client connected to /ws/snapshot")

    last_tick = -1
    try:
        while not _shutdown_flag:
            engine = get_engine()
            if engine is not None and engine.state.tick != last_tick:
                snap = engine.snapshot()
                last_tick = snap.tick
                await websocket.send_json(snap.model_dump(mode="json"))
            await asyncio.sleep(settings.simulation.tick_interval_seconds)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning(f"WebSocket error: {e}")
    finally:
        logger.info("Client disconnected from /ws/snapshot")


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "event_sentinel.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
