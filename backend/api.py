"""
WeatherVibe API Endpoints
"""

import os
import secrets
import sys
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from loguru import logger
from pydantic import BaseModel

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.weathervibe.commands import CommandHandler, CommandResult
from core.weathervibe.engine import WeatherVibeEngine
from core.weathervibe.exceptions import CommandError

router = APIRouter()

# Engine and command handler (set by app.py during startup)
engine: WeatherVibeEngine | None = None
commands: CommandHandler | None = None


class SetPercentRequest(BaseModel):
    """Request body for ``set``."""
    zone_id: int
    condition: str
    percent: float


class SetRawRequest(BaseModel):
    """Request body for ``setRaw``."""
    zone_id: int
    condition: str
    intensity: float


class CommandLineRequest(BaseModel):
    """Console command line, e.g. ``set 1519 3 50``."""
    command: str


class ObserverZoneRequest(BaseModel):
    """Zone an observer logged into or moved to."""
    zone_id: int


def get_engine() -> WeatherVibeEngine:
    if engine is None:
        raise HTTPException(status_code=503, detail="Weather engine not initialized")
    return engine


def get_commands() -> CommandHandler:
    if commands is None:
        raise HTTPException(status_code=503, detail="Weather engine not initialized")
    return commands


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    """Administrative commands need the configured admin token."""
    expected = os.environ.get("WEATHERVIBE_ADMIN_TOKEN", "")
    if not expected or not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=403, detail="Administrator privilege required")


def _result(result: CommandResult) -> dict:
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return {"success": True, "message": result.message, "data": result.data}


def _run(action, *args) -> dict:
    try:
        return _result(action(*args))
    except CommandError as e:
        logger.info(f"Command rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": "WeatherVibe",
        "version": "0.1.0",
        "engine_ready": engine is not None,
        "enabled": engine.enabled if engine else False,
    }


@router.get("/api/zones")
async def get_zones():
    """Managed zones and their scheduler state."""
    eng = get_engine()
    return {
        "day_part": eng.day_part().display_name,
        "season": eng.season().display_name,
        "zones": [
            {
                "zone_id": zone_id,
                "has_catalog": eng.tables.has_catalog(zone_id),
                "scheduler": eng.scheduler.runtime(zone_id).to_dict() if eng.scheduler.runtime(zone_id) else None,
            }
            for zone_id in eng.settings.zone_ids
        ],
    }


@router.post("/api/commands/set", dependencies=[Depends(require_admin)])
async def set_percent(request: SetPercentRequest):
    """Push a condition at a percentage of its band for the current day part."""
    return _run(get_commands().set_percent, request.zone_id, request.condition, request.percent)


@router.post("/api/commands/set_raw", dependencies=[Depends(require_admin)])
async def set_raw(request: SetRawRequest):
    """Push a condition at a raw intensity."""
    return _run(get_commands().set_raw, request.zone_id, request.condition, request.intensity)


@router.post("/api/commands/reload", dependencies=[Depends(require_admin)])
async def reload():
    """Re-read the options; in-flight fades are discarded."""
    return _run(get_commands().reload)


@router.get("/api/commands/show", dependencies=[Depends(require_admin)])
async def show():
    """Last-applied value and scheduler state per zone."""
    return _run(get_commands().show)


@router.post("/api/commands", dependencies=[Depends(require_admin)])
async def run_command_line(request: CommandLineRequest):
    """Run a console command line."""
    return _result(get_commands().execute(request.command))


@router.post("/api/observers/{observer_id}/login")
async def observer_login(observer_id: str, request: ObserverZoneRequest):
    """Bring a freshly logged-in observer up to date."""
    sent = get_engine().on_observer_login(observer_id, request.zone_id)
    return _observer_response(observer_id, request.zone_id, sent)


@router.post("/api/observers/{observer_id}/zone")
async def observer_zone_change(observer_id: str, request: ObserverZoneRequest):
    """Bring an observer up to date after moving to another zone."""
    sent = get_engine().on_observer_zone_change(observer_id, request.zone_id)
    return _observer_response(observer_id, request.zone_id, sent)


def _observer_response(observer_id: str, zone_id: int, sent) -> dict:
    response = {
        "observer_id": observer_id,
        "zone_id": zone_id,
        "sent": sent is not None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if sent is not None:
        condition, intensity = sent
        response.update({"condition": condition.display_name, "intensity": intensity})
    return response


@router.get("/api/history")
async def get_push_history(
    zone_id: int | None = Query(None, description="Filter by zone"),
    hours: int | None = Query(None, ge=1, le=24, description="Hours of history"),
):
    """Recent pushes, oldest first."""
    events = get_engine().history.get_push_history(zone_id=zone_id, hours=hours)
    return {"events": events, "count": len(events)}
