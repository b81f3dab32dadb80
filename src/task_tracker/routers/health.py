from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from ..schemas import HealthOut

router = APIRouter(tags=["health"])


# PUBLIC_INTERFACE
@router.get("/health", response_model=HealthOut, summary="Health Check")
def health_check(request: Request) -> HealthOut:
    """
    Liveness probe. Never touches the database.
    """
    started = getattr(request.app.state, "started_at", None) or time.monotonic()
    return HealthOut(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - started, 3),
    )
