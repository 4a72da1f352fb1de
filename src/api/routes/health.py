from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
def health(request: Request):
    """
    Health endpoint minimale.
    """
    poller = request.app.state.poller
    return {
        "status": "ok",
        "poller_running": bool(poller is not None and poller.running),
        "phase": poller.state.phase.value if poller is not None else None,
    }
