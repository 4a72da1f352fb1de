from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from core.logging import get_logger
from live.poller import LivePoller
from live.table import build_table

router = APIRouter(tags=["live"])
logger = get_logger("api.routes.live")


def _poller(request: Request) -> LivePoller:
    poller = request.app.state.poller
    if poller is None:
        raise HTTPException(status_code=503, detail="live poller not available")
    return poller


@router.get("/live", summary="Snapshot live corrente")
def get_live(request: Request):
    return _poller(request).state.to_dict()


@router.get("/live/table", summary="Tabella live pronta per la UI")
def get_live_table(request: Request):
    return build_table(_poller(request).state)
