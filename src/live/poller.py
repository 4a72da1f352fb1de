from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from core.config import get_settings
from core.logging import get_logger
from core.models import FixtureMetrics, LiveState, PollerPhase
from monitoring.prometheus_exporter import (
    record_poll_cancelled,
    record_poll_failure,
    record_poll_success,
)
from providers.sportmonks.base import LiveFixturesProviderBase
from providers.sportmonks.livescores_provider import LivescoresProvider

log = get_logger("live.poller")

StateListener = Callable[[LiveState], None]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class CancelToken:
    """Segnale di cancellazione cooperativo, uno per ciclo di poll."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class LivePoller:
    """
    Coordinatore del polling live: unico proprietario di LiveState.

    Macchina a stati: IDLE -> LOADING -> {READY, ERROR}; READY ed ERROR
    tornano a LOADING ad ogni tick. stop() porta a STOPPED (terminale).

    Regola di ordinamento: ogni nuovo ciclo cancella prima quello in volo
    (token + Task.cancel), quindi al massimo una richiesta è in volo e una
    risposta lenta non può sovrascrivere lo stato di un ciclo successivo.
    """

    def __init__(
        self,
        provider: Optional[LiveFixturesProviderBase] = None,
        *,
        interval_ms: Optional[int] = None,
    ) -> None:
        if interval_ms is None:
            interval_ms = get_settings().live_poll_interval_ms
        self._provider = provider or LivescoresProvider()
        self._interval_ms = max(int(interval_ms), 1)

        self._state = LiveState()
        self._listeners: List[StateListener] = []

        self._token: Optional[CancelToken] = None
        self._inflight: Optional[asyncio.Task] = None
        self._timer: Optional[asyncio.Task] = None
        self._seq = 0
        self._stopped = False

    # ------------------------------------------------------------------
    # Osservabilità
    # ------------------------------------------------------------------

    @property
    def state(self) -> LiveState:
        return self._state

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._stopped

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Registra un listener; ritorna la funzione di unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _transition(self, *, notify: bool = True, **changes: Any) -> None:
        if self._stopped:
            return
        self._state = replace(self._state, updated_at=_now_iso(), **changes)
        if not notify:
            return
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                log.exception("Listener stato live fallito")

    # ------------------------------------------------------------------
    # Ciclo di vita
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if self._stopped:
            raise RuntimeError("LivePoller già fermato: crearne uno nuovo")
        if self._timer is not None:
            return
        log.info("Polling live avviato (intervallo %sms)", self._interval_ms)
        self._timer = asyncio.get_running_loop().create_task(self._tick_loop())

    async def _tick_loop(self) -> None:
        # Primo ciclo immediato, poi uno per tick anche se il precedente è in volo
        while True:
            self.begin_cycle()
            await asyncio.sleep(self._interval_ms / 1000)

    def begin_cycle(self) -> asyncio.Task:
        if self._stopped:
            raise RuntimeError("LivePoller fermato: nessun nuovo ciclo")
        self._cancel_inflight()
        self._seq += 1
        token = CancelToken()
        self._token = token
        self._transition(phase=PollerPhase.LOADING, notify=False)
        self._inflight = asyncio.get_running_loop().create_task(self._run_cycle(token, self._seq))
        return self._inflight

    async def poll_once(self) -> LiveState:
        """Esegue un singolo ciclo e ritorna lo stato risultante."""
        task = self.begin_cycle()
        # wait() non propaga né la cancellazione né gli errori del task
        await asyncio.wait([task])
        return self._state

    def _cancel_inflight(self) -> None:
        if self._token is not None:
            self._token.cancel()
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._token = None
        self._inflight = None

    async def stop(self) -> None:
        if self._stopped:
            return
        timer, inflight = self._timer, self._inflight
        self._timer = None
        self._cancel_inflight()
        if timer is not None:
            timer.cancel()
        pending = [t for t in (timer, inflight) if t is not None]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._transition(phase=PollerPhase.STOPPED)
        self._stopped = True
        try:
            await self._provider.aclose()
        except Exception as exc:
            log.error("Chiusura provider fallita: %s", exc)
        log.info("Polling live fermato")

    # ------------------------------------------------------------------
    # Singolo ciclo
    # ------------------------------------------------------------------

    async def _run_cycle(self, token: CancelToken, seq: int) -> None:
        try:
            fixtures = await self._provider.fetch_live_fixtures()
        except asyncio.CancelledError:
            record_poll_cancelled()
            log.debug("Ciclo %s cancellato", seq)
            raise
        except Exception as exc:
            if token.cancelled:
                record_poll_cancelled()
                log.debug("Ciclo %s superato, errore ignorato: %s", seq, exc)
                return
            self._on_failure(exc, seq)
            return

        if token.cancelled:
            record_poll_cancelled()
            log.debug("Risposta tardiva del ciclo %s scartata", seq)
            return
        self._on_success(fixtures, seq)

    def _on_success(self, fixtures: Iterable[FixtureMetrics], seq: int) -> None:
        snapshot = tuple(fixtures)
        stats = self._provider.get_last_stats()
        self._transition(
            loading=False,
            error=None,
            fixtures=snapshot,
            phase=PollerPhase.READY,
            cycle=self._state.cycle + 1,
        )
        record_poll_success(len(snapshot), stats)
        log.info(
            "Poll %s completato: %s fixture live",
            seq,
            len(snapshot),
            extra={"fixtures_count": len(snapshot), "fetch_stats": stats},
        )

    def _on_failure(self, exc: Exception, seq: int) -> None:
        message = str(exc) or "Fetch error"
        stats = self._provider.get_last_stats()
        # Fixture precedenti mantenute: meglio stale che vuoto
        self._transition(
            loading=False,
            error=message,
            phase=PollerPhase.ERROR,
            cycle=self._state.cycle + 1,
        )
        record_poll_failure(stats)
        log.warning("Poll %s fallito: %s", seq, message, extra={"fetch_stats": stats})


__all__ = ["LivePoller", "CancelToken", "StateListener"]
