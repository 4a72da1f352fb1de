from __future__ import annotations

import argparse
import asyncio
from typing import List, Optional

from prometheus_client import start_http_server

from core.config import get_settings
from core.logging import get_logger
from core.models import LiveState
from live.poller import LivePoller
from live.table import build_table
from monitoring.prometheus_exporter import _REGISTRY

log = get_logger("scripts.live_poll")


def render(state: LiveState) -> List[str]:
    table = build_table(state)
    lines = [f"[live] {table['updated_at'] or '-'} phase={table['phase']}"]
    if table["message"]:
        lines.append(f"[live] {table['message']}")
    for row in table["rows"]:
        sign = "+" if row["delta"] > 0 else ""
        lines.append(
            f"  {row['match']:<40} {row['time']:>6}  C:{row['corners']:>3}  "
            f"DA {row['da_first_half']:>3} | {row['da_second_half']:>3}  Δ {sign}{row['delta']}"
        )
    return lines


def _print_state(state: LiveState) -> None:
    print("\n".join(render(state)), flush=True)


async def _run(interval_ms: Optional[int], duration: Optional[float]) -> None:
    poller = LivePoller(interval_ms=interval_ms)
    poller.subscribe(_print_state)
    await poller.start()
    try:
        if duration:
            await asyncio.sleep(duration)
        else:
            await asyncio.Event().wait()
    finally:
        await poller.stop()


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Polling live dangerous attacks (SportMonks inplay)")
    ap.add_argument("--interval-ms", type=int, default=None, help="Override LIVE_POLL_INTERVAL_MS")
    ap.add_argument("--duration", type=float, default=None, help="Secondi di esecuzione (default: infinito)")
    args = ap.parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        log.error("Config non valida: %s", e)
        return 2

    if settings.enable_prometheus_exporter:
        start_http_server(settings.prometheus_port, registry=_REGISTRY)
        log.info("Prometheus exporter avviato su porta %s", settings.prometheus_port)

    try:
        asyncio.run(_run(args.interval_ms, args.duration))
    except KeyboardInterrupt:
        log.info("Interrotto dall'utente")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
