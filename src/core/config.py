import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, List


_DEFAULT_TYPE_FILTERS = [34, 42, 43, 44, 45, 52, 58, 83, 98, 99]


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    v = value.strip().lower()
    if v in {"0", "false", "no"}:
        return False
    return True


def _parse_int_list(value: Optional[str], default: List[int]) -> List[int]:
    if not value:
        return list(default)
    out: List[int] = []
    for token in value.split(","):
        t = token.strip()
        if not t:
            continue
        try:
            out.append(int(t))
        except ValueError:
            continue
    return out or list(default)


@dataclass
class Settings:
    sportmonks_api_token: str
    sportmonks_base_url: str
    sportmonks_timezone: str
    sportmonks_populate: int
    sportmonks_type_filters: List[int]

    live_poll_interval_ms: int

    enable_prometheus_exporter: bool
    prometheus_port: int

    @classmethod
    def from_env(cls) -> "Settings":
        token = os.getenv("SPORTMONKS_API_TOKEN")
        if not token:
            raise ValueError(
                "SPORTMONKS_API_TOKEN non impostata. Aggiungi a .env: SPORTMONKS_API_TOKEN=IL_TUO_TOKEN"
            )

        def _int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if not raw:
                return default
            try:
                return int(raw)
            except ValueError as e:
                raise ValueError(f"Variabile {name} deve essere un intero (valore: {raw!r})") from e

        base_url = os.getenv("SPORTMONKS_BASE_URL", "https://api.sportmonks.com/v3").rstrip("/")
        timezone = os.getenv("SPORTMONKS_TIMEZONE", "Europe/London")
        populate = _int("SPORTMONKS_POPULATE", 400)
        type_filters = _parse_int_list(os.getenv("SPORTMONKS_TYPE_FILTERS"), _DEFAULT_TYPE_FILTERS)

        interval_ms = _int("LIVE_POLL_INTERVAL_MS", 3000)
        if interval_ms < 100:
            interval_ms = 100

        enable_prometheus_exporter = _parse_bool(os.getenv("ENABLE_PROMETHEUS_EXPORTER"), False)
        prometheus_port = _int("PROMETHEUS_PORT", 9100)

        return cls(
            sportmonks_api_token=token,
            sportmonks_base_url=base_url,
            sportmonks_timezone=timezone,
            sportmonks_populate=populate,
            sportmonks_type_filters=type_filters,
            live_poll_interval_ms=interval_ms,
            enable_prometheus_exporter=enable_prometheus_exporter,
            prometheus_port=prometheus_port,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def _reset_settings_cache_for_tests() -> None:
    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "_reset_settings_cache_for_tests"]
