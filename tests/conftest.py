import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from core.config import _reset_settings_cache_for_tests  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings_cache():
    _reset_settings_cache_for_tests()
    yield
    _reset_settings_cache_for_tests()


@pytest.fixture
def sportmonks_token(monkeypatch):
    """Token fittizio: necessario a get_settings() per client e provider."""
    monkeypatch.setenv("SPORTMONKS_API_TOKEN", "DUMMY")
    monkeypatch.delenv("SPORTMONKS_BASE_URL", raising=False)
    monkeypatch.delenv("SPORTMONKS_TYPE_FILTERS", raising=False)
    _reset_settings_cache_for_tests()
    return "DUMMY"
