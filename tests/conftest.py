import sys
from pathlib import Path

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skycast.config import Settings  # noqa: E402

GEOCODE_URL = "https://geocoding.test/v1/search"
FORECAST_URL = "https://forecast.test/v1/forecast"


@pytest.fixture(autouse=True)
def _test_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SKYCAST_STORAGE", "memory")
    monkeypatch.setenv("SKYCAST_CACHE_DIR", str(tmp_path / "cache"))


@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return

    def _boom(*args, **kwargs):
        raise RuntimeError(
            "Network is blocked in unit tests. "
            "Inject a fake client or mark the test with @pytest.mark.network"
        )

    monkeypatch.setattr(httpx.Client, "request", _boom, raising=True)
    monkeypatch.setattr(httpx.AsyncClient, "request", _boom, raising=True)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAsyncClient:
    """Stands in for ``httpx.AsyncClient``: replays queued responses or errors."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self._responses.extend(responses)

    async def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        if not self._responses:
            raise AssertionError(f"Unexpected request to {url}")
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def aclose(self):
        pass


def json_response(payload, status_code: int = 200, url: str = GEOCODE_URL) -> httpx.Response:
    return httpx.Response(status_code=status_code, json=payload, request=httpx.Request("GET", url))


def geocode_payload(name="Paris", latitude=48.85, longitude=2.35, country_code="FR", admin1=None):
    result = {"name": name, "latitude": latitude, "longitude": longitude, "country_code": country_code}
    if admin1 is not None:
        result["admin1"] = admin1
    return {"results": [result]}


def forecast_payload(latitude=52.52, longitude=13.41, temperature=12.3, weathercode=3, humidity=(81, 79)):
    payload = {
        "latitude": latitude,
        "longitude": longitude,
        "current_weather": {
            "temperature": temperature,
            "windspeed": 9.4,
            "winddirection": 250.0,
            "weathercode": weathercode,
            "time": "2024-05-01T12:00",
        },
    }
    if humidity is not None:
        payload["hourly"] = {"relativehumidity_2m": list(humidity)}
    return payload


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        geocode_url=GEOCODE_URL,
        forecast_url=FORECAST_URL,
        http_timeout=8.0,
        geocode_ttl=3600.0,
        weather_ttl=600.0,
        min_interval=15.0,
        cache_max_entries=12,
        storage="memory",
        cache_dir=tmp_path / "cache",
        redis_url=None,
        log_level="INFO",
    )
