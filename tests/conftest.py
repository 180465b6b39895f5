"""
Pytest configuration and shared fixtures for favorites_conformance tests.

Scenario tests run against an in-process stand-in of the favorites service
unless ``FAVORITES_LIVE=1`` is set, in which case they run against the
service configured through ``FAVORITES_*`` environment variables.
"""

import itertools
import math
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from favorites_conformance.client import FavoritesClient
from favorites_conformance.config import ConformanceConfig
from favorites_conformance.observability.logging import configure_logging
from favorites_conformance.runner import ScenarioRunner
from favorites_conformance.timestamp import format_timestamp

LIVE = ConformanceConfig.from_env().live

SERVICE_COLORS = {"BLUE", "GREEN", "RED", "YELLOW"}
SERVICE_OFFSET = timezone(timedelta(hours=3))
STAND_IN_TTL_SECONDS = 0.5


def pytest_configure(config: pytest.Config) -> None:
    settings = ConformanceConfig.from_env()
    configure_logging(level=settings.log_level, json_output=settings.json_logs)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if not LIVE:
        return
    skip = pytest.mark.skip(reason="asserts stand-in behavior beyond the contract")
    for item in items:
        if "stand_in_only" in item.keywords:
            item.add_marker(skip)


def _allowed_title_char(ch: str) -> bool:
    """Latin, Cyrillic, digits, spaces and ASCII punctuation."""
    if ch.isascii():
        return ch.isprintable()
    return "Ѐ" <= ch <= "ӿ" or ch == "№"


def _coordinate(form: dict[str, list[str]], name: str, limit: float) -> float | None:
    raw = form.get(name, [""])[0]
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or not (-limit <= value <= limit):
        return None
    return value


def create_favorites_app(token_ttl_seconds: float = STAND_IN_TTL_SECONDS) -> FastAPI:
    """Create a strict stand-in of the favorites service.

    Tokens expire after ``token_ttl_seconds``; ids increase across the
    app's lifetime; colors are uppercase only; titles are 1-999 characters
    after trimming, Latin or Cyrillic.
    """
    app = FastAPI()
    issued: dict[str, float] = {}
    ids = itertools.count(1)

    @app.post("/v1/auth/tokens")
    async def issue_token() -> JSONResponse:
        token = uuid.uuid4().hex
        issued[token] = time.monotonic()
        response = JSONResponse(content={})
        response.set_cookie("token", token)
        return response

    @app.post("/v1/favorites")
    async def create_favorite(request: Request) -> JSONResponse:
        token = request.cookies.get("token")
        issued_at = issued.get(token) if token else None
        if issued_at is None or time.monotonic() - issued_at >= token_ttl_seconds:
            return JSONResponse(status_code=401, content={"error": {"message": "Unauthorized"}})

        form = parse_qs((await request.body()).decode("utf-8"), keep_blank_values=True)

        title = form.get("title", [""])[0]
        stripped = title.strip()
        if not stripped or len(stripped) > 999 or not all(map(_allowed_title_char, stripped)):
            return JSONResponse(status_code=400, content={"error": {"message": "Invalid title"}})

        lat = _coordinate(form, "lat", 90.0)
        lon = _coordinate(form, "lon", 180.0)
        if lat is None or lon is None:
            return JSONResponse(status_code=400, content={"error": {"message": "Invalid coordinates"}})

        color = form["color"][0] if "color" in form else None
        if color is not None and color not in SERVICE_COLORS:
            return JSONResponse(status_code=400, content={"error": {"message": "Invalid color"}})

        return JSONResponse(
            content={
                "id": next(ids),
                "title": title,
                "lat": lat,
                "lon": lon,
                "color": color,
                "created_at": format_timestamp(datetime.now(SERVICE_OFFSET)),
            }
        )

    return app


@pytest.fixture
def stand_in_config() -> ConformanceConfig:
    """Config with a short expiry window so the expiry scenario stays fast."""
    return ConformanceConfig(
        base_url="http://testserver",
        token_ttl_seconds=STAND_IN_TTL_SECONDS,
        expiry_wait_seconds=STAND_IN_TTL_SECONDS * 2,
    )


@pytest.fixture
def make_favorites_app() -> Callable[..., FastAPI]:
    """Provide the stand-in factory, for tests that need a custom window."""
    return create_favorites_app


@pytest.fixture
def favorites_app() -> FastAPI:
    """Create a fresh stand-in service for each test."""
    return create_favorites_app()


@pytest.fixture
def runner_for(stand_in_config: ConformanceConfig) -> Callable[..., ScenarioRunner]:
    """Build a runner whose every client talks to the given app in-process."""

    def build(app: FastAPI, config: ConformanceConfig | None = None) -> ScenarioRunner:
        return ScenarioRunner(
            config or stand_in_config,
            client_factory=lambda cfg: FavoritesClient(
                cfg, http=TestClient(app), close_http=True
            ),
        )

    return build


@pytest.fixture
def runner(
    favorites_app: FastAPI, runner_for: Callable[..., ScenarioRunner]
) -> ScenarioRunner:
    """Runner against the live service when FAVORITES_LIVE is set, the stand-in otherwise."""
    if LIVE:
        return ScenarioRunner(ConformanceConfig.from_env())
    return runner_for(favorites_app)
