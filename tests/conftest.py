"""Shared fixtures: an in-memory market core and admin clients built around it."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from dex_admin.core.config import Settings
from dex_admin.core.engine import MarketCore
from dex_admin.core.time_utils import from_unix_milli, unix_milli
from dex_admin.core.types import At, MarketReport, SuspendEpoch, SuspendTime
from dex_admin.services.admin.main import create_app

ADMIN_PASSWORD = "password123"
FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@dataclass(slots=True)
class FakeMarket:
    """Scripted market state served by FakeCore."""

    running: bool = True
    epoch_duration: int = 1234
    start_epoch: int = 0
    active_epoch: int = 0
    suspend: SuspendEpoch | None = None
    persist_book: bool = False


@dataclass
class FakeCore:
    """Market core double that records every suspend call."""

    markets: dict[str, FakeMarket] = field(default_factory=dict)
    suspend_calls: list[tuple[str, SuspendTime, bool]] = field(default_factory=list)
    refuse_suspend: bool = False
    stop_on_suspend: bool = False

    def add_market(self, name: str, **kwargs: Any) -> FakeMarket:
        """Register a market and return its mutable state."""

        market = FakeMarket(**kwargs)
        self.markets[name] = market
        return market

    def config_msg(self) -> dict[str, Any]:
        return {"markets": sorted(self.markets)}

    def list_markets(self) -> list[str]:
        return list(self.markets)

    def market_status(self, name: str) -> MarketReport | None:
        market = self.markets.get(name)
        if market is None:
            return None
        return MarketReport(
            running=market.running,
            epoch_duration=market.epoch_duration,
            active_epoch=market.active_epoch,
            start_epoch=market.start_epoch,
            suspend=market.suspend,
            persist_book=market.persist_book,
        )

    def suspend_market(self, name: str, when: SuspendTime, persist_book: bool) -> SuspendEpoch | None:
        self.suspend_calls.append((name, when, persist_book))
        market = self.markets.get(name)
        if market is None or self.refuse_suspend:
            return None
        if self.stop_on_suspend:
            market.running = False
            return None

        if isinstance(when, At):
            index = unix_milli(when.time)
            end = when.time + timedelta(milliseconds=1)
        else:
            index = market.active_epoch
            end = from_unix_milli((index + 1) * market.epoch_duration)

        market.suspend = SuspendEpoch(index=index, end=end)
        market.persist_book = persist_book
        return market.suspend

    def suspend_all(self, when: SuspendTime, persist_book: bool) -> dict[str, SuspendEpoch]:
        scheduled: dict[str, SuspendEpoch] = {}
        for name, market in self.markets.items():
            if not market.running:
                continue
            suspend = self.suspend_market(name, when, persist_book)
            if suspend is not None:
                scheduled[name] = suspend
        return scheduled


def make_settings(**overrides: Any) -> Settings:
    """Build isolated settings with the test admin password and no .env file."""

    values: dict[str, Any] = {"ADMIN_PASSWORD": ADMIN_PASSWORD, "ADMIN_AUTH_SHA256": "", "MARKETS": ""}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def core() -> FakeCore:
    """Return an empty fake market core."""

    return FakeCore()


@pytest.fixture
def make_client(core: FakeCore) -> Callable[..., TestClient]:
    """Return a factory building a client with optional core, clock and settings overrides."""

    def _make(
        clock: Callable[[], datetime] | None = None,
        app_core: MarketCore | None = None,
        **overrides: Any,
    ) -> TestClient:
        kwargs: dict[str, Any] = {}
        if clock is not None:
            kwargs["clock"] = clock
        app = create_app(app_core if app_core is not None else core, make_settings(**overrides), **kwargs)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    """Return a client with default test settings."""

    return make_client()


@pytest.fixture
def admin_auth() -> tuple[str, str]:
    """Return Basic credentials carrying the admin password."""

    return ("admin", ADMIN_PASSWORD)


@pytest.fixture
def fixed_now() -> datetime:
    """Return a fixed UTC instant for clock-dependent tests."""

    return FIXED_NOW
