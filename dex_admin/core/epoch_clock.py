"""In-process market core that places configured markets on a wall-clock epoch timeline."""

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from dex_admin.core.config import Settings
from dex_admin.core.time_utils import from_unix_milli, unix_milli, utc_now
from dex_admin.core.types import At, MarketReport, SuspendEpoch, SuspendTime

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ClockMarket:
    """Mutable per-market schedule state."""

    epoch_duration: int
    start_epoch: int
    suspend: SuspendEpoch | None = None
    persist_book: bool = False


class EpochClockCore:
    """Market core whose epoch index is wall-clock milliseconds divided by the epoch duration.

    A market runs from construction until its scheduled final epoch has
    elapsed. Suspensions are never honored before the active epoch, so an
    immediate request stops the market at the end of the current epoch.
    """

    def __init__(self, epochs: Mapping[str, int], clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        now_ms = unix_milli(clock())
        self._markets: dict[str, ClockMarket] = {
            name: ClockMarket(epoch_duration=duration, start_epoch=now_ms // duration)
            for name, duration in epochs.items()
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "EpochClockCore":
        """Build a core for the markets listed in MARKETS."""

        return cls(settings.market_epochs())

    def config_msg(self) -> dict[str, Any]:
        """Return each market with its epoch duration and start epoch."""

        with self._lock:
            markets = [
                {"name": name, "epochlen": market.epoch_duration, "startepoch": market.start_epoch}
                for name, market in sorted(self._markets.items())
            ]
        return {"markets": markets}

    def list_markets(self) -> list[str]:
        """Return configured market names."""

        with self._lock:
            return list(self._markets)

    def market_status(self, name: str) -> MarketReport | None:
        """Return the market state at the current wall-clock epoch."""

        with self._lock:
            market = self._markets.get(name)
            if market is None:
                return None
            active = self._active_epoch(market, unix_milli(self._clock()))
            return MarketReport(
                running=_is_running(market, active),
                epoch_duration=market.epoch_duration,
                active_epoch=_clamp_to_final(market, active),
                start_epoch=market.start_epoch,
                suspend=market.suspend,
                persist_book=market.persist_book,
            )

    def suspend_market(self, name: str, when: SuspendTime, persist_book: bool) -> SuspendEpoch | None:
        """Schedule the final epoch, or return None for unknown, stopped or unrepresentable schedules."""

        with self._lock:
            market = self._markets.get(name)
            if market is None:
                return None
            return self._schedule(name, market, when, persist_book, unix_milli(self._clock()))

    def suspend_all(self, when: SuspendTime, persist_book: bool) -> dict[str, SuspendEpoch]:
        """Schedule every running market against a single clock reading."""

        scheduled: dict[str, SuspendEpoch] = {}
        with self._lock:
            now_ms = unix_milli(self._clock())
            for name, market in self._markets.items():
                suspend = self._schedule(name, market, when, persist_book, now_ms)
                if suspend is not None:
                    scheduled[name] = suspend
        return scheduled

    def _active_epoch(self, market: ClockMarket, now_ms: int) -> int:
        return now_ms // market.epoch_duration

    def _schedule(
        self,
        name: str,
        market: ClockMarket,
        when: SuspendTime,
        persist_book: bool,
        now_ms: int,
    ) -> SuspendEpoch | None:
        active = self._active_epoch(market, now_ms)
        if not _is_running(market, active):
            logger.info("clock_market_not_running", extra={"market": name, "active_epoch": active})
            return None

        final = active
        if isinstance(when, At):
            final = max(unix_milli(when.time) // market.epoch_duration, active)

        try:
            end = from_unix_milli((final + 1) * market.epoch_duration)
        except OverflowError:
            logger.warning("clock_epoch_end_out_of_range", extra={"market": name, "final_epoch": final})
            return None

        market.suspend = SuspendEpoch(index=final, end=end)
        market.persist_book = persist_book
        return market.suspend


def _is_running(market: ClockMarket, active: int) -> bool:
    return market.suspend is None or active <= market.suspend.index


def _clamp_to_final(market: ClockMarket, active: int) -> int:
    if market.suspend is None:
        return active
    return min(active, market.suspend.index)
