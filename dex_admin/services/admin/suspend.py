"""Validation and scheduling of market suspensions."""

import logging
import re
from collections.abc import Callable
from datetime import datetime

from dex_admin.core.engine import MarketCore
from dex_admin.core.time_utils import from_unix_milli, utc_now
from dex_admin.core.types import IMMEDIATE, At, SuspendEpoch, SuspendTime
from dex_admin.services.admin.errors import (
    InvalidPersistFlagError,
    InvalidSuspendTimeError,
    MarketNotRunningError,
    SuspendFailedError,
    SuspendTimeInPastError,
    UnknownMarketError,
)
from dex_admin.services.admin.models import SuspendResult

logger = logging.getLogger(__name__)

_PERSIST_LITERALS = {"true": True, "1": True, "false": False, "0": False}
_PERSIST_DEFAULT = True
_MILLIS_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_suspend_time(raw: str | None, now: datetime) -> SuspendTime:
    """Return IMMEDIATE when no time was given, otherwise a future At time.

    ``raw`` is milliseconds since the Unix epoch; an empty value counts as not
    given. Only an explicit time is checked against ``now``.
    """

    if raw is None or raw == "":
        return IMMEDIATE

    if not _MILLIS_PATTERN.fullmatch(raw):
        raise InvalidSuspendTimeError(raw, "not an integer millisecond timestamp")
    try:
        when = from_unix_milli(int(raw))
    except (OverflowError, ValueError):
        raise InvalidSuspendTimeError(raw, "timestamp out of range") from None

    if when <= now:
        raise SuspendTimeInPastError(when.isoformat())
    return At(when)


def parse_persist_flag(raw: str | None) -> bool:
    """Map the allow-listed persist literals to a bool; absent or empty means true."""

    if raw is None or raw == "":
        return _PERSIST_DEFAULT
    try:
        return _PERSIST_LITERALS[raw]
    except KeyError:
        raise InvalidPersistFlagError(raw) from None


def _to_result(name: str, suspend: SuspendEpoch) -> SuspendResult:
    return SuspendResult(market=name, final_epoch=suspend.index, suspend_time=suspend.end)


class SuspendScheduler:
    """Turns raw suspend request parameters into a core suspension.

    There are no retries; each failure is terminal for the request.
    """

    def __init__(self, core: MarketCore, clock: Callable[[], datetime] = utc_now) -> None:
        self.core = core
        self._clock = clock

    def suspend(self, name: str, raw_time: str | None, raw_persist: str | None) -> SuspendResult:
        """Validate the request in order, then schedule the suspension with the core."""

        report = self.core.market_status(name)
        if report is None:
            raise UnknownMarketError(name)
        if not report.running:
            raise MarketNotRunningError(name)

        when = parse_suspend_time(raw_time, self._clock())
        persist_book = parse_persist_flag(raw_persist)

        suspend = self.core.suspend_market(name, when, persist_book)
        if suspend is None:
            self._raise_if_gone(name)
            logger.error(
                "market_suspend_failed",
                extra={"market": name, "suspend_time": _describe(when), "persist_book": persist_book},
            )
            raise SuspendFailedError(name)

        logger.info(
            "market_suspend_scheduled",
            extra={
                "market": name,
                "final_epoch": suspend.index,
                "suspend_time": suspend.end.isoformat(),
                "requested": _describe(when),
                "persist_book": persist_book,
            },
        )
        return _to_result(name, suspend)

    def suspend_all(self, raw_time: str | None, raw_persist: str | None) -> dict[str, SuspendResult]:
        """Suspend every running market; markets the core skips are absent from the result."""

        when = parse_suspend_time(raw_time, self._clock())
        persist_book = parse_persist_flag(raw_persist)

        scheduled = self.core.suspend_all(when, persist_book)
        logger.info(
            "all_markets_suspend_scheduled",
            extra={
                "markets": sorted(scheduled),
                "requested": _describe(when),
                "persist_book": persist_book,
            },
        )
        return {name: _to_result(name, scheduled[name]) for name in sorted(scheduled)}

    def _raise_if_gone(self, name: str) -> None:
        """Report a market that vanished or stopped since it was checked as a client error."""

        report = self.core.market_status(name)
        if report is None:
            raise UnknownMarketError(name)
        if not report.running:
            logger.info("market_stopped_before_suspend", extra={"market": name})
            raise MarketNotRunningError(name)


def _describe(when: SuspendTime) -> str:
    if isinstance(when, At):
        return when.time.isoformat()
    return "immediate"
