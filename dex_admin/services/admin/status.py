"""Conversion of core market reports into serializable status records."""

from dex_admin.core.engine import MarketCore
from dex_admin.core.types import MarketReport
from dex_admin.services.admin.errors import UnknownMarketError
from dex_admin.services.admin.models import MarketStatus

PING_RESPONSE = "pong"


def build_status(report: MarketReport, name: str | None = None) -> MarketStatus:
    """Copy the base fields and attach suspension fields only when a suspend record exists."""

    suspend_epoch: int | None = None
    persist_book: bool | None = None
    if report.suspend is not None:
        suspend_epoch = report.suspend.index
        persist_book = report.persist_book

    return MarketStatus(
        name=name,
        running=report.running,
        epoch_duration=report.epoch_duration,
        active_epoch=report.active_epoch,
        start_epoch=report.start_epoch,
        suspend_epoch=suspend_epoch,
        persist_book=persist_book,
    )


class StatusAggregator:
    """Read-only view over the core's markets."""

    def __init__(self, core: MarketCore) -> None:
        self.core = core

    def get_one(self, name: str) -> MarketStatus:
        """Return the named market's status, including its name."""

        report = self.core.market_status(name)
        if report is None:
            raise UnknownMarketError(name)
        return build_status(report, name=name)

    def get_all(self) -> dict[str, MarketStatus]:
        """Return one status per market, ordered by market name.

        Markets that disappear between listing and lookup are skipped.
        """

        statuses: dict[str, MarketStatus] = {}
        for name in sorted(self.core.list_markets()):
            report = self.core.market_status(name)
            if report is None:
                continue
            statuses[name] = build_status(report)
        return statuses
