"""Capability contract the admin server needs from the market core."""

from typing import Any, Protocol

from dex_admin.core.types import MarketReport, SuspendEpoch, SuspendTime


class MarketCore(Protocol):
    """Market status and suspension operations exposed by the matching engine.

    Implementations must be safe for concurrent use. Two suspend calls for the
    same market race inside the core and the later write wins.
    """

    def config_msg(self) -> dict[str, Any]:
        """Return the engine's public configuration document."""
        ...

    def list_markets(self) -> list[str]:
        """Return the names of every market the core knows."""
        ...

    def market_status(self, name: str) -> MarketReport | None:
        """Return the market's state, or None for an unknown market."""
        ...

    def suspend_market(self, name: str, when: SuspendTime, persist_book: bool) -> SuspendEpoch | None:
        """Schedule a suspension, returning None when the core refuses it."""
        ...

    def suspend_all(self, when: SuspendTime, persist_book: bool) -> dict[str, SuspendEpoch]:
        """Schedule a suspension for every running market."""
        ...
