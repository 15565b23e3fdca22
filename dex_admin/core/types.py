"""Shared lightweight types exchanged between the admin layer and the market core."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SuspendEpoch:
    """Final epoch of a scheduled suspension as reported by the core."""

    index: int
    end: datetime


@dataclass(frozen=True, slots=True)
class MarketReport:
    """Point-in-time market state as reported by the core."""

    running: bool
    epoch_duration: int
    active_epoch: int
    start_epoch: int
    suspend: SuspendEpoch | None = None
    persist_book: bool = False


@dataclass(frozen=True, slots=True)
class Immediate:
    """Suspend at the next epoch boundary the core can honor."""


@dataclass(frozen=True, slots=True)
class At:
    """Suspend at the end of the epoch containing ``time``."""

    time: datetime


SuspendTime = Immediate | At

IMMEDIATE = Immediate()
