"""Citation ledger data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CitationType(Enum):
    EXTRACTED = "extracted"
    MANUAL = "manual"


class CitationStatus(Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    LIVE = "live"
    ERROR = "error"


@dataclass(frozen=True)
class Citation:
    """A tracked web reference, either extracted from a report or added by hand.

    ``status`` is owned by the ledger's verification state machine.
    ``verified`` is user-togglable and raised (never lowered) by a live probe.
    """

    id: str
    title: str
    url: str
    type: CitationType
    status: CitationStatus = CitationStatus.UNKNOWN
    verified: bool = False


@dataclass(frozen=True)
class LedgerStats:
    """Summary counts shown alongside the ledger."""

    total: int
    verified: int
    manual: int
    extracted: int
    progress: float
