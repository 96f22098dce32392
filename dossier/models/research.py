"""Research result data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ResearchStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ResearchResult:
    """Output of a report generator."""

    scratchpad: str
    report: str
    source_urls: list[str] = field(default_factory=list)
