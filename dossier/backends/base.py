"""Base protocol for report generation backends."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dossier.models.research import ResearchResult


class GenerationError(RuntimeError):
    """Raised when a backend cannot produce a report."""


@runtime_checkable
class ReportGenerator(Protocol):
    """Interface that all report generation backends must implement."""

    name: str

    async def generate(self, query: str) -> ResearchResult:
        """Run a research query and return the scratchpad, report and sources."""
        ...
