"""Report sessions — the host-side state for one generated report."""

from __future__ import annotations

import logging
import uuid

from dossier.backends.base import ReportGenerator
from dossier.citations.intake import ManualIntake
from dossier.citations.ledger import CitationLedger
from dossier.citations.probe import Probe
from dossier.models.blocks import Block
from dossier.models.research import ResearchResult, ResearchStatus
from dossier.render.blocks import parse_report

logger = logging.getLogger(__name__)


class ReportSession:
    """A report, its rendered blocks, its citation ledger and intake form."""

    def __init__(self, probe: Probe, query: str = "") -> None:
        self.id = str(uuid.uuid4())
        self.query = query
        self.status = ResearchStatus.IDLE
        self.error: str | None = None
        self.scratchpad = ""
        self.report = ""
        self.source_urls: list[str] = []
        self.blocks: list[Block] = []
        self.ledger = CitationLedger(probe)
        self.intake = ManualIntake(probe)

    def set_report(self, text: str) -> None:
        """Text-change notification: re-render and re-extract citations."""
        self.report = text
        self.blocks = parse_report(text)
        self.ledger.load_report(text)

    def apply_result(self, result: ResearchResult) -> None:
        self.scratchpad = result.scratchpad
        self.source_urls = list(result.source_urls)
        self.set_report(result.report)
        self.status = ResearchStatus.SUCCESS
        self.error = None

    async def run(self, generator: ReportGenerator) -> None:
        """Generate the report for this session's query.

        Errors from the generator propagate after the session is marked failed.
        """
        self.status = ResearchStatus.LOADING
        self.error = None
        try:
            result = await generator.generate(self.query)
        except Exception as exc:
            self.status = ResearchStatus.ERROR
            self.error = str(exc) or "Failed to generate research report."
            raise
        self.apply_result(result)
        logger.info(
            "Session %s ready: %d blocks, %d citations",
            self.id, len(self.blocks), len(self.ledger.citations),
        )


class SessionStore:
    """In-memory registry of report sessions; nothing is persisted."""

    def __init__(self, probe: Probe) -> None:
        self.probe = probe
        self._sessions: dict[str, ReportSession] = {}

    def create(self, query: str = "") -> ReportSession:
        session = ReportSession(self.probe, query=query)
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> ReportSession | None:
        return self._sessions.get(session_id)
