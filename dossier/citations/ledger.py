"""Citation ledger and verification state machine.

Extracted and manual citations are kept as separate ownership domains:
re-extraction replaces the extracted list wholesale and bumps the ledger
generation, while manual entries are append-only and survive it.  The two
are merged (extracted first) only when the ledger is read.

Status transitions::

    unknown | live | error --begin_check--> checking --complete_check--> live | error

A probe is issued against a ``ProbeTicket`` carrying the generation it was
started in.  Completions for extracted citations from an older generation
are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from dossier.citations.extractor import extract_citations
from dossier.citations.probe import Probe
from dossier.models.citation import Citation, CitationStatus, CitationType, LedgerStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeTicket:
    """Identifies an outstanding probe."""

    generation: int
    citation_id: str
    url: str


class CitationLedger:
    """Ordered collection of citations for the current report."""

    def __init__(self, probe: Probe) -> None:
        self.probe = probe
        self.generation = 0
        self._extracted: list[Citation] = []
        self._manual: list[Citation] = []

    @property
    def citations(self) -> list[Citation]:
        return self._extracted + self._manual

    def load_report(self, text: str) -> list[Citation]:
        """Replace the extracted citations with those found in ``text``."""
        self.generation += 1
        self._extracted = extract_citations(text)
        logger.info(
            "Ledger generation %d: %d extracted, %d manual",
            self.generation, len(self._extracted), len(self._manual),
        )
        return list(self._extracted)

    def get(self, citation_id: str) -> Citation | None:
        for citation in self.citations:
            if citation.id == citation_id:
                return citation
        return None

    def add_manual(self, citation: Citation) -> Citation:
        if citation.type is not CitationType.MANUAL:
            raise ValueError("Only manual citations can be appended")
        if self.get(citation.id) is not None:
            raise ValueError(f"Duplicate citation id: {citation.id}")
        self._manual.append(citation)
        return citation

    def toggle_verified(self, citation_id: str) -> Citation | None:
        """Flip the user verification flag; status is left alone."""
        return self._update(citation_id, lambda c: replace(c, verified=not c.verified))

    # -- Verification --

    def begin_check(self, citation_id: str) -> ProbeTicket | None:
        """Move a citation to ``checking`` and return the ticket for its probe."""
        citation = self._update(
            citation_id, lambda c: replace(c, status=CitationStatus.CHECKING)
        )
        if citation is None:
            return None
        return ProbeTicket(self.generation, citation.id, citation.url)

    def complete_check(self, ticket: ProbeTicket, reachable: bool) -> Citation | None:
        """Apply a probe outcome; returns the updated citation or None if stale."""
        citation = self.get(ticket.citation_id)
        if citation is None or citation.url != ticket.url:
            logger.debug("Discarding probe result for missing citation %s", ticket.citation_id)
            return None
        if citation.type is CitationType.EXTRACTED and ticket.generation != self.generation:
            logger.debug(
                "Discarding stale probe result for %s (generation %d, current %d)",
                ticket.citation_id, ticket.generation, self.generation,
            )
            return None

        status = CitationStatus.LIVE if reachable else CitationStatus.ERROR
        # A live probe can raise the verified flag but never lower it.
        return self._update(
            ticket.citation_id,
            lambda c: replace(c, status=status, verified=c.verified or reachable),
        )

    async def check(self, citation_id: str) -> Citation | None:
        """Probe a citation end to end. Status is ``checking`` until the probe returns."""
        ticket = self.begin_check(citation_id)
        if ticket is None:
            return None
        reachable = await self.probe.check(ticket.url)
        return self.complete_check(ticket, reachable)

    def stats(self) -> LedgerStats:
        citations = self.citations
        total = len(citations)
        verified = sum(1 for c in citations if c.verified)
        manual = len(self._manual)
        return LedgerStats(
            total=total,
            verified=verified,
            manual=manual,
            extracted=len(self._extracted),
            progress=(verified / total * 100) if total else 0.0,
        )

    def _update(self, citation_id: str, transform) -> Citation | None:
        for entries in (self._extracted, self._manual):
            for i, citation in enumerate(entries):
                if citation.id == citation_id:
                    entries[i] = transform(citation)
                    return entries[i]
        return None
