"""Manual citation intake — the "add supplemental source" form."""

from __future__ import annotations

import logging
import re
from enum import Enum
from urllib.parse import unquote, urlparse
from uuid import uuid4

from dossier.citations.ledger import CitationLedger
from dossier.citations.probe import Probe
from dossier.models.citation import Citation, CitationStatus, CitationType

logger = logging.getLogger(__name__)

HTML_SUFFIX = re.compile(r"\.html?$")


class IntakeStatus(Enum):
    IDLE = "idle"
    CHECKING = "checking"
    FOUND = "found"
    ERROR = "error"


def infer_title(url: str) -> str | None:
    """Guess a readable title from a URL's last path segment or hostname.

    ``https://example.com/My-Great-Report.html`` -> ``"My great report"``.
    Returns None when the URL cannot be parsed.
    """
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
    except ValueError:
        return None

    segments = [s for s in parsed.path.split("/") if s]
    name = unquote(segments[-1]) if segments else hostname
    if not name:
        return None
    name = HTML_SUFFIX.sub("", re.sub(r"[-_]", " ", name))
    return name.capitalize()


class ManualIntake:
    """Form state for one manual citation: title, URL and probe outcome."""

    def __init__(self, probe: Probe) -> None:
        self.probe = probe
        self.title = ""
        self.url = ""
        self.status = IntakeStatus.IDLE

    def edit(self, title: str | None = None, url: str | None = None) -> None:
        """Keystroke-level edits; changing the URL clears the probe outcome."""
        if title is not None:
            self.title = title
        if url is not None and url != self.url:
            self.url = url
            self.status = IntakeStatus.IDLE

    async def commit_url(self, url: str | None = None) -> IntakeStatus:
        """Handle the URL field losing focus.

        Probes http(s) URLs and, on success, fills an empty title from the URL.
        """
        self.edit(url=url)
        committed = self.url
        if not committed or not committed.startswith("http"):
            return self.status

        self.status = IntakeStatus.CHECKING
        reachable = await self.probe.check(committed)
        if self.url != committed:
            # The field was edited while the probe was running.
            logger.debug("Ignoring intake probe result for superseded URL %s", committed)
            return self.status

        if reachable:
            if not self.title:
                self.title = infer_title(committed) or ""
            self.status = IntakeStatus.FOUND
        else:
            self.status = IntakeStatus.ERROR
        return self.status

    def submit(self, ledger: CitationLedger) -> Citation | None:
        """Append the form as a manual citation, or return None if incomplete."""
        if not self.title.strip() or not self.url.strip():
            return None

        found = self.status is IntakeStatus.FOUND
        citation = ledger.add_manual(
            Citation(
                id=f"man-{uuid4().hex[:12]}",
                title=self.title,
                url=self.url,
                type=CitationType.MANUAL,
                # An unprobed or failed manual entry is just unverified, not an error.
                status=CitationStatus.LIVE if found else CitationStatus.UNKNOWN,
                verified=found,
            )
        )
        logger.info("Added manual citation %s (%s)", citation.id, citation.url)
        self.reset()
        return citation

    def reset(self) -> None:
        self.title = ""
        self.url = ""
        self.status = IntakeStatus.IDLE
