"""Citation extractor — pulls deduplicated web links out of a report."""

from __future__ import annotations

import re

from dossier.models.citation import Citation, CitationType

# A "[" preceded by "!" is image syntax and is not a citation.
CITATION_PATTERN = re.compile(r"(?<!!)\[(.*?)\]\((.*?)\)")

MAX_TITLE_LENGTH = 70
ELLIPSIS = "..."


def truncate_title(title: str, limit: int = MAX_TITLE_LENGTH) -> str:
    if len(title) > limit:
        return title[:limit] + ELLIPSIS
    return title


def extract_citations(text: str) -> list[Citation]:
    """Return one citation per distinct http(s) URL, in order of first use.

    Later links to an already-seen URL are discarded, so the first label wins.
    """
    found: list[Citation] = []
    seen_urls: set[str] = set()
    for match in CITATION_PATTERN.finditer(text):
        title, url = match.group(1), match.group(2)
        if not url.startswith("http") or url in seen_urls:
            continue
        seen_urls.add(url)
        found.append(
            Citation(
                id=f"cit-{len(found)}",
                title=truncate_title(title),
                url=url,
                type=CitationType.EXTRACTED,
            )
        )
    return found
