"""Inline parser — bold and link spans within a single line."""

from __future__ import annotations

import re

from dossier.models.blocks import Bold, Link, Span, Text

# Bold and link are alternatives at each position; the first to match wins
# and its interior is taken literally (no nesting).
INLINE_PATTERN = re.compile(r"(\*\*(.*?)\*\*)|(\[(.*?)\]\((.*?)\))")
LINK_PATTERN = re.compile(r"\[(.*?)\]\((.*?)\)")


def parse_inline(text: str) -> tuple[Span, ...]:
    """Split a line into Text, Bold and Link spans, left to right."""
    spans: list[Span] = []
    last = 0
    for match in INLINE_PATTERN.finditer(text):
        if match.start() > last:
            spans.append(Text(text[last:match.start()]))
        if match.group(1) is not None:
            spans.append(Bold(match.group(2)))
        else:
            spans.append(Link(match.group(4), match.group(5)))
        last = match.end()

    if last < len(text):
        spans.append(Text(text[last:]))
    return tuple(spans)


def parse_links(text: str) -> tuple[Span, ...]:
    """Link-only variant used for table cells; ``**`` is left as literal text."""
    spans: list[Span] = []
    last = 0
    for match in LINK_PATTERN.finditer(text):
        if match.start() > last:
            spans.append(Text(text[last:match.start()]))
        spans.append(Link(match.group(1), match.group(2)))
        last = match.end()

    if last < len(text):
        spans.append(Text(text[last:]))
    return tuple(spans)


def plain_text(spans: tuple[Span, ...]) -> str:
    """Concatenate the visible text of spans (link labels, bold interiors)."""
    parts = []
    for span in spans:
        parts.append(span.label if isinstance(span, Link) else span.text)
    return "".join(parts)
