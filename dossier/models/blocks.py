"""Rendered report data model: blocks, inline spans and table cells."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Text:
    """Plain text span."""

    text: str
    kind: str = field(default="text", init=False)


@dataclass(frozen=True)
class Bold:
    """Bold span; the surrounding ``**`` markers are not kept."""

    text: str
    kind: str = field(default="bold", init=False)


@dataclass(frozen=True)
class Link:
    """Link span from ``[label](url)`` syntax."""

    label: str
    url: str
    kind: str = field(default="link", init=False)


Span = Union[Text, Bold, Link]


@dataclass(frozen=True)
class Cell:
    """A table body cell: the trimmed raw text and its link-resolved spans."""

    text: str
    spans: tuple[Span, ...] = ()
    kind: str = field(default="cell", init=False)


@dataclass(frozen=True)
class Heading:
    level: int
    spans: tuple[Span, ...]
    # Presentation hint for "limitations"-style sections.
    emphasized: bool = False
    kind: str = field(default="heading", init=False)


@dataclass(frozen=True)
class ListItem:
    ordered: bool
    spans: tuple[Span, ...]
    kind: str = field(default="list_item", init=False)


@dataclass(frozen=True)
class Paragraph:
    spans: tuple[Span, ...]
    kind: str = field(default="paragraph", init=False)


@dataclass(frozen=True)
class Separator:
    """A blank input line."""

    kind: str = field(default="separator", init=False)


@dataclass(frozen=True)
class Table:
    headers: tuple[str, ...]
    rows: tuple[tuple[Cell, ...], ...]
    kind: str = field(default="table", init=False)


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code; ``language`` is the info string after the opening fence."""

    lines: tuple[str, ...]
    language: str = ""
    kind: str = field(default="code_block", init=False)


Block = Union[Heading, ListItem, Paragraph, Separator, Table, CodeBlock]
