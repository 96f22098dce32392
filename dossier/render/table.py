"""Table sub-parser — turns a run of pipe rows into a Table block."""

from __future__ import annotations

from dossier.models.blocks import Cell, Table
from dossier.render.inline import parse_links


def split_row(row: str) -> list[str]:
    """Split a pipe row into trimmed cells, dropping empty segments."""
    return [cell.strip() for cell in row.split("|") if cell.strip()]


def parse_table(lines: list[str]) -> Table | None:
    """Parse collected table lines, or return None for a single-line run.

    Row 0 is the header and row 1 the ``|---|`` separator, which is skipped
    without checking its syntax.
    """
    if len(lines) < 2:
        return None

    headers = tuple(cell.replace("**", "") for cell in split_row(lines[0]))
    rows = tuple(
        tuple(Cell(text=cell, spans=parse_links(cell)) for cell in split_row(line))
        for line in lines[2:]
    )
    return Table(headers=headers, rows=rows)
