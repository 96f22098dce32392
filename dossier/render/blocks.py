"""Block parser — converts report text into an ordered sequence of blocks.

The parser is a single pass over the input lines.  Fenced code and pipe
tables are collected into buffers and flushed as one block each; every
other line becomes its own block.  Malformed markup never raises, it just
falls through to a paragraph.
"""

from __future__ import annotations

import logging
import re

from dossier.models.blocks import (
    Block,
    CodeBlock,
    Heading,
    ListItem,
    Paragraph,
    Separator,
)
from dossier.render.inline import parse_inline
from dossier.render.table import parse_table

logger = logging.getLogger(__name__)

FENCE = "```"

# Most specific prefix first so "#### " is never read as "## ".
HEADING_PREFIXES = (("#### ", 4), ("### ", 3), ("## ", 2))

EMPHASIS_WORDS = ("limitations", "deficiencies", "weaknesses", "drawbacks")

ORDERED_MARKER = re.compile(r"^\d+\.\s")


def is_emphasized(text: str) -> bool:
    """True when a level-3 heading names a limitations-style section."""
    lowered = text.lower()
    return any(word in lowered for word in EMPHASIS_WORDS)


def parse_line(line: str) -> Block:
    """Classify one line outside of a table or code run."""
    for prefix, level in HEADING_PREFIXES:
        if line.startswith(prefix):
            content = line[len(prefix):]
            return Heading(
                level=level,
                spans=parse_inline(content),
                emphasized=level == 3 and is_emphasized(content),
            )

    stripped = line.strip()
    if stripped.startswith("- "):
        return ListItem(ordered=False, spans=parse_inline(stripped[2:]))
    marker = ORDERED_MARKER.match(stripped)
    if marker:
        return ListItem(ordered=True, spans=parse_inline(stripped[marker.end():]))

    if not stripped:
        return Separator()
    return Paragraph(spans=parse_inline(line))


class BlockParser:
    """Line-oriented state machine over table and code-fence buffers."""

    def __init__(self) -> None:
        self.blocks: list[Block] = []
        self.table_lines: list[str] = []
        self.code_lines: list[str] = []
        self.in_table = False
        self.in_code = False
        self.code_language = ""

    def feed(self, line: str) -> None:
        stripped = line.strip()
        if stripped.startswith(FENCE):
            if self.in_code:
                self._flush_code()
            else:
                self._flush_table()
                self.in_code = True
                self.code_language = stripped[len(FENCE):].strip()
            return

        if self.in_code:
            self.code_lines.append(line)
            return

        if stripped.startswith("|"):
            self.in_table = True
            self.table_lines.append(line)
            return

        self._flush_table()
        self.blocks.append(parse_line(line))

    def close(self) -> list[Block]:
        """Flush unterminated runs and return the finished blocks."""
        self._flush_table()
        if self.in_code:
            logger.debug("Unterminated code fence flushed at end of input")
            self._flush_code()
        return self.blocks

    def _flush_table(self) -> None:
        if not self.in_table:
            return
        table = parse_table(self.table_lines)
        if table is None:
            logger.debug("Dropped %d-line pipe run (not a table)", len(self.table_lines))
        else:
            self.blocks.append(table)
        self.table_lines = []
        self.in_table = False

    def _flush_code(self) -> None:
        self.blocks.append(CodeBlock(lines=tuple(self.code_lines), language=self.code_language))
        self.code_lines = []
        self.code_language = ""
        self.in_code = False


def parse_report(text: str) -> list[Block]:
    """Parse a full report into blocks. Total: never raises."""
    parser = BlockParser()
    for line in text.split("\n"):
        parser.feed(line)
    return parser.close()
