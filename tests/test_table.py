from dossier.models.blocks import Link, Text
from dossier.render.table import parse_table, split_row


def cell_texts(table):
    return [[cell.text for cell in row] for row in table.rows]


def test_basic_table():
    table = parse_table(["| A | B |", "|---|---|", "| 1 | 2 |", "| 3 | 4 |"])
    assert table.headers == ("A", "B")
    assert cell_texts(table) == [["1", "2"], ["3", "4"]]


def test_single_line_is_not_a_table():
    assert parse_table(["| only |"]) is None
    assert parse_table([]) is None


def test_header_only_table_has_no_rows():
    table = parse_table(["| A |", "|---|"])
    assert table.headers == ("A",)
    assert table.rows == ()


def test_separator_row_is_not_validated():
    table = parse_table(["| A |", "| not dashes |", "| x |"])
    assert cell_texts(table) == [["x"]]


def test_header_bold_markers_stripped():
    table = parse_table(["| **Tool** | **Critical Flaw** |", "|--|--|"])
    assert table.headers == ("Tool", "Critical Flaw")


def test_cells_resolve_links():
    table = parse_table(["| A |", "|---|", "| see [doc](https://d.io) now |"])
    cell = table.rows[0][0]
    assert cell.spans == (Text("see "), Link("doc", "https://d.io"), Text(" now"))


def test_split_row_drops_empty_segments():
    assert split_row("|  a | | b  |") == ["a", "b"]
    assert split_row("a|b") == ["a", "b"]
