from dossier.models.blocks import Bold, Link, Text
from dossier.render.inline import parse_inline, parse_links, plain_text


def test_bold_and_link_in_order():
    spans = parse_inline("**a** and [b](http://x))")
    assert spans[:3] == (Bold("a"), Text(" and "), Link("b", "http://x"))
    # The stray closing paren is ordinary trailing text.
    assert spans[3:] == (Text(")"),)


def test_plain_line_is_single_text_span():
    assert parse_inline("nothing special here") == (Text("nothing special here"),)


def test_empty_line_has_no_spans():
    assert parse_inline("") == ()


def test_unclosed_bold_is_literal():
    assert parse_inline("**open only") == (Text("**open only"),)


def test_bold_is_non_greedy():
    assert parse_inline("**a** x **b**") == (Bold("a"), Text(" x "), Bold("b"))


def test_no_nesting_first_match_wins():
    spans = parse_inline("[**label**](http://x)")
    assert spans == (Link("**label**", "http://x"),)

    spans = parse_inline("**see [a](http://y)**")
    assert spans == (Bold("see [a](http://y)"),)


def test_link_only_resolver_keeps_bold_markers():
    spans = parse_links("**Cost** [ref](https://a.io)")
    assert spans == (Text("**Cost** "), Link("ref", "https://a.io"))


def test_plain_text_reconstructs_visible_text():
    line = "Lead **bold** mid [label](https://u.io) tail"
    assert plain_text(parse_inline(line)) == "Lead bold mid label tail"
