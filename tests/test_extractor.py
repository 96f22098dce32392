from dossier.citations.extractor import extract_citations, truncate_title
from dossier.models.citation import CitationStatus, CitationType


def test_image_links_are_excluded():
    citations = extract_citations("![alt](http://img) and [real](http://site)")
    assert [c.url for c in citations] == ["http://site"]


def test_duplicate_urls_first_label_wins():
    citations = extract_citations("[First](https://a.io) then [Second](https://a.io)")
    assert len(citations) == 1
    assert citations[0].title == "First"


def test_non_http_urls_are_ignored():
    text = "[mail](mailto:x@y.z) [rel](/local/path) [anchor](#top) [ok](https://ok.io)"
    assert [c.url for c in extract_citations(text)] == ["https://ok.io"]


def test_new_citations_start_unverified():
    (citation,) = extract_citations("[Doc](https://d.io)")
    assert citation.type is CitationType.EXTRACTED
    assert citation.status is CitationStatus.UNKNOWN
    assert citation.verified is False


def test_ids_are_positional_and_unique():
    text = "[a](https://1.io) [skip](ftp://x) [b](https://2.io) [a2](https://1.io) [c](https://3.io)"
    citations = extract_citations(text)
    assert [c.id for c in citations] == ["cit-0", "cit-1", "cit-2"]
    assert [c.url for c in citations] == ["https://1.io", "https://2.io", "https://3.io"]


def test_long_titles_are_truncated():
    title = "x" * 80
    (citation,) = extract_citations(f"[{title}](https://t.io)")
    assert citation.title == "x" * 70 + "..."


def test_title_at_limit_is_kept():
    assert truncate_title("y" * 70) == "y" * 70


def test_links_in_tables_and_lists_are_found(report_text):
    citations = extract_citations(report_text)
    assert [c.url for c in citations] == ["https://gartner.com/a", "https://forrester.com/b"]
    assert citations[0].title == "Gartner"


def test_empty_text():
    assert extract_citations("") == []
