from arisa.services.html_extract import clean_text, parse_html


def test_clean_text_collapses_whitespace_and_thin_spaces():
    assert clean_text("  Closed\u2009/\u2009Delivered \n\t ok ") == "Closed/Delivered ok"


def test_unclosed_paragraphs_and_list_items_become_siblings():
    doc = parse_html("<div><p>one<p>two</div><ul><li>a<li>b</ul>")
    paragraphs = doc.find_all("p")
    assert [p.clean_text() for p in paragraphs] == ["one", "two"]
    assert [li.clean_text() for li in doc.find_all("li")] == ["a", "b"]


def test_find_by_class_and_id():
    doc = parse_html('<table class="head big"><tr><td id="x">1</td></tr></table><table><tr><td>2</td></tr></table>')
    assert len(doc.find_all("table", class_="head")) == 1
    assert doc.find_by_id("x").text() == "1"
    assert doc.find_by_id("missing") is None


def test_adjacent_chain_skips_text_nodes():
    doc = parse_html('<h2 id="M">M</h2>\n<h3>sub</h3>\n<p>body</p>')
    heading = doc.find_by_id("M")
    assert heading.adjacent("h3", "p").text() == "body"
    assert heading.adjacent("p") is None


def test_void_tags_and_hrefs():
    doc = parse_html('<td>see<br><a href="https://bugs.openjdk.org/browse/JDK-1">1</a><img src="x"></td>')
    cell = doc.find("td")
    assert cell.hrefs() == ["https://bugs.openjdk.org/browse/JDK-1"]
    assert cell.clean_text() == "see1"
