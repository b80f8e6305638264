from image_reference import (
    ImageReference,
    SyntaxKind,
    extract_html_reference,
    extract_markdown_reference,
    extract_references,
)


def test_html_tag_with_all_attributes():
    line = 'Intro <img src="http://x/y/cat.png" alt="Cat" width="200" /> outro'
    reference = extract_html_reference(line)

    assert reference.syntax_kind is SyntaxKind.HTML_TAG
    assert reference.source_locator == "http://x/y/cat.png"
    assert reference.alt_text == "Cat"
    assert reference.width == "200"
    assert reference.raw_match == '<img src="http://x/y/cat.png" alt="Cat" width="200" />'


def test_html_attribute_order_does_not_matter():
    reference = extract_html_reference('<img width="50" alt="Dog" src="static/dog.jpg">')

    assert reference.source_locator == "static/dog.jpg"
    assert reference.alt_text == "Dog"
    assert reference.width == "50"
    assert reference.raw_match == '<img width="50" alt="Dog" src="static/dog.jpg">'


def test_html_tag_without_src_is_malformed():
    reference = extract_html_reference('<img alt="nothing here" />')

    assert reference is not None
    assert reference.source_locator is None
    assert reference.is_malformed


def test_html_empty_alt_is_treated_as_missing():
    reference = extract_html_reference('<img src="a.png" alt="" />')

    assert reference.alt_text is None
    assert reference.render("images/a.png") == '<img src="images/a.png" />'


def test_html_render_keeps_alt_and_width():
    reference = extract_html_reference('<img alt="Cat" src="cat.png" width="200">')

    assert reference.render("images/cat.png") == '<img src="images/cat.png" alt="Cat" width="200" />'


def test_markdown_image():
    reference = extract_markdown_reference("See ![A chart](static/chart.png) above")

    assert reference.syntax_kind is SyntaxKind.MARKDOWN_INLINE
    assert reference.source_locator == "static/chart.png"
    assert reference.alt_text == "A chart"
    assert reference.width is None
    assert reference.raw_match == "![A chart](static/chart.png)"
    assert reference.render("images/chart.png") == "![A chart](images/chart.png)"


def test_markdown_empty_alt():
    reference = extract_markdown_reference("![](pic.png)")

    assert reference.alt_text == ""
    assert reference.render("images/pic.png") == "![](images/pic.png)"


def test_markdown_without_locator_is_not_an_image():
    assert extract_markdown_reference("![alt]()") is None


def test_only_first_occurrence_per_syntax():
    reference = extract_markdown_reference("![one](a.png) and ![two](b.png)")

    assert reference.source_locator == "a.png"


def test_plain_link_is_not_an_image():
    assert extract_references("A [link](http://example.com) and text") == []


def test_both_syntaxes_on_one_line():
    references = extract_references('<img src="a.png" /> ![b](b.png)')

    assert [r.syntax_kind for r in references] == [SyntaxKind.HTML_TAG, SyntaxKind.MARKDOWN_INLINE]
    assert [r.source_locator for r in references] == ["a.png", "b.png"]


def test_markdown_render_without_alt_text():
    reference = ImageReference(SyntaxKind.MARKDOWN_INLINE, "x.png", None, None, "![](x.png)")

    assert reference.render("images/x.png") == "![](images/x.png)"
