"""Regels voor afbeeldingen, grafieken, formulieren, tabellen en media."""
from a11y_auditor.dom.engine import AccessibilityEngine
from a11y_auditor.model import Severity


def test_clean_page_has_no_violations(audit, html_page):
    """Het basisdocument uit conftest mag zelf niets rapporteren."""
    assert audit(html_page("<p>Hello</p>")) == []


def test_image_without_alt(find, html_page):
    violations = find(html_page('<img src="a.png">'), "image-alt")

    assert len(violations) == 1
    v = violations[0]
    assert v.severity == Severity.CRITICAL.value
    assert len(v.nodes) == 1
    assert v.nodes[0].line == 8
    assert 'src="a.png"' in v.nodes[0].element
    assert v.nodes[0].description == "Missing alt attribute"


def test_image_alt_blank_or_present(find, html_page):
    """Een lege of alleen-spaties alt telt als ontbrekend; een echte alt niet."""
    html = html_page('<img src="a.png" alt="   ">\n<img src="b.png" alt="Logo">\n<img src="c.png" alt="">')
    (v,) = find(html, "image-alt")
    assert [n.line for n in v.nodes] == [8, 10]


def test_image_alt_only_rule_that_fires(audit, html_page):
    assert [v.id for v in audit(html_page('<img src="a.png">'))] == ["image-alt"]


def test_chart_alt(find, html_page):
    html = html_page(
        '<svg></svg>\n'
        '<canvas aria-label="Sales per month"></canvas>\n'
        '<div role="img"></div>\n'
        '<canvas aria-labelledby="caption"></canvas>'
    )
    (v,) = find(html, "chart-alt")
    assert [n.line for n in v.nodes] == [8, 10]


def test_form_label_associations(find, html_page):
    """Label via for, via nesting en via aria tellen; een kale textarea niet."""
    html = html_page(
        '<label for="name">Name</label>\n'
        '<input id="name" type="text">\n'
        '<label>Email <input type="email"></label>\n'
        '<input type="search" aria-label="Search">\n'
        '<select aria-labelledby="lbl"><option>A</option></select>\n'
        '<textarea></textarea>'
    )
    (v,) = find(html, "form-label")
    assert len(v.nodes) == 1
    assert v.nodes[0].element.startswith("<textarea")
    assert v.nodes[0].line == 13


def test_label_for_another_id_does_not_count(find, html_page):
    html = html_page('<label for="other">Name</label>\n<input id="name" type="text">')
    (v,) = find(html, "form-label")
    assert v.nodes[0].line == 9


def test_table_headers(find, html_page):
    html = html_page(
        '<table><tr><td>1</td></tr></table>\n'
        '<table><tr><th>Head</th></tr><tr><td>2</td></tr></table>'
    )
    (v,) = find(html, "table-headers")
    assert len(v.nodes) == 1
    assert v.nodes[0].line == 8


def test_fieldset_legend_is_minor(find, html_page):
    html = html_page(
        '<fieldset><legend>Address</legend></fieldset>\n'
        '<fieldset class="contact"><input aria-label="City"></fieldset>'
    )
    (v,) = find(html, "fieldset-legend")
    assert v.severity == "minor"
    assert [n.line for n in v.nodes] == [9]


def test_media_alternatives(find, html_page):
    html = html_page(
        '<video src="a.mp4"><track kind="captions" src="a.vtt"></video>\n'
        '<audio src="b.mp3"></audio>\n'
        '<video src="c.mp4" aria-describedby="desc"></video>\n'
        '<video src="d.mp4"><track kind="subtitles" src="d.vtt"></video>'
    )
    (v,) = find(html, "media-alternatives")
    assert [n.line for n in v.nodes] == [9, 11]


def test_contrast_low_on_default_white(find, html_page):
    html = html_page('<p style="color: #777777">Grey</p>\n<p style="color: rgb(0, 0, 0)">Black</p>')
    (v,) = find(html, "contrast")
    assert v.severity == "moderate"
    assert len(v.nodes) == 1
    assert v.nodes[0].description == "Low text contrast (4.48:1)"


def test_contrast_uses_ancestor_background(find, html_page):
    """Donkere tekst op een donkere ouder-achtergrond wordt gevonden."""
    html = html_page(
        '<div style="background-color: #000000">\n'
        '<span style="color: #111111">dark</span>\n'
        '<span style="color: #ffffff">light</span>\n'
        '</div>'
    )
    (v,) = find(html, "contrast")
    assert [n.line for n in v.nodes] == [9]


def test_contrast_from_stylesheet(find, html_page):
    head = '<title>T</title>\n<meta name="viewport" content="width=device-width">\n' \
           '<style>.faint { color: #aaaaaa; }</style>'
    html = html_page('<p class="faint">x</p>', head=head)
    (v,) = find(html, "contrast")
    assert 'class="faint"' in v.nodes[0].element


def test_contrast_skips_unparseable_colours(find, html_page):
    html = html_page('<p style="color: var(--brand)">x</p>\n<p style="color: transparent">y</p>')
    assert find(html, "contrast") == []


def test_contrast_respects_default_background_setting(html_page):
    html = html_page('<p style="color: #ffffff">white</p>')
    on_white = AccessibilityEngine().run_audit(html)
    on_black = AccessibilityEngine(settings={"default_background": "#000000"}).run_audit(html)

    assert "contrast" in [v.id for v in on_white]
    assert "contrast" not in [v.id for v in on_black]
