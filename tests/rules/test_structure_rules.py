"""Regels voor landmarks, koppen en dubbele rollen."""
from a11y_auditor.dom.rules.structure import skipped_headings


def test_landmark_without_role_or_label(find, html_page):
    html = html_page(
        '<nav class="top"></nav>\n'
        '<header role="banner" aria-label="Site"></header>\n'
        '<aside aria-label="Related"></aside>\n'
        '<footer class="bottom"></footer>'
    )
    (v,) = find(html, "landmark")
    assert [n.line for n in v.nodes] == [8, 11]


def test_headings_sequential_is_clean(find, html_page):
    html = html_page('<h1>A</h1>\n<h2>B</h2>\n<h3>C</h3>\n<h2>D</h2>\n<h2>E</h2>')
    assert find(html, "headings") == []


def test_heading_skip_is_reported(find, html_page):
    """Een sprong van h1 naar h3 wordt gemeld op de h3."""
    html = html_page('<h1>A</h1>\n<h3 id="c">C</h3>')
    (v,) = find(html, "headings")

    assert len(v.nodes) == 1
    assert v.nodes[0].line == 9
    assert v.nodes[0].description == "Heading level 3 follows level 1"


def test_first_heading_counts_from_zero(find, html_page):
    html = html_page('<h2 id="start">Start</h2>')
    (v,) = find(html, "headings")
    assert v.nodes[0].description == "Heading level 2 follows level 0"


def test_heading_fold_uses_previous_heading_not_maximum(builder):
    """Na een terugstap naar h2 is een h4 weer een sprong; na h3 is h4 dat niet."""
    doc = builder.parse_doc("<h1>a</h1><h2>b</h2><h3>c</h3><h2>d</h2><h4>e</h4><h1>f</h1><h3>g</h3><h4>h</h4>")
    headings = doc.find_all(("h1", "h2", "h3", "h4", "h5", "h6"))

    skipped = [(node.text, level, previous) for node, level, previous in skipped_headings(headings)]
    assert skipped == [("e", 4, 2), ("g", 3, 1)]


def test_duplicate_role_per_role(find, audit, html_page):
    """Elke unieke rol krijgt een eigen violation, in vaste rolvolgorde."""
    html = html_page(
        '<div role="main" aria-label="One">1</div>\n'
        '<div role="banner" aria-label="Top">b</div>\n'
        '<div role="main" aria-label="Two">2</div>\n'
        '<div role="banner" aria-label="Bottom">b</div>\n'
        '<div role="complementary" aria-label="A">c</div>\n'
        '<div role="complementary" aria-label="B">c</div>'
    )
    ids = [v.id for v in audit(html)]
    assert ids == ["duplicate-role-banner", "duplicate-role-main"]

    (main,) = find(html, "duplicate-role-main")
    assert main.severity == "moderate"
    assert [n.line for n in main.nodes] == [8, 10]


def test_single_role_is_not_a_duplicate(audit, html_page):
    html = html_page('<nav role="navigation" aria-label="Main">x</nav>')
    assert audit(html) == []


def test_unlabeled_landmark_roles(find, html_page):
    html = html_page(
        '<div role="contentinfo">Footer</div>\n'
        '<div role="complementary" aria-labelledby="h">Aside</div>\n'
        '<div role="search">Search</div>'
    )
    (v,) = find(html, "unlabeled-landmarks")
    assert [n.line for n in v.nodes] == [8]
