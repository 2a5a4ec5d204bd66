import pytest

from a11y_auditor.utils.contrast import (
    ContrastCalculator,
    contrast_ratio,
    parse_color,
    relative_luminance,
)

BLACK = (0.0, 0.0, 0.0)
WHITE = (1.0, 1.0, 1.0)


def test_black_on_white_is_maximum_ratio():
    """Zwart op wit hoort de maximale verhouding van 21:1 op te leveren."""
    assert contrast_ratio(BLACK, WHITE) == pytest.approx(21.0, abs=0.01)


def test_ratio_is_symmetric():
    """De volgorde van voor- en achtergrond maakt voor de verhouding niet uit."""
    grey = (119 / 255,) * 3
    assert contrast_ratio(grey, WHITE) == pytest.approx(contrast_ratio(WHITE, grey))


def test_identical_colours_have_ratio_one():
    colour = (0.1, 0.5, 0.9)
    assert contrast_ratio(colour, colour) == pytest.approx(1.0)


def test_relative_luminance_bounds():
    assert relative_luminance(BLACK) == pytest.approx(0.0)
    assert relative_luminance(WHITE) == pytest.approx(1.0)


@pytest.mark.parametrize("text, expected", [
    ("rgb(255, 0, 0)", (1.0, 0.0, 0.0, 1.0)),
    ("rgb(0 51 255)", (0.0, 0.2, 1.0, 1.0)),
    ("rgba(255, 255, 255, 0.5)", (1.0, 1.0, 1.0, 0.5)),
    ("rgb(100%, 50%, 0%)", (1.0, 0.5, 0.0, 1.0)),
    ("#fff", (1.0, 1.0, 1.0, 1.0)),
    ("#000000", (0.0, 0.0, 0.0, 1.0)),
    ("#ff000033", (1.0, 0.0, 0.0, 0.2)),
    ("White", (1.0, 1.0, 1.0, 1.0)),
    ("  black  ", (0.0, 0.0, 0.0, 1.0)),
])
def test_parse_color_formats(text, expected):
    """Ondersteunde kleurnotaties worden naar genormaliseerde kanalen vertaald."""
    assert tuple(parse_color(text)) == pytest.approx(expected)


@pytest.mark.parametrize("text", [None, "", "notacolor", "rgb(1, 2)", "#12", "hsl(0, 0%, 0%)"])
def test_parse_color_rejects_unknown_input(text):
    assert parse_color(text) is None


def test_transparent_is_recognised():
    colour = parse_color("transparent")
    assert colour is not None
    assert colour.is_transparent


def test_calculator_ratio_and_threshold():
    """#777 op wit zit net onder 4.5:1, #767676 er net boven."""
    calc = ContrastCalculator()
    low = calc.ratio("#777777", "#ffffff")
    ok = calc.ratio("#767676", "rgb(255, 255, 255)")

    assert low == pytest.approx(4.48, abs=0.01)
    assert not calc.passes(low)
    assert calc.passes(ok)


def test_calculator_returns_none_for_unparseable_colour():
    assert ContrastCalculator().ratio("bogus", "#fff") is None


def test_calculator_custom_threshold():
    calc = ContrastCalculator(threshold=3.0)
    assert calc.passes(calc.ratio("#777777", "#ffffff"))
