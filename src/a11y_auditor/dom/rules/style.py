import logging
from typing import List

from ..core import RuleContext, audit_rule
from ...model import AffectedNode, Severity, Violation
from ...utils.contrast import parse_color

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = "rgb(255, 255, 255)"


@audit_rule("contrast", Severity.MODERATE, "Text contrast is below WCAG recommended levels.")
def check_contrast(ctx: RuleContext) -> List[Violation]:
    """
    Compares every element with a resolvable foreground colour against its
    effective background (nearest declared ancestor background, else white).

    Styles are declared values only, so this runs on an approximation of the
    rendered page. Nodes with unparseable colours are skipped.
    """
    doc = ctx.document
    default_bg = ctx.setting("default_background", DEFAULT_BACKGROUND)
    affected: List[AffectedNode] = []

    for node in doc.nodes:
        fg = node.computed_style("color")
        fg_color = parse_color(fg)
        if fg_color is None or fg_color.is_transparent:
            continue

        bg = doc.effective_background(node, default_bg)
        ratio = ctx.calculator.ratio(fg, bg)
        if ratio is None:
            logger.debug(f"Skipping contrast check for <{node.tag}>: unparseable colours {fg!r} / {bg!r}")
            continue

        if not ctx.calculator.passes(ratio):
            affected.append(ctx.affected(node, f"Low text contrast ({ratio:.2f}:1)"))

    return ctx.fragment(check_contrast, affected)


def _restricts_zoom(value: str) -> bool:
    value = value.strip().lower()
    if value == "100%":
        return True
    try:
        return float(value) == 1.0
    except ValueError:
        return False


# Checked on the document body only, not on every element.
_ZOOM_CHECKS = (
    ("zoom", _restricts_zoom),
    ("text-size-adjust", lambda v: v.strip().lower() == "none"),
)


@audit_rule("css-zoom-restriction", Severity.MODERATE, "Page styles restrict text resizing.")
def check_css_zoom(ctx: RuleContext) -> List[Violation]:
    """One violation per offending property on the body's declared style."""
    body = ctx.document.body
    if body is None:
        return []

    violations = []
    for prop, restricts in _ZOOM_CHECKS:
        value = body.computed_style(prop)
        if value is None or not restricts(value):
            continue
        violations.extend(ctx.violation(
            check_css_zoom,
            [body],
            node_description=f"{prop}: {value}",
            description=f"Body style '{prop}: {value}' restricts text resizing."
        ))
    return violations


RULES = [check_contrast, check_css_zoom]
