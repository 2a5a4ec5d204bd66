from typing import List

from ..core import RuleContext, audit_rule
from ...model import Severity, Violation


@audit_rule("image-alt", Severity.CRITICAL, "Image elements are missing alt attributes.")
def check_image_alt(ctx: RuleContext) -> List[Violation]:
    """An <img> needs an alt attribute that is not blank."""
    missing = [
        img for img in ctx.document.find_all("img")
        if not (img.get("alt") or "").strip()
    ]
    return ctx.violation(check_image_alt, missing, "Missing alt attribute")


@audit_rule("chart-alt", Severity.CRITICAL, "Charts or graphs are missing text alternatives.")
def check_chart_alt(ctx: RuleContext) -> List[Violation]:
    """Charts drawn with svg/canvas (or anything with role=img) need aria-label or aria-labelledby."""
    graphs = ctx.document.select("svg, canvas, [role='img']")
    missing = [
        el for el in graphs
        if not el.has_nonempty_attr("aria-label") and not el.has_nonempty_attr("aria-labelledby")
    ]
    return ctx.violation(check_chart_alt, missing, "Missing text alternative for chart/graph")


RULES = [check_image_alt, check_chart_alt]
