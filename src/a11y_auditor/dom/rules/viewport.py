from typing import Dict, List

from ..core import RuleContext, audit_rule
from ..models import Node
from ...model import Severity, Violation


def _viewport_metas(ctx: RuleContext) -> List[Node]:
    return [
        meta for meta in ctx.document.find_all("meta")
        if (meta.get("name") or "").strip().lower() == "viewport"
    ]


def parse_viewport_content(content: str) -> Dict[str, str]:
    """Parses 'width=device-width, user-scalable=no' into lowercase key/value pairs."""
    directives = {}
    for part in content.replace(";", ",").split(","):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        directives[key.strip().lower()] = value.strip().lower()
    return directives


def restricts_zoom(content: str) -> bool:
    """
    True when the viewport disables user scaling or caps it at 1x
    (maximum-scale=1, maximum-scale=1.0, user-scalable=no).
    """
    directives = parse_viewport_content(content or "")
    if directives.get("user-scalable") in ("no", "0"):
        return True
    maximum = directives.get("maximum-scale")
    if maximum is None:
        return False
    try:
        return float(maximum) <= 1.0
    except ValueError:
        return False


@audit_rule("viewport-restricts-zoom", Severity.CRITICAL, "Viewport meta tag prevents users from zooming.")
def check_viewport_zoom(ctx: RuleContext) -> List[Violation]:
    offending = [m for m in _viewport_metas(ctx) if restricts_zoom(m.get("content"))]
    return ctx.violation(check_viewport_zoom, offending, "Viewport disables or caps user scaling")


@audit_rule("viewport-missing", Severity.MODERATE, "Document is missing a viewport meta tag.")
def check_viewport_present(ctx: RuleContext) -> List[Violation]:
    if not _viewport_metas(ctx):
        return ctx.document_violation(check_viewport_present)
    return []


RULES = [check_viewport_zoom, check_viewport_present]
