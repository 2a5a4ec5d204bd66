import re
from typing import List, Optional

from ..core import RuleContext, audit_rule
from ..models import Node
from ...model import AffectedNode, Severity, Violation

FOCUSABLE_SELECTOR = "a, button, input, textarea, select, [tabindex]"
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def _has_aria_name(node: Node) -> bool:
    return node.has_nonempty_attr("aria-label") or node.has_nonempty_attr("aria-labelledby")


def _parse_tabindex(value: Optional[str]) -> Optional[int]:
    """Leading integer of the value, as browsers parse it ("5abc" is 5, "abc" is invalid)."""
    match = _LEADING_INTEGER.match(value or "")
    return int(match.group(1)) if match else None


@audit_rule("link-name", Severity.CRITICAL, "Links must have discernible text.")
def check_link_names(ctx: RuleContext) -> List[Violation]:
    """
    Flags anchors without text and without aria-label, and anchors whose
    href is a bare '#'.
    """
    affected: List[AffectedNode] = []
    for link in ctx.document.find_all("a"):
        if link.get("href") == "#":
            affected.append(ctx.affected(link, "Link href is '#'"))
        elif not link.text and not link.has_nonempty_attr("aria-label"):
            affected.append(ctx.affected(link, "Link has no discernible text"))

    return ctx.fragment(check_link_names, affected)


@audit_rule("focusable-name", Severity.CRITICAL, "Focusable elements must have an accessible name.")
def check_focusable_names(ctx: RuleContext) -> List[Violation]:
    unnamed = [
        el for el in ctx.document.select(FOCUSABLE_SELECTOR)
        if not el.text and not _has_aria_name(el)
    ]
    return ctx.violation(check_focusable_names, unnamed, "Focusable element has no accessible name")


@audit_rule("high-tabindex", Severity.MODERATE, "Elements should not use a tabindex greater than zero.")
def check_high_tabindex(ctx: RuleContext) -> List[Violation]:
    """Positive tabindex values override the natural focus order. Unparseable values are ignored."""
    affected: List[AffectedNode] = []
    for el in ctx.document.select(FOCUSABLE_SELECTOR):
        tabindex = _parse_tabindex(el.get("tabindex"))
        if tabindex is not None and tabindex > 0:
            affected.append(ctx.affected(el, f"tabindex={tabindex}"))

    return ctx.fragment(check_high_tabindex, affected)


@audit_rule("iframe-title", Severity.CRITICAL, "Frames must have a title attribute.")
def check_iframe_title(ctx: RuleContext) -> List[Violation]:
    untitled = [f for f in ctx.document.find_all("iframe") if not f.has_nonempty_attr("title")]
    return ctx.violation(check_iframe_title, untitled, "Frame is missing a title")


@audit_rule("empty-links-buttons", Severity.CRITICAL, "Links and buttons must not be empty.")
def check_empty_links_buttons(ctx: RuleContext) -> List[Violation]:
    empty = [
        el for el in ctx.document.find_all(("a", "button"))
        if not el.text and not _has_aria_name(el)
    ]
    return ctx.violation(check_empty_links_buttons, empty, "Element has no content and no aria label")


RULES = [
    check_link_names,
    check_focusable_names,
    check_high_tabindex,
    check_iframe_title,
    check_empty_links_buttons,
]
