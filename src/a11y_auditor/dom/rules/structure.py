from typing import Iterable, Iterator, List, Tuple

from ..core import RuleContext, audit_rule, group_duplicates
from ..models import Node
from ...model import Severity, Violation

LANDMARK_TAGS = ("header", "main", "footer", "nav", "aside")
UNIQUE_ROLES = ("banner", "main", "navigation")
LANDMARK_ROLES = ("banner", "main", "navigation", "complementary", "contentinfo")
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


def _has_aria_name(node: Node) -> bool:
    return node.has_nonempty_attr("aria-label") or node.has_nonempty_attr("aria-labelledby")


@audit_rule("table-headers", Severity.CRITICAL, "Data tables are missing header cells.")
def check_table_headers(ctx: RuleContext) -> List[Violation]:
    doc = ctx.document
    missing = [t for t in doc.find_all("table") if not doc.has_descendant(t, "th")]
    return ctx.violation(check_table_headers, missing, "Table is missing header cells")


@audit_rule("landmark", Severity.MODERATE, "Landmark regions are missing proper roles or labels.")
def check_landmarks(ctx: RuleContext) -> List[Violation]:
    incorrect = [
        el for el in ctx.document.find_all(LANDMARK_TAGS)
        if not el.has_nonempty_attr("role") and not el.has_nonempty_attr("aria-label")
    ]
    return ctx.violation(check_landmarks, incorrect, "Landmark is missing role or label")


def skipped_headings(headings: Iterable[Node]) -> Iterator[Tuple[Node, int, int]]:
    """
    Folds over headings in document order, carrying the previous level
    (starting at 0), and yields (node, level, previous) for every heading that
    jumps more than one level deeper.
    """
    previous = 0
    for heading in headings:
        level = int(heading.tag[1])
        if level > previous + 1:
            yield heading, level, previous
        previous = level


@audit_rule("headings", Severity.MODERATE, "Heading levels should only increase by one.")
def check_heading_order(ctx: RuleContext) -> List[Violation]:
    affected = [
        ctx.affected(heading, f"Heading level {level} follows level {previous}")
        for heading, level, previous in skipped_headings(ctx.document.find_all(HEADING_TAGS))
    ]
    return ctx.fragment(check_heading_order, affected)


@audit_rule("duplicate-role", Severity.MODERATE, "Landmark roles that must be unique are used more than once.")
def check_duplicate_roles(ctx: RuleContext) -> List[Violation]:
    """One violation per unique-by-convention role that appears on several elements."""
    violations = []
    for role, nodes in group_duplicates(ctx.document, "role", UNIQUE_ROLES).items():
        violations.extend(ctx.violation(
            check_duplicate_roles,
            nodes,
            node_description=f"role=\"{role}\" is used {len(nodes)} times",
            rule_id=f"duplicate-role-{role}",
            description=f"Landmark role '{role}' is used more than once."
        ))
    return violations


@audit_rule("unlabeled-landmarks", Severity.MODERATE, "Landmark roles should have an accessible label.")
def check_unlabeled_landmarks(ctx: RuleContext) -> List[Violation]:
    selector = ", ".join(f"[role='{role}']" for role in LANDMARK_ROLES)
    unlabeled = [el for el in ctx.document.select(selector) if not _has_aria_name(el)]
    return ctx.violation(check_unlabeled_landmarks, unlabeled, "Landmark has no aria-label or aria-labelledby")


RULES = [
    check_table_headers,
    check_landmarks,
    check_heading_order,
    check_duplicate_roles,
    check_unlabeled_landmarks,
]
