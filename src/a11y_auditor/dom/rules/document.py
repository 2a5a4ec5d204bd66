from typing import List

from ..core import RuleContext, audit_rule, group_duplicates
from ...model import Severity, Violation


# --- Document-level rules: these fire on absence and carry no nodes ---

@audit_rule("missing-title", Severity.CRITICAL, "Document is missing a non-empty <title> element.")
def check_title(ctx: RuleContext) -> List[Violation]:
    title = ctx.document.title
    if title is None or not title.text:
        return ctx.document_violation(check_title)
    return []


@audit_rule("missing-lang", Severity.CRITICAL, "The root element is missing a lang attribute.")
def check_lang(ctx: RuleContext) -> List[Violation]:
    root = ctx.document.root
    if root is None or not root.has_nonempty_attr("lang"):
        return ctx.document_violation(check_lang)
    return []


@audit_rule("duplicate-id", Severity.CRITICAL, "Element ids must be unique.")
def check_duplicate_ids(ctx: RuleContext) -> List[Violation]:
    """One violation per id value that appears on more than one element."""
    violations = []
    for value, nodes in group_duplicates(ctx.document, "id").items():
        violations.extend(ctx.violation(
            check_duplicate_ids,
            nodes,
            node_description=f"id=\"{value}\" is used {len(nodes)} times",
            description=f"ID '{value}' is used on more than one element."
        ))
    return violations


RULES = [check_title, check_lang, check_duplicate_ids]
