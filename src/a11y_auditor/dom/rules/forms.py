from typing import List

from ..core import RuleContext, audit_rule
from ...model import Severity, Violation

FORM_CONTROLS = ("input", "textarea", "select", "button")


@audit_rule("form-label", Severity.CRITICAL, "Form elements are missing associated labels.")
def check_form_labels(ctx: RuleContext) -> List[Violation]:
    """
    Rule: every form control needs a <label> (by `for` or by nesting),
    an aria-label or an aria-labelledby reference.
    """
    doc = ctx.document
    unlabeled = [
        el for el in doc.find_all(FORM_CONTROLS)
        if not doc.labels_for(el)
        and not el.has_nonempty_attr("aria-label")
        and not el.has_nonempty_attr("aria-labelledby")
    ]
    return ctx.violation(check_form_labels, unlabeled, "Form control is missing an associated label")


@audit_rule("fieldset-legend", Severity.MINOR, "Fieldsets are missing legends.")
def check_fieldset_legend(ctx: RuleContext) -> List[Violation]:
    doc = ctx.document
    missing = [fs for fs in doc.find_all("fieldset") if not doc.has_descendant(fs, "legend")]
    return ctx.violation(check_fieldset_legend, missing, "Fieldset is missing a legend")


RULES = [check_form_labels, check_fieldset_legend]
