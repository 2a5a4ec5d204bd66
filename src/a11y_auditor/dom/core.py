from typing import Dict, Any, List, Callable, Optional, Iterable, Sequence

from .models import Document, Node
from ..model import AffectedNode, Severity, Violation
from ..utils.contrast import ContrastCalculator
from ..utils.line_resolver import LineResolver


def audit_rule(rule_id: str, severity: Severity, description: str):
    """
    Decorator declaring the violation id, severity and description a rule produces.
    Facilitates auto-discovery and ordering by the RuleRegistry.

    For rules that derive their ids per offending group (e.g. duplicate-role-<role>),
    `rule_id` is the shared prefix.
    """
    def decorator(func):
        func.rule_id = rule_id
        func.severity = Severity(severity)
        func.description = description
        return func
    return decorator


class RuleDefinition:
    """
    Registry entry binding a rule id to its severity, description and evaluator.
    """

    def __init__(
            self,
            rule_id: str,
            severity: Severity,
            description: str,
            evaluator: Callable[['RuleContext'], List[Violation]],
            position: int = 0
    ):
        self.rule_id = rule_id
        self.severity = severity
        self.description = description
        self.evaluator = evaluator
        self.position = position

    @classmethod
    def from_function(cls, func: Callable, position: int = 0) -> 'RuleDefinition':
        return cls(func.rule_id, func.severity, func.description, func, position)

    def __call__(self, ctx: 'RuleContext') -> List[Violation]:
        return self.evaluator(ctx)

    def __repr__(self) -> str:
        return f"RuleDefinition({self.rule_id!r}, {self.severity.value!r}, position={self.position})"


class RuleContext:
    """
    Everything a rule may read: the shared document, the line resolver and the
    contrast calculator. Rules never mutate any of it.
    """

    def __init__(
            self,
            document: Document,
            resolver: Optional[LineResolver] = None,
            calculator: Optional[ContrastCalculator] = None,
            settings: Optional[Dict[str, Any]] = None
    ):
        self.document = document
        self.resolver = resolver or LineResolver(document.source)
        self.calculator = calculator or ContrastCalculator()
        self.settings = settings or {}

    def setting(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def affected(self, node: Node, description: Optional[str] = None) -> AffectedNode:
        return AffectedNode(
            element=node.outer_html,
            line=self.resolver.resolve(node),
            description=description
        )

    def violation(
            self,
            rule: Callable,
            nodes: Sequence[Node],
            node_description: Optional[str] = None,
            rule_id: Optional[str] = None,
            description: Optional[str] = None
    ) -> List[Violation]:
        """
        Builds the fragment for a rule: an empty list when nothing matched,
        otherwise a single Violation carrying the rule's metadata.
        """
        affected = [self.affected(n, node_description) for n in nodes]
        return self.fragment(rule, affected, rule_id=rule_id, description=description)

    def fragment(
            self,
            rule: Callable,
            affected: Sequence[AffectedNode],
            rule_id: Optional[str] = None,
            description: Optional[str] = None
    ) -> List[Violation]:
        """Wraps already-built AffectedNodes (e.g. with per-node descriptions) into a fragment."""
        if not affected:
            return []
        return [Violation(
            id=rule_id or rule.rule_id,
            description=description or rule.description,
            severity=rule.severity,
            nodes=list(affected)
        )]

    def document_violation(self, rule: Callable, description: Optional[str] = None) -> List[Violation]:
        """A document-level finding, carrying no affected nodes."""
        return [Violation(
            id=rule.rule_id,
            description=description or rule.description,
            severity=rule.severity,
            nodes=[]
        )]


def group_duplicates(
        document: Document,
        attribute: str,
        values: Optional[Iterable[str]] = None
) -> Dict[str, List[Node]]:
    """
    Groups nodes by the value of `attribute` and keeps the groups with more than
    one member. Blank values never form a group. Reads the document's attribute
    index, so no extra tree scan is made.

    Args:
        document: The parsed document.
        attribute: Attribute to group by (e.g. 'id', 'role').
        values: Restrict and order the groups to these values. When omitted,
                groups are ordered by the first occurrence in the document.
    """
    index = document.attribute_index.get(attribute, {})
    if values is not None:
        keys = [v for v in values if v in index]
    else:
        keys = sorted(index, key=lambda v: index[v][0].index)

    return {key: list(index[key]) for key in keys if key.strip() and len(index[key]) > 1}
