# src/a11y_auditor/dom/registry.py
import importlib
import pkgutil
import logging
from typing import List, Callable

from .core import RuleDefinition

logger = logging.getLogger(__name__)

# Fixed evaluation order. Output ordering is part of the contract, so rules are
# sorted by this list rather than by discovery order.
DECLARATION_ORDER = (
    "image-alt",
    "form-label",
    "contrast",
    "chart-alt",
    "table-headers",
    "fieldset-legend",
    "landmark",
    "headings",
    "link-name",
    "focusable-name",
    "missing-title",
    "missing-lang",
    "high-tabindex",
    "duplicate-role",
    "iframe-title",
    "empty-links-buttons",
    "duplicate-id",
    "media-alternatives",
    "unlabeled-landmarks",
    "viewport-restricts-zoom",
    "viewport-missing",
    "css-zoom-restriction",
)


class RuleRegistry:
    """
    Central registry for audit rules.

    Dynamically discovers the modules in the 'a11y_auditor.dom.rules' package,
    collects the functions listed in their `RULES` attribute and orders them by
    DECLARATION_ORDER. Rules with an id outside that list are appended after it
    in discovery order, so the set stays open for extension.
    """

    _rules: List[RuleDefinition] = []
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """Imports every rule module once and builds the ordered rule list."""
        if cls._loaded:
            return

        import a11y_auditor.dom.rules as rules_pkg

        found: List[Callable] = []
        for _, name, _ in sorted(pkgutil.iter_modules(rules_pkg.__path__), key=lambda m: m.name):
            full_name = f"a11y_auditor.dom.rules.{name}"
            module = importlib.import_module(full_name)
            for func in getattr(module, "RULES", []):
                if not hasattr(func, "rule_id"):
                    logger.warning(f"Ignoring {full_name}.{func.__name__}: not decorated with @audit_rule")
                    continue
                found.append(func)
            logger.debug(f"Rule module loaded: {name}")

        cls._rules = cls.order(found)
        cls._loaded = True

    @staticmethod
    def order(functions: List[Callable]) -> List[RuleDefinition]:
        """Wraps rule functions in RuleDefinitions sorted by the declaration order."""
        known = {rule_id: i for i, rule_id in enumerate(DECLARATION_ORDER)}
        indexed = [
            (known.get(func.rule_id, len(known) + i), func)
            for i, func in enumerate(functions)
        ]
        return [
            RuleDefinition.from_function(func, position)
            for position, (_, func) in enumerate(sorted(indexed, key=lambda pair: pair[0]))
        ]

    @classmethod
    def get_all_rules(cls) -> List[RuleDefinition]:
        """Returns the ordered list of registered rules."""
        cls.discover()
        return list(cls._rules)

    @classmethod
    def get_all_rule_ids(cls) -> List[str]:
        """Rule ids in evaluation order (prefix ids for rules that derive per-group ids)."""
        cls.discover()
        return [rule.rule_id for rule in cls._rules]
