# src/a11y_auditor/dom/engine.py
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Tuple, Union

from .builder import DOMBuilder
from .core import RuleContext, RuleDefinition
from .models import Document
from .registry import RuleRegistry
from ..model import Violation
from ..utils.contrast import ContrastCalculator, DEFAULT_THRESHOLD
from ..utils.line_resolver import LineResolver

logger = logging.getLogger(__name__)


class AccessibilityEngine:
    """
    Runs the full, ordered rule set over one parsed document.

    Every rule runs regardless of what earlier rules found; fragments are
    concatenated in declaration order. The engine keeps no state between
    runs, so analyzing the same input twice yields identical output.
    """

    def __init__(
            self,
            settings: Optional[Dict[str, Any]] = None,
            rules: Optional[List[RuleDefinition]] = None,
            builder: Optional[DOMBuilder] = None
    ):
        """
        Args:
            settings: The 'rules' section of the configuration
                      (contrast_threshold, default_background, ...).
            rules: Explicit rule list; defaults to everything the RuleRegistry discovers.
            builder: DOMBuilder used when raw text is passed to run_audit.
        """
        self.settings = settings or {}
        self.rules = rules if rules is not None else RuleRegistry.get_all_rules()
        self.builder = builder or DOMBuilder()

    def _context(self, document: Document) -> RuleContext:
        threshold = float(self.settings.get("contrast_threshold", DEFAULT_THRESHOLD))
        return RuleContext(
            document,
            resolver=LineResolver(document.source),
            calculator=ContrastCalculator(threshold),
            settings=self.settings
        )

    def _run_rule(self, rule: RuleDefinition, ctx: RuleContext) -> List[Violation]:
        start = time.perf_counter()
        try:
            fragment = rule(ctx)
        except Exception as e:
            # A broken rule must not take the rest of the battery down with it
            logger.error(f"Rule '{rule.rule_id}' failed: {e}", exc_info=True)
            return []
        logger.debug(
            f"Rule '{rule.rule_id}': {len(fragment)} violation(s) in {time.perf_counter() - start:.4f}s"
        )
        return fragment

    def run_audit(
            self,
            source: Union[str, Document, None],
            parallel: bool = False,
            workers: int = 4
    ) -> List[Violation]:
        """
        Runs every registered rule over `source`.

        Args:
            source: Raw markup, or a Document already built by DOMBuilder.
            parallel: Evaluate rules on a thread pool. Results are re-sorted into
                      declaration order before concatenation.
            workers: Thread pool size when `parallel` is set.

        Returns:
            List[Violation]: Ordered by rule, then by node discovery order.
        """
        if isinstance(source, Document):
            document = source
        elif source is None or isinstance(source, str):
            document = self.builder.parse_doc(source)
        else:
            raise TypeError(f"run_audit expects markup text or a Document, got {type(source).__name__}")

        ctx = self._context(document)

        if parallel and len(self.rules) > 1:
            fragments = self._run_parallel(ctx, workers)
        else:
            fragments = [self._run_rule(rule, ctx) for rule in self.rules]

        violations = [violation for fragment in fragments for violation in fragment]
        logger.info(f"Audit finished: {len(violations)} violation(s) from {len(self.rules)} rules.")
        return violations

    def _run_parallel(self, ctx: RuleContext, workers: int) -> List[List[Violation]]:
        results: List[Tuple[int, List[Violation]]] = []
        with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
            futures = {
                executor.submit(self._run_rule, rule, ctx): position
                for position, rule in enumerate(self.rules)
            }
            for future in as_completed(futures):
                results.append((futures[future], future.result()))

        # Completion order is arbitrary; the output contract is declaration order
        results.sort(key=lambda pair: pair[0])
        return [fragment for _, fragment in results]
