import asyncio
import logging
from typing import Any, Dict, Optional

from a11y_auditor.dom.builder import DOMBuilder
from a11y_auditor.dom.engine import AccessibilityEngine
from a11y_auditor.model import AuditReport
from a11y_auditor.services.external_audit_service import ExternalAuditService

logger = logging.getLogger(__name__)


class AuditController:
    """
    Orchestrates one analysis: parses the markup once, runs the rule set and,
    when requested, the external audit engine as a separate channel.

    The two channels are never merged or reconciled; they meet only in the
    AuditReport handed to the presentation layer.
    """

    def __init__(
            self,
            settings: Optional[Dict[str, Any]] = None,
            engine: Optional[AccessibilityEngine] = None,
            external_service: Optional[ExternalAuditService] = None
    ):
        self.settings = settings or {}
        engine_settings = self.settings.get("engine", {})
        self.parallel = bool(engine_settings.get("parallel", False))
        self.workers = int(engine_settings.get("workers", 4))

        self.builder = DOMBuilder()
        self.engine = engine or AccessibilityEngine(settings=self.settings.get("rules", {}), builder=self.builder)
        self.external_service = external_service

    def _external(self) -> ExternalAuditService:
        if self.external_service is None:
            self.external_service = ExternalAuditService.from_settings(self.settings.get("external_audit", {}))
        return self.external_service

    def analyze(self, html: Optional[str], external: bool = False) -> AuditReport:
        """
        Analyzes one document synchronously.

        Args:
            html (str): The raw markup.
            external (bool): Also run the external audit engine (blocks until it finishes).
        """
        if external:
            return asyncio.run(self.analyze_async(html, external=True))

        document = self.builder.parse_doc(html)
        violations = self.engine.run_audit(document, parallel=self.parallel, workers=self.workers)
        return AuditReport(violations=violations)

    async def analyze_async(self, html: Optional[str], external: bool = False) -> AuditReport:
        """
        Parses once, then runs the synchronous rule set in a worker thread while
        the external engine is awaited alongside it.
        """
        document = self.builder.parse_doc(html)
        loop = asyncio.get_running_loop()

        rules_future = loop.run_in_executor(
            None, lambda: self.engine.run_audit(document, parallel=self.parallel, workers=self.workers)
        )
        if not external:
            return AuditReport(violations=await rules_future)

        violations, external_result = await asyncio.gather(rules_future, self._external().run(document))
        return AuditReport(violations=violations, external=external_result)
