# src/a11y_auditor/services/external_audit_service.py
import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from ..dom.models import Document
from ..model import ExternalAuditResult

logger = logging.getLogger(__name__)

DEFAULT_AXE_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"


class ExternalAuditEngine(Protocol):
    """A general-purpose audit engine whose output shape is opaque to the rule set."""
    name: str

    async def audit(self, document: Document) -> List[Dict[str, Any]]:
        ...


class AxePlaywrightEngine:
    """
    Runs axe-core against the document inside headless Chromium.

    The document source is loaded with `page.set_content`, axe-core is injected
    from `script_url` and `axe.run(document)` is evaluated in the page. The
    returned violations are passed through untouched.
    Requires the `playwright` package and an installed Chromium
    (`python -m playwright install chromium`).
    """
    name = "axe-core"

    def __init__(self, script_url: str = DEFAULT_AXE_URL, run_options: Optional[Dict[str, Any]] = None):
        self.script_url = script_url
        self.run_options = run_options or {}

    async def audit(self, document: Document) -> List[Dict[str, Any]]:
        from playwright.async_api import async_playwright

        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            try:
                page = await browser.new_page()
                await page.set_content(document.source or "", wait_until="domcontentloaded")
                await page.add_script_tag(url=self.script_url)
                results = await page.evaluate(
                    "async (options) => await axe.run(document, options)",
                    self.run_options
                )
            finally:
                await browser.close()

        return list(results.get("violations", []))


class ExternalAuditService:
    """
    Awaits an external audit engine in isolation from the synchronous rule set.

    Every failure (timeout, missing library or browser, engine error) is logged
    and turned into an unsuccessful ExternalAuditResult; it never propagates
    into the primary output. Cancellation is not swallowed: a cancelled audit
    simply has no result.
    """

    def __init__(self, engine: ExternalAuditEngine, timeout: float = 30.0):
        self.engine = engine
        self.timeout = timeout

    async def run(self, document: Document) -> ExternalAuditResult:
        name = getattr(self.engine, "name", type(self.engine).__name__)
        try:
            violations = await asyncio.wait_for(self.engine.audit(document), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"External audit '{name}' timed out after {self.timeout}s")
            return ExternalAuditResult(engine=name, success=False, error=f"Timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(f"External audit '{name}' failed: {e}", exc_info=True)
            return ExternalAuditResult(engine=name, success=False, error=f"{type(e).__name__}: {e}")

        logger.info(f"External audit '{name}' returned {len(violations)} violation(s)")
        return ExternalAuditResult(engine=name, success=True, violations=violations)

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'ExternalAuditService':
        """Builds the axe-core backed service from the 'external_audit' config section."""
        engine = AxePlaywrightEngine(
            script_url=settings.get("axe_script_url", DEFAULT_AXE_URL),
            run_options=settings.get("run_options")
        )
        return cls(engine, timeout=float(settings.get("timeout", 30)))
