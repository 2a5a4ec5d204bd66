# src/a11y_shell/core/handlers/audit_handler.py
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd
from tqdm.auto import tqdm

from a11y_auditor.controllers.audit_controller import AuditController
from a11y_auditor.controllers.report_controller import ReportController
from a11y_auditor.model import AuditReport, Severity
from a11y_shell.core.managers.config_manager import config_manager, get_nested, set_nested
from a11y_shell.core.utils.configure_logging import configure_from_settings
from a11y_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

SEVERITY_RANK = {s.value: rank for rank, s in enumerate(Severity)}

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_VIOLATIONS = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="a11y-audit",
        description="Heuristic accessibility audit of HTML documents."
    )
    parser.add_argument("inputs", nargs="+", help="HTML file(s) to audit, or '-' to read stdin.")
    parser.add_argument(
        "--format", "-f", choices=["text", "json", "summary"], default="text",
        help="Console output format."
    )
    parser.add_argument(
        "--export", "-o", default=None,
        help="Write the report to a .txt/.csv/.json/.xlsx file (relative paths go to Documents)."
    )
    parser.add_argument("--axe", action="store_true", help="Also run axe-core through Playwright.")
    parser.add_argument("--parallel", action="store_true", help="Evaluate rules on a thread pool.")
    parser.add_argument(
        "--fail-on", choices=[s.value for s in Severity], default=None,
        help="Exit with code 2 when a violation of this severity (or worse) is found."
    )
    parser.add_argument("--config", default=None, help="JSON settings file layered over the defaults.")
    parser.add_argument(
        "--set", action="append", default=[], metavar="KEY=VALUE", dest="overrides",
        help="Override one setting for this run, e.g. rules.contrast_threshold=3 (repeatable)."
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    return parser


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8", errors="replace")


def _print_report(name: str, report: AuditReport, fmt: str, snippet_length: Optional[int]) -> None:
    controller = ReportController(report, snippet_length=snippet_length)

    if fmt == "json":
        print(json.dumps({"input": name, **report.to_dict()}, indent=2))
        return

    print(f"\n📄 {name}")
    print("-" * 60)
    if not report.violations:
        print("  ✅ No violations found.")
    elif fmt == "summary":
        table = pd.DataFrame(controller.summary_rows())
        print(table.to_string(index=False))
        severities = ", ".join(f"{sev}: {count}" for sev, count in controller.counts_by_severity().items())
        print(f"\n  Nodes per severity: {severities}")
    else:
        for violation in report.violations:
            # Document-level findings carry no nodes but are still listed in order
            lines = controller.node_lines(violation) or [
                f"{violation.id} / {violation.description} / {violation.severity} / Nodes: -"
            ]
            for line in lines:
                print(f"  {line}")

    if report.external is not None:
        external = report.external
        if external.success:
            print(f"\n  🔎 {external.engine}: {len(external.violations)} violation(s)")
            for rec in controller.recommendations():
                print(f"    - {rec['id']}: {rec['help']}")
        else:
            print(f"\n  ⚠️ {external.engine} did not complete: {external.error}")


def _worst_rank(report: AuditReport) -> Optional[int]:
    ranks = [SEVERITY_RANK[v.severity] for v in report.violations]
    return min(ranks) if ranks else None


def handle_audit(args: List[str]) -> int:
    """
    Handler for the audit command.

    Returns:
        0 on success, 1 on usage or IO errors, 2 when --fail-on is triggered.
    """
    parser = build_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return EXIT_OK if e.code == 0 else EXIT_ERROR

    # Per-run copy: --config, --set and --parallel never change the shared configuration
    settings = config_manager.snapshot(parsed_args.config)
    if settings is None:
        print(f"❌ Could not load settings file: {parsed_args.config}")
        return EXIT_ERROR

    for assignment in parsed_args.overrides:
        key_path, sep, value = assignment.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        if not sep or not key_path.strip() or not set_nested(settings, key_path.strip(), value):
            print(f"❌ Invalid --set value: {assignment}")
            return EXIT_ERROR

    configure_from_settings(settings, parsed_args.log_level)

    if parsed_args.export and len(parsed_args.inputs) > 1:
        print("❌ --export needs exactly one input file.")
        return EXIT_ERROR

    if parsed_args.parallel:
        set_nested(settings, "engine.parallel", True)

    controller = AuditController(settings=settings)
    run_external = parsed_args.axe or bool(get_nested(settings, "external_audit.enabled", False))
    snippet_length = get_nested(settings, "report.snippet_length")

    results: List[Tuple[str, AuditReport]] = []
    for name in tqdm(parsed_args.inputs, desc="Auditing", unit="doc", disable=len(parsed_args.inputs) < 2):
        try:
            html = _read_input(name)
        except OSError as e:
            logger.error(f"Could not read {name}: {e}")
            print(f"❌ Could not read {name}: {e}")
            return EXIT_ERROR
        results.append((name, controller.analyze(html, external=run_external)))

    for name, report in results:
        _print_report(name, report, parsed_args.format, snippet_length)

    if parsed_args.export:
        name, report = results[0]
        target = PathUtils.resolve_output_path(parsed_args.export)
        try:
            ReportController(report, snippet_length=snippet_length).export(target)
        except (ValueError, OSError) as e:
            print(f"❌ Export failed: {e}")
            return EXIT_ERROR
        if parsed_args.format != "json":
            print(f"\n💾 Report saved to {target}")

    if parsed_args.fail_on:
        threshold = SEVERITY_RANK[parsed_args.fail_on]
        for _, report in results:
            worst = _worst_rank(report)
            if worst is not None and worst <= threshold:
                return EXIT_VIOLATIONS

    return EXIT_OK
