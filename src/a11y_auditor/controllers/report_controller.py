import json
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

import pandas as pd

from a11y_auditor.model import AuditReport, Severity, Violation

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["ID", "Description", "Severity", "Line", "Element", "Node Description"]
EXPORT_FORMATS = (".txt", ".csv", ".json", ".xlsx")


class ReportController:
    """
    Controller responsible for turning an AuditReport into presentation data:
    chart counts, the breakdown table, recommendations and flat exports.
    Reads the report only; nothing here changes the violations.
    """

    def __init__(self, report: AuditReport, snippet_length: Optional[int] = None):
        self.report = report
        self.snippet_length = snippet_length

    # --- HELPERS ---

    def _snippet(self, element: str) -> str:
        text = " ".join(element.split())
        if self.snippet_length and len(text) > self.snippet_length:
            return text[:self.snippet_length] + "..."
        return text

    # --- CHART DATA ---

    def counts_by_rule(self) -> Dict[str, int]:
        """Affected-node count per violation id (bar chart data)."""
        counts: Dict[str, int] = {}
        for v in self.report.violations:
            counts[v.id] = counts.get(v.id, 0) + v.node_count
        return counts

    def counts_by_severity(self) -> Dict[str, int]:
        """Affected-node count summed per severity (pie chart data), in severity order."""
        totals = Counter()
        for v in self.report.violations:
            totals[v.severity] += v.node_count
        return {s.value: totals[s.value] for s in Severity if s.value in totals}

    def summary_rows(self) -> List[Dict[str, Any]]:
        """One row per violation for the detailed breakdown table."""
        return [
            {"id": v.id, "description": v.description, "severity": v.severity, "count": v.node_count}
            for v in self.report.violations
        ]

    def recommendations(self) -> List[Dict[str, str]]:
        """id/help pairs from the external audit channel, if it ran successfully."""
        external = self.report.external
        if not external or not external.success:
            return []
        return [
            {"id": str(v.get("id", "")), "help": str(v.get("help", ""))}
            for v in external.violations
        ]

    # --- EXPORTS ---

    def node_lines(self, violation: Violation) -> List[str]:
        lines = []
        for node in violation.nodes:
            line = node.line if node.line is not None else "N/A"
            lines.append(
                f"{violation.id} / {violation.description} / {violation.severity} / "
                f"Nodes: {line} / {self._snippet(node.element)}"
            )
        return lines

    def export_lines(self) -> List[str]:
        """One line per affected node: 'ID / Description / Severity / Nodes: Line / snippet'."""
        return [line for v in self.report.violations for line in self.node_lines(v)]

    def to_dataframe(self) -> pd.DataFrame:
        """Flattens the rule-set channel to one row per affected node."""
        rows = [
            {
                "ID": v.id,
                "Description": v.description,
                "Severity": v.severity,
                "Line": node.line,
                "Element": self._snippet(node.element),
                "Node Description": node.description or "",
            }
            for v in self.report.violations
            for node in v.nodes
        ]
        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        # Nullable integers keep 'no line' distinct from a number
        df["Line"] = df["Line"].astype("Int64")
        return df

    def export(self, path: Union[str, Path]) -> Path:
        """
        Writes the report to `path`; the format follows the suffix
        (.txt, .csv, .json or .xlsx).
        """
        target = Path(path)
        suffix = target.suffix.lower()
        if suffix not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format '{suffix}'. Use .txt, .csv, .json or .xlsx.")
        target.parent.mkdir(parents=True, exist_ok=True)

        if suffix == ".txt":
            target.write_text("\n".join(self.export_lines()) + "\n", encoding="utf-8")
        elif suffix == ".csv":
            self.to_dataframe().to_csv(target, index=False)
        elif suffix == ".json":
            target.write_text(json.dumps(self.report.to_dict(), indent=2), encoding="utf-8")
        else:
            self.to_dataframe().to_excel(target, index=False, sheet_name="Violations")

        logger.info(f"Report exported to {target}")
        return target
