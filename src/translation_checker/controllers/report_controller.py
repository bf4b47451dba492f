# src/translation_checker/controllers/report_controller.py
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from translation_checker.model import DestinationRecord, DestinationVerdict, ReportSummary

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["URL", "Test", "Issues", "Type", "Text", "Element", "Attribute", "XPath"]


class ReportController:
    """
    Turns the stored destination records into the end-of-run verdicts:
    a summary over all pages, and a pass/fail per page with every defect spelled out.
    """

    def __init__(self, records: List[DestinationRecord]):
        self.records = list(records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    # --- SUMMARY ---

    def summarize(self) -> ReportSummary:
        with_errors = [r for r in self.records if r.has_errors]
        return ReportSummary(
            total_pages=len(self.records),
            clean_pages=len(self.records) - len(with_errors),
            pages_with_issues=len(with_errors),
            failing=[(r.url, r.test_context, r.error_count) for r in with_errors],
        )

    def format_summary(self) -> str:
        summary = self.summarize()
        lines = [
            "=== Translation Validation Summary ===",
            f"Total pages checked: {summary.total_pages}",
            f"Pages with issues: {summary.pages_with_issues}",
            f"Clean pages: {summary.clean_pages}",
        ]
        for url, test_context, count in summary.failing:
            lines.append("")
            lines.append(f"Page: {url}")
            lines.append(f'  Test: "{test_context}"')
            lines.append(f"  Issues: {count}")
        return "\n".join(lines)

    # --- PER DESTINATION ---

    def validate(self) -> List[DestinationVerdict]:
        """Returns one verdict per stored destination; none are skipped on failure."""
        return [self._verdict(record) for record in self.records]

    def failures(self) -> List[DestinationVerdict]:
        return [v for v in self.validate() if not v.passed]

    @staticmethod
    def _verdict(record: DestinationRecord) -> DestinationVerdict:
        if not record.has_errors:
            return DestinationVerdict(url=record.url, test_context=record.test_context, passed=True)

        details = [
            f"=== Translation Issues on {record.url} ===",
            f'Test context: "{record.test_context}"',
            f"Total issues: {record.error_count}",
        ]
        for index, error in enumerate(record.errors, start=1):
            details.append(f'{index}. {error.kind.value.upper()}: "{error.text}"')
            details.append(f"   Element: <{error.element}>")
            if error.attribute:
                details.append(f"   Attribute: {error.attribute}")
            details.append(f"   XPath: {error.xpath}")

        message = (
            f"Translation validation failed for {record.url}\n"
            f"Found {record.error_count} issue(s). See console output above for details."
        )
        return DestinationVerdict(
            url=record.url,
            test_context=record.test_context,
            passed=False,
            issue_count=record.error_count,
            details=details,
            message=message,
        )

    # --- EXPORT ---

    def to_dataframe(self) -> pd.DataFrame:
        """One row per defect; clean pages get a single row with empty defect columns."""
        rows: List[Dict[str, Any]] = []
        for record in self.records:
            base = {"URL": record.url, "Test": record.test_context, "Issues": record.error_count}
            if not record.errors:
                rows.append({**base, "Type": "", "Text": "", "Element": "", "Attribute": "", "XPath": ""})
                continue
            for error in record.errors:
                rows.append({
                    **base,
                    "Type": error.kind.value,
                    "Text": error.text,
                    "Element": error.element,
                    "Attribute": error.attribute or "",
                    "XPath": error.xpath,
                })
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def export(self, output_file: Union[str, Path]) -> Path:
        """Writes the flat report to .xlsx (openpyxl) or .csv, depending on the suffix."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        df = self.to_dataframe()
        if output_file.suffix.lower() == ".xlsx":
            df.to_excel(output_file, index=False, engine="openpyxl")
        else:
            df.to_csv(output_file, index=False)
        logger.info(f"✅ Translation report exported to {output_file} ({len(df)} rows)")
        return output_file
