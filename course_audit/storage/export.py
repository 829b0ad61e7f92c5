"""CSV and JSONL export of audit report rows."""

import csv
import json
from pathlib import Path
from typing import Iterator, List

from ..models.report import ProbeOutcome, ReportRow, REPORT_COLUMNS
from ..utils.logging_config import get_logger

logger = get_logger()


def report_filename(term_prefix: str, extension: str = "csv") -> str:
    """Default report filename for a term, e.g. ``6253_unpublished_courses.csv``."""
    term = term_prefix.strip("-") or "all"
    return f"{term}_unpublished_courses.{extension}"


class ReportExporter:
    """Writes report rows to disk."""

    def __init__(self, output_dir: Path):
        """
        Initialize exporter.

        Args:
            output_dir: Directory for output files
        """
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_csv(self, rows: List[ReportRow], filename: str) -> Path:
        """
        Export rows to a CSV file with a header row.

        Args:
            rows: Report rows in output order
            filename: Output filename

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        with open(filepath, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(REPORT_COLUMNS)
            for row in rows:
                writer.writerow(row.to_csv_row())

        logger.info(f"Exported {len(rows)} rows to {filepath}")
        return filepath

    def export_jsonl(self, rows: List[ReportRow], filename: str) -> Path:
        """
        Export rows to JSONL, one object per course.

        Returns:
            Path to created file
        """
        filepath = self.output_dir / filename

        with open(filepath, "w", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row.to_dict(), ensure_ascii=False) + "\n")

        logger.info(f"Exported {len(rows)} rows to {filepath}")
        return filepath

    @staticmethod
    def load_csv(filepath: Path) -> Iterator[ReportRow]:
        """
        Load rows back from a CSV report.

        Yields:
            ReportRow objects
        """
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            for record in csv.DictReader(f):
                yield ReportRow(
                    course_id=int(record["course_id"]),
                    course_name=record["course_name"],
                    subject=record["subject"],
                    with_modules=ProbeOutcome(record["with_modules"]),
                    with_assignments=ProbeOutcome(record["with_assignments"]),
                    with_front_page=ProbeOutcome(record["with_front_page"]),
                    faculty_name=record["faculty_name"],
                    faculty_email=record["faculty_email"],
                )
