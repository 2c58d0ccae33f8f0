"""
Decree Data Consistency Auditor: batch runner.

Loads PA/FL sheet exports and the personnel roster, runs the consistency
audit and writes the findings and a per-category summary as CSV.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from config import settings
from engine.auditor import DataAuditor
from ingestion.loader import FileLoader
from ingestion.record_parser import parse_employees, records_from_document
from models.decree import Employee, PermitRecord
from reporting.export import export_filename, generate_csv_export, generate_summary_dataframe
from storage.audit_log import AuditLog

logger = logging.getLogger("run_audit")


def load_records(paths: List[str], loader: FileLoader, audit_log: AuditLog, user: str) -> Tuple[List[PermitRecord], List[str]]:
    """Load every decree sheet, returning (records, errors and row warnings)"""
    records: List[PermitRecord] = []
    messages: List[str] = []

    for path in paths:
        ok, msg, doc = loader.load_file(path)
        if not ok:
            messages.append(msg)
            continue

        result = records_from_document(doc)
        records.extend(result.records)
        messages.extend(result.warnings)
        audit_log.log_data_load(
            source=doc.document_type,
            file_name=doc.file_name,
            user=user,
            records_loaded=len(result.records),
        )

    return records, messages


def load_roster(path: Optional[str], loader: FileLoader, audit_log: AuditLog, user: str) -> Tuple[List[Employee], List[str]]:
    """Load the personnel roster; no path means an empty roster"""
    if not path:
        return [], []

    ok, msg, doc = loader.load_file(path, document_type="employees")
    if not ok:
        return [], [msg]

    employees, warnings = parse_employees(doc.dataframe)
    audit_log.log_data_load(
        source="employees",
        file_name=doc.file_name,
        user=user,
        records_loaded=len(employees),
    )
    return employees, warnings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=settings.APP_TITLE)
    parser.add_argument("--records", nargs="+", required=True, help="PA/FL sheet exports (.csv, .xlsx)")
    parser.add_argument("--employees", default=None, help="Personnel roster export")
    parser.add_argument("--out", default="outputs", help="Output directory")
    parser.add_argument("--user", default=settings.DEFAULT_USER, help="Name recorded in the audit trail")
    parser.add_argument("--log-path", default=None, help="Audit trail JSONL path")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    loader = FileLoader()
    audit_log = AuditLog(args.log_path)

    records, messages = load_records(args.records, loader, audit_log, args.user)
    employees, roster_messages = load_roster(args.employees, loader, audit_log, args.user)
    messages.extend(roster_messages)

    for message in messages:
        logger.warning(message)

    if not records:
        logger.error("No decree records loaded; nothing to audit")
        return 1

    auditor = DataAuditor(records, employees)
    issues = auditor.detect()
    stats = auditor.get_summary_stats()
    audit_log.log_audit_run(args.user, len(records), len(employees), len(issues))

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    findings_path = out_dir / export_filename()
    findings_path.write_bytes(generate_csv_export(issues))
    audit_log.log_export(export_type="CSV", user=args.user, record_count=len(issues))

    summary_path = out_dir / "summary.csv"
    summary_df = generate_summary_dataframe(issues)
    summary_df.to_csv(summary_path, index=False)

    print(f"Wrote: {findings_path}")
    print(f"Wrote: {summary_path}")
    print(
        f"Findings: {stats['total_findings']} "
        f"(errors: {stats['errors']}, warnings: {stats['warnings']}, overlaps: {stats['overlaps']}); "
        f"clean records: {stats['valid_records']} of {len(records)}"
    )
    print(summary_df.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
