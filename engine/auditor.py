"""
Decree data auditor - public entry point and result helpers
"""
from typing import Iterable, List, Optional

from config import settings
from engine.rules import RulesEngine
from engine.working_days import WorkingDayPredicate
from models.decree import AuditIssue, AuditSummary, Employee, PermitRecord
from utils.helpers import normalize_search_text
from utils.validations import validate_category, validate_severity

ALL = "all"


def audit(
    records: Iterable[PermitRecord],
    employees: Iterable[Employee] = (),
    is_working_day: Optional[WorkingDayPredicate] = None
) -> List[AuditIssue]:
    """
    Audit decree records against each other and the personnel roster.

    Returns every finding in detection order, unsorted and without
    deduplication. Pure: identical inputs give equal output and neither
    ``records`` nor ``employees`` is modified.

    Args:
        records: Decree records to check.
        employees: Personnel roster; when empty the roster check is skipped.
        is_working_day: ISO date string -> bool oracle. Defaults to the
            configured holiday calendar.
    """
    return RulesEngine(records, employees, is_working_day).run_all_rules()


def summarize(issues: List[AuditIssue], records: List[PermitRecord]) -> AuditSummary:
    """Headline counts; a record is valid when no finding references it"""
    flagged = {issue.record_id for issue in issues}
    return AuditSummary(
        total=len(issues),
        errors=len([i for i in issues if i.is_error]),
        warnings=len([i for i in issues if i.severity == settings.SEVERITY_WARNING]),
        overlaps=len([i for i in issues if i.category == settings.CATEGORY_OVERLAP]),
        valid_records=len(records) - len(flagged),
    )


def filter_issues(
    issues: List[AuditIssue],
    severity: str = ALL,
    category: str = ALL,
    search: str = ""
) -> List[AuditIssue]:
    """
    Filter findings by severity, category and free-text search.

    The search matches (case and accent insensitive) against the employee
    name, the act number and the message.
    """
    if severity != ALL and not validate_severity(severity):
        raise ValueError(f"Unknown severity: {severity}")
    if category != ALL and not validate_category(category):
        raise ValueError(f"Unknown category: {category}")

    needle = normalize_search_text(search)

    def _matches(issue: AuditIssue) -> bool:
        if severity != ALL and issue.severity != severity:
            return False
        if category != ALL and issue.category != category:
            return False
        if not needle:
            return True
        haystack = (
            issue.record.employee_name or "",
            issue.record.act or "",
            issue.message,
        )
        return any(needle in normalize_search_text(text) for text in haystack)

    return [issue for issue in issues if _matches(issue)]


class DataAuditor:
    """
    Runs the audit over one snapshot and answers questions about the result
    """

    def __init__(
        self,
        records: Iterable[PermitRecord],
        employees: Iterable[Employee] = (),
        is_working_day: Optional[WorkingDayPredicate] = None
    ):
        self.records = list(records)
        self.employees = list(employees)
        self.is_working_day = is_working_day
        self.issues: List[AuditIssue] = []

    def detect(self) -> List[AuditIssue]:
        """Run all consistency rules (detection order is preserved)"""
        self.issues = audit(self.records, self.employees, self.is_working_day)
        return self.issues

    def get_issues_by_severity(self, severity: str) -> List[AuditIssue]:
        return [i for i in self.issues if i.severity == severity]

    def get_issues_by_category(self, category: str) -> List[AuditIssue]:
        return [i for i in self.issues if i.category == category]

    def get_issues_by_record(self, record_id: str) -> List[AuditIssue]:
        return [i for i in self.issues if i.record_id == record_id]

    def get_summary_stats(self) -> dict:
        """Get summary statistics about findings"""
        summary = summarize(self.issues, self.records)

        by_category = {category: 0 for category in settings.CATEGORIES}
        for issue in self.issues:
            by_category[issue.category] = by_category.get(issue.category, 0) + 1

        affected_ruts = len({i.record.rut for i in self.issues if i.record.rut})

        return {
            'total_findings': summary.total,
            'errors': summary.errors,
            'warnings': summary.warnings,
            'overlaps': summary.overlaps,
            'valid_records': summary.valid_records,
            'by_category': by_category,
            'affected_employees': affected_ruts,
        }
