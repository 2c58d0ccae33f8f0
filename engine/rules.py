"""
Consistency rules engine - implements all decree audit rules
"""
import logging
from collections import defaultdict
from datetime import datetime, time
from typing import Dict, Iterable, List, Optional, Tuple

from config import settings
from engine.working_days import WorkingDayPredicate, count_working_days, is_working_day
from models.decree import AuditIssue, Employee, PermitRecord
from utils.helpers import format_days, parse_iso_date, to_iso
from utils.validations import validate_date_range

logger = logging.getLogger(__name__)

DAY_END = time(23, 59, 59)

EffectiveRange = Tuple[datetime, datetime]


def _has_value(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def effective_range(record: PermitRecord) -> Optional[EffectiveRange]:
    """
    Range a record occupies for overlap purposes: start of the start day to
    the end of the end day, falling back to the start day when there is no
    (parsable) end date. Returns None when the start date is unusable.
    """
    start = parse_iso_date(record.start_date)
    if start is None:
        return None

    end = parse_iso_date(record.end_date) or start
    return datetime.combine(start, time.min), datetime.combine(end, DAY_END)


def ranges_overlap(first: EffectiveRange, second: EffectiveRange) -> bool:
    """Inclusive interval intersection; a shared boundary day overlaps"""
    return first[0] <= second[1] and second[0] <= first[1]


class RulesEngine:
    """
    Implements all consistency rules over a snapshot of decree records.

    Per-record rules run in input order (presence, roster, dates, balance),
    followed by the cross-record overlap and name-consistency detectors.
    Inputs are never modified.
    """

    def __init__(
        self,
        records: Iterable[PermitRecord],
        employees: Iterable[Employee] = (),
        working_day: Optional[WorkingDayPredicate] = None
    ):
        self.records = list(records)
        self.employees = list(employees)
        self.working_day = working_day or is_working_day
        self.findings: List[AuditIssue] = []

        # Build indexes keyed by the raw RUT string
        self.employees_by_rut = {e.rut: e for e in self.employees}
        self.records_by_rut: Dict[str, List[PermitRecord]] = defaultdict(list)
        for record in self.records:
            if record.rut:
                self.records_by_rut[record.rut].append(record)

    def run_all_rules(self) -> List[AuditIssue]:
        """Run all consistency rules and return findings"""
        self.findings = []

        for record in self.records:
            # Rule 1: Required fields
            self.check_required_fields(record)

            # Rule 2: Personnel roster cross-reference
            self.check_roster_membership(record)

            # Rule 3: Dates and working-day count
            self.check_dates(record)

            # Rule 4: Balances
            self.check_balances(record)

        # Rule 5: Date collisions per person
        self.check_overlaps()

        # Rule 6: Name drift per RUT
        self.check_name_consistency()

        logger.debug(
            "Audited %d records against %d employees: %d findings",
            len(self.records), len(self.employees), len(self.findings)
        )
        return self.findings

    def _add(
        self,
        record: PermitRecord,
        severity: str,
        category: str,
        message: str,
        details: Optional[str] = None
    ):
        self.findings.append(
            AuditIssue(
                record_id=record.record_id,
                record=record,
                severity=severity,
                category=category,
                message=message,
                details=details,
            )
        )

    def check_required_fields(self, record: PermitRecord):
        """
        Rule 1: Required Fields
        IF act missing OR rut/name missing FLAG: missing_info error
        """
        if not _has_value(record.act):
            self._add(
                record,
                settings.SEVERITY_ERROR,
                settings.CATEGORY_MISSING_INFO,
                "Missing act number (resolution/decree)",
            )

        if not _has_value(record.rut) or not _has_value(record.employee_name):
            self._add(
                record,
                settings.SEVERITY_ERROR,
                settings.CATEGORY_MISSING_INFO,
                "Missing identification data (RUT or name)",
            )

    def check_roster_membership(self, record: PermitRecord):
        """
        Rule 2: Roster Cross-Reference
        IF roster not empty AND rut not in roster FLAG: consistency warning
        """
        if not record.rut or not self.employees:
            return

        if record.rut not in self.employees_by_rut:
            self._add(
                record,
                settings.SEVERITY_WARNING,
                settings.CATEGORY_CONSISTENCY,
                "Employee not registered in the personnel roster",
                f"RUT: {record.rut} does not exist in the personnel module.",
            )

    def check_dates(self, record: PermitRecord):
        """
        Rule 3: Dates and Day Count
        FL with end date: end >= start AND working days in range == days requested
        PA: more than one day requires an explicit end date
        """
        start = parse_iso_date(record.start_date)
        if start is None:
            details = None
            if _has_value(record.start_date):
                details = f"Unrecognized start date value: {record.start_date}"
            self._add(
                record,
                settings.SEVERITY_ERROR,
                settings.CATEGORY_DATES,
                "Missing start date",
                details,
            )
            return

        end = parse_iso_date(record.end_date)
        requested = record.days_requested or 0

        if record.is_legal_holiday and end is not None:
            if not validate_date_range(start, end):
                self._add(
                    record,
                    settings.SEVERITY_ERROR,
                    settings.CATEGORY_DATES,
                    "End date precedes start date",
                )
                return

            working_days = count_working_days(start, end, self.working_day)
            if working_days != requested:
                self._add(
                    record,
                    settings.SEVERITY_ERROR,
                    settings.CATEGORY_DATES,
                    f"Day-count discrepancy: requested {format_days(requested)}, "
                    f"but the range has {working_days} working days",
                    f"Range: {to_iso(start)} to {to_iso(end)}",
                )

        elif record.is_permit:
            if requested > 1 and end is None:
                self._add(
                    record,
                    settings.SEVERITY_WARNING,
                    settings.CATEGORY_DATES,
                    f"Administrative permit of {format_days(requested)} days without an end date",
                )

    def check_balances(self, record: PermitRecord):
        """
        Rule 4: Balances
        FL: neither sub-period may end negative
        PA: days entitled - days requested >= 0
        """
        if record.is_legal_holiday:
            balance_p1 = record.balance_after_p1 if record.balance_after_p1 is not None else 0
            balance_p2 = record.balance_after_p2 if record.balance_after_p2 is not None else 0

            if balance_p1 < 0 or balance_p2 < 0:
                self._add(
                    record,
                    settings.SEVERITY_ERROR,
                    settings.CATEGORY_BALANCE,
                    "The record resulted in a negative legal-holiday balance",
                    f"P1 balance: {format_days(balance_p1)}, P2 balance: {format_days(balance_p2)}",
                )

        elif record.is_permit:
            entitled = record.days_entitled or 0
            requested = record.days_requested or 0

            if entitled - requested < 0:
                self._add(
                    record,
                    settings.SEVERITY_ERROR,
                    settings.CATEGORY_BALANCE,
                    "The record exceeds the available administrative-permit days",
                    f"Entitled: {format_days(entitled)}, requested: {format_days(requested)}",
                )

    def check_overlaps(self):
        """
        Rule 5: Date Collisions
        IF two records of the same RUT share at least one calendar day
        FLAG: overlap error on both records
        """
        for rut, person_records in self.records_by_rut.items():
            ranged = [(record, effective_range(record)) for record in person_records]

            for i in range(len(ranged)):
                first, first_range = ranged[i]
                if first_range is None:
                    continue

                for j in range(i + 1, len(ranged)):
                    second, second_range = ranged[j]
                    if second_range is None:
                        continue

                    if ranges_overlap(first_range, second_range):
                        self._add_overlap(first, first_range, second)
                        self._add_overlap(second, second_range, first)

    def _add_overlap(self, record: PermitRecord, record_range: EffectiveRange, other: PermitRecord):
        other_act = other.act or settings.MISSING_ACT_LABEL
        self._add(
            record,
            settings.SEVERITY_ERROR,
            settings.CATEGORY_OVERLAP,
            f"Date overlap with another decree (act: {other_act})",
            f"This decree collides with decree {other_act} between "
            f"{to_iso(record_range[0].date())} and {to_iso(record_range[1].date())}",
        )

    def check_name_consistency(self):
        """
        Rule 6: Name Consistency
        IF one RUT carries more than one distinct name
        FLAG: consistency warning on every record of that RUT
        """
        names_by_rut: Dict[str, List[str]] = {}

        for record in self.records:
            if not record.rut:
                continue
            name = (record.employee_name or "").strip().upper()
            names = names_by_rut.setdefault(record.rut, [])
            if name not in names:
                names.append(name)

        for rut, names in names_by_rut.items():
            if len(names) <= 1:
                continue

            name_list = " vs ".join(names)
            for record in self.records_by_rut[rut]:
                self._add(
                    record,
                    settings.SEVERITY_WARNING,
                    settings.CATEGORY_CONSISTENCY,
                    f"Name mismatch for RUT {rut}",
                    f"Names found: {name_list}",
                )
