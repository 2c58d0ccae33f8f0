"""
Data models for the decree auditor
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from config import settings

DateValue = Union[str, date, None]


@dataclass
class Employee:
    """Roster entry from the personnel module"""
    rut: str
    name: str
    department: Optional[str] = None


@dataclass
class PermitRecord:
    """
    One issued leave decree.

    ``request_type`` is "PA" (administrative permit, counted in days against
    ``days_entitled``) or "FL" (legal holiday, a date range charged against
    up to two sub-period balances).
    """
    record_id: str
    request_type: str
    rut: str = ""
    employee_name: str = ""
    act: str = ""
    start_date: DateValue = None
    end_date: DateValue = None
    days_requested: float = 0.0
    days_entitled: float = 0.0
    # FL sub-periods
    period_1: Optional[str] = None
    balance_before_p1: Optional[float] = None
    requested_p1: Optional[float] = None
    balance_after_p1: Optional[float] = None
    period_2: Optional[str] = None
    balance_before_p2: Optional[float] = None
    requested_p2: Optional[float] = None
    balance_after_p2: Optional[float] = None
    # Not validated
    decree: str = ""
    subject: str = ""
    department: Optional[str] = None
    period: str = ""
    shift: str = ""
    decree_date: DateValue = None
    notes: str = ""

    @property
    def is_permit(self) -> bool:
        """Check if this is an administrative permit"""
        return self.request_type == settings.REQUEST_TYPE_PA

    @property
    def is_legal_holiday(self) -> bool:
        """Check if this is a legal holiday"""
        return self.request_type == settings.REQUEST_TYPE_FL


@dataclass
class AuditIssue:
    """One consistency finding attached to a record"""
    record_id: str
    record: PermitRecord
    severity: str  # error, warning
    category: str  # dates, missing_info, consistency, balance, overlap
    message: str
    details: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == settings.SEVERITY_ERROR


@dataclass
class AuditSummary:
    """Headline counts for an audit run"""
    total: int = 0
    errors: int = 0
    warnings: int = 0
    overlaps: int = 0
    valid_records: int = 0
