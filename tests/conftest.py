"""
Pytest fixtures for the decree auditor test suite.
"""
from datetime import date

import pytest

from models.decree import Employee, PermitRecord


def weekdays_only(value: str) -> bool:
    """Working-day oracle without holidays: Monday to Friday."""
    return date.fromisoformat(value).weekday() < 5


def make_record(record_id: str, request_type: str = "PA", **overrides) -> PermitRecord:
    """Well-formed record; override any field per test."""
    fields = dict(
        rut="12345678-5",
        employee_name="Ana Rojas",
        act=f"{record_id}/2024",
        start_date="2024-03-04",
        days_requested=1,
        days_entitled=6,
    )
    if request_type == "FL":
        fields.update(balance_before_p1=15, requested_p1=1, balance_after_p1=14)
    fields.update(overrides)
    return PermitRecord(record_id=record_id, request_type=request_type, **fields)


@pytest.fixture
def working_day():
    return weekdays_only


@pytest.fixture
def roster():
    return [
        Employee(rut="12345678-5", name="Ana Rojas", department="Finanzas"),
        Employee(rut="9876543-3", name="Luis Soto"),
    ]


@pytest.fixture
def clean_records():
    """Non-overlapping, balance-positive records whose day counts match."""
    return [
        make_record("1", "PA", start_date="2024-03-04", days_requested=1),
        make_record(
            "2", "FL",
            start_date="2024-03-11", end_date="2024-03-15", days_requested=5,
            balance_after_p1=10,
        ),
        make_record(
            "3", "PA",
            rut="9876543-3", employee_name="Luis Soto",
            start_date="2024-03-04", days_requested=0.5,
        ),
        make_record(
            "4", "FL",
            rut="9876543-3", employee_name="Luis Soto",
            start_date="2024-04-01", end_date="2024-04-03", days_requested=3,
            balance_after_p1=12, balance_after_p2=0,
        ),
    ]
