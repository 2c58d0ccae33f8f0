"""
Chilean national ID (RUT) utilities
"""
import re
from typing import Optional


def sanitize_rut(value: Optional[str]) -> str:
    """Keep digits and the K check digit, uppercased"""
    return re.sub(r"[^0-9kK]", "", str(value or "")).upper()


def normalize_rut_canonical(value: Optional[str]) -> str:
    """
    Canonical "BODY-DV" form, e.g. "12.345.678-5" -> "12345678-5".
    Returns "" when the value cannot be a RUT.
    """
    cleaned = sanitize_rut(value)
    if len(cleaned) < 2:
        return ""

    body, dv = cleaned[:-1], cleaned[-1]
    if not body.isdigit():
        return ""

    return f"{body}-{dv}"


def format_rut(value: Optional[str]) -> str:
    """Dotted display form, e.g. "12345678-5" -> "12.345.678-5" """
    canonical = normalize_rut_canonical(value)
    if not canonical:
        return ""

    body, dv = canonical.split("-")
    return f"{int(body):,}".replace(",", ".") + f"-{dv}"


def compute_check_digit(body: str) -> str:
    """Modulo 11 check digit for a RUT body"""
    total = 0
    multiplier = 2
    for digit in reversed(body):
        total += int(digit) * multiplier
        multiplier = 2 if multiplier == 7 else multiplier + 1

    expected = 11 - (total % 11)
    if expected == 11:
        return "0"
    if expected == 10:
        return "K"
    return str(expected)


def is_valid_rut(value: Optional[str]) -> bool:
    """Validate body length (7-8 digits) and modulo 11 check digit"""
    canonical = normalize_rut_canonical(value)
    if not canonical:
        return False

    body, dv = canonical.split("-")
    if not 7 <= len(body) <= 8:
        return False

    return compute_check_digit(body) == dv
