"""
Row parsers for PA (administrative permit) and FL (legal holiday) sheets.

Both sheets are positional: the column order below mirrors the decree
books, the first row of the export being the header.

PA: 0 #, 1 type, 2 subject, 3 act, 4 name, 5 RUT, 6 period, 7 days,
    8 start date, 9 shift, 10 days entitled, 11 decree date
FL: 0 #, 1 act, 2 type, 3 subject, 4 name, 5 RUT, 6 days,
    7-10 period 1 (label, balance before, requested, balance after),
    11-14 period 2 (same), 15 start date, 16 end date, 17 decree date,
    18 RA, 19 issuer, 20 notes
"""
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from config import settings
from ingestion.parsers import ParsedDocument
from models.decree import Employee, PermitRecord
from utils.helpers import clean_text, normalize_number, normalize_period, parse_sheet_date
from utils.rut import is_valid_rut
from utils.validations import validate_request_type

logger = logging.getLogger(__name__)

Row = Sequence[object]


@dataclass
class ParseResult:
    """Records parsed from a sheet plus human-readable row warnings"""
    records: List[PermitRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _cell(row: Row, index: int) -> str:
    if index >= len(row):
        return ""
    return clean_text(row[index])


def normalize_request_type(value: str) -> Optional[str]:
    """'pa' / ' FL ' -> 'PA' / 'FL'; None for anything else"""
    upper = str(value or "").strip().upper()
    return upper if validate_request_type(upper) else None


def resolve_request_type(*values: str) -> str:
    """First valid request type among the values, defaulting to PA"""
    for value in values:
        normalized = normalize_request_type(value)
        if normalized:
            return normalized
    return settings.REQUEST_TYPE_PA


def looks_like_correlative(value: str) -> bool:
    """Act correlatives look like '123' or '123/2024'"""
    trimmed = str(value or "").strip()
    if not trimmed:
        return False
    if re.fullmatch(r"\d{1,4}\s*/\s*\d{4}", trimmed):
        return True
    return bool(re.fullmatch(r"\d{1,4}", trimmed))


def resolve_act_subject(subject_cell: str, act_cell: str) -> Tuple[str, str]:
    """
    Older PA books swap the subject and act columns. Pick the correlative as
    the act and fall back to the default subject.

    Returns:
        (act, subject)
    """
    subject_value = subject_cell.strip()
    act_value = act_cell.strip()
    subject_is_correlative = looks_like_correlative(subject_value)
    act_is_correlative = looks_like_correlative(act_value)
    act_is_type = normalize_request_type(act_value) is not None
    subject_is_type = normalize_request_type(subject_value) is not None
    default = settings.DEFAULT_MATERIA

    if subject_is_correlative and not act_is_correlative:
        return subject_value, default if act_is_type else (act_value or default)
    if act_is_correlative and not subject_is_correlative:
        return act_value, default if subject_is_type else (subject_value or default)
    if subject_is_correlative and act_is_correlative:
        return subject_value, default

    if act_is_type and not subject_is_type:
        return subject_value or act_value, subject_value or default
    if subject_is_type and not act_is_type:
        return act_value or subject_value, act_value or default

    return subject_value or act_value, act_value or subject_value or default


def normalize_shift(value: str) -> str:
    """Map free-text shift cells onto the three known shifts"""
    cleaned = re.sub(r"[()]", "", str(value or "")).strip()
    if not cleaned:
        return settings.DEFAULT_JORNADA

    lower = cleaned.lower()
    if "manana" in lower or "mañana" in lower:
        return "Jornada mañana"
    if "tarde" in lower:
        return "Jornada tarde"
    if "completa" in lower:
        return "Jornada completa"

    return cleaned


def parse_act_number(act: str) -> Optional[int]:
    """'123/2024' -> 123"""
    match = re.match(r"\s*(\d+)", str(act or "").split("/")[0])
    return int(match.group(1)) if match else None


def _act_number_from_row(row: Row) -> Optional[int]:
    for index in (2, 3, 1):
        number = parse_act_number(_cell(row, index))
        if number is not None:
            return number
    return None


def should_reverse_rows(rows: List[Row]) -> bool:
    """PA books are sometimes exported newest first; detect that"""
    if len(rows) < 2:
        return False

    first, last = rows[0], rows[-1]

    first_date = parse_sheet_date(_cell(first, 11))
    last_date = parse_sheet_date(_cell(last, 11))
    if first_date and last_date:
        return first_date > last_date

    first_act = _act_number_from_row(first)
    last_act = _act_number_from_row(last)
    if first_act is not None and last_act is not None:
        return first_act > last_act

    return False


def _record_id(request_type: str, source: str, number) -> str:
    """PA-12, or PA-permisos_2024-12 when the source sheet is known"""
    if source:
        return f"{request_type}-{source}-{number}"
    return f"{request_type}-{number}"


def _check_rut(label: str, rut: str, warnings: List[str]):
    if rut and not is_valid_rut(rut):
        warnings.append(f"{label}: RUT with invalid check digit ({rut})")


def parse_pa_records(rows: List[Row], source: str = "") -> ParseResult:
    """
    Parse PA sheet rows (header excluded); rows without a name are skipped.
    A non-empty ``source`` qualifies record ids so several books can be
    audited together.
    """
    result = ParseResult()
    data_rows = [row for row in rows if _cell(row, 4)]
    if should_reverse_rows(data_rows):
        data_rows = list(reversed(data_rows))

    for index, row in enumerate(data_rows):
        label = f"[PA] Row {index + 2}"
        type_cell = _cell(row, 1)
        subject_cell = _cell(row, 2)
        act_cell = _cell(row, 3)
        start_raw = _cell(row, 8)
        shift_raw = _cell(row, 9)
        decree_raw = _cell(row, 11)

        start_date = parse_sheet_date(start_raw)
        decree_date = parse_sheet_date(decree_raw)
        act, subject = resolve_act_subject(subject_cell, act_cell)
        shift = normalize_shift(shift_raw)
        rut = _cell(row, 5)

        if not any(normalize_request_type(v) for v in (type_cell, subject_cell, act_cell)):
            result.warnings.append(f"{label}: invalid request type")
        if start_raw and not start_date:
            result.warnings.append(f"{label}: invalid start date ({start_raw})")
        if decree_raw and not decree_date:
            result.warnings.append(f"{label}: invalid decree date ({decree_raw})")
        if shift_raw and shift not in settings.JORNADA_VALUES:
            result.warnings.append(f"{label}: invalid shift ({shift_raw})")
        _check_rut(label, rut, result.warnings)

        result.records.append(
            PermitRecord(
                record_id=_record_id(settings.REQUEST_TYPE_PA, source, _cell(row, 0) or index + 2),
                request_type=settings.REQUEST_TYPE_PA,
                rut=rut,
                employee_name=_cell(row, 4),
                act=act,
                subject=subject,
                period=normalize_period(_cell(row, 6)),
                days_requested=normalize_number(_cell(row, 7), 0),
                start_date=start_date,
                shift=shift if shift in settings.JORNADA_VALUES else settings.DEFAULT_JORNADA,
                days_entitled=normalize_number(_cell(row, 10), 0),
                decree_date=decree_date,
            )
        )

    return result


def parse_fl_records(rows: List[Row], source: str = "") -> ParseResult:
    """Parse FL sheet rows (header excluded); see parse_pa_records for ``source``"""
    result = ParseResult()
    data_rows = [row for row in rows if _cell(row, 4)]

    for index, row in enumerate(data_rows):
        label = f"[FL] Row {index + 2}"
        act = _cell(row, 1)
        rut = _cell(row, 5)
        start_raw = _cell(row, 15)
        end_raw = _cell(row, 16)
        decree_raw = _cell(row, 17)

        start_date = parse_sheet_date(start_raw)
        end_date = parse_sheet_date(end_raw)
        decree_date = parse_sheet_date(decree_raw)
        balance_before_p1 = normalize_number(_cell(row, 8), 0)
        balance_before_p2 = normalize_number(_cell(row, 12), 0)

        if start_raw and not start_date:
            result.warnings.append(f"{label}: invalid start date ({start_raw})")
        if end_raw and not end_date:
            result.warnings.append(f"{label}: invalid end date ({end_raw})")
        if not act:
            result.warnings.append(f"{label}: empty act number")
        _check_rut(label, rut, result.warnings)

        result.records.append(
            PermitRecord(
                record_id=_record_id(settings.REQUEST_TYPE_FL, source, _cell(row, 0) or index + 2),
                request_type=settings.REQUEST_TYPE_FL,
                rut=rut,
                employee_name=_cell(row, 4),
                act=act,
                subject=settings.DEFAULT_MATERIA,
                days_requested=normalize_number(_cell(row, 6), 0),
                days_entitled=balance_before_p1 + balance_before_p2,
                period_1=_cell(row, 7),
                balance_before_p1=balance_before_p1,
                requested_p1=normalize_number(_cell(row, 9), 0),
                balance_after_p1=normalize_number(_cell(row, 10), 0),
                period_2=_cell(row, 11),
                balance_before_p2=balance_before_p2,
                requested_p2=normalize_number(_cell(row, 13), 0),
                balance_after_p2=normalize_number(_cell(row, 14), 0),
                start_date=start_date,
                end_date=end_date,
                decree_date=decree_date,
                shift=settings.DEFAULT_JORNADA,
                notes=_cell(row, 20),
            )
        )

    return result


def _find_column(df: pd.DataFrame, keywords: List[str]) -> Optional[str]:
    return next(
        (c for c in df.columns if any(kw in str(c).lower() for kw in keywords)),
        None,
    )


def parse_employees(df: Optional[pd.DataFrame]) -> Tuple[List[Employee], List[str]]:
    """
    Build the personnel roster from a sheet with RUT / name / department
    columns (English or Spanish headers).
    """
    if df is None:
        raise ValueError("parse_employees received None, expected a DataFrame.")
    if df.empty:
        return [], []

    rut_col = _find_column(df, ["rut"])
    name_col = _find_column(df, ["nombre", "name", "funcionario"])
    dept_col = _find_column(df, ["departamento", "department", "unidad"])

    if rut_col is None or name_col is None:
        return [], ["Roster sheet needs RUT and name columns"]

    employees: List[Employee] = []
    warnings: List[str] = []
    for index, row in enumerate(df.to_dict("records")):
        rut = clean_text(row.get(rut_col))
        name = clean_text(row.get(name_col))
        if not rut or not name:
            warnings.append(f"[Roster] Row {index + 2}: missing RUT or name")
            continue
        department = clean_text(row.get(dept_col)) if dept_col else ""
        employees.append(Employee(rut=rut, name=name, department=department or None))

    return employees, warnings


def records_from_document(doc: ParsedDocument) -> ParseResult:
    """Dispatch a loaded PA or FL sheet to its row parser"""
    if doc.dataframe is None or doc.dataframe.empty:
        return ParseResult()

    rows = doc.dataframe.values.tolist()
    source = Path(doc.file_name).stem
    if doc.document_type == "pa_records":
        return parse_pa_records(rows, source)
    if doc.document_type == "fl_records":
        return parse_fl_records(rows, source)

    logger.warning("%s is not a decree sheet (%s); skipped", doc.file_name, doc.document_type)
    return ParseResult(warnings=[f"{doc.file_name}: not a PA or FL sheet"])
