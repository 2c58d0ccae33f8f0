"""
ingestion.parsers — spreadsheet-export parsers returning ParsedDocument.
"""
from dataclasses import dataclass
import re
from typing import Optional
import pandas as pd


@dataclass
class ParsedDocument:
    """Normalised result returned by every parser."""
    file_name: str
    file_type: str
    raw_text: str
    dataframe: Optional[pd.DataFrame] = None
    document_type: Optional[str] = None  # pa_records | fl_records | employees | unknown


_EMPLOYEE_HINTS = {"employees", "employee", "roster", "personal", "funcionarios", "staff"}
_FL_HINTS = {"fl", "feriado", "feriados", "vacaciones", "holiday", "holidays"}
_PA_HINTS = {"pa", "permiso", "permisos", "permit", "permits"}


def detect_document_type(file_name: str, content: str = "") -> str:
    """
    Heuristic document-type detection from the file name, falling back to
    the first lines of content.

    Returns one of: "pa_records", "fl_records", "employees", "unknown".
    """
    for text in (file_name, content):
        tokens = set(re.split(r"[^a-z]+", text.lower()))
        if tokens & _EMPLOYEE_HINTS:
            return "employees"
        if tokens & _FL_HINTS:
            return "fl_records"
        if tokens & _PA_HINTS:
            return "pa_records"
    return "unknown"
