"""
Excel parser (.xlsx / .xls) — returns a ParsedDocument.
"""
from pathlib import Path
from typing import Optional

import pandas as pd

from ingestion.parsers import ParsedDocument, detect_document_type
from ingestion.parsers.csv_parser import skip_metadata_rows


def parse_excel(file_path: str, document_type: Optional[str] = None) -> ParsedDocument:
    """
    Parse the first sheet of an Excel file (.xlsx or .xls) and return a
    ParsedDocument. Date cells are kept as date objects; everything else is
    left for the record parser to normalise.
    """
    path = Path(file_path)
    ext = path.suffix.lower()

    engine = "openpyxl" if ext == ".xlsx" else "xlrd"
    df = pd.read_excel(str(path), engine=engine, dtype=object)
    df = df.where(pd.notna(df), "")

    df = skip_metadata_rows(df)
    raw_text = df.to_string(index=False)
    doc_type = document_type or detect_document_type(path.name, raw_text[:2000])

    return ParsedDocument(
        file_name=path.name,
        file_type=ext.lstrip("."),
        raw_text=raw_text,
        dataframe=df,
        document_type=doc_type,
    )
