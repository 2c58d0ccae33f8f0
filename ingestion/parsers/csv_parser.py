"""
CSV parser — returns a ParsedDocument.
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ingestion.parsers import ParsedDocument, detect_document_type

logger = logging.getLogger(__name__)


def _read_csv_resilient(file_path: str) -> pd.DataFrame:
    """Try utf-8 then latin-1 encoding; every cell is read as text."""
    for enc in ("utf-8", "latin-1"):
        try:
            return pd.read_csv(file_path, dtype=str, keep_default_na=False, encoding=enc)
        except UnicodeDecodeError:
            continue
        except pd.errors.EmptyDataError:
            return pd.DataFrame()

    return pd.DataFrame()


def skip_metadata_rows(df: pd.DataFrame) -> pd.DataFrame:
    """
    Drop rows where at most one cell is filled, which typically represent
    blank separator or title rows in sheet exports.
    """
    if df.empty:
        return df

    def _is_metadata_row(row) -> bool:
        non_empty = row.fillna("").astype(str).str.strip().str.len() > 0
        return non_empty.sum() <= 1

    mask = df.apply(_is_metadata_row, axis=1)
    cleaned = df[~mask].reset_index(drop=True)
    return cleaned if not cleaned.empty else df


def parse_csv(file_path: str, document_type: Optional[str] = None) -> ParsedDocument:
    """
    Parse a CSV file and return a ParsedDocument.

    Args:
        file_path: Path to the CSV file.
        document_type: Force the document type instead of detecting it.

    Returns:
        ParsedDocument with dataframe, raw_text, and document_type.
    """
    path = Path(file_path)
    try:
        df = _read_csv_resilient(str(path))
        df = skip_metadata_rows(df)
        raw_text = df.to_string(index=False)
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", path.name, e)
        df = pd.DataFrame()
        raw_text = ""

    doc_type = document_type or detect_document_type(path.name, raw_text[:2000])

    return ParsedDocument(
        file_name=path.name,
        file_type="csv",
        raw_text=raw_text,
        dataframe=df,
        document_type=doc_type,
    )
