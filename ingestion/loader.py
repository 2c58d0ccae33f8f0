"""
Unified file loader - routes sheet exports to the appropriate parser.
Returns (bool, str, Optional[ParsedDocument]) instead of raising.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple

from ingestion.parsers import ParsedDocument
from ingestion.parsers.csv_parser import parse_csv
from ingestion.parsers.excel_parser import parse_excel
from utils.validations import validate_file_extension

logger = logging.getLogger(__name__)


class FileLoader:
    """
    Unified file loader that routes files to the appropriate parser
    based on file extension.
    """

    SUPPORTED_EXTENSIONS = {
        "xlsx": parse_excel,
        "xls": parse_excel,
        "csv": parse_csv,
    }

    def load_file(
        self,
        file_path: str,
        document_type: Optional[str] = None,
    ) -> Tuple[bool, str, Optional[ParsedDocument]]:
        """
        Load a file and return a ParsedDocument.

        Args:
            file_path: Path to the file to load.
            document_type: Force "pa_records", "fl_records" or "employees"
                instead of detecting it from the file name.

        Returns:
            (success: bool, message: str, parsed_doc: Optional[ParsedDocument])
        """
        path = Path(file_path)
        if not path.exists():
            return False, f"File not found: {file_path}", None

        extension = path.suffix.lower().lstrip(".")
        if not self.is_supported(path.name):
            supported = ", ".join(self.SUPPORTED_EXTENSIONS.keys())
            return (
                False,
                f"Unsupported file type: {extension}. Supported types: {supported}",
                None,
            )

        parser_fn = self.SUPPORTED_EXTENSIONS[extension]

        try:
            parsed_doc = parser_fn(str(path), document_type)
        except Exception as e:
            logger.warning("Failed to load %s: %s", path.name, e)
            return False, f"Error loading {path.name}: {str(e)}", None

        return True, f"Successfully loaded {path.name}", parsed_doc

    @classmethod
    def get_supported_extensions(cls) -> list:
        """Get list of supported file extensions."""
        return list(cls.SUPPORTED_EXTENSIONS.keys())

    @classmethod
    def is_supported(cls, filename: str) -> bool:
        """Check if a filename has a supported extension."""
        return validate_file_extension(filename, cls.get_supported_extensions())
