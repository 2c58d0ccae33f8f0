"""
Configuration settings for the Decree Data Consistency Auditor
"""
import os
from pathlib import Path
from typing import Dict, List

_CONFIG_DIR = Path(__file__).parent

# Application Settings
APP_TITLE = "Decree Data Consistency Auditor"
DEFAULT_USER = os.getenv("DECREE_AUDIT_USER", "System")

# Request Types
REQUEST_TYPE_PA = "PA"  # Administrative Permit
REQUEST_TYPE_FL = "FL"  # Legal Holiday
REQUEST_TYPES = [REQUEST_TYPE_PA, REQUEST_TYPE_FL]

# Severity Levels
SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITIES = [SEVERITY_ERROR, SEVERITY_WARNING]

# Finding Categories
CATEGORY_DATES = "dates"
CATEGORY_MISSING_INFO = "missing_info"
CATEGORY_CONSISTENCY = "consistency"
CATEGORY_BALANCE = "balance"
CATEGORY_OVERLAP = "overlap"
CATEGORIES = [
    CATEGORY_DATES,
    CATEGORY_MISSING_INFO,
    CATEGORY_CONSISTENCY,
    CATEGORY_BALANCE,
    CATEGORY_OVERLAP,
]

CATEGORY_LABELS: Dict[str, str] = {
    CATEGORY_DATES: "Dates and Days",
    CATEGORY_MISSING_INFO: "Missing Data",
    CATEGORY_CONSISTENCY: "Identity and RUT",
    CATEGORY_BALANCE: "Balances",
    CATEGORY_OVERLAP: "Overlaps",
}

# Working-day calendar
HOLIDAYS_PATH = os.getenv(
    "DECREE_AUDIT_HOLIDAYS_PATH",
    str(_CONFIG_DIR / "holidays.yaml"),
)

# Audit trail
AUDIT_LOG_PATH = os.getenv("DECREE_AUDIT_LOG_PATH", "data/audit_log.jsonl")
AUDIT_LOG_MAX_ENTRIES = 500
AUDIT_SCOPES = ["decree", "admin", "auth"]

# Export Settings
EXPORT_HEADERS: List[str] = ["Type", "Category", "Employee", "RUT", "Act", "Message", "Details"]
MISSING_ACT_LABEL = "No act"

# Sheet defaults
DEFAULT_MATERIA = "Decreto Exento"
JORNADA_VALUES: List[str] = ["Jornada mañana", "Jornada tarde", "Jornada completa"]
DEFAULT_JORNADA = "Jornada completa"

# Date Format
DATE_FORMAT = "%Y-%m-%d"
