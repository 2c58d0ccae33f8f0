"""
Input validation utilities
"""
from typing import Optional
from datetime import date
import re

from config import settings


def validate_date_range(start_date: Optional[date], end_date: Optional[date]) -> bool:
    """Validate that date range is logical"""
    if not start_date or not end_date:
        return False

    return start_date <= end_date


def validate_severity(severity: str) -> bool:
    """Validate severity level"""
    return severity in settings.SEVERITIES


def validate_category(category: str) -> bool:
    """Validate finding category"""
    return category in settings.CATEGORIES


def validate_request_type(request_type: str) -> bool:
    """Validate decree request type (PA / FL)"""
    return request_type in settings.REQUEST_TYPES


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe file operations"""
    # Remove or replace unsafe characters
    filename = re.sub(r'[<>:"/\\|?*]', '_', filename)
    # Remove leading/trailing spaces and dots
    filename = filename.strip('. ')
    # Limit length
    if len(filename) > 255:
        filename = filename[:255]

    return filename or 'unnamed'


def validate_file_extension(filename: str, allowed_extensions: list) -> bool:
    """Validate file extension"""
    if not filename or '.' not in filename:
        return False

    extension = filename.lower().split('.')[-1]
    return extension in [ext.lower().lstrip('.') for ext in allowed_extensions]
