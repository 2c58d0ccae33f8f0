"""
Export functionality for audit findings
"""
import io
from datetime import date
from typing import List, Optional

import pandas as pd

from config import settings
from models.decree import AuditIssue
from utils.validations import sanitize_filename


def generate_issues_dataframe(issues: List[AuditIssue]) -> pd.DataFrame:
    """One row per finding, in the order given"""
    data = []
    for issue in issues:
        record = issue.record
        data.append({
            'Type': issue.severity.upper(),
            'Category': issue.category.upper(),
            'Employee': record.employee_name or '',
            'RUT': record.rut or '',
            'Act': record.act or 'N/A',
            'Message': issue.message,
            'Details': issue.details or '',
        })

    return pd.DataFrame(data, columns=settings.EXPORT_HEADERS)


def generate_csv_export(issues: List[AuditIssue]) -> bytes:
    """Generate CSV file with findings"""
    df = generate_issues_dataframe(issues)

    output = io.StringIO()
    df.to_csv(output, index=False)
    output.seek(0)

    return output.getvalue().encode('utf-8')


def generate_excel_export(issues: List[AuditIssue]) -> bytes:
    """Generate Excel workbook with findings and a summary sheet"""
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        generate_summary_dataframe(issues).to_excel(writer, sheet_name='Summary', index=False)
        generate_issues_dataframe(issues).to_excel(writer, sheet_name='Findings', index=False)

    output.seek(0)
    return output.getvalue()


def generate_summary_dataframe(issues: List[AuditIssue]) -> pd.DataFrame:
    """Finding counts per category and severity (all categories listed)"""
    rows = []
    for category in settings.CATEGORIES:
        in_category = [i for i in issues if i.category == category]
        errors = len([i for i in in_category if i.severity == settings.SEVERITY_ERROR])
        warnings = len([i for i in in_category if i.severity == settings.SEVERITY_WARNING])
        rows.append({
            'Category': settings.CATEGORY_LABELS[category],
            'Errors': errors,
            'Warnings': warnings,
            'Total': errors + warnings,
        })

    return pd.DataFrame(rows, columns=['Category', 'Errors', 'Warnings', 'Total'])


def export_filename(prefix: str = "audit_findings", today: Optional[date] = None, extension: str = "csv") -> str:
    """e.g. audit_findings_2024-03-04.csv"""
    today = today or date.today()
    return f"{sanitize_filename(prefix)}_{today.strftime(settings.DATE_FORMAT)}.{extension}"
