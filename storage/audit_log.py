"""
Audit trail logging
"""
from datetime import datetime
from typing import Optional
import json
import logging
from pathlib import Path

from config import settings

logger = logging.getLogger(__name__)


class AuditLog:
    """
    Maintains an audit trail of user actions as JSON lines, keeping only the
    most recent ``max_entries`` lines.
    """

    def __init__(self, log_path: Optional[str] = None, max_entries: int = settings.AUDIT_LOG_MAX_ENTRIES):
        self.log_path = Path(log_path or settings.AUDIT_LOG_PATH)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.max_entries = max_entries

    def log_action(
        self,
        action: str,
        user: str,
        details: dict,
        scope: str = "decree",
        timestamp: Optional[datetime] = None
    ):
        """Log an action to the audit trail"""
        if scope not in settings.AUDIT_SCOPES:
            raise ValueError(f"Unknown audit scope: {scope}")

        if timestamp is None:
            timestamp = datetime.now()

        log_entry = {
            'timestamp': timestamp.isoformat(),
            'scope': scope,
            'action': action,
            'user': user,
            'details': details
        }

        # Append to log file
        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')

        self._truncate()

    def _truncate(self):
        """Drop the oldest lines beyond max_entries"""
        with open(self.log_path, 'r', encoding='utf-8') as f:
            lines = [line for line in f if line.strip()]

        if len(lines) <= self.max_entries:
            return

        with open(self.log_path, 'w', encoding='utf-8') as f:
            f.writelines(lines[-self.max_entries:])

    def log_audit_run(
        self,
        user: str,
        record_count: int,
        employee_count: int,
        finding_count: int
    ):
        """Log a consistency audit run"""
        self.log_action(
            action='audit_run',
            user=user,
            details={
                'record_count': record_count,
                'employee_count': employee_count,
                'finding_count': finding_count
            }
        )

    def log_data_load(
        self,
        source: str,
        file_name: str,
        user: str,
        records_loaded: int
    ):
        """Log a data load action"""
        self.log_action(
            action='data_load',
            user=user,
            details={
                'source': source,
                'file_name': file_name,
                'records_loaded': records_loaded
            }
        )

    def log_export(
        self,
        export_type: str,
        user: str,
        record_count: int
    ):
        """Log an export action"""
        self.log_action(
            action='export',
            user=user,
            details={
                'export_type': export_type,
                'record_count': record_count
            }
        )

    def get_recent_logs(self, limit: int = 100, scope: Optional[str] = None) -> list:
        """Get recent log entries, newest last"""
        if not self.log_path.exists():
            return []

        logs = []
        with open(self.log_path, 'r', encoding='utf-8') as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning("Skipping unreadable audit log line in %s", self.log_path)
                    continue
                if scope is None or entry.get('scope') == scope:
                    logs.append(entry)

        # Return most recent entries
        return logs[-limit:]
