"""
Tests for storage.audit_log.AuditLog: JSON-lines audit trail.
"""
import json
from datetime import datetime

import pytest

from storage.audit_log import AuditLog


@pytest.fixture
def audit_log(tmp_path):
    return AuditLog(str(tmp_path / "logs" / "audit_log.jsonl"))


def test_creates_parent_directory(tmp_path):
    log = AuditLog(str(tmp_path / "nested" / "dir" / "audit.jsonl"))
    assert log.log_path.parent.is_dir()


def test_log_action_writes_json_line(audit_log):
    audit_log.log_action("review", "ana", {"record_id": "PA-1"}, timestamp=datetime(2024, 3, 4, 9, 30))

    lines = audit_log.log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0]) == {
        "timestamp": "2024-03-04T09:30:00",
        "scope": "decree",
        "action": "review",
        "user": "ana",
        "details": {"record_id": "PA-1"},
    }


def test_unknown_scope_raises(audit_log):
    with pytest.raises(ValueError):
        audit_log.log_action("login", "ana", {}, scope="billing")
    assert not audit_log.log_path.exists()


def test_convenience_loggers(audit_log):
    audit_log.log_data_load(source="pa_records", file_name="permisos.csv", user="ana", records_loaded=12)
    audit_log.log_audit_run("ana", record_count=12, employee_count=40, finding_count=3)
    audit_log.log_export(export_type="CSV", user="ana", record_count=3)

    logs = audit_log.get_recent_logs()
    assert [entry["action"] for entry in logs] == ["data_load", "audit_run", "export"]
    assert logs[1]["details"] == {"record_count": 12, "employee_count": 40, "finding_count": 3}


def test_keeps_only_most_recent_entries(tmp_path):
    log = AuditLog(str(tmp_path / "audit.jsonl"), max_entries=3)
    for i in range(5):
        log.log_action(f"action-{i}", "ana", {})

    assert len(log.log_path.read_text(encoding="utf-8").splitlines()) == 3
    assert [entry["action"] for entry in log.get_recent_logs()] == ["action-2", "action-3", "action-4"]


def test_recent_logs_limit_and_scope(audit_log):
    audit_log.log_action("one", "ana", {})
    audit_log.log_action("grant", "root", {}, scope="admin")
    audit_log.log_action("two", "ana", {})

    assert [e["action"] for e in audit_log.get_recent_logs(limit=2)] == ["grant", "two"]
    assert [e["action"] for e in audit_log.get_recent_logs(scope="admin")] == ["grant"]


def test_missing_file_returns_empty(audit_log):
    assert audit_log.get_recent_logs() == []


def test_unreadable_lines_are_skipped(audit_log):
    audit_log.log_action("one", "ana", {})
    with open(audit_log.log_path, "a", encoding="utf-8") as f:
        f.write("{not json\n")
    audit_log.log_action("two", "ana", {})

    assert [e["action"] for e in audit_log.get_recent_logs()] == ["one", "two"]
