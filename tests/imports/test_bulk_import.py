import io
from datetime import datetime

import pandas as pd
import pytest

from task_manager.core.enums import Priority
from task_manager.core.exceptions import ValidationError
from task_manager.imports.rows import extract_task_row, extract_user_row, normalize_key, read_rows


def test_normalize_key():
    assert normalize_key("Start Date") == "startdate"
    assert normalize_key("due_date") == "duedate"


def test_extract_task_row_matches_loose_headers():
    row = extract_task_row({"Task": "Audit", "Start Date": "2025-03-01", "Due Date": "2025-03-05", "Priority": "High", "Status": "Done"})
    assert row.title == "Audit"
    assert row.start_date == datetime(2025, 3, 1)
    assert row.end_date == datetime(2025, 3, 5)
    assert row.priority == Priority.HIGH
    assert row.status == "completed"


def test_extract_task_row_skips_untitled_and_bad_dates():
    assert extract_task_row({"title": "  ", "end date": "2025-03-05"}) is None
    assert extract_task_row({"title": "x", "end_date": "someday"}) is None


def test_extract_user_row():
    assert extract_user_row({"Name": "Eve", "Mail ID": "eve@example.com"}).email == "eve@example.com"
    assert extract_user_row({"Name": "No mail"}) is None


def test_read_rows_csv():
    data = b"Title,End Date,Priority\nAudit,2025-03-05,low\n,,\nReview,,\n"
    rows = read_rows("tasks.csv", io.BytesIO(data))
    assert rows[0] == {"Title": "Audit", "End Date": "2025-03-05", "Priority": "low"}
    assert rows[-1]["Title"] == "Review"


def test_read_rows_xlsx():
    buffer = io.BytesIO()
    pd.DataFrame({"Name": ["Eve", None], "Mail ID": ["eve@example.com", None]}).to_excel(buffer, index=False, engine="openpyxl")
    buffer.seek(0)

    rows = read_rows("people.xlsx", buffer)
    assert rows == [{"Name": "Eve", "Mail ID": "eve@example.com"}]


def test_read_rows_rejects_other_extensions():
    with pytest.raises(ValidationError):
        read_rows("tasks.txt", io.BytesIO(b"title\nx\n"))


def test_import_tasks_assigns_every_row(container, employee, admin):
    rows = [
        {"Title": "Audit", "End Date": "2025-03-05", "Status": "in progress"},
        {"Title": "", "End Date": "2025-03-05"},
        {"Task": "Review", "Priority": "low"},
    ]
    report = container.import_service.import_tasks(rows, assigned_email="emp@example.com", created_by=admin.uid)

    assert report.accepted == 2
    assert report.skipped == 1
    tasks = container.task_service.list_by_assignee(uid=employee.uid, email=None)
    assert sorted(t.title for t in tasks) == ["Audit", "Review"]
    assert {t.created_by for t in tasks} == {admin.uid}


def test_import_tasks_requires_assignee_and_titles(container):
    with pytest.raises(ValidationError) as exc:
        container.import_service.import_tasks([{"title": "x"}])
    assert str(exc.value) == "Please choose or enter an assignee."

    with pytest.raises(ValidationError) as exc:
        container.import_service.import_tasks([{"name": "x"}], assigned_to="u1")
    assert "Ensure there is a title column" in str(exc.value)


def test_import_users_skips_duplicates_and_existing(container, employee, admin):
    rows = [
        {"Name": "Ann", "Mail ID": "ann@example.com"},
        {"Name": "Ann again", "Mail ID": "ANN@example.com"},
        {"Name": "Eve", "Mail ID": "emp@example.com"},
        {"Mail ID": "bob@example.com"},
    ]
    report = container.import_service.import_users(rows, actor_id=admin.uid)

    assert report.accepted == 2
    assert report.skipped == 2
    bob = container.user_service.get_by_email("bob@example.com")
    assert bob.name == "bob@example.com"
    assert container.auth_service.sign_in("ann@example.com", "12345678").name == "Ann"


def test_import_users_without_email_column(container):
    with pytest.raises(ValidationError):
        container.import_service.import_users([{"Name": "Ann"}])


def test_import_users_skips_rows_with_invalid_email(container, admin):
    rows = [
        {"Name": "Ann", "Mail Id": "ann@example.com"},
        {"Name": "Broken", "Mail Id": "not-an-email"},
    ]
    report = container.import_service.import_users(rows, actor_id=admin.uid)

    assert (report.accepted, report.skipped) == (1, 1)
    assert container.user_service.get_by_email("ann@example.com").name == "Ann"
    assert extract_user_row({"Mail Id": "not-an-email"}) is None
