from datetime import datetime, timedelta

import pytest

from task_manager.core.enums import Priority
from task_manager.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def test_create_task_resolves_assignee_by_email(container, employee, admin):
    task_id = container.task_service.create_task(
        {"title": "Write report", "assignedEmail": "EMP@example.com", "priority": "URGENT", "endDate": "2025-03-12"},
        created_by=admin.uid,
    )
    task = container.task_service.get_task(task_id)
    assert task.assigned_to == employee.uid
    assert task.assigned_name == "Eve Employee"
    assert task.priority == Priority.HIGH
    assert task.status == "pending"
    assert task.end_date == datetime(2025, 3, 12)
    assert task.created_by == admin.uid


def test_create_task_requires_title(container):
    with pytest.raises(ValidationError):
        container.task_service.create_task({"title": "  "})


def test_end_date_before_start_date_is_rejected(container):
    with pytest.raises(ValidationError):
        container.task_service.create_task({"title": "x", "startDate": "2025-03-10", "endDate": "2025-03-01"})


def test_bulk_create_reports_per_row(container):
    result = container.task_service.bulk_create(
        [
            {"title": "A"},
            {},
            {"title": "B", "endDate": "not a date"},
            {"title": "C", "priority": "low"},
        ]
    ).to_dict()

    assert result["count"] == 2
    assert [r["index"] for r in result["results"]] == [0, 1, 2, 3]
    assert result["results"][1] == {"index": 1, "ok": False, "error": "missing title"}
    assert result["results"][2]["ok"] is False
    assert result["results"][0]["ok"] and result["results"][3]["ok"]
    assert len(container.task_service.list_tasks()) == 2


def test_bulk_create_write_failure_marks_valid_rows_failed(container, repos):
    repos.tasks.fail_bulk = True
    result = container.task_service.bulk_create([{"title": "A"}, {"title": ""}])
    assert result.count == 0
    assert result.results[0].error == "batch write failed"
    assert result.results[1].error == "missing title"


def test_closing_mark_range(container, fixed_now):
    task_id = container.task_service.create_task({"title": "A"})
    with pytest.raises(ValidationError):
        container.task_service.set_closing_mark(task_id, 101)
    with pytest.raises(ValidationError):
        container.task_service.set_closing_mark(task_id, -5)

    task = container.task_service.set_closing_mark(task_id, "95", now=fixed_now)
    assert task.closing_mark == 95.0
    assert task.closing_marked_at == fixed_now


def test_mark_overdue_as_delayed(container, fixed_now):
    service = container.task_service
    overdue = service.create_task({"title": "late", "status": "in progress", "endDate": fixed_now - timedelta(days=2)})
    done = service.create_task({"title": "done", "status": "completed", "endDate": fixed_now - timedelta(days=2)})
    open_ = service.create_task({"title": "open", "status": "in progress", "endDate": fixed_now + timedelta(days=2)})

    assert service.mark_overdue_as_delayed(fixed_now) == [overdue]
    assert service.get_task(overdue).status == "delayed"
    assert service.get_task(done).status == "completed"
    assert service.get_task(open_).status == "in-progress"
    assert [t.task_id for t in service.list_by_status("Delayed")] == [overdue]


def test_update_task_normalizes_fields(container):
    task_id = container.task_service.create_task({"title": "A"})
    task = container.task_service.update_task(task_id, {"priority": "High priority", "description": "more"})
    assert task.priority == Priority.HIGH
    assert task.description == "more"


def test_missing_task_raises_not_found(container):
    with pytest.raises(NotFoundError):
        container.task_service.delete_task("nope")
    with pytest.raises(NotFoundError):
        container.task_service.update_status("nope", "completed")


def test_require_assignee(container, employee):
    task_id = container.task_service.create_task({"title": "A", "assignedTo": employee.uid})
    assert container.task_service.require_assignee(task_id, uid=employee.uid, email=None).task_id == task_id
    with pytest.raises(AuthorizationError):
        container.task_service.require_assignee(task_id, uid="someone", email="someone@example.com")


def test_list_tasks_newest_first(container):
    first = container.task_service.create_task({"title": "first"})
    second = container.task_service.create_task({"title": "second"})
    assert [t.task_id for t in container.task_service.list_tasks()] == [second, first]


def test_bulk_create_rejects_non_mapping_rows(container):
    result = container.task_service.bulk_create([{"title": "A"}, "garbage", ["title"], None])
    assert result.count == 1
    assert [r.error for r in result.results[1:]] == ["invalid row", "invalid row", "missing title"]
