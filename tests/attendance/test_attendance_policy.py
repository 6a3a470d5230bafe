from datetime import date, datetime

import pytest

from task_manager.attendance.model import AttendanceEntry
from task_manager.attendance.service import attendance_percentage, normalize_attendance_status, summarize_attendance
from task_manager.core.enums import AttendanceStatus
from task_manager.core.exceptions import ValidationError


def _entries(*statuses):
    return [
        AttendanceEntry(entry_id=f"u1_{i}", user_id="u1", work_date=date(2025, 3, i + 1), status=s)
        for i, s in enumerate(statuses)
    ]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Present", AttendanceStatus.PRESENT),
        ("half day", AttendanceStatus.HALF_DAY),
        ("Half-Day", AttendanceStatus.HALF_DAY),
        ("short_leave", AttendanceStatus.SHORT_LEAVE),
        ("Holiday", AttendanceStatus.OFF),
        ("on-site", AttendanceStatus.OUTDOOR),
        (AttendanceStatus.ABSENT, AttendanceStatus.ABSENT),
    ],
)
def test_normalize_attendance_status(raw, expected):
    assert normalize_attendance_status(raw) == expected


def test_unknown_status_is_rejected():
    with pytest.raises(ValidationError):
        normalize_attendance_status("vacationing")


def test_weighted_percentage_ignores_off_days():
    s = AttendanceStatus
    summary = summarize_attendance(
        _entries(s.PRESENT, s.PRESENT, s.OUTDOOR, s.SHORT_LEAVE, s.HALF_DAY, s.ABSENT, s.OFF, s.OFF, s.OFF)
    )
    assert summary.present == 2
    assert summary.off == 3
    assert summary.percentage == pytest.approx(4.3 / 6 * 100)
    assert summary.to_dict()["halfDay"] == 1


def test_only_off_days_gives_zero():
    assert summarize_attendance(_entries(AttendanceStatus.OFF)).percentage == 0.0
    assert attendance_percentage([]) == 0.0


def test_marking_twice_overwrites_the_day(container, employee, fixed_now):
    user = container.user_service.get_user(employee.uid)
    container.attendance_service.mark(user, "2025-03-10", "present", now=fixed_now)
    entry = container.attendance_service.mark(user, "2025-03-10", "absent", now=fixed_now)

    assert entry.entry_id == f"{employee.uid}_2025-03-10"
    entries = container.attendance_service.list_entries()
    assert len(entries) == 1
    assert entries[0].status == AttendanceStatus.ABSENT
    assert entries[0].user_name == "Eve Employee"


def test_bulk_mark_and_monthly_summary(container, employee, admin, fixed_now):
    users = container.user_service.list_users()
    ids = container.attendance_service.bulk_mark(users, datetime(2025, 3, 3, 9, 30), "present", now=fixed_now)
    assert len(ids) == 2

    container.attendance_service.mark(
        container.user_service.get_user(employee.uid), date(2025, 2, 28), "half day", now=fixed_now
    )
    march = container.attendance_service.summary_for_user(employee.uid, year=2025, month=3)
    assert march.present == 1 and march.half_day == 0
    assert march.percentage == 100.0

    overall = container.attendance_service.summary_for_user(employee.uid)
    assert overall.percentage == pytest.approx(75.0)


def test_missing_date_is_rejected(container, employee):
    user = container.user_service.get_user(employee.uid)
    with pytest.raises(ValidationError):
        container.attendance_service.mark(user, "", "present")
    with pytest.raises(ValidationError):
        container.attendance_service.mark(user, "yesterday", "present")
