"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

REMINDER_WINDOW_DAYS = 3
RECENT_TASKS_LIMIT = 6
DEFAULT_ACTIVITY_LIMIT = 100
DEFAULT_PRIORITY = "medium"
DEFAULT_TASK_STATUS = "pending"

GRADE_F_REMARK = "need improvment"

MAX_CLOSING_MARK = 100

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Attendance % policy weights; "off" days are not counted at all.
ATTENDANCE_WEIGHTS = {
    "present": 1.0,
    "outdoor": 1.0,
    "shortLeave": 0.8,
    "halfDay": 0.5,
    "absent": 0.0,
}
