from task_manager.evaluation.summaries import member_summaries, status_breakdown
from task_manager.tasks.model import Task
from task_manager.users.model import User


def test_status_breakdown_counts_canonical_statuses():
    tasks = [
        Task(task_id="1", title="a", status="Completed"),
        Task(task_id="2", title="b", status="in_progress"),
        Task(task_id="3", title="c", status="pending"),
        Task(task_id="4", title="d", status="cancelled"),
    ]
    assert status_breakdown(tasks) == {"completed": 1, "in process": 2, "delayed": 0, "cancelled": 1}


def test_member_summary_uses_closed_tasks_and_scales_marks():
    users = [User(uid="u1", email="eve@example.com", name="Eve")]
    tasks = [
        Task(task_id="1", title="a", status="completed", assigned_to="u1", closing_mark=80),
        Task(task_id="2", title="b", status="completed", assigned_to="u1", closing_mark=100),
        Task(task_id="3", title="c", status="delayed", assigned_to="u1"),
        Task(task_id="4", title="d", status="in progress", assigned_to="u1"),
    ]
    [summary] = member_summaries(tasks, users)
    assert summary.name == "Eve"
    assert (summary.completed, summary.delayed, summary.total) == (2, 1, 3)
    assert summary.completion_percentage == 67
    assert summary.marked_count == 2
    assert summary.marks_scaled == 90
