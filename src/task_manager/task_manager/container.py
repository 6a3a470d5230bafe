from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activity.mysql_activity_repository import MySQLActivityRepository
from .activity.repository import ActivityRepository
from .activity.service import ActivityRecorder, ActivityService
from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.repository import AssignmentRepository
from .assignments.service import AssignmentService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import AdminDashboardService, EmployeeDashboardService
from .database.connection import DBConfig, DatabaseConnection
from .events.bus import EventBus
from .identity.mysql_identity_repository import MySQLIdentityRepository
from .identity.repository import IdentityRepository
from .identity.service import AuthService
from .identity.tokens import TokenService
from .imports.service import BulkImportService
from .kpi.mysql_kpi_repository import MySQLKpiRepository
from .kpi.repository import KpiRepository
from .kpi.service import KpiService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Repositories:
    identities: IdentityRepository
    users: UserRepository
    tasks: TaskRepository
    kpi: KpiRepository
    activity: ActivityRepository
    notifications: NotificationRepository
    attendance: AttendanceRepository
    assignments: AssignmentRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    bus: EventBus
    repos: Repositories

    auth_service: AuthService
    user_service: UserService
    task_service: TaskService
    kpi_service: KpiService
    activity_service: ActivityService
    activity_recorder: ActivityRecorder
    notification_service: NotificationService
    attendance_service: AttendanceService
    assignment_service: AssignmentService
    import_service: BulkImportService
    admin_dashboard_service: AdminDashboardService
    employee_dashboard_service: EmployeeDashboardService


def build_services(
    repos: Repositories,
    *,
    secret_key: str,
    token_max_age_seconds: int = 3600,
    default_employee_password: str = "12345678",
    reminder_signature: str = "",
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    bus = EventBus()

    tokens = TokenService(secret_key, max_age_seconds=token_max_age_seconds)
    auth_service = AuthService(repos.identities, repos.users, tokens, bus=bus)
    task_service = TaskService(repos.tasks, repos.users, bus=bus)
    user_service = UserService(
        repos.users,
        auth_service,
        task_service,
        default_password=default_employee_password,
        bus=bus,
    )
    kpi_service = KpiService(repos.kpi)
    activity_service = ActivityService(repos.activity)
    activity_recorder = ActivityRecorder(activity_service)
    activity_recorder.attach(bus)
    notification_service = NotificationService(repos.notifications, signature=reminder_signature)
    attendance_service = AttendanceService(repos.attendance)
    assignment_service = AssignmentService(repos.assignments)
    import_service = BulkImportService(task_service, user_service)
    admin_dashboard_service = AdminDashboardService(task_service, user_service, kpi_service, bus=bus)
    employee_dashboard_service = EmployeeDashboardService(task_service, kpi_service, notification_service)

    return Container(
        conn=conn,
        bus=bus,
        repos=repos,
        auth_service=auth_service,
        user_service=user_service,
        task_service=task_service,
        kpi_service=kpi_service,
        activity_service=activity_service,
        activity_recorder=activity_recorder,
        notification_service=notification_service,
        attendance_service=attendance_service,
        assignment_service=assignment_service,
        import_service=import_service,
        admin_dashboard_service=admin_dashboard_service,
        employee_dashboard_service=employee_dashboard_service,
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_max_age_seconds: int = 3600,
    default_employee_password: str = "12345678",
    reminder_signature: str = "",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    repos = Repositories(
        identities=MySQLIdentityRepository(conn),
        users=MySQLUserRepository(conn),
        tasks=MySQLTaskRepository(conn),
        kpi=MySQLKpiRepository(conn),
        activity=MySQLActivityRepository(conn),
        notifications=MySQLNotificationRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        assignments=MySQLAssignmentRepository(conn),
    )
    return build_services(
        repos,
        secret_key=secret_key,
        token_max_age_seconds=token_max_age_seconds,
        default_employee_password=default_employee_password,
        reminder_signature=reminder_signature,
        conn=conn,
    )
