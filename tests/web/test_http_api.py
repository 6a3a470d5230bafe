import io
from datetime import datetime, timedelta


def test_requests_without_credentials_are_unauthorized(client):
    resp = client.get("/api/tasks")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized"}

    resp = client.get("/api/tasks", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_employee_cannot_use_admin_endpoints(client, employee_headers):
    for method, url in [("get", "/api/admin/dashboard"), ("post", "/api/tasks"), ("get", "/api/users")]:
        resp = getattr(client, method)(url, headers=employee_headers, json={})
        assert resp.status_code == 403
        assert resp.get_json() == {"error": "Forbidden"}


def test_signup_login_and_session(client):
    resp = client.post(
        "/api/auth/signup",
        json={"email": "new@example.com", "password": "secret1", "name": "New", "role": "admin"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["user"]["role"] == "employee"
    assert body["token"]

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401

    resp = client.post("/api/auth/login", json={"email": "new@example.com", "password": "secret1"})
    assert resp.status_code == 200
    assert client.get("/api/auth/me").get_json()["user"]["email"] == "new@example.com"

    resp = client.post("/api/auth/login", json={"email": "new@example.com", "password": "wrong1"})
    assert resp.status_code == 401


def test_task_crud(client, admin_headers, employee_headers, employee):
    resp = client.post(
        "/api/tasks",
        headers=admin_headers,
        json={"title": "Write report", "assignedTo": employee.uid, "priority": "high"},
    )
    assert resp.status_code == 201
    task_id = resp.get_json()["id"]

    assert client.put("/api/tasks", headers=admin_headers, json={"title": "x"}).get_json() == {"error": "Task ID required"}
    assert client.delete("/api/tasks", headers=admin_headers).status_code == 400

    resp = client.put(f"/api/tasks?taskId={task_id}", headers=admin_headers, json={"description": "details"})
    assert resp.status_code == 200

    mine = client.get("/api/tasks", headers=employee_headers).get_json()
    assert [t["id"] for t in mine] == [task_id]
    assert mine[0]["description"] == "details"
    assert mine[0]["priority"] == "high"

    resp = client.put(f"/api/tasks/{task_id}/status", headers=employee_headers, json={"status": "completed"})
    assert resp.get_json()["task"]["status"] == "completed"

    resp = client.put(f"/api/tasks/{task_id}/mark", headers=admin_headers, json={"mark": 120})
    assert resp.status_code == 400

    resp = client.delete(f"/api/tasks?taskId={task_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert client.get(f"/api/tasks?taskId={task_id}", headers=admin_headers).status_code == 404


def test_employee_cannot_touch_other_tasks(client, admin_headers, employee_headers, admin):
    task_id = client.post("/api/tasks", headers=admin_headers, json={"title": "admin only", "assignedTo": admin.uid}).get_json()["id"]
    resp = client.put(f"/api/tasks/{task_id}/status", headers=employee_headers, json={"status": "done"})
    assert resp.status_code == 403


def test_bulk_tasks_endpoint(client, admin_headers):
    resp = client.post("/api/admin/bulkTasks", headers=admin_headers, json={"tasks": []})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "No tasks provided"}

    resp = client.post("/api/admin/bulkTasks", headers=admin_headers, json={"tasks": [{"title": "a"}, {"title": ""}]})
    body = resp.get_json()
    assert body["count"] == 1
    assert body["results"][1] == {"index": 1, "ok": False, "error": "missing title"}


def test_bulk_tasks_reports_non_object_rows(client, admin_headers):
    resp = client.post("/api/admin/bulkTasks", headers=admin_headers, json={"tasks": [{"title": "ok"}, "garbage", 7]})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["count"] == 1
    assert body["results"][1] == {"index": 1, "ok": False, "error": "invalid row"}
    assert body["results"][2] == {"index": 2, "ok": False, "error": "invalid row"}


def test_bulk_upload_csv(client, admin_headers, employee):
    data = {
        "file": (io.BytesIO(b"Title,Due Date\nAudit,2025-03-05\nReview,\n"), "tasks.csv"),
        "kind": "tasks",
        "assignedEmail": "emp@example.com",
    }
    resp = client.post("/api/admin/bulkUpload", headers=admin_headers, data=data, content_type="multipart/form-data")
    assert resp.status_code == 200
    assert resp.get_json()["accepted"] == 2

    resp = client.post(
        "/api/admin/bulkUpload",
        headers=admin_headers,
        data={"file": (io.BytesIO(b"x"), "tasks.pdf"), "kind": "tasks"},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400


def test_kpi_scores_are_write_once(client, admin_headers, employee_headers, employee):
    payload = {"userId": employee.uid, "month": "March", "year": 2025, "score": 88}
    assert client.post("/api/admin/kpi", headers=admin_headers, json=payload).status_code == 201

    resp = client.post("/api/admin/kpi", headers=admin_headers, json={**payload, "score": 10})
    assert resp.status_code == 409
    assert resp.get_json() == {"error": "Score already exists for Eve Employee in March 2025"}

    mine = client.get("/api/employee/kpi", headers=employee_headers).get_json()
    assert mine["average"] == 88
    assert [e["score"] for e in mine["entries"]] == [88.0]


def test_user_management(client, admin_headers, admin):
    resp = client.post("/api/users", headers=admin_headers, json={"email": "bob@example.com", "name": "Bob"})
    assert resp.status_code == 201
    uid = resp.get_json()["id"]

    assert client.put("/api/users", headers=admin_headers, json={}).status_code == 400
    resp = client.put(f"/api/users?userId={uid}", headers=admin_headers, json={"department": "QA"})
    assert resp.status_code == 200
    assert client.get(f"/api/users?userId={uid}", headers=admin_headers).get_json()["department"] == "QA"

    resp = client.delete(f"/api/users?userId={uid}", headers=admin_headers)
    assert resp.get_json()["ok"] is True

    resp = client.post("/api/admin/deleteUser", headers=admin_headers, json={"uid": admin.uid})
    assert resp.status_code == 403

    resp = client.post("/api/admin/deleteUser", headers=admin_headers, json={})
    assert resp.status_code == 400


def test_reminders_reach_the_employee(client, admin_headers, employee_headers, employee):
    due = (datetime.now() + timedelta(days=1)).strftime("%Y-%m-%d")
    task_id = client.post(
        "/api/tasks", headers=admin_headers, json={"title": "Report", "assignedTo": employee.uid, "endDate": due}
    ).get_json()["id"]

    resp = client.post("/api/admin/reminders", headers=admin_headers, json={"taskIds": []})
    assert resp.status_code == 400

    resp = client.post("/api/admin/reminders", headers=admin_headers, json={"taskIds": [task_id], "view": "due"})
    assert resp.status_code == 201
    assert resp.get_json()["count"] == 1

    inbox = client.get("/api/notifications", headers=employee_headers).get_json()["notifications"]
    assert [n["taskId"] for n in inbox] == [task_id]

    dashboard = client.get("/api/employee/dashboard", headers=employee_headers).get_json()
    assert len(dashboard["portalReminders"]) == 1


def test_attendance_endpoints(client, admin_headers, employee_headers, employee):
    resp = client.post(
        "/api/admin/attendance", headers=admin_headers, json={"userId": employee.uid, "date": "2025-03-10", "status": "half day"}
    )
    assert resp.get_json()["entry"]["status"] == "halfDay"

    summary = client.get("/api/employee/attendance?year=2025&month=3", headers=employee_headers).get_json()["summary"]
    assert summary["halfDay"] == 1
    assert summary["percentage"] == 50.0

    resp = client.post("/api/admin/attendance", headers=admin_headers, json={"userId": employee.uid, "status": "present"})
    assert resp.status_code == 400


def test_assignments_ownership(client, admin_headers, employee_headers, employee, admin):
    resp = client.post("/api/assignments", headers=admin_headers, json={"employeeId": employee.uid, "taskId": "t1"})
    assignment_id = resp.get_json()["id"]

    resp = client.put(f"/api/assignments?assignmentId={assignment_id}", headers=employee_headers, json={"progress": 40})
    assert resp.get_json()["assignment"]["progress"] == 40

    resp = client.get(f"/api/assignments?employeeId={admin.uid}", headers=employee_headers)
    assert resp.status_code == 403


def test_admin_dashboard_and_activity(client, admin_headers, employee):
    client.post("/api/tasks", headers=admin_headers, json={"title": "a", "assignedTo": employee.uid})

    data = client.get("/api/admin/dashboard?view=all", headers=admin_headers).get_json()
    assert data["totals"]["tasks"] == 1
    assert data["reminders"]["view"] == "all"

    logs = client.get("/api/admin/activity?limit=1", headers=admin_headers).get_json()["logs"]
    assert logs[0]["action"] == "Task Created"
