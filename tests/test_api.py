from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.users.model import CallerIdentity


def test_mark_bulk_end_to_end(client, auth_header, admin):
    resp = client.post(
        "/attendance/mark-bulk",
        json={
            "date": "2024-03-01",
            "students": [{"studentId": 1, "status": "Present"}, {"studentId": 2, "status": "Absent"}],
        },
        headers=auth_header(admin),
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "Marked 2 students, 0 failed"
    assert body["data"] == {
        "success": 2,
        "failed": 0,
        "results": [
            {"studentId": 1, "action": "created", "status": "Present"},
            {"studentId": 2, "action": "created", "status": "Absent"},
        ],
        "errors": [],
    }


def test_mark_bulk_with_empty_list_is_rejected(client, auth_header, admin):
    resp = client.post("/attendance/mark-bulk", json={"students": []}, headers=auth_header(admin))

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Students array is required"}


def test_mark_then_remark_reports_update(client, auth_header, admin):
    payload = {"studentId": 1, "status": "Present", "date": "2024-03-01"}

    first = client.post("/attendance/mark", json=payload, headers=auth_header(admin)).get_json()
    second = client.post(
        "/attendance/mark", json=dict(payload, status="Absent"), headers=auth_header(admin)
    ).get_json()

    assert first["action"] == "created"
    assert second["action"] == "updated"
    assert second["message"] == "Attendance updated successfully"
    assert second["data"] == {"id": first["data"]["id"], "studentId": 1, "date": "2024-03-01", "status": "Absent"}


@pytest.mark.parametrize(
    "method, url",
    [
        ("get", "/attendance/today"),
        ("post", "/attendance/mark"),
        ("get", "/students"),
        ("get", "/reports/attendance"),
        ("get", "/api/dashboard"),
    ],
)
def test_protected_routes_need_a_token(client, method, url):
    resp = getattr(client, method)(url)

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "No token provided"}


def test_bad_token_is_401(client):
    resp = client.get("/attendance/today", headers={"Authorization": "Bearer nope"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid token"


def test_login_cookie_authenticates_later_requests(client):
    resp = client.post("/auth/login", json={"email": "teacher@pgp.com", "password": "password123"})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["user"]["role"] == "teacher"
    assert "HttpOnly" in resp.headers["Set-Cookie"]

    me = client.get("/auth/me")
    assert me.get_json()["data"] == {"id": 2, "name": "John Teacher", "role": "teacher"}


def test_login_with_wrong_password(client):
    resp = client.post("/auth/login", json={"email": "teacher@pgp.com", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid credentials"


def test_teacher_outside_any_period_is_forbidden(client, auth_header, teacher):
    # no timetable rows for the teacher at all
    resp = client.post(
        "/attendance/mark",
        json={"studentId": 1, "status": "Present", "date": "2024-03-01"},
        headers=auth_header(teacher),
    )

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "You can only mark attendance during your assigned period"


def test_unknown_student_is_404(client, auth_header, admin):
    resp = client.post(
        "/attendance/mark", json={"studentId": 99, "status": "Present"}, headers=auth_header(admin)
    )

    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Student 99 not found"


def test_storage_failure_is_500_without_details(client, repos, auth_header, admin):
    repos.attendance.fail_for.add(1)

    resp = client.post(
        "/attendance/mark", json={"studentId": 1, "status": "Present"}, headers=auth_header(admin)
    )

    assert resp.status_code == 500
    assert "MySQL" not in resp.get_json()["message"]


def test_missing_students_for_date(client, auth_header, admin):
    client.post(
        "/attendance/mark", json={"studentId": 1, "status": "Present", "date": "2024-03-01"}, headers=auth_header(admin)
    )

    body = client.get("/attendance/missing/2024-03-01", headers=auth_header(admin)).get_json()

    assert body["count"] == 2
    assert [s["rollNumber"] for s in body["data"]] == ["A002", "A003"]


def test_malformed_date_in_path_is_400(client, auth_header, admin):
    resp = client.get("/attendance/date/03-01-2024", headers=auth_header(admin))

    assert resp.status_code == 400


def test_student_history_route(client, auth_header, admin):
    client.post(
        "/attendance/mark", json={"studentId": 2, "status": "Present", "date": "2024-03-01"}, headers=auth_header(admin)
    )

    body = client.get("/attendance/student/2", headers=auth_header(admin)).get_json()

    assert body["data"]["student"]["rollNumber"] == "A002"
    assert body["data"]["summary"]["percentage"] == 100


def test_create_student_route(client, auth_header, admin, teacher):
    payload = {"name": "Deepa", "rollNumber": "A004", "class": "CSE-A"}

    created = client.post("/students/create", json=payload, headers=auth_header(admin))
    denied = client.post("/students/create", json=dict(payload, rollNumber="A005"), headers=auth_header(teacher))

    assert created.status_code == 201
    assert created.get_json()["data"]["course"] == "B.Tech"
    assert denied.status_code == 403


@pytest.mark.parametrize(
    "fmt, mimetype, magic",
    [
        ("csv", "text/csv", b"\xef\xbb\xbfDate,"),
        ("excel", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", b"PK"),
        ("pdf", "application/pdf", b"%PDF"),
    ],
)
def test_report_export_formats(client, auth_header, admin, fmt, mimetype, magic):
    client.post(
        "/attendance/mark", json={"studentId": 1, "status": "Present", "date": "2024-03-01"}, headers=auth_header(admin)
    )

    resp = client.get(f"/reports/export/{fmt}?className=CSE-A", headers=auth_header(admin))

    assert resp.status_code == 200
    assert resp.mimetype == mimetype
    assert resp.headers["Content-Disposition"].startswith("attachment; filename=attendance_report_")
    assert resp.data.startswith(magic)


def test_report_export_unknown_format(client, auth_header, admin):
    resp = client.get("/reports/export/docx", headers=auth_header(admin))

    assert resp.status_code == 404


def test_unknown_route_is_json_404(client):
    resp = client.get("/nope")

    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Route not found"}


def test_bulk_mark_by_role_outside_marking_groups_is_403(client, repos, auth_header):
    librarian = CallerIdentity(user_id=9, role="librarian")

    resp = client.post(
        "/attendance/mark-bulk",
        json={"date": "2024-03-01", "students": [{"studentId": 1, "status": "Absent"}]},
        headers=auth_header(librarian),
    )

    assert resp.status_code == 403
    assert resp.get_json() == {"success": False, "message": "Unauthorized"}
    assert repos.attendance.records == {}


def test_create_student_with_numeric_fields(client, auth_header, admin):
    resp = client.post(
        "/students/create",
        json={"name": 5, "rollNumber": 77, "className": "CSE-A"},
        headers=auth_header(admin),
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert (data["name"], data["rollNumber"], data["class"]) == ("5", "77", "CSE-A")


def test_update_period_can_unassign_teacher(client, repos, auth_header, admin):
    period = repos.timetable.add(teacher_id=2, day="Monday", start="09:00", end="10:00")
    url = f"/timetable/update/{period.period_id}"

    kept = client.put(url, json={"subject": "Physics"}, headers=auth_header(admin)).get_json()
    cleared = client.put(url, json={"teacherId": None}, headers=auth_header(admin)).get_json()

    assert kept["data"]["teacherId"] == 2
    assert cleared["data"]["teacherId"] is None
    assert repos.timetable.get_by_id(period.period_id).teacher_id is None
