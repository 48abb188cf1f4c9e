"""Tests for the HTTP API over the data store."""

import io

import pandas as pd

NEW_STUDENT = {
    "name": "Meera Nair",
    "registerNumber": "SVIT2023006",
    "branch": "Computer Science",
    "year": 2,
    "email": "meera.nair@svit.edu.in",
    "phone": "9876543215",
}

NEW_INTERNSHIP = {
    "title": "Cloud Automation",
    "description": "Automate infrastructure provisioning.",
    "duration": "2 months",
    "startDate": "2024-01-01",
    "endDate": "2024-03-01",
    "maxStudents": 1,
    "guide": "Dr. Meena Iyer",
    "skills": ["Python", "Terraform"],
}

FUTURE_SESSION = {
    "title": "Aptitude Drill",
    "description": "Timed aptitude practice.",
    "date": "2099-01-15",
    "time": "10:00 AM - 11:00 AM",
    "venue": "Seminar Hall 1",
    "speaker": "Ms. Kavita Sharma",
    "eligibility": "All students",
}


class TestHealthAndAuth:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"
        assert client.get("/health/storage").json()["status"] == "ok"

    def test_login_rejects_bad_password(self, client):
        response = client.post("/auth/login", data={"username": "admin", "password": "nope"})
        assert response.status_code == 401

    def test_me_returns_role_and_student_link(self, client, student_headers):
        me = client.get("/auth/me", headers=student_headers).json()
        assert me["role"] == "student"
        assert me["student_id"] == 1

    def test_endpoints_require_token(self, client):
        assert client.get("/api/students/").status_code in (401, 403)

    def test_invalid_token(self, client):
        response = client.get("/api/students/", headers={"Authorization": "Bearer junk"})
        assert response.status_code == 401


class TestStudentsApi:
    def test_list_uses_camel_case_fields(self, client, faculty_headers):
        students = client.get("/api/students/", headers=faculty_headers).json()
        assert len(students) == 5
        assert students[0]["registerNumber"] == "SVIT2023001"
        assert students[4]["internshipId"] is None

    def test_list_filters_and_sorts(self, client, student_headers):
        response = client.get(
            "/api/students/",
            params={"internship": "assigned", "sort_by": "name", "sort_order": "desc"},
            headers=student_headers,
        )
        assert [s["id"] for s in response.json()] == [4, 3, 2, 1]

    def test_list_rejects_bad_internship_filter(self, client, admin_headers):
        response = client.get("/api/students/", params={"internship": "maybe"}, headers=admin_headers)
        assert response.status_code == 400

    def test_create_update_delete(self, client, admin_headers):
        created = client.post("/api/students/", json=NEW_STUDENT, headers=admin_headers)
        assert created.status_code == 201
        body = created.json()
        assert body["id"] == 6
        assert body["progress"] == []

        updated = client.put("/api/students/6", json={"year": 3}, headers=admin_headers)
        assert updated.json()["year"] == 3
        assert updated.json()["name"] == "Meera Nair"

        assert client.delete("/api/students/6", headers=admin_headers).status_code == 204
        assert client.get("/api/students/6", headers=admin_headers).status_code == 404

    def test_create_validates_fields(self, client, admin_headers):
        response = client.post(
            "/api/students/", json={**NEW_STUDENT, "email": "meera"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == {"email": "Please enter a valid email address"}

    def test_students_cannot_create(self, client, student_headers):
        response = client.post("/api/students/", json=NEW_STUDENT, headers=student_headers)
        assert response.status_code == 403

    def test_progress_by_owner_and_others(self, client, student_headers):
        entry = {"date": "2023-10-01", "task": "Testing", "status": "Delayed", "remarks": "blocked"}

        own = client.post("/api/students/1/progress", json=entry, headers=student_headers)
        assert own.status_code == 201
        assert own.json()["progress"][-1] == entry
        assert len(own.json()["progress"]) == 3

        other = client.post("/api/students/2/progress", json=entry, headers=student_headers)
        assert other.status_code == 403

    def test_progress_defaults_date_and_status(self, client, faculty_headers):
        response = client.post("/api/students/3/progress", json={"task": "Setup"}, headers=faculty_headers)
        entry = response.json()["progress"][-1]
        assert entry["status"] == "In Progress"
        assert entry["date"]

    def test_null_fields_keep_current_values(self, client, admin_headers):
        response = client.put("/api/students/2", json={"email": None, "year": 4}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["email"] == "priya.sharma@svit.edu.in"
        assert response.json()["year"] == 4

    def test_facets(self, client, student_headers):
        facets = client.get("/api/students/facets", headers=student_headers).json()
        assert facets == {
            "branches": ["Computer Science", "Information Technology", "Electronics", "Mechanical"],
            "years": [3, 4],
        }

    def test_export(self, client, admin_headers):
        response = client.get("/api/students/export", headers=admin_headers)

        assert response.status_code == 200
        assert "spreadsheetml" in response.headers["content-type"]
        sheet = pd.read_excel(io.BytesIO(response.content), sheet_name="Students")
        assert len(sheet) == 5
        assert sheet.iloc[0]["Name"] == "Arun Kumar"
        assert sheet.iloc[0]["Phone"] == "+91 98765 43210"


class TestInternshipsApi:
    def test_list_includes_occupancy(self, client, student_headers):
        internships = client.get("/api/internships/", headers=student_headers).json()
        first = internships[0]
        assert first["assignedCount"] == 2
        assert first["isFull"] is False

    def test_create_forces_active(self, client, faculty_headers):
        response = client.post("/api/internships/", json=NEW_INTERNSHIP, headers=faculty_headers)
        assert response.status_code == 201
        assert response.json()["id"] == 4
        assert response.json()["status"] == "Active"

    def test_create_validates_dates(self, client, faculty_headers):
        response = client.post(
            "/api/internships/",
            json={**NEW_INTERNSHIP, "endDate": "2023-12-01"},
            headers=faculty_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"]["endDate"] == "End date cannot be before start date"

    def test_null_fields_keep_current_values(self, client, admin_headers):
        response = client.put(
            "/api/internships/1",
            json={"status": None, "guide": None, "skills": None, "maxStudents": 12},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Active"
        assert response.json()["guide"] == "Dr. Srinivas Reddy"
        assert response.json()["maxStudents"] == 12

        listing = client.get("/api/internships/", headers=admin_headers)
        assert listing.status_code == 200
        assert [i["status"] for i in listing.json()] == ["Active", "Active", "Active"]

    def test_list_filters_by_guide_and_skill(self, client, student_headers):
        by_guide = client.get("/api/internships/", params={"guide": "anitha"}, headers=student_headers).json()
        assert [i["id"] for i in by_guide] == [2]

        by_skill = client.get(
            "/api/internships/",
            params={"skill": "JavaScript", "sort_by": "startDate", "sort_order": "desc"},
            headers=student_headers,
        ).json()
        assert [i["id"] for i in by_skill] == [3, 1]

    def test_update_status(self, client, admin_headers):
        response = client.put("/api/internships/2", json={"status": "Completed"}, headers=admin_headers)
        assert response.json()["status"] == "Completed"
        assert response.json()["title"] == "Machine Learning Project"

    def test_assign_respects_capacity(self, client, admin_headers):
        internship_id = client.post("/api/internships/", json=NEW_INTERNSHIP, headers=admin_headers).json()["id"]

        first = client.post(f"/api/internships/{internship_id}/assign/5", headers=admin_headers)
        assert first.status_code == 200
        assert first.json()["internshipId"] == internship_id

        second = client.post(f"/api/internships/{internship_id}/assign/2", headers=admin_headers)
        assert second.status_code == 409
        assert "maximum capacity of 1" in second.json()["detail"]

        # Re-assigning the same student is not blocked by the full internship
        again = client.post(f"/api/internships/{internship_id}/assign/5", headers=admin_headers)
        assert again.status_code == 200

    def test_assign_unknown_records(self, client, admin_headers):
        assert client.post("/api/internships/99/assign/1", headers=admin_headers).status_code == 404
        assert client.post("/api/internships/1/assign/99", headers=admin_headers).status_code == 404

    def test_unassign(self, client, admin_headers):
        response = client.delete("/api/internships/1/assign/3", headers=admin_headers)
        assert response.json()["internshipId"] is None

        again = client.delete("/api/internships/1/assign/3", headers=admin_headers)
        assert again.status_code == 400

    def test_delete_cascades(self, client, admin_headers):
        assert client.delete("/api/internships/1", headers=admin_headers).status_code == 204

        students = client.get("/api/students/", headers=admin_headers).json()
        assert students[0]["internshipId"] is None
        assert students[2]["internshipId"] is None
        assert client.get("/api/internships/1", headers=admin_headers).status_code == 404

    def test_internship_students(self, client, student_headers):
        students = client.get("/api/internships/1/students", headers=student_headers).json()
        assert [s["id"] for s in students] == [1, 3]


class TestCRTSessionsApi:
    def _create_future_session(self, client, headers):
        response = client.post("/api/crt-sessions/", json=FUTURE_SESSION, headers=headers)
        assert response.status_code == 201
        return response.json()

    def test_create_resets_registrations(self, client, faculty_headers):
        session = self._create_future_session(client, faculty_headers)
        assert session["id"] == 4
        assert session["registeredStudents"] == []

    def test_student_registers_once(self, client, faculty_headers, student_headers):
        session = self._create_future_session(client, faculty_headers)

        client.post(f"/api/crt-sessions/{session['id']}/register", headers=student_headers)
        response = client.post(f"/api/crt-sessions/{session['id']}/register", headers=student_headers)

        assert response.status_code == 200
        assert response.json()["registeredStudents"] == [1]

        registered = client.get(
            "/api/crt-sessions/", params={"kind": "registered"}, headers=student_headers
        ).json()
        assert session["id"] in [s["id"] for s in registered]

    def test_student_cannot_register_for_past_session(self, client, student_headers):
        response = client.post("/api/crt-sessions/3/register", headers=student_headers)
        assert response.status_code == 400

    def test_student_cannot_register_someone_else(self, client, faculty_headers, student_headers):
        session = self._create_future_session(client, faculty_headers)
        response = client.post(
            f"/api/crt-sessions/{session['id']}/register",
            params={"student_id": 2},
            headers=student_headers,
        )
        assert response.status_code == 403

    def test_staff_registration_needs_student_id(self, client, admin_headers):
        assert client.post("/api/crt-sessions/1/register", headers=admin_headers).status_code == 400

        response = client.post("/api/crt-sessions/1/register", params={"student_id": 4}, headers=admin_headers)
        assert response.json()["registeredStudents"] == [1, 2, 5, 4]

    def test_unregister_is_noop_when_absent(self, client, admin_headers):
        response = client.delete("/api/crt-sessions/3/register", params={"student_id": 1}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["registeredStudents"] == [2, 3]

        response = client.delete("/api/crt-sessions/3/register", params={"student_id": 2}, headers=admin_headers)
        assert response.json()["registeredStudents"] == [3]

    def test_session_students(self, client, student_headers):
        students = client.get("/api/crt-sessions/2/students", headers=student_headers).json()
        assert [s["id"] for s in students] == [1, 3, 4]

    def test_update_and_delete(self, client, admin_headers):
        response = client.put("/api/crt-sessions/1", json={"venue": "Auditorium"}, headers=admin_headers)
        assert response.json()["venue"] == "Auditorium"
        assert response.json()["registeredStudents"] == [1, 2, 5]

        assert client.delete("/api/crt-sessions/1", headers=admin_headers).status_code == 204
        assert client.get("/api/crt-sessions/1", headers=admin_headers).status_code == 404

    def test_null_fields_keep_current_values(self, client, admin_headers):
        response = client.put(
            "/api/crt-sessions/1",
            json={"eligibility": None, "venue": None, "title": "Resume Workshop"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["eligibility"] == "All final year students"
        assert response.json()["venue"] == "Seminar Hall 1"
        assert response.json()["title"] == "Resume Workshop"

        assert client.get("/api/crt-sessions/", headers=admin_headers).status_code == 200

    def test_list_filters_by_venue_and_speaker(self, client, student_headers):
        by_venue = client.get("/api/crt-sessions/", params={"venue": "seminar"}, headers=student_headers).json()
        assert [s["id"] for s in by_venue] == [1, 3]

        by_speaker = client.get("/api/crt-sessions/", params={"speaker": "Venkat"}, headers=student_headers).json()
        assert [s["id"] for s in by_speaker] == [2]


class TestDashboardApi:
    def test_dashboard_for_each_role(self, client, admin_headers, student_headers):
        admin = client.get("/api/dashboard/", headers=admin_headers).json()
        assert admin["stats"]["totalStudents"] == 5
        assert admin["stats"]["pendingTasks"] == 1

        student = client.get("/api/dashboard/", headers=student_headers).json()
        assert len(student["studentProgress"]) == 2


def test_writes_reach_storage(client, storage, admin_headers):
    client.post("/api/students/", json=NEW_STUDENT, headers=admin_headers)

    assert "Meera Nair" in storage.get("students")
