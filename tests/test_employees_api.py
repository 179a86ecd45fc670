from datetime import date
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from salary_tracker import config
from salary_tracker.employees.models import Employee
from salary_tracker.main import app
from salary_tracker.salaries.models import Salary

from conftest import make_employee, make_salary

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _create(client, headers, **fields):
    data = {"name": "Jane Doe", "position": "Data Analyst", "starting_date": "2024-02-01"}
    data.update(fields)
    return client.post("/api/employees", data=data, headers=headers)


def test_create_employee_with_defaults(client, auth_headers):
    res = _create(client, auth_headers, email="Jane@Company.com", phone="+1-555-0100")

    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "Jane Doe"
    assert body["email"] == "jane@company.com"
    assert body["status"] == "active"
    assert body["starting_date"] == "2024-02-01"
    assert body["profile_picture"] is None


def test_create_requires_name_position_and_starting_date(client, auth_headers):
    res = client.post("/api/employees", data={"name": "Jane Doe"}, headers=auth_headers)

    assert res.status_code == 400
    assert res.json()["detail"] == "Name, position and starting date are required"


def test_create_rejects_bad_values(client, auth_headers):
    assert _create(client, auth_headers, starting_date="01/02/2024").status_code == 400
    assert _create(client, auth_headers, email="not-an-email").status_code == 400
    assert _create(client, auth_headers, status="retired").status_code == 400


def test_create_rejects_duplicate_email(client, db, auth_headers):
    make_employee(db, email="jane@company.com")

    res = _create(client, auth_headers, email="jane@company.com")

    assert res.status_code == 400
    assert res.json()["detail"] == "Employee with this email already exists"


def test_create_with_profile_picture(client, auth_headers):
    res = client.post(
        "/api/employees",
        data={"name": "Jane Doe", "position": "Data Analyst", "starting_date": "2024-02-01"},
        files={"profile_picture": ("me.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )

    assert res.status_code == 201
    picture = res.json()["profile_picture"]
    assert picture.startswith("/uploads/profile-") and picture.endswith(".png")
    assert (Path(config.UPLOAD_DIR) / Path(picture).name).read_bytes() == PNG_BYTES


def test_create_rejects_non_image_upload(client, auth_headers):
    res = client.post(
        "/api/employees",
        data={"name": "Jane Doe", "position": "Data Analyst", "starting_date": "2024-02-01"},
        files={"profile_picture": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )

    assert res.status_code == 400
    assert res.json()["detail"] == "Only image files are allowed"


def test_list_filters_and_sorting(client, db, auth_headers):
    make_employee(db, "Charlie Brown", "Designer", "charlie@company.com", starting_date=date(2022, 5, 1))
    make_employee(db, "Alice Green", "Software Engineer", "alice@company.com", starting_date=date(2023, 1, 1))
    make_employee(db, "Bob White", "Software Engineer", "bob@company.com", "inactive", date(2021, 3, 1))

    def names(res):
        return [e["name"] for e in res.json()]

    default = client.get("/api/employees", headers=auth_headers)
    assert names(default) == ["Alice Green", "Bob White", "Charlie Brown"]

    by_date = client.get("/api/employees", params={"sort_by": "starting_date", "sort_order": "desc"}, headers=auth_headers)
    assert names(by_date) == ["Alice Green", "Charlie Brown", "Bob White"]

    fallback = client.get("/api/employees", params={"sort_by": "salary", "sort_order": "sideways"}, headers=auth_headers)
    assert names(fallback) == ["Alice Green", "Bob White", "Charlie Brown"]

    engineers = client.get("/api/employees", params={"position": "Software Engineer"}, headers=auth_headers)
    assert names(engineers) == ["Alice Green", "Bob White"]

    active = client.get("/api/employees", params={"status": "active"}, headers=auth_headers)
    assert names(active) == ["Alice Green", "Charlie Brown"]

    search = client.get("/api/employees", params={"search": "DESIGN"}, headers=auth_headers)
    assert names(search) == ["Charlie Brown"]

    by_email = client.get("/api/employees", params={"search": "bob@"}, headers=auth_headers)
    assert names(by_email) == ["Bob White"]


def test_positions_are_distinct_and_sorted(client, db, auth_headers):
    make_employee(db, "A", "Software Engineer")
    make_employee(db, "B", "Designer")
    make_employee(db, "C", "Software Engineer")

    res = client.get("/api/employees/positions", headers=auth_headers)

    assert res.json() == ["Designer", "Software Engineer"]


def test_get_missing_employee(client, auth_headers):
    res = client.get("/api/employees/404", headers=auth_headers)

    assert res.status_code == 404
    assert res.json()["detail"] == "Employee not found"


def test_update_is_partial(client, db, auth_headers):
    emp = make_employee(db, "John Smith", "Software Engineer", "john@company.com")

    res = client.put(
        f"/api/employees/{emp.id}",
        data={"position": "Senior Software Engineer", "name": "", "status": "inactive"},
        headers=auth_headers,
    )

    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "John Smith"
    assert body["email"] == "john@company.com"
    assert body["position"] == "Senior Software Engineer"
    assert body["status"] == "inactive"


def test_update_rejects_email_of_another_employee(client, db, auth_headers):
    make_employee(db, "Sarah Johnson", email="sarah@company.com")
    emp = make_employee(db, "John Smith", email="john@company.com")

    taken = client.put(f"/api/employees/{emp.id}", data={"email": "sarah@company.com"}, headers=auth_headers)
    same = client.put(f"/api/employees/{emp.id}", data={"email": "john@company.com"}, headers=auth_headers)

    assert taken.status_code == 400
    assert taken.json()["detail"] == "Email already used by another employee"
    assert same.status_code == 200


def test_update_replaces_profile_picture(client, auth_headers):
    created = client.post(
        "/api/employees",
        data={"name": "Jane Doe", "position": "Data Analyst", "starting_date": "2024-02-01"},
        files={"profile_picture": ("a.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    ).json()
    old_file = Path(config.UPLOAD_DIR) / Path(created["profile_picture"]).name

    res = client.put(
        f"/api/employees/{created['id']}",
        files={"profile_picture": ("b.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )

    assert res.status_code == 200
    assert res.json()["profile_picture"] != created["profile_picture"]
    assert not old_file.exists()


def test_delete_removes_employee_and_salaries(client, db, session_factory, auth_headers):
    emp = make_employee(db, "John Smith")
    other = make_employee(db, "Sarah Johnson")
    make_salary(db, emp, date(2024, 1, 25))
    make_salary(db, emp, date(2024, 2, 25))
    make_salary(db, other, date(2024, 2, 25))
    emp_id = emp.id

    res = client.delete(f"/api/employees/{emp_id}", headers=auth_headers)

    assert res.status_code == 200
    assert res.json() == {"message": "Employee deleted successfully"}

    fresh = session_factory()
    try:
        assert fresh.get(Employee, emp_id) is None
        assert fresh.query(Salary).filter(Salary.employee_id == emp_id).count() == 0
        assert fresh.query(Salary).count() == 1
    finally:
        fresh.close()

    assert client.get(f"/api/employees/{emp_id}", headers=auth_headers).status_code == 404


def _upload_files():
    return set(Path(config.UPLOAD_DIR).iterdir())


def test_failed_commit_removes_new_picture(client, db, auth_headers, monkeypatch):
    emp = make_employee(db, "John Smith")
    before = _upload_files()

    def failing_commit(self):
        raise RuntimeError("disk full")

    monkeypatch.setattr(Session, "commit", failing_commit)
    quiet = TestClient(app, raise_server_exceptions=False)

    created = quiet.post(
        "/api/employees",
        data={"name": "Jane Doe", "position": "Data Analyst", "starting_date": "2024-02-01"},
        files={"profile_picture": ("a.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    updated = quiet.put(
        f"/api/employees/{emp.id}",
        files={"profile_picture": ("b.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )

    assert created.status_code == 500
    assert updated.status_code == 500
    assert _upload_files() == before
