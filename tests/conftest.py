"""
Pytest fixtures for the salary tracker test suite.

Every test gets its own in-memory SQLite database (StaticPool, so all
sessions share the single connection) and a TestClient whose ``get_db``
dependency is bound to it. Rate-limit counters start from zero for every
client.
"""
import os
import tempfile
from datetime import date

# must be set before salary_tracker.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="salary-tracker-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from werkzeug.security import generate_password_hash

from salary_tracker.auth.jwt_handler import token_for_user
from salary_tracker.auth.models import User
from salary_tracker.database import build_engine, get_db, init_db
from salary_tracker.employees.models import Employee
from salary_tracker.main import app
from salary_tracker.rate_limit import limiter
from salary_tracker.salaries.engine import apply_calculation, calculate_net_salary
from salary_tracker.salaries.models import Salary


@pytest.fixture
def engine():
    eng = build_engine("sqlite://", poolclass=StaticPool)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, username="admin", email="admin@example.com", password="secret123", role="admin"):
    user = User(username=username, email=email, password_hash=generate_password_hash(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_employee(db, name="John Smith", position="Software Engineer", email=None, status="active",
                  starting_date=date(2023, 1, 15)):
    emp = Employee(name=name, position=position, email=email, status=status, starting_date=starting_date)
    db.add(emp)
    db.commit()
    db.refresh(emp)
    return emp


def make_salary(db, employee, payment_date, base=7500, bonus=500, deductions=200, tax=15, notes=None):
    salary = Salary(employee_id=employee.id, payment_date=payment_date, notes=notes)
    apply_calculation(salary, calculate_net_salary(base, bonus, deductions, tax))
    db.add(salary)
    db.commit()
    db.refresh(salary)
    return salary


@pytest.fixture
def admin(db):
    return make_user(db)


@pytest.fixture
def auth_headers(admin):
    return {"Authorization": f"Bearer {token_for_user(admin)}"}


@pytest.fixture
def viewer_headers(db):
    viewer = make_user(db, username="viewer", email="viewer@example.com", role="viewer")
    return {"Authorization": f"Bearer {token_for_user(viewer)}"}
