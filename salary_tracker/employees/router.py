# salary_tracker/employees/router.py
import logging
import re
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from salary_tracker.auth.dependencies import get_current_user, require_admin
from salary_tracker.database import get_db
from salary_tracker.employees.models import EMPLOYEE_STATUSES, Employee
from salary_tracker.utils.uploads import delete_upload, save_profile_picture

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"], dependencies=[Depends(get_current_user)])

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SORT_COLUMNS = {
    "name": Employee.name,
    "position": Employee.position,
    "starting_date": Employee.starting_date,
    "created_at": Employee.created_at,
}


# ----------------- helpers -----------------
def _blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() in ("", "None")


def _parse_date(value: str, field: str) -> date:
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} must be a date (YYYY-MM-DD)")


def _clean_email(value: Optional[str]) -> Optional[str]:
    if _blank(value):
        return None
    email = value.strip().lower()
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="Invalid email address")
    return email


def _clean_status(value: Optional[str]) -> str:
    st = (value or "").strip().lower()
    if st not in EMPLOYEE_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of: {', '.join(EMPLOYEE_STATUSES)}")
    return st


def get_employee_or_404(db: Session, employee_id: int) -> Employee:
    emp = db.get(Employee, employee_id)
    if not emp:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(Employee.id).filter(Employee.email == email)
    if exclude_id is not None:
        q = q.filter(Employee.id != exclude_id)
    return q.first() is not None


def _commit_or_discard_upload(db: Session, new_picture: Optional[str]) -> None:
    """Commit; a picture saved for this request is removed again if the commit fails."""
    try:
        db.commit()
    except Exception:
        db.rollback()
        delete_upload(new_picture)
        raise


# ----------------- routes -----------------
@router.get("/positions")
def list_positions(db: Session = Depends(get_db)):
    rows = db.query(Employee.position).distinct().order_by(Employee.position).all()
    return [r[0] for r in rows]


@router.get("")
def list_employees(
    search: Optional[str] = None,
    position: Optional[str] = None,
    employee_status: Optional[str] = Query(None, alias="status"),
    sort_by: str = "name",
    sort_order: str = "asc",
    db: Session = Depends(get_db),
):
    q = db.query(Employee)

    if not _blank(search):
        term = f"%{search.strip()}%"
        q = q.filter(or_(Employee.name.ilike(term), Employee.email.ilike(term), Employee.position.ilike(term)))

    if not _blank(position):
        q = q.filter(Employee.position == position)

    if not _blank(employee_status):
        q = q.filter(Employee.status == _clean_status(employee_status))

    column = SORT_COLUMNS.get(sort_by, Employee.name)
    ordering = column.desc() if sort_order.lower() == "desc" else column.asc()
    employees = q.order_by(ordering, Employee.id).all()

    return [e.to_dict() for e in employees]


@router.get("/{employee_id}")
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    return get_employee_or_404(db, employee_id).to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_employee(
    name: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    starting_date: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    employee_status: Optional[str] = Form(None, alias="status"),
    profile_picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    if _blank(name) or _blank(position) or _blank(starting_date):
        raise HTTPException(status_code=400, detail="Name, position and starting date are required")

    email_val = _clean_email(email)
    if email_val and _email_taken(db, email_val):
        raise HTTPException(status_code=400, detail="Employee with this email already exists")

    emp = Employee(
        name=name.strip(),
        position=position.strip(),
        phone=None if _blank(phone) else phone.strip(),
        email=email_val,
        starting_date=_parse_date(starting_date, "starting_date"),
        status=_clean_status(employee_status) if not _blank(employee_status) else "active",
    )

    if profile_picture is not None and profile_picture.filename:
        emp.profile_picture = save_profile_picture(profile_picture)

    db.add(emp)
    _commit_or_discard_upload(db, emp.profile_picture)
    db.refresh(emp)
    logger.info("Employee %s created by user %s", emp.id, admin.id)
    return emp.to_dict()


@router.put("/{employee_id}")
def update_employee(
    employee_id: int,
    name: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    starting_date: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    employee_status: Optional[str] = Form(None, alias="status"),
    profile_picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    emp = get_employee_or_404(db, employee_id)

    # blank fields keep their current value
    if not _blank(email):
        email_val = _clean_email(email)
        if email_val != emp.email and _email_taken(db, email_val, exclude_id=emp.id):
            raise HTTPException(status_code=400, detail="Email already used by another employee")
        emp.email = email_val

    if not _blank(name):
        emp.name = name.strip()
    if not _blank(position):
        emp.position = position.strip()
    if not _blank(phone):
        emp.phone = phone.strip()
    if not _blank(starting_date):
        emp.starting_date = _parse_date(starting_date, "starting_date")
    if not _blank(employee_status):
        emp.status = _clean_status(employee_status)

    old_picture = new_picture = None
    if profile_picture is not None and profile_picture.filename:
        old_picture = emp.profile_picture
        new_picture = emp.profile_picture = save_profile_picture(profile_picture)

    _commit_or_discard_upload(db, new_picture)
    db.refresh(emp)

    if old_picture:
        delete_upload(old_picture)

    logger.info("Employee %s updated by user %s", emp.id, admin.id)
    return emp.to_dict()


@router.delete("/{employee_id}")
def delete_employee(employee_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    emp = get_employee_or_404(db, employee_id)
    picture = emp.profile_picture
    salary_count = len(emp.salaries)

    # salaries go in the same transaction via the relationship cascade
    db.delete(emp)
    db.commit()

    delete_upload(picture)
    logger.info("Employee %s deleted by user %s (%d salary records removed)", employee_id, admin.id, salary_count)
    return {"message": "Employee deleted successfully"}
