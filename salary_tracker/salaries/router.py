# salary_tracker/salaries/router.py
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from salary_tracker.auth.dependencies import get_current_user, require_admin
from salary_tracker.database import get_db
from salary_tracker.employees.models import Employee
from salary_tracker.salaries import engine
from salary_tracker.salaries.export import history_csv, payroll_csv, safe_filename_part
from salary_tracker.salaries.models import Salary
from salary_tracker.salaries.schemas import SalaryCreateSchema, SalaryUpdateSchema
from salary_tracker.utils.pdf_generator import generate_salary_slip, slip_filename

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/salaries", tags=["salaries"], dependencies=[Depends(get_current_user)])


def _salary_with_employee_or_404(db: Session, salary_id: int):
    row = engine.salaries_with_employee(db).filter(Salary.id == salary_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Salary record not found")
    return row


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# -------------------- reports --------------------
@router.get("/monthly")
def get_monthly_payroll(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
):
    return engine.monthly_payroll(db, year, month)


@router.get("/export")
def export_payroll(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    format: str = "csv",
    db: Session = Depends(get_db),
):
    fmt = format.lower()
    if fmt not in ("csv", "json"):
        raise HTTPException(status_code=400, detail="format must be 'csv' or 'json'")

    payroll = engine.monthly_payroll(db, year, month)
    if fmt == "json":
        return payroll["salaries"]

    logger.info("Exporting payroll %s (%d rows)", payroll["month"], len(payroll["salaries"]))
    return _csv_response(payroll_csv(payroll["salaries"]), f"payroll_{year}_{month:02d}.csv")


@router.get("/employee/{employee_id}")
def get_employee_salary_history(employee_id: int, db: Session = Depends(get_db)):
    return engine.employee_history(db, employee_id)


@router.get("/employee/{employee_id}/export")
def export_employee_salary_history(employee_id: int, db: Session = Depends(get_db)):
    history = engine.employee_history(db, employee_id)
    name = safe_filename_part(history["employee"]["name"].replace(" ", "_"))
    return _csv_response(history_csv(history["salaries"]), f"salary_history_{name}.csv")


# -------------------- CRUD --------------------
@router.get("")
def list_salaries(
    employee_id: Optional[int] = None,
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    min_salary: Optional[Decimal] = None,
    max_salary: Optional[Decimal] = None,
    db: Session = Depends(get_db),
):
    q = engine.salaries_with_employee(db)

    if employee_id is not None:
        q = q.filter(Salary.employee_id == employee_id)

    if month is not None:
        if year is None:
            raise HTTPException(status_code=400, detail="year is required when filtering by month")
        first, last = engine.first_last_day(year, month)
        q = q.filter(Salary.payment_date >= first, Salary.payment_date <= last)
    elif year is not None:
        first, _ = engine.first_last_day(year, 1)
        _, last = engine.first_last_day(year, 12)
        q = q.filter(Salary.payment_date >= first, Salary.payment_date <= last)

    if start_date is not None:
        q = q.filter(Salary.payment_date >= start_date)
    if end_date is not None:
        q = q.filter(Salary.payment_date <= end_date)

    if min_salary is not None:
        q = q.filter(Salary.net_salary >= min_salary)
    if max_salary is not None:
        q = q.filter(Salary.net_salary <= max_salary)

    rows = q.order_by(Salary.payment_date.desc(), Salary.id.desc()).all()
    return [engine.serialize_salary(s, e) for s, e in rows]


@router.get("/{salary_id}")
def get_salary(salary_id: int, db: Session = Depends(get_db)):
    salary, employee = _salary_with_employee_or_404(db, salary_id)
    return engine.serialize_salary(salary, employee)


@router.get("/{salary_id}/slip")
def download_salary_slip(salary_id: int, db: Session = Depends(get_db)):
    salary, employee = _salary_with_employee_or_404(db, salary_id)
    pdf = generate_salary_slip(employee, salary)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={slip_filename(employee, salary)}"},
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_salary(data: SalaryCreateSchema, db: Session = Depends(get_db), admin=Depends(require_admin)):
    employee = db.get(Employee, data.employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")

    breakdown = engine.calculate_net_salary(data.base_salary, data.bonus, data.deductions, data.tax_percentage)
    salary = Salary(employee_id=employee.id, payment_date=data.payment_date, notes=data.notes)
    engine.apply_calculation(salary, breakdown)

    db.add(salary)
    db.commit()
    db.refresh(salary)
    logger.info("Salary %s created for employee %s by user %s (net=%s)", salary.id, employee.id, admin.id, salary.net_salary)
    return engine.serialize_salary(salary, employee)


@router.put("/{salary_id}")
def update_salary(
    salary_id: int,
    data: SalaryUpdateSchema,
    db: Session = Depends(get_db),
    admin=Depends(require_admin),
):
    salary, employee = _salary_with_employee_or_404(db, salary_id)
    changes = data.model_dump(exclude_unset=True)

    def pick(field):
        value = changes.get(field)
        return getattr(salary, field) if value is None else value

    # derived fields always follow the (possibly updated) inputs
    breakdown = engine.calculate_net_salary(
        pick("base_salary"), pick("bonus"), pick("deductions"), pick("tax_percentage")
    )
    engine.apply_calculation(salary, breakdown)

    if changes.get("payment_date") is not None:
        salary.payment_date = changes["payment_date"]
    if "notes" in changes:
        salary.notes = changes["notes"]

    db.commit()
    db.refresh(salary)
    logger.info("Salary %s updated by user %s (net=%s)", salary.id, admin.id, salary.net_salary)
    return engine.serialize_salary(salary, employee)


@router.delete("/{salary_id}")
def delete_salary(salary_id: int, db: Session = Depends(get_db), admin=Depends(require_admin)):
    salary = db.get(Salary, salary_id)
    if not salary:
        raise HTTPException(status_code=404, detail="Salary record not found")

    db.delete(salary)
    db.commit()
    logger.info("Salary %s deleted by user %s", salary_id, admin.id)
    return {"message": "Salary record deleted successfully"}
