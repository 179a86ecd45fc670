# salary_tracker/salaries/engine.py
"""
Payroll arithmetic and aggregation.

All money is handled as ``Decimal`` quantized to cents (ROUND_HALF_UP).
Tax is rounded once and net salary is derived from the rounded tax, so
``net_salary == gross - tax_amount`` always holds exactly.
"""
from calendar import monthrange
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func, extract
from sqlalchemy.orm import Session

from salary_tracker.employees.models import Employee
from salary_tracker.exceptions import InvalidInputError, NotFoundError
from salary_tracker.salaries.models import Salary

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
# largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def to_money(value: Any, field: str = "value") -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError(f"{field} must be a number")
    if not amount.is_finite():
        raise InvalidInputError(f"{field} must be a finite number")
    try:
        return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInputError(f"{field} is too large")


@dataclass(frozen=True)
class SalaryBreakdown:
    base_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    tax_percentage: Decimal
    gross_salary: Decimal
    tax_amount: Decimal
    net_salary: Decimal


def calculate_net_salary(base_salary, bonus=0, deductions=0, tax_percentage=0) -> SalaryBreakdown:
    """Compute gross, tax and net salary for one payment.

    gross = base + bonus - deductions
    tax   = gross * tax_percentage / 100
    net   = gross - tax
    """
    base = to_money(base_salary, "base_salary")
    bonus_amt = to_money(bonus, "bonus")
    deduction_amt = to_money(deductions, "deductions")
    rate = to_money(tax_percentage, "tax_percentage")

    for field, amount in (("base_salary", base), ("bonus", bonus_amt), ("deductions", deduction_amt)):
        if amount < 0:
            raise InvalidInputError(f"{field} cannot be negative")
        if amount > MAX_AMOUNT:
            raise InvalidInputError(f"{field} cannot exceed {MAX_AMOUNT}")
    if rate < 0 or rate > HUNDRED:
        raise InvalidInputError("tax_percentage must be between 0 and 100")

    gross = base + bonus_amt - deduction_amt
    if gross < 0:
        raise InvalidInputError("deductions cannot exceed base_salary plus bonus")
    if gross > MAX_AMOUNT:
        raise InvalidInputError(f"base_salary plus bonus minus deductions cannot exceed {MAX_AMOUNT}")

    tax = (gross * rate / HUNDRED).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    net = gross - tax

    return SalaryBreakdown(
        base_salary=base,
        bonus=bonus_amt,
        deductions=deduction_amt,
        tax_percentage=rate,
        gross_salary=gross,
        tax_amount=tax,
        net_salary=net,
    )


def apply_calculation(salary: Salary, breakdown: SalaryBreakdown) -> Salary:
    """Copy inputs and derived fields of ``breakdown`` onto the ORM row."""
    salary.base_salary = breakdown.base_salary
    salary.bonus = breakdown.bonus
    salary.deductions = breakdown.deductions
    salary.tax_percentage = breakdown.tax_percentage
    salary.tax_amount = breakdown.tax_amount
    salary.net_salary = breakdown.net_salary
    return salary


# -------------------- periods --------------------
def first_last_day(year: int, month: int) -> Tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise InvalidInputError("month must be between 1 and 12")
    if not 1 <= int(year) <= 9999:
        raise InvalidInputError("year is out of range")
    first = date(year, month, 1)
    last = date(year, month, monthrange(year, month)[1])
    return first, last


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


# -------------------- serialization --------------------
def serialize_salary(salary: Salary, employee: Optional[Employee] = None) -> Dict[str, Any]:
    row = {
        "id": salary.id,
        "employee_id": salary.employee_id,
        "base_salary": to_money(salary.base_salary),
        "bonus": to_money(salary.bonus),
        "deductions": to_money(salary.deductions),
        "tax_percentage": to_money(salary.tax_percentage),
        "tax_amount": to_money(salary.tax_amount),
        "net_salary": to_money(salary.net_salary),
        "payment_date": salary.payment_date,
        "notes": salary.notes,
        "created_at": salary.created_at,
        "updated_at": salary.updated_at,
    }
    if employee is not None:
        row["employee_name"] = employee.name
        row["employee_position"] = employee.position
        row["employee_email"] = employee.email
    return row


# -------------------- aggregation --------------------
_SUM_COLUMNS = (
    ("total_base_salary", Salary.base_salary),
    ("total_bonus", Salary.bonus),
    ("total_deductions", Salary.deductions),
    ("total_tax", Salary.tax_amount),
    ("total_net_salary", Salary.net_salary),
)


def _sum_columns():
    return [func.coalesce(func.sum(col), 0).label(name) for name, col in _SUM_COLUMNS]


def _totals_from_row(row) -> Dict[str, Decimal]:
    return {name: to_money(getattr(row, name)) for name, _ in _SUM_COLUMNS}


def salaries_with_employee(db: Session):
    return db.query(Salary, Employee).join(Employee, Salary.employee_id == Employee.id)


def monthly_payroll(db: Session, year: int, month: int) -> Dict[str, Any]:
    """All payments of one payroll period plus their column totals."""
    first, last = first_last_day(year, month)
    period = (Salary.payment_date >= first, Salary.payment_date <= last)

    rows = (
        salaries_with_employee(db)
        .filter(*period)
        .order_by(Employee.name, Salary.payment_date)
        .all()
    )
    totals = db.query(*_sum_columns(), func.count(Salary.id).label("payment_count")).filter(*period).one()

    return {
        "month": f"{first.year:04d}-{first.month:02d}",
        "employee_count": len(rows),
        "payment_count": int(totals.payment_count or 0),
        "salaries": [serialize_salary(s, e) for s, e in rows],
        "summary": _totals_from_row(totals),
    }


def yearly_summary(db: Session, year: int) -> Dict[str, Any]:
    """Per-month totals for ``year`` (months without payments are omitted) and a year total."""
    first, _ = first_last_day(year, 1)
    _, last = first_last_day(year, 12)
    period = (Salary.payment_date >= first, Salary.payment_date <= last)
    month_col = extract("month", Salary.payment_date)

    grouped = (
        db.query(
            month_col.label("month"),
            *_sum_columns(),
            func.count(Salary.id).label("payment_count"),
            func.count(func.distinct(Salary.employee_id)).label("employee_count"),
        )
        .filter(*period)
        .group_by(month_col)
        .order_by(month_col)
        .all()
    )

    monthly = []
    for row in grouped:
        entry = {"month": int(row.month)}
        entry.update(_totals_from_row(row))
        entry["payment_count"] = int(row.payment_count or 0)
        entry["employee_count"] = int(row.employee_count or 0)
        monthly.append(entry)

    total_row = db.query(
        *_sum_columns(),
        func.count(Salary.id).label("payment_count"),
        func.count(func.distinct(Salary.employee_id)).label("employee_count"),
    ).filter(*period).one()
    year_total = _totals_from_row(total_row)
    year_total["payment_count"] = int(total_row.payment_count or 0)
    year_total["employee_count"] = int(total_row.employee_count or 0)

    return {"year": year, "monthly_summary": monthly, "year_total": year_total}


def employee_history(db: Session, employee_id: int) -> Dict[str, Any]:
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")

    salaries = (
        db.query(Salary)
        .filter(Salary.employee_id == employee_id)
        .order_by(Salary.payment_date.desc(), Salary.id.desc())
        .all()
    )
    return {"employee": employee.to_dict(), "salaries": [serialize_salary(s) for s in salaries]}


def dashboard_stats(db: Session, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()

    total_employees = db.query(func.count(Employee.id)).filter(Employee.status == "active").scalar() or 0

    first, last = first_last_day(today.year, today.month)
    current = db.query(
        func.coalesce(func.sum(Salary.net_salary), 0).label("total"),
        func.count(Salary.id).label("payment_count"),
    ).filter(Salary.payment_date >= first, Salary.payment_date <= last).one()

    best = (
        db.query(Salary.employee_id, func.max(Salary.net_salary).label("net_salary"))
        .group_by(Salary.employee_id)
        .subquery()
    )
    highest = (
        db.query(Employee, best.c.net_salary)
        .join(best, best.c.employee_id == Employee.id)
        .order_by(best.c.net_salary.desc())
        .first()
    )
    highest_paid = None
    if highest is not None:
        emp, net = highest
        highest_paid = {"id": emp.id, "name": emp.name, "position": emp.position, "net_salary": to_money(net)}

    # trend covers the current month and the 11 before it
    start_year, start_month = shift_month(today.year, today.month, -11)
    trend_start, _ = first_last_day(start_year, start_month)
    year_col = extract("year", Salary.payment_date)
    month_col = extract("month", Salary.payment_date)
    trend_rows = (
        db.query(
            year_col.label("year"),
            month_col.label("month"),
            func.coalesce(func.sum(Salary.net_salary), 0).label("total"),
            func.count(Salary.id).label("payment_count"),
        )
        .filter(Salary.payment_date >= trend_start, Salary.payment_date <= last)
        .group_by(year_col, month_col)
        .order_by(year_col, month_col)
        .all()
    )
    salary_trend = [
        {
            "month": f"{int(r.year):04d}-{int(r.month):02d}",
            "total": to_money(r.total),
            "payment_count": int(r.payment_count),
        }
        for r in trend_rows
    ]

    recent = (
        salaries_with_employee(db)
        .order_by(Salary.payment_date.desc(), Salary.id.desc())
        .limit(5)
        .all()
    )

    positions = (
        db.query(Employee.position, func.count(Employee.id).label("count"))
        .filter(Employee.status == "active")
        .group_by(Employee.position)
        .order_by(func.count(Employee.id).desc(), Employee.position)
        .all()
    )

    return {
        "total_employees": int(total_employees),
        "monthly_payroll": {
            "month": f"{today.year:04d}-{today.month:02d}",
            "total": to_money(current.total),
            "payment_count": int(current.payment_count or 0),
        },
        "highest_paid_employee": highest_paid,
        "salary_trend": salary_trend,
        "recent_payments": [serialize_salary(s, e) for s, e in recent],
        "position_breakdown": [{"position": p, "count": int(c)} for p, c in positions],
    }
