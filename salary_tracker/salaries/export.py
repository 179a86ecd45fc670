# salary_tracker/salaries/export.py
import csv
import io
import re
from typing import Any, Dict, Iterable

PAYROLL_COLUMNS = [
    ("Employee Name", "employee_name"),
    ("Position", "employee_position"),
    ("Email", "employee_email"),
    ("Base Salary", "base_salary"),
    ("Bonus", "bonus"),
    ("Deductions", "deductions"),
    ("Tax %", "tax_percentage"),
    ("Tax Amount", "tax_amount"),
    ("Net Salary", "net_salary"),
    ("Payment Date", "payment_date"),
]

HISTORY_COLUMNS = [
    ("Payment Date", "payment_date"),
    ("Base Salary", "base_salary"),
    ("Bonus", "bonus"),
    ("Deductions", "deductions"),
    ("Tax %", "tax_percentage"),
    ("Tax Amount", "tax_amount"),
    ("Net Salary", "net_salary"),
    ("Notes", "notes"),
]


def rows_to_csv(rows: Iterable[Dict[str, Any]], columns) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([header for header, _ in columns])
    for row in rows:
        writer.writerow(["" if row.get(key) is None else row.get(key) for _, key in columns])
    return buffer.getvalue()


def payroll_csv(salaries: Iterable[Dict[str, Any]]) -> str:
    return rows_to_csv(salaries, PAYROLL_COLUMNS)


def history_csv(salaries: Iterable[Dict[str, Any]]) -> str:
    return rows_to_csv(salaries, HISTORY_COLUMNS)


def safe_filename_part(s: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]", "_", str(s or "")).strip("_") or "employee"
