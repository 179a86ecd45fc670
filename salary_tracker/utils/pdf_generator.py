# salary_tracker/utils/pdf_generator.py
import io
import logging
from datetime import datetime, timezone

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from salary_tracker import config
from salary_tracker.salaries.engine import to_money
from salary_tracker.salaries.export import safe_filename_part

logger = logging.getLogger(__name__)


def slip_filename(employee, salary) -> str:
    name_part = safe_filename_part(employee.name.replace(" ", "_"))[:40]
    return f"salary_slip_emp{employee.id}_{salary.payment_date.isoformat()}_{name_part}.pdf"


def _money(value) -> str:
    return f"{to_money(value):,.2f}"


def generate_salary_slip(employee, salary) -> bytes:
    """
    Render a one-page salary slip for a stored salary record.
    Figures are printed exactly as stored; nothing is recalculated here.
    """
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    # Header
    c.setFont("Helvetica-Bold", 18)
    c.drawString(50, height - 50, config.COMPANY_NAME)
    c.setStrokeColor(colors.black)
    c.line(40, height - 65, width - 40, height - 65)

    c.setFont("Helvetica-Bold", 16)
    c.drawString(220, height - 100, "SALARY SLIP")

    c.setFont("Helvetica", 12)
    c.drawString(50, height - 130, f"Employee ID: {employee.id}")
    c.drawString(50, height - 145, f"Name: {employee.name}")
    c.drawString(50, height - 160, f"Position: {employee.position}")
    if employee.email:
        c.drawString(50, height - 175, f"Email: {employee.email}")
    c.drawString(300, height - 130, f"Payment Date: {salary.payment_date.isoformat()}")
    c.drawString(300, height - 145, f"Generated On: {datetime.now(timezone.utc).strftime('%Y-%m-%d')}")

    table_top = height - 220
    left_x = 50
    right_x = 300

    c.setFont("Helvetica-Bold", 14)
    c.drawString(left_x, table_top, "EARNINGS")
    c.setFont("Helvetica", 12)
    c.drawString(left_x, table_top - 20, f"Base Salary: {_money(salary.base_salary)}")
    c.drawString(left_x, table_top - 40, f"Bonus: {_money(salary.bonus)}")

    c.setFont("Helvetica-Bold", 14)
    c.drawString(right_x, table_top, "DEDUCTIONS")
    c.setFont("Helvetica", 12)
    c.drawString(right_x, table_top - 20, f"Deductions: {_money(salary.deductions)}")
    c.drawString(right_x, table_top - 40, f"Tax ({to_money(salary.tax_percentage)}%): {_money(salary.tax_amount)}")

    c.setFont("Helvetica-Bold", 14)
    c.drawString(50, table_top - 90, f"NET SALARY: {_money(salary.net_salary)}")

    if salary.notes:
        c.setFont("Helvetica-Oblique", 11)
        c.drawString(50, table_top - 120, f"Notes: {salary.notes[:90]}")

    # Footer
    c.line(40, 120, width - 40, 120)
    c.setFont("Helvetica", 12)
    c.drawString(50, 100, "This is a system generated payslip and does not require a signature.")

    c.showPage()
    c.save()

    logger.info("Generated salary slip for salary %s (employee %s)", salary.id, employee.id)
    return buffer.getvalue()
