# salary_tracker/seed.py
# Creates the admin user plus sample employees and 12 months of payments.
# Run with:  salary-tracker-seed   (or python -m salary_tracker.seed)
import logging
from datetime import date

from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from salary_tracker import config
from salary_tracker.auth.models import User
from salary_tracker.database import SessionLocal, init_db
from salary_tracker.employees.models import Employee
from salary_tracker.salaries.engine import apply_calculation, calculate_net_salary, shift_month
from salary_tracker.salaries.models import Salary

logger = logging.getLogger(__name__)

# name, position, phone, email, starting_date, (base, bonus, deductions), months employed (None = all 12)
SAMPLE_EMPLOYEES = [
    ("John Smith", "Software Engineer", "555-0101", "john.smith@company.com", "2023-01-15", (7500, 500, 200), None),
    ("Sarah Johnson", "Product Manager", "555-0102", "sarah.johnson@company.com", "2022-06-01", (8500, 1000, 300), None),
    ("Michael Brown", "UX Designer", "555-0103", "michael.brown@company.com", "2023-03-20", (6500, 300, 150), None),
    ("Emily Davis", "Software Engineer", "555-0104", "emily.davis@company.com", "2023-08-10", (7000, 200, 100), 5),
    ("David Wilson", "DevOps Engineer", "555-0105", "david.wilson@company.com", "2022-11-05", (8000, 600, 250), None),
    ("Jessica Martinez", "Data Analyst", "555-0106", "jessica.martinez@company.com", "2023-05-15", (6000, 400, 100), 7),
    ("Christopher Lee", "Software Engineer", "555-0107", "christopher.lee@company.com", "2024-01-08", (7200, 350, 180), 11),
    ("Amanda Taylor", "HR Manager", "555-0108", "amanda.taylor@company.com", "2021-04-12", (7800, 500, 200), None),
]

TAX_PERCENTAGE = 15
PAYMENT_DAY = 25


def seed(db: Session, today: date = None) -> bool:
    """Insert sample data. Returns False (and changes nothing) if users already exist."""
    if db.query(User).first():
        logger.info("Data already seeded. Skipping...")
        return False

    today = today or date.today()

    admin = User(
        username=config.ADMIN_USERNAME,
        email=config.ADMIN_EMAIL.lower(),
        password_hash=generate_password_hash(config.ADMIN_PASSWORD),
        role="admin",
    )
    db.add(admin)

    payments = 0
    for name, position, phone, email, started, (base, bonus, deductions), months in SAMPLE_EMPLOYEES:
        emp = Employee(
            name=name,
            position=position,
            phone=phone,
            email=email,
            starting_date=date.fromisoformat(started),
        )
        db.add(emp)

        for offset in range(11, -1, -1):
            if months is not None and offset >= months:
                continue
            year, month = shift_month(today.year, today.month, -offset)
            salary = Salary(employee=emp, payment_date=date(year, month, PAYMENT_DAY))
            apply_calculation(salary, calculate_net_salary(base, bonus, deductions, TAX_PERCENTAGE))
            db.add(salary)
            payments += 1

    db.commit()
    logger.info("Admin user created: %s", admin.email)
    logger.info("%d employees and %d salary records created", len(SAMPLE_EMPLOYEES), payments)
    return True


def main():
    config.configure_logging()
    init_db()
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
