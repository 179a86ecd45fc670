# salary_tracker/salaries/models.py

from sqlalchemy import Column, Integer, Date, DateTime, Text, Numeric, ForeignKey, func
from sqlalchemy.orm import relationship

from salary_tracker.database import Base


class Salary(Base):
    __tablename__ = "salaries"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    base_salary = Column(Numeric(12, 2), nullable=False)
    bonus = Column(Numeric(12, 2), nullable=False, default=0)
    deductions = Column(Numeric(12, 2), nullable=False, default=0)
    tax_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    # derived at write time, see salaries.engine.apply_calculation
    tax_amount = Column(Numeric(12, 2), nullable=False, default=0)
    net_salary = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    employee = relationship("Employee", back_populates="salaries")

    def __repr__(self):
        return f"<Salary id={self.id} employee_id={self.employee_id} payment_date={self.payment_date}>"
