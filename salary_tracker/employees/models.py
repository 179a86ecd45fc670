# salary_tracker/employees/models.py

from sqlalchemy import Column, Integer, String, Date, DateTime, func
from sqlalchemy.orm import relationship

from salary_tracker.database import Base

EMPLOYEE_STATUSES = ("active", "inactive")


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(150), unique=True, nullable=True)
    starting_date = Column(Date, nullable=False)
    profile_picture = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # deleting an employee deletes its salary history in the same flush
    salaries = relationship(
        "Salary",
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="Salary.payment_date.desc()",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "phone": self.phone,
            "email": self.email,
            "starting_date": self.starting_date,
            "profile_picture": self.profile_picture,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self):
        return f"<Employee id={self.id} name={self.name} position={self.position}>"
