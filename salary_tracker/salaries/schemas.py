# salary_tracker/salaries/schemas.py
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from salary_tracker.salaries.engine import MAX_AMOUNT


class SalaryCreateSchema(BaseModel):
    employee_id: int
    base_salary: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    bonus: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    deductions: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    tax_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)
    payment_date: date
    notes: Optional[str] = None


class SalaryUpdateSchema(BaseModel):
    base_salary: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    bonus: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    deductions: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    tax_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    payment_date: Optional[date] = None
    notes: Optional[str] = None
