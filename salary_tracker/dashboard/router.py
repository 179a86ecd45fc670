# salary_tracker/dashboard/router.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from salary_tracker.auth.dependencies import get_current_user
from salary_tracker.database import get_db
from salary_tracker.salaries import engine

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(get_current_user)])


@router.get("/stats")
def dashboard_stats(db: Session = Depends(get_db)):
    return engine.dashboard_stats(db)


@router.get("/payroll-summary")
def payroll_summary(year: Optional[int] = None, db: Session = Depends(get_db)):
    return engine.yearly_summary(db, year or date.today().year)
