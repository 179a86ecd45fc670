# salary_tracker/pages_router.py
# Server-rendered pages. They are shells: data comes from /api/* with the
# bearer token the login page stores in localStorage. Pages are not rate limited.

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from salary_tracker import config
from salary_tracker.rate_limit import limiter

router = APIRouter(include_in_schema=False)
templates = Jinja2Templates(directory=str(config.TEMPLATES_DIR))


def _page(request: Request, template: str, **context):
    ctx = {"company_name": config.COMPANY_NAME}
    ctx.update(context)
    return templates.TemplateResponse(request, template, ctx)


@router.get("/login", response_class=HTMLResponse)
@limiter.exempt
def login_page(request: Request):
    return _page(request, "login.html")


@router.get("/", response_class=HTMLResponse)
@limiter.exempt
def dashboard_page(request: Request):
    return _page(request, "dashboard.html", active="dashboard")


@router.get("/employees", response_class=HTMLResponse)
@limiter.exempt
def employees_page(request: Request):
    return _page(request, "employees.html", active="employees")


@router.get("/employees/{employee_id}/history", response_class=HTMLResponse)
@limiter.exempt
def salary_history_page(request: Request, employee_id: int):
    return _page(request, "salary_history.html", active="employees", employee_id=employee_id)


@router.get("/salaries", response_class=HTMLResponse)
@limiter.exempt
def salaries_page(request: Request):
    return _page(request, "salaries.html", active="salaries")


@router.get("/reports", response_class=HTMLResponse)
@limiter.exempt
def reports_page(request: Request):
    return _page(request, "reports.html", active="reports")
