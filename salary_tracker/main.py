# salary_tracker/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from salary_tracker import config
from salary_tracker.database import init_db
from salary_tracker.exceptions import InvalidInputError, NotFoundError
from salary_tracker.rate_limit import limiter, rate_limit_exceeded_handler

# routers
from salary_tracker.auth.router import router as auth_router
from salary_tracker.employees.router import router as employee_router
from salary_tracker.salaries.router import router as salary_router
from salary_tracker.dashboard.router import router as dashboard_router
from salary_tracker.pages_router import router as pages_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.configure_logging()
    init_db()
    logger.info("Salary Tracker started with %d routes", len(app.routes))
    yield


app = FastAPI(title="Salary Tracker", lifespan=lifespan)
app.state.limiter = limiter

# -------------------- Middleware & static files --------------------
# inner to CORSMiddleware: 429 responses keep their CORS headers
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(config.UPLOAD_DIR)), name="uploads")
if config.STATIC_DIR.is_dir():
    app.mount("/static", StaticFiles(directory=str(config.STATIC_DIR)), name="static")


# -------------------- Error handlers --------------------
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Internal server error"})


# -------------------- Routes --------------------
@app.get("/api/health", tags=["health"])
def health():
    return {"status": "ok", "message": "Salary Tracker API is running"}


app.include_router(auth_router, prefix="/api")
app.include_router(employee_router, prefix="/api")
app.include_router(salary_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")
app.include_router(pages_router)


def run():
    """Console entry point: ``salary-tracker``."""
    import uvicorn

    config.configure_logging()
    uvicorn.run("salary_tracker.main:app", host=config.HOST, port=config.PORT)
