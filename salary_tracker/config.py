# salary_tracker/config.py
import os
import pathlib
import logging

from dotenv import load_dotenv, find_dotenv

# project root (one level above the package)
ROOT = pathlib.Path(__file__).resolve().parent.parent
BASE_DIR = pathlib.Path(__file__).resolve().parent

env_path = ROOT / ".env"
if not env_path.exists():
    env_path = find_dotenv(usecwd=True)

if env_path:
    load_dotenv(env_path)

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ---------------- Database ----------------
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{ROOT / 'salary_tracker.db'}")
SQL_ECHO = _env_bool("SQL_ECHO")

# ---------------- Auth ----------------
_DEV_JWT_SECRET = "dev-only-salary-tracker-secret-DO-NOT-USE-IN-PRODUCTION"
JWT_SECRET = os.getenv("JWT_SECRET") or _DEV_JWT_SECRET
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES") or 60 * 24)

# ---------------- Uploads ----------------
UPLOAD_DIR = pathlib.Path(os.getenv("UPLOAD_DIR") or ROOT / "uploads")
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE") or 5 * 1024 * 1024)

# ---------------- Web ----------------
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT") or 8000)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

# ---------------- Rate limits (per client IP) ----------------
RATE_LIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", True)
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100 per 15 minutes")
RATE_LIMIT_AUTH = os.getenv("RATE_LIMIT_AUTH", "10 per 15 minutes")

# ---------------- Misc ----------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
COMPANY_NAME = os.getenv("COMPANY_NAME", "Salary Tracker")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@salarytracker.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


def configure_logging(level: str = None):
    """Configure root logging once for the process (entry points call this)."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if JWT_SECRET == _DEV_JWT_SECRET:
        logger.warning("JWT_SECRET is not set. Using a development-only default; set JWT_SECRET in production!")
