import os

from dotenv import load_dotenv

# Load .env from the project root
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./travel_agency.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "0"))
DB_POOL_TIMEOUT_SECONDS = int(os.getenv("DB_POOL_TIMEOUT_SECONDS", "30"))

ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:5173",
    ]

# Auth (JWT)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24)))

# Rate limit (per client address)
RATE_LIMIT_ENABLED = _env_flag("RATE_LIMIT_ENABLED", "1")
RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))
# Peers allowed to set X-Forwarded-For (comma separated addresses)
RATE_LIMIT_TRUSTED_PROXIES = frozenset(
    address.strip() for address in os.getenv("RATE_LIMIT_TRUSTED_PROXIES", "").split(",") if address.strip()
)

# Initial employee account (dev bootstrap)
DEV_EMPLOYEE_EMAIL = os.getenv("DEV_EMPLOYEE_EMAIL", "admin@mlaku-mulu.com").strip()
DEV_EMPLOYEE_PASSWORD = os.getenv("DEV_EMPLOYEE_PASSWORD", "").strip()
DEV_EMPLOYEE_FIRST_NAME = os.getenv("DEV_EMPLOYEE_FIRST_NAME", "Admin").strip()
DEV_EMPLOYEE_LAST_NAME = os.getenv("DEV_EMPLOYEE_LAST_NAME", "Employee").strip()
