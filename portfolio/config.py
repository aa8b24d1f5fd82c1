# portfolio/config.py
import os
from pathlib import Path
from dotenv import load_dotenv

# --- Load env from portfolio/.env OR .env (whichever exists) ---
root = Path(__file__).resolve().parents[1]          # project root
package_env = root / "portfolio" / ".env"
root_env = root / ".env"
if package_env.exists():
    load_dotenv(package_env)
elif root_env.exists():
    load_dotenv(root_env)

ENV = os.getenv("ENV", "dev").lower()

# === 🔐 Admin gate ===
# bcrypt hash of the admin password (see scripts/generate_password_hash.py)
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")
JWT_SECRET = os.getenv("JWT_SECRET") or os.getenv("SECRET_KEY") or "change-me-in-prod"
JWT_ALG = "HS256"
JWT_EXPIRE_SECONDS = int(os.getenv("JWT_EXPIRE_SECONDS", str(60 * 60 * 24)))  # 24h

# === 🌍 CORS Settings ===
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

# === 🗄️ Database Configuration ===
def _resolve_sqlite_url(url: str) -> str:
    """Turn 'sqlite:///relative.db' into an absolute path under project root.
    Keep ':memory:' as-is. Ensure absolute paths use 4 slashes."""
    if not url.startswith("sqlite:"):
        return url
    if ":memory:" in url or url == "sqlite://":
        return url
    prefix = "sqlite:///"
    if url.startswith(prefix):
        path = url[len(prefix):]
        if Path(path).is_absolute():
            return f"sqlite:////{Path(path).as_posix().lstrip('/')}"
        abs_path = (root / path).resolve()
        return f"sqlite:////{abs_path.as_posix().lstrip('/')}"
    return url

# Prefer env DATABASE_URL (e.g. the Supabase Postgres URL); else ./data/portfolio.db
_env_db = os.getenv("DATABASE_URL")
if _env_db:
    DATABASE_URL = _resolve_sqlite_url(_env_db)
else:
    data_dir = (root / "data").resolve()
    data_dir.mkdir(parents=True, exist_ok=True)
    sqlite_path = (data_dir / "portfolio.db").resolve()
    DATABASE_URL = f"sqlite:////{sqlite_path.as_posix().lstrip('/')}"

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# === ☁️ Blob storage (Supabase Storage) ===
SUPABASE_URL = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL") or ""
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY") or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY") or ""
RESUME_BUCKET = os.getenv("RESUME_BUCKET", "resumes")
CERTIFICATE_BUCKET = os.getenv("CERTIFICATE_BUCKET", "certificates")

# Local-directory blob store used when Supabase is not configured
LOCAL_STORAGE_DIR = Path(os.getenv("LOCAL_STORAGE_DIR", str(root / "data" / "storage")))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000/files").rstrip("/")

# === 🌐 Client side ===
PORTFOLIO_API_URL = os.getenv("PORTFOLIO_API_URL", "http://localhost:8000").rstrip("/")
PORTFOLIO_CACHE_PATH = Path(os.getenv("PORTFOLIO_CACHE_PATH", str(root / "data" / "cache.json")))
HTTP_TIMEOUT_SECS = float(os.getenv("HTTP_TIMEOUT_SECS", "30"))
