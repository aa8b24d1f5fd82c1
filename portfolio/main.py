# portfolio/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from portfolio.config import ALLOWED_ORIGINS, CERTIFICATE_BUCKET, ENV, RESUME_BUCKET

# -----------
# Logging
# -----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ----------------------------------------
# DB metadata (DEV ONLY: auto-create tables)
# ----------------------------------------
from portfolio.database import init_db  # noqa: E402

if ENV == "dev":
    init_db()

# -----------
# Routers
# -----------
from portfolio.routes import auth, portfolio, resumes, uploads  # noqa: E402
from portfolio.services.blob_store import build_blob_store  # noqa: E402

app = FastAPI(
    title="Portfolio API",
    version="1.0.0",
    description="Portfolio content sections, resume files and certificate attachments",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,          # must be explicit when credentials=True
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)

# Storage backends are picked once, here
app.state.resume_store = build_blob_store(RESUME_BUCKET)
app.state.certificate_store = build_blob_store(CERTIFICATE_BUCKET)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    auth_present = bool(request.headers.get("authorization"))
    response = await call_next(request)
    logging.info("REQ %s %s  Auth? %s -> %s", request.method, request.url.path, auth_present, response.status_code)
    return response

app.include_router(auth.router,      prefix="/api/v1")
app.include_router(portfolio.router, prefix="/api/v1")
app.include_router(resumes.router,   prefix="/api/v1")
app.include_router(uploads.router,   prefix="/api/v1")

@app.get("/health")
def health():
    return {"status": "ok", "env": ENV}
