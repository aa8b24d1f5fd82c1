# portfolio/constants.py

# every persisted section, in display order of the admin panel
SECTIONS = (
    "personalInfo",
    "technicalSkills",
    "projects",
    "experience",
    "education",
    "certifications",
    "achievements",
    "quickFacts",
    "currentFocus",
    "resumes",
)

# sections written by a bulk save (import / reset); resumes are never replaced wholesale
BULK_SECTIONS = tuple(s for s in SECTIONS if s != "resumes")

# local cache keys
CACHE_KEY = "portfolio_data"
TOKEN_KEY = "admin_token"

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB

RESUME_UPLOAD = {
    "max_file_size": MAX_UPLOAD_BYTES,
    "allowed_types": {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    },
    "allowed_extensions": {".pdf", ".doc", ".docx", ".txt"},
}

CERTIFICATE_UPLOAD = {
    "max_file_size": MAX_UPLOAD_BYTES,
    "allowed_types": {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
    },
    "allowed_extensions": {".jpg", ".jpeg", ".png", ".gif", ".webp", ".pdf"},
}
