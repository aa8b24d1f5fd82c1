# portfolio/utils/files.py
import base64
import re
import secrets
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9]")
_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<b64>;base64)?,(?P<payload>.*)$", re.S)
_ALPHABET = string.ascii_lowercase + string.digits


class UploadValidationError(ValueError):
    """File rejected locally, before any upload attempt."""


@dataclass
class FilePayload:
    """An uploaded file held in memory."""
    name: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path, content_type: str) -> "FilePayload":
        p = Path(path)
        return cls(name=p.name, content=p.read_bytes(), content_type=content_type)


def _random_suffix(n: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(n))


def generate_id() -> str:
    """Millisecond timestamp + random tail, unique enough for a single admin."""
    return f"{int(time.time() * 1000)}{_random_suffix(9)}"


def generate_file_name(original: str) -> str:
    """'My CV (v2).pdf' -> 'My_CV__v2__<millis>_<random>.pdf'"""
    stem, dot, ext = original.rpartition(".")
    if not dot:
        stem, ext = original, ""
    base = _UNSAFE_RE.sub("_", stem) or "file"
    name = f"{base}_{int(time.time() * 1000)}_{_random_suffix(13)}"
    return f"{name}.{ext}" if ext else name


def format_file_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = 0
    while i < len(units) - 1 and num_bytes >= 1024 ** (i + 1):
        i += 1
    value = round(num_bytes / (1024 ** i), 2)
    # 1.50 -> 1.5, 2.00 -> 2
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[i]}"


def to_data_url(content: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def from_data_url(data_url: str) -> bytes:
    """Decode a data URL; a bare base64 string is accepted too."""
    m = _DATA_URL_RE.match(data_url or "")
    if not m:
        return base64.b64decode(data_url)
    payload = m.group("payload")
    if m.group("b64"):
        return base64.b64decode(payload)
    return payload.encode("utf-8")


def validate_upload(file: FilePayload, rules: Dict[str, Any]) -> None:
    """Size, MIME type and extension checks; raises UploadValidationError."""
    max_size = rules["max_file_size"]
    if file.size > max_size:
        raise UploadValidationError(
            f"File size exceeds {max_size // (1024 * 1024)}MB limit"
        )
    if file.content_type not in rules["allowed_types"]:
        raise UploadValidationError(f"File type {file.content_type} is not allowed")
    ext = "." + file.name.rsplit(".", 1)[-1].lower() if "." in file.name else ""
    if ext not in rules["allowed_extensions"]:
        raise UploadValidationError(f"File extension {ext or '(none)'} is not allowed")
