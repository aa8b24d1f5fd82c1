# portfolio/schemas/portfolio.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def to_iso(ts: datetime) -> str:
    """Naive timestamps (SQLite drops tzinfo) are treated as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class CamelModel(BaseModel):
    """Python attribute names, camelCase JSON on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---- Content references (where a resume's bytes live) ----
@dataclass(frozen=True)
class ByKey:
    key: str


@dataclass(frozen=True)
class ByUrl:
    url: str


@dataclass(frozen=True)
class Inline:
    data: str


ContentRef = Union[ByKey, ByUrl, Inline]


class Resume(CamelModel):
    id: str
    name: str
    description: str = ""
    file_name: str
    file_size: str
    file_type: str
    upload_date: str
    storage_type: Literal["local", "cloud"] = "local"

    # local: data URL; cloud: object key and/or public URL
    file_data: Optional[str] = None
    cloud_file_name: Optional[str] = None
    cloud_url: Optional[str] = None

    def content_ref(self) -> Optional[ContentRef]:
        """Where to read the bytes from, in resolution order: key, url, inline."""
        if self.storage_type == "cloud" and self.cloud_file_name:
            return ByKey(self.cloud_file_name)
        if self.cloud_url:
            return ByUrl(self.cloud_url)
        if self.file_data:
            return Inline(self.file_data)
        return None


class CloudFile(CamelModel):
    """One object in a blob store bucket."""
    name: str
    size: int = 0
    mime_type: str = "application/octet-stream"
    created_at: str = Field(default_factory=utc_now_iso)
    public_url: str


class SectionRecord(CamelModel):
    section: str
    data: Any = None
    updated_at: str


class PortfolioData(CamelModel):
    """Loose envelope used to validate imported / posted documents."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    personal_info: Optional[Dict[str, Any]] = None
    technical_skills: Optional[List[Any]] = None
    projects: Optional[List[Any]] = None
    experience: Optional[List[Any]] = None
    education: Optional[List[Any]] = None
    certifications: Optional[List[Any]] = None
    achievements: Optional[List[Any]] = None
    quick_facts: Optional[Dict[str, Any]] = None
    current_focus: Optional[List[Any]] = None
    resumes: Optional[List[Any]] = None
    last_updated: Optional[str] = None


def assemble_portfolio(records: List[SectionRecord]) -> Dict[str, Any]:
    """Fold section records into one PortfolioData document.

    `resumes` is always a list; `lastUpdated` is the newest section timestamp.
    """
    data: Dict[str, Any] = {"resumes": [], "lastUpdated": utc_now_iso()}
    if not records:
        return data

    for rec in records:
        if rec.section == "resumes":
            data["resumes"] = rec.data if isinstance(rec.data, list) else []
        else:
            data[rec.section] = rec.data

    data["lastUpdated"] = max(records, key=lambda r: _parse_ts(r.updated_at)).updated_at
    return data


def _parse_ts(value: str) -> datetime:
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts
