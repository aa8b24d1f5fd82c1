# portfolio/services/sections.py
"""Section table access shared by the API routes and the in-process stores."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from portfolio.constants import BULK_SECTIONS
from portfolio.models import PortfolioSection
from portfolio.schemas import SectionRecord, to_iso

log = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def fetch_sections(db: Session) -> List[SectionRecord]:
    rows = db.query(PortfolioSection).order_by(PortfolioSection.section).all()
    return [
        SectionRecord(section=r.section, data=r.data, updated_at=to_iso(r.updated_at))
        for r in rows
    ]


def get_section(db: Session, section: str) -> Any:
    row = db.get(PortfolioSection, section)
    return row.data if row else None


def upsert_section(db: Session, section: str, data: Any) -> None:
    row = db.get(PortfolioSection, section)
    if row is None:
        row = PortfolioSection(section=section)
        db.add(row)
    row.data = data
    row.updated_at = _now()
    db.commit()
    log.info("Section %s saved", section)


def upsert_sections(db: Session, data: Dict[str, Any]) -> List[str]:
    """Bulk upsert of the fixed section list; sections absent from `data` are left alone."""
    now = _now()
    written: List[str] = []
    for section in BULK_SECTIONS:
        if data.get(section) is None:
            continue
        row = db.get(PortfolioSection, section)
        if row is None:
            row = PortfolioSection(section=section)
            db.add(row)
        row.data = data[section]
        row.updated_at = now
        written.append(section)
    db.commit()
    log.info("Bulk save wrote %d sections", len(written))
    return written
