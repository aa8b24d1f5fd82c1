# portfolio/routes/portfolio.py
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from portfolio.constants import SECTIONS
from portfolio.database import get_db
from portfolio.middleware.auth_middleware import require_admin
from portfolio.schemas import PortfolioData, SectionRecord, assemble_portfolio
from portfolio.services.sections import fetch_sections, upsert_section, upsert_sections

log = logging.getLogger(__name__)

router = APIRouter(prefix="/portfolio", tags=["Portfolio"])

# ----- Schemas -----
class PortfolioIn(BaseModel):
    data: Dict[str, Any]

# ----- Routes -----
@router.get("/data")
def get_portfolio_data(db: Session = Depends(get_db)):
    records = fetch_sections(db)
    if not records:
        raise HTTPException(status_code=404, detail="No portfolio data found")
    return {"success": True, "data": assemble_portfolio(records)}

@router.post("/data")
def save_portfolio_data(body: PortfolioIn, db: Session = Depends(get_db), _: dict = Depends(require_admin)):
    try:
        doc = PortfolioData.model_validate(body.data).to_json_dict()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid portfolio data: {e.errors()[:3]}")
    written = upsert_sections(db, doc)
    return {"success": True, "sections": written}

@router.get("/sections", response_model=list[SectionRecord], response_model_by_alias=True)
def list_sections(db: Session = Depends(get_db)):
    return fetch_sections(db)

@router.post("/sections")
def save_section(
    section: str = Query(...),
    data: Any = Body(...),
    db: Session = Depends(get_db),
    _: dict = Depends(require_admin),
):
    if section not in SECTIONS:
        raise HTTPException(status_code=400, detail=f"Unknown section: {section}")
    upsert_section(db, section, data)
    return {"success": True, "section": section}
