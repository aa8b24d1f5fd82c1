# portfolio/models.py
from __future__ import annotations

from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

from portfolio.database import Base

# JSONB on Postgres (the hosted store), plain JSON elsewhere (e.g., SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# =======================
# Portfolio section model
# =======================
class PortfolioSection(Base):
    """One row per named section; `data` holds the section's JSON value."""
    __tablename__ = "portfolio_data"

    section = Column(String(64), primary_key=True)
    # sections are either objects (personalInfo) or lists (projects); no mutable tracking,
    # every write assigns a whole new value
    data = Column(JSONType, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<PortfolioSection section={self.section!r} updated_at={self.updated_at}>"
