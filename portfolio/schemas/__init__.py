# portfolio/schemas/__init__.py
from .portfolio import (
    ByKey,
    ByUrl,
    CloudFile,
    ContentRef,
    Inline,
    PortfolioData,
    Resume,
    SectionRecord,
    assemble_portfolio,
    to_iso,
    utc_now_iso,
)

__all__ = [
    "ByKey", "ByUrl", "Inline", "ContentRef",
    "CloudFile", "PortfolioData", "Resume", "SectionRecord",
    "assemble_portfolio", "to_iso", "utc_now_iso",
]
