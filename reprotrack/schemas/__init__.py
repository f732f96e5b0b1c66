"""Pydantic schemas for request/response validation."""
from reprotrack.schemas.user import UserRead, UserCreate, UserUpdate
from reprotrack.schemas.mother import MotherCreate, MotherRead, MotherRemoval
from reprotrack.schemas.litter import LitterCreate, LitterUpdate, LitterRead
from reprotrack.schemas.offspring import Sex, OffspringCreate, OffspringUpdate, OffspringRead
from reprotrack.schemas.report import (
    ReportGenerate,
    ReportRename,
    ReportResults,
    ReportRead,
    ReportSummary,
    PerformanceEntry,
)
from reprotrack.schemas.summary import SummaryFindings

__all__ = [
    # User schemas
    "UserRead",
    "UserCreate",
    "UserUpdate",
    # Mother schemas
    "MotherCreate",
    "MotherRead",
    "MotherRemoval",
    # Litter schemas
    "LitterCreate",
    "LitterUpdate",
    "LitterRead",
    # Offspring schemas
    "Sex",
    "OffspringCreate",
    "OffspringUpdate",
    "OffspringRead",
    # Report schemas
    "ReportGenerate",
    "ReportRename",
    "ReportResults",
    "ReportRead",
    "ReportSummary",
    "PerformanceEntry",
    # Summarizer schemas
    "SummaryFindings",
]
