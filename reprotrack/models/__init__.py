"""SQLAlchemy models for the application."""
from reprotrack.models.user import User
from reprotrack.models.mother import Mother
from reprotrack.models.litter import Litter
from reprotrack.models.offspring import Offspring
from reprotrack.models.report import Report

__all__ = [
    "User",
    "Mother",
    "Litter",
    "Offspring",
    "Report",
]
