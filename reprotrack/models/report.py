"""Report model for named reproductive performance reports."""
from datetime import datetime
from typing import TYPE_CHECKING
import uuid

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, JSON, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reprotrack.database import Base

if TYPE_CHECKING:
    from reprotrack.models.user import User


class Report(Base):
    """
    Report model aggregating performance entries across mothers and windows.
    
    ``target_mothers`` and ``results`` are JSON lists of distinct strings.
    They are always reassigned as new lists, never mutated in place, so the
    ORM sees every change. ``summary`` caches the summarizer output and is
    cleared whenever the content changes.
    """
    __tablename__ = "reports"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_reports_owner_name"),
    )
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        nullable=False
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False
    )
    target_mothers: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list
    )
    results: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list
    )
    summary: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=""
    )
    
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="reports",
        lazy="noload"
    )
    
    def __repr__(self) -> str:
        return f"<Report(name={self.name}, owner_id={self.owner_id}, entries={len(self.results or [])})>"
