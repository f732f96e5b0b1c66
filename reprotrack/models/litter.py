"""Litter model for groups of offspring born together."""
from datetime import datetime, date
from typing import Optional, TYPE_CHECKING
import uuid

from sqlalchemy import String, Text, Integer, Date, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reprotrack.database import Base

if TYPE_CHECKING:
    from reprotrack.models.offspring import Offspring


class Litter(Base):
    """
    Litter model representing a group of offspring born to one mother.
    
    ``litter_id`` is derived as ``"<mother_id>-<sequence>"`` when the litter
    is recorded and never changes afterwards. ``father_id`` is NULL when the
    father is unspecified.
    """
    __tablename__ = "litters"
    __table_args__ = (
        UniqueConstraint("owner_id", "litter_id", name="uq_litters_owner_litter"),
        UniqueConstraint("owner_id", "mother_id", "sequence", name="uq_litters_owner_mother_sequence"),
    )
    
    # Surrogate primary key
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
    litter_id: Mapped[str] = mapped_column(
        String(300),
        nullable=False
    )
    mother_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True
    )
    sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )
    
    # Litter information
    father_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )
    birth_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True
    )
    reported_litter_size: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )
    notes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=""
    )
    
    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True
    )
    
    # Relationships
    offspring: Mapped[list["Offspring"]] = relationship(
        "Offspring",
        back_populates="litter",
        lazy="noload",
        passive_deletes=True
    )
    
    def __repr__(self) -> str:
        return f"<Litter(litter_id={self.litter_id}, birth_date={self.birth_date})>"
