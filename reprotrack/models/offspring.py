"""Offspring model for individual animals within a litter."""
from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import String, Text, Boolean, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reprotrack.database import Base
from reprotrack.models.litter import Litter


class Offspring(Base):
    """
    Offspring model representing one animal born in a litter.
    
    The row is keyed by a surrogate integer so that renaming
    ``offspring_id`` is a single-row update. ``survived_to_weaning`` only
    ever moves from False to True.
    """
    __tablename__ = "offspring"
    __table_args__ = (
        UniqueConstraint("owner_id", "offspring_id", name="uq_offspring_owner_offspring"),
    )
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        nullable=False
    )
    
    # Foreign keys
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    litter_pk: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("litters.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    offspring_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    sex: Mapped[str] = mapped_column(
        String(20),
        nullable=False
    )
    notes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=""
    )
    
    # Lifecycle flags
    is_alive: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True
    )
    survived_to_weaning: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False
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
    litter: Mapped["Litter"] = relationship(
        "Litter",
        back_populates="offspring",
        lazy="joined",
        innerjoin=True
    )
    
    @property
    def litter_id(self) -> str:
        """Public id of the litter this offspring belongs to."""
        return self.litter.litter_id
    
    def __repr__(self) -> str:
        return (
            f"<Offspring(offspring_id={self.offspring_id}, litter_pk={self.litter_pk}, "
            f"is_alive={self.is_alive}, survived_to_weaning={self.survived_to_weaning})>"
        )
