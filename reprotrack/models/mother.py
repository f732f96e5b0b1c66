"""Mother model for breeding females and their litter sequence counter."""
from datetime import datetime
from typing import TYPE_CHECKING
import uuid

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reprotrack.database import Base

if TYPE_CHECKING:
    from reprotrack.models.user import User


class Mother(Base):
    """
    Mother model representing a breeding female.
    
    ``mother_id`` is the farmer-supplied identifier, unique per owner.
    ``next_litter_sequence`` is only ever advanced by an atomic
    increment-and-read, never by application-side read-modify-write.
    """
    __tablename__ = "mothers"
    __table_args__ = (
        UniqueConstraint("owner_id", "mother_id", name="uq_mothers_owner_mother"),
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
    mother_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    notes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=""
    )
    next_litter_sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="mothers",
        lazy="noload"
    )
    
    def __repr__(self) -> str:
        return (
            f"<Mother(mother_id={self.mother_id}, owner_id={self.owner_id}, "
            f"next_litter_sequence={self.next_litter_sequence})>"
        )
