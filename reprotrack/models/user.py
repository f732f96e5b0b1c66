"""User model for authentication and record ownership."""
import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reprotrack.database import Base

if TYPE_CHECKING:
    from reprotrack.models.mother import Mother
    from reprotrack.models.report import Report


class User(SQLAlchemyBaseUserTableUUID, Base):
    """
    User model extending fastapi-users base user table.
    
    Every mother, litter, offspring and report is owned by exactly one user;
    the id is the opaque owner identifier passed to the services.
    """
    __tablename__ = "users"
    
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )
    farm_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
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
    mothers: Mapped[list["Mother"]] = relationship(
        "Mother",
        back_populates="owner",
        lazy="noload"
    )
    reports: Mapped[list["Report"]] = relationship(
        "Report",
        back_populates="owner",
        lazy="noload"
    )
    
    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
