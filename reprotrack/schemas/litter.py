"""Litter schemas for API request/response validation."""
from datetime import datetime, date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LitterCreate(BaseModel):
    """
    Schema for recording a new litter.
    
    The litter id is not supplied; it is derived from the mother's next
    sequence number. An unknown ``mother_id`` registers the mother.
    """
    mother_id: str = Field(..., min_length=1, max_length=255)
    father_id: Optional[str] = Field(default=None, max_length=255)
    birth_date: date
    reported_litter_size: int = Field(..., ge=0)
    notes: Optional[str] = None


class LitterUpdate(BaseModel):
    """
    Schema for updating a litter.
    
    Only fields present in the request are applied. An explicit ``null``
    for ``father_id`` marks the father as unspecified and an explicit
    ``null`` for ``notes`` clears them. ``mother_id`` may only repeat the
    current mother.
    """
    mother_id: Optional[str] = None
    father_id: Optional[str] = Field(default=None, max_length=255)
    birth_date: Optional[date] = None
    reported_litter_size: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class LitterRead(BaseModel):
    """Schema for reading litter data."""
    litter_id: str
    mother_id: str
    sequence: int
    father_id: Optional[str] = None
    birth_date: date
    reported_litter_size: int
    notes: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)
