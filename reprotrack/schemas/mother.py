"""Mother schemas for API request/response validation."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MotherCreate(BaseModel):
    """Schema for registering a mother explicitly."""
    mother_id: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = None


class MotherRead(BaseModel):
    """Schema for reading mother data."""
    mother_id: str
    notes: str
    next_litter_sequence: int
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class MotherRemoval(BaseModel):
    """Outcome of removing a mother and everything recorded under her."""
    mother_id: str
    litters_removed: int
    offspring_removed: int
