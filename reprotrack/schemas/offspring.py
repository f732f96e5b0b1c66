"""Offspring schemas for API request/response validation."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Sex(str, Enum):
    """Enum for offspring sex values."""
    MALE = "male"
    FEMALE = "female"
    NEUTERED = "neutered"


class OffspringCreate(BaseModel):
    """Schema for recording an offspring in an existing litter."""
    litter_id: str = Field(..., min_length=1)
    offspring_id: str = Field(..., min_length=1, max_length=255)
    sex: Sex
    notes: Optional[str] = None


class OffspringUpdate(BaseModel):
    """
    Schema for updating or renaming an offspring.
    
    Supplying ``new_offspring_id`` different from the current id renames
    the offspring; lifecycle flags are carried over unchanged.
    """
    new_offspring_id: Optional[str] = Field(default=None, min_length=1, max_length=255)
    litter_id: Optional[str] = None
    sex: Optional[Sex] = None
    notes: Optional[str] = None


class OffspringRead(BaseModel):
    """Schema for reading offspring data."""
    offspring_id: str
    litter_id: str
    sex: Sex
    notes: str
    is_alive: bool
    survived_to_weaning: bool
    
    model_config = ConfigDict(from_attributes=True)
