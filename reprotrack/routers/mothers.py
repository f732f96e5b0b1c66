"""
Mothers router for managing breeding females.

This module provides operations for:
- Registering mothers explicitly
- Listing mothers and their litters
- Removing a mother together with all of her litters and offspring
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.database import get_async_session
from reprotrack.dependencies import current_active_user, get_mother_registry, get_litter_ledger
from reprotrack.models.user import User
from reprotrack.schemas.mother import MotherCreate, MotherRead, MotherRemoval
from reprotrack.schemas.litter import LitterRead
from reprotrack.services.mother_registry import MotherRegistry
from reprotrack.services.litter_ledger import LitterLedger


router = APIRouter(
    prefix="/api/mothers",
    tags=["mothers"],
    responses={
        404: {"description": "Mother not found"},
    }
)


@router.post("/", response_model=MotherRead, status_code=status.HTTP_201_CREATED)
async def add_mother(
    mother_data: MotherCreate,
    session: AsyncSession = Depends(get_async_session),
    mothers: MotherRegistry = Depends(get_mother_registry),
    current_user: User = Depends(current_active_user),
):
    """
    Register a mother.
    
    Mothers are also registered automatically the first time a litter is
    recorded for an unknown mother id.
    
    **Example:**
    ```json
    {
        "mother_id": "EWE-102",
        "notes": "Bought in spring"
    }
    ```
    
    **Returns:** The mother with `next_litter_sequence` 1
    
    **Errors:** 409 if the mother id is already registered
    """
    mother = await mothers.add_mother(
        current_user.id,
        mother_data.mother_id,
        notes=mother_data.notes,
    )
    await session.commit()
    await session.refresh(mother)
    return mother


@router.get("/", response_model=List[MotherRead])
async def list_mothers(
    mothers: MotherRegistry = Depends(get_mother_registry),
    current_user: User = Depends(current_active_user),
):
    """List all mothers owned by the current user."""
    return await mothers.list_mothers(current_user.id)


@router.get("/{mother_id}", response_model=MotherRead)
async def get_mother(
    mother_id: str,
    mothers: MotherRegistry = Depends(get_mother_registry),
    current_user: User = Depends(current_active_user),
):
    """Get a single mother by her id."""
    return await mothers.get_mother(current_user.id, mother_id)


@router.get("/{mother_id}/litters", response_model=List[LitterRead])
async def list_litters_by_mother(
    mother_id: str,
    litters: LitterLedger = Depends(get_litter_ledger),
    current_user: User = Depends(current_active_user),
):
    """
    List a mother's litters in the order they were recorded.
    
    **Errors:** 404 if the mother is not registered
    """
    return await litters.list_litters_by_mother(current_user.id, mother_id)


@router.delete("/{mother_id}", response_model=MotherRemoval)
async def remove_mother(
    mother_id: str,
    session: AsyncSession = Depends(get_async_session),
    mothers: MotherRegistry = Depends(get_mother_registry),
    current_user: User = Depends(current_active_user),
):
    """
    Remove a mother.
    
    All litters of this mother and all offspring in those litters are
    removed with her. The removal is applied in a single transaction.
    
    **Returns:** Counts of the litters and offspring removed
    """
    removal = await mothers.remove(current_user.id, mother_id)
    await session.commit()
    return removal
