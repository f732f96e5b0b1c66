"""
Litters router for recording births.

This module provides operations for:
- Recording litters under ids derived from the mother's litter sequence
- Updating litter details
- Listing a litter's offspring
- Deleting a litter with its offspring
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.database import get_async_session
from reprotrack.dependencies import current_active_user, get_litter_ledger, get_offspring_registry
from reprotrack.models.user import User
from reprotrack.schemas.litter import LitterCreate, LitterUpdate, LitterRead
from reprotrack.schemas.offspring import OffspringRead
from reprotrack.services.litter_ledger import LitterLedger
from reprotrack.services.offspring_registry import OffspringRegistry


router = APIRouter(
    prefix="/api/litters",
    tags=["litters"],
    responses={
        404: {"description": "Litter not found"},
    }
)


@router.post("/", response_model=LitterRead, status_code=status.HTTP_201_CREATED)
async def record_litter(
    litter_data: LitterCreate,
    session: AsyncSession = Depends(get_async_session),
    litters: LitterLedger = Depends(get_litter_ledger),
    current_user: User = Depends(current_active_user),
):
    """
    Record a new litter.
    
    The litter id is `<mother_id>-<n>` where `n` is the mother's next litter
    number. Unknown mothers are registered automatically. Omitting
    `father_id` records the father as unspecified.
    
    **Example:**
    ```json
    {
        "mother_id": "EWE-102",
        "father_id": "RAM-7",
        "birth_date": "2024-03-14",
        "reported_litter_size": 2
    }
    ```
    
    **Returns:** The recorded litter, e.g. with `litter_id` "EWE-102-1"
    """
    litter = await litters.record_litter(
        current_user.id,
        litter_data.mother_id,
        birth_date=litter_data.birth_date,
        reported_litter_size=litter_data.reported_litter_size,
        father_id=litter_data.father_id,
        notes=litter_data.notes,
    )
    await session.commit()
    await session.refresh(litter)
    return litter


@router.get("/{litter_id}", response_model=LitterRead)
async def get_litter(
    litter_id: str,
    litters: LitterLedger = Depends(get_litter_ledger),
    current_user: User = Depends(current_active_user),
):
    """Get a single litter by its id."""
    return await litters.get_litter(current_user.id, litter_id)


@router.put("/{litter_id}", response_model=LitterRead)
async def update_litter(
    litter_id: str,
    litter_update: LitterUpdate,
    session: AsyncSession = Depends(get_async_session),
    litters: LitterLedger = Depends(get_litter_ledger),
    current_user: User = Depends(current_active_user),
):
    """
    Update a litter.
    
    Only provided fields are updated. Sending `"father_id": null` marks the
    father as unspecified and `"notes": null` clears the notes. The mother
    of a litter cannot be changed.
    
    **Errors:** 404 if the litter does not exist, 409 on a mother change
    """
    update_data = litter_update.model_dump(exclude_unset=True)
    litter = await litters.update_litter(current_user.id, litter_id, **update_data)
    await session.commit()
    await session.refresh(litter)
    return litter


@router.get("/{litter_id}/offspring", response_model=List[OffspringRead])
async def list_offspring_by_litter(
    litter_id: str,
    offspring: OffspringRegistry = Depends(get_offspring_registry),
    current_user: User = Depends(current_active_user),
):
    """List the offspring recorded in a litter."""
    return await offspring.list_offspring_by_litter(current_user.id, litter_id)


@router.delete("/{litter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_litter(
    litter_id: str,
    session: AsyncSession = Depends(get_async_session),
    litters: LitterLedger = Depends(get_litter_ledger),
    current_user: User = Depends(current_active_user),
) -> None:
    """Delete a litter and all offspring recorded in it."""
    await litters.delete_litter(current_user.id, litter_id)
    await session.commit()
