"""
Offspring router for individual animals.

This module provides operations for:
- Recording offspring in a litter
- Updating and renaming offspring
- Recording weaning and death
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.database import get_async_session
from reprotrack.dependencies import current_active_user, get_offspring_registry
from reprotrack.models.user import User
from reprotrack.schemas.offspring import OffspringCreate, OffspringUpdate, OffspringRead
from reprotrack.services.offspring_registry import OffspringRegistry


router = APIRouter(
    prefix="/api/offspring",
    tags=["offspring"],
    responses={
        404: {"description": "Offspring not found"},
    }
)


@router.post("/", response_model=OffspringRead, status_code=status.HTTP_201_CREATED)
async def record_offspring(
    offspring_data: OffspringCreate,
    session: AsyncSession = Depends(get_async_session),
    offspring: OffspringRegistry = Depends(get_offspring_registry),
    current_user: User = Depends(current_active_user),
):
    """
    Record an offspring in an existing litter.
    
    **Example:**
    ```json
    {
        "litter_id": "EWE-102-1",
        "offspring_id": "LAMB-311",
        "sex": "female"
    }
    ```
    
    **Returns:** The offspring, alive and not yet weaned
    """
    record = await offspring.record_offspring(
        current_user.id,
        offspring_data.litter_id,
        offspring_data.offspring_id,
        offspring_data.sex,
        notes=offspring_data.notes,
    )
    await session.commit()
    return record


@router.get("/{offspring_id}", response_model=OffspringRead)
async def get_offspring(
    offspring_id: str,
    offspring: OffspringRegistry = Depends(get_offspring_registry),
    current_user: User = Depends(current_active_user),
):
    """Get a single offspring by its id."""
    return await offspring.get_offspring(current_user.id, offspring_id)


@router.put("/{offspring_id}", response_model=OffspringRead)
async def update_offspring(
    offspring_id: str,
    offspring_update: OffspringUpdate,
    session: AsyncSession = Depends(get_async_session),
    offspring: OffspringRegistry = Depends(get_offspring_registry),
    current_user: User = Depends(current_active_user),
):
    """
    Update or rename an offspring.
    
    Only provided fields are updated. A `new_offspring_id` renames the
    offspring; its weaning and alive flags are kept.
    
    **Errors:** 404 if the offspring or target litter does not exist,
    409 if the new id is taken
    """
    update_data = offspring_update.model_dump(exclude_unset=True)
    final_id = await offspring.update_offspring(current_user.id, offspring_id, **update_data)
    await session.commit()
    return await offspring.get_offspring(current_user.id, final_id)


@router.post("/{offspring_id}/weaning", response_model=OffspringRead)
async def record_weaning(
    offspring_id: str,
    session: AsyncSession = Depends(get_async_session),
    offspring: OffspringRegistry = Depends(get_offspring_registry),
    current_user: User = Depends(current_active_user),
):
    """
    Record that an offspring survived to weaning.
    
    **Errors:** 409 `INVALID_STATE` if the offspring is not alive
    """
    record = await offspring.record_weaning(current_user.id, offspring_id)
    await session.commit()
    return record


@router.post("/{offspring_id}/death", response_model=OffspringRead)
async def record_death(
    offspring_id: str,
    session: AsyncSession = Depends(get_async_session),
    offspring: OffspringRegistry = Depends(get_offspring_registry),
    current_user: User = Depends(current_active_user),
):
    """
    Record the death of an offspring.
    
    A weaning recorded earlier is kept.
    
    **Errors:** 409 `INVALID_STATE` if the offspring is already deceased
    """
    record = await offspring.record_death(current_user.id, offspring_id)
    await session.commit()
    return record


@router.delete("/{offspring_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_offspring(
    offspring_id: str,
    session: AsyncSession = Depends(get_async_session),
    offspring: OffspringRegistry = Depends(get_offspring_registry),
    current_user: User = Depends(current_active_user),
) -> None:
    """Delete an offspring record."""
    await offspring.delete_offspring(current_user.id, offspring_id)
    await session.commit()
