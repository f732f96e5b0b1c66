"""Offspring registry: individual animals, renames and lifecycle flags."""
import logging
import uuid
from typing import Any, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.exceptions import ConflictError, InvalidInputError, InvalidStateError, NotFoundError
from reprotrack.models.offspring import Offspring
from reprotrack.schemas.offspring import Sex
from reprotrack.services.litter_ledger import LitterLedger


logger = logging.getLogger(__name__)


UPDATABLE_FIELDS = {"new_offspring_id", "litter_id", "sex", "notes"}


def parse_sex(value: Union[Sex, str]) -> Sex:
    """Coerce a sex value, rejecting anything outside the enumeration."""
    try:
        return Sex(value)
    except ValueError:
        allowed = ", ".join(s.value for s in Sex)
        raise InvalidInputError(f"Invalid sex '{value}'. Must be one of: {allowed}.")


class OffspringRegistry:
    """
    Service managing individual offspring.

    Offspring ids are farmer-supplied and renameable. Rows are keyed by a
    surrogate integer, so a rename is a single-row update and both
    lifecycle flags travel with the record untouched.
    """

    def __init__(self, session: AsyncSession, litters: Optional[LitterLedger] = None):
        self.session = session
        self.litters = litters or LitterLedger(session)

    async def _find(self, owner_id: uuid.UUID, offspring_id: str) -> Optional[Offspring]:
        result = await self.session.execute(
            select(Offspring).where(
                Offspring.owner_id == owner_id,
                Offspring.offspring_id == offspring_id
            )
        )
        return result.scalar_one_or_none()

    async def get_offspring(self, owner_id: uuid.UUID, offspring_id: str) -> Offspring:
        """
        Fetch an offspring by its external id.

        Raises:
            NotFoundError: If the offspring does not exist for this owner
        """
        offspring = await self._find(owner_id, offspring_id)
        if offspring is None:
            raise NotFoundError(f"Offspring with ID '{offspring_id}' not found.")
        return offspring

    async def list_offspring_by_litter(self, owner_id: uuid.UUID, litter_id: str) -> List[Offspring]:
        """Return the offspring recorded in a litter."""
        litter = await self.litters.get_litter(owner_id, litter_id)
        result = await self.session.execute(
            select(Offspring)
            .where(
                Offspring.owner_id == owner_id,
                Offspring.litter_pk == litter.id
            )
            .order_by(Offspring.id)
        )
        return list(result.scalars().all())

    async def record_offspring(
        self,
        owner_id: uuid.UUID,
        litter_id: str,
        offspring_id: str,
        sex: Union[Sex, str],
        notes: Optional[str] = None
    ) -> Offspring:
        """
        Record an offspring in an existing litter.

        New offspring start alive and not yet weaned.

        Raises:
            InvalidInputError: If ``sex`` is not male, female or neutered
            NotFoundError: If the litter does not exist
            ConflictError: If the offspring id is already taken
        """
        sex = parse_sex(sex)
        litter = await self.litters.get_litter(owner_id, litter_id)
        if await self._find(owner_id, offspring_id) is not None:
            raise ConflictError(f"Offspring with ID '{offspring_id}' already exists.")

        offspring = Offspring(
            owner_id=owner_id,
            litter=litter,
            offspring_id=offspring_id,
            sex=sex.value,
            notes=notes or "",
            is_alive=True,
            survived_to_weaning=False,
        )
        self.session.add(offspring)
        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError(f"Offspring with ID '{offspring_id}' already exists.")

        logger.info(f"Recorded offspring {offspring_id} in litter {litter_id} for owner {owner_id}")
        return offspring

    async def update_offspring(self, owner_id: uuid.UUID, offspring_id: str, **changes: Any) -> str:
        """
        Update an offspring's fields and optionally rename it.

        Recognised keys are ``new_offspring_id``, ``litter_id``, ``sex`` and
        ``notes``. Only keys present are applied; ``notes=None`` clears the
        notes. All checks run before anything is written.

        Returns:
            The offspring's id after the update

        Raises:
            NotFoundError: If the offspring or the new litter does not exist
            ConflictError: If the new id is already taken
            InvalidInputError: For unknown fields or an invalid sex
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Unknown offspring fields: {', '.join(sorted(unknown))}.")

        offspring = await self.get_offspring(owner_id, offspring_id)

        new_litter = None
        target_litter_id = changes.get("litter_id")
        if target_litter_id is not None and target_litter_id != offspring.litter_id:
            new_litter = await self.litters.get_litter(owner_id, target_litter_id)

        new_sex = None
        if changes.get("sex") is not None:
            new_sex = parse_sex(changes["sex"])

        final_id = offspring_id
        new_offspring_id = changes.get("new_offspring_id")
        if new_offspring_id is not None and new_offspring_id != offspring_id:
            if await self._find(owner_id, new_offspring_id) is not None:
                raise ConflictError(
                    f"Offspring with ID '{new_offspring_id}' already exists. Cannot rename."
                )
            final_id = new_offspring_id

        if new_litter is not None:
            offspring.litter = new_litter
        if new_sex is not None:
            offspring.sex = new_sex.value
        if "notes" in changes:
            offspring.notes = changes["notes"] or ""
        if final_id != offspring_id:
            offspring.offspring_id = final_id

        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError(f"Offspring with ID '{final_id}' already exists. Cannot rename.")

        if final_id != offspring_id:
            logger.info(f"Renamed offspring {offspring_id} to {final_id} for owner {owner_id}")
        return final_id

    async def record_weaning(self, owner_id: uuid.UUID, offspring_id: str) -> Offspring:
        """
        Mark an offspring as having survived to weaning.

        Raises:
            NotFoundError: If the offspring does not exist
            InvalidStateError: If the offspring is not alive
        """
        offspring = await self.get_offspring(owner_id, offspring_id)
        if not offspring.is_alive:
            raise InvalidStateError(
                f"Offspring with ID '{offspring_id}' is not alive and cannot be weaned."
            )
        offspring.survived_to_weaning = True
        await self.session.flush()
        return offspring

    async def record_death(self, owner_id: uuid.UUID, offspring_id: str) -> Offspring:
        """
        Mark an offspring as deceased.

        Only ``is_alive`` changes; a weaning already recorded is a past
        milestone and stays recorded.

        Raises:
            NotFoundError: If the offspring does not exist
            InvalidStateError: If the offspring is already deceased
        """
        offspring = await self.get_offspring(owner_id, offspring_id)
        if not offspring.is_alive:
            raise InvalidStateError(
                f"Offspring with ID '{offspring_id}' is already marked as deceased."
            )
        offspring.is_alive = False
        await self.session.flush()
        return offspring

    async def delete_offspring(self, owner_id: uuid.UUID, offspring_id: str) -> None:
        """Delete an offspring record."""
        offspring = await self.get_offspring(owner_id, offspring_id)
        await self.session.delete(offspring)
        await self.session.flush()
        logger.info(f"Deleted offspring {offspring_id} for owner {owner_id}")
