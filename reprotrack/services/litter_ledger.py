"""Litter ledger: recording and updating litters under mother-derived ids."""
import logging
import uuid
from datetime import date
from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.exceptions import ConflictError, InvalidInputError, NotFoundError
from reprotrack.models.litter import Litter
from reprotrack.models.offspring import Offspring
from reprotrack.services.mother_registry import MotherRegistry


logger = logging.getLogger(__name__)


UPDATABLE_FIELDS = {"mother_id", "father_id", "birth_date", "reported_litter_size", "notes"}


def format_litter_id(mother_id: str, sequence: int) -> str:
    """Build the public litter id for a mother's n-th litter."""
    return f"{mother_id}-{sequence}"


class LitterLedger:
    """
    Service recording litters.

    A litter's id is ``"<mother_id>-<sequence>"`` where the sequence is
    reserved from the mother's counter, so ids are unique and strictly
    increasing per mother.
    """

    def __init__(self, session: AsyncSession, mothers: Optional[MotherRegistry] = None):
        self.session = session
        self.mothers = mothers or MotherRegistry(session)

    async def _find(self, owner_id: uuid.UUID, litter_id: str) -> Optional[Litter]:
        result = await self.session.execute(
            select(Litter).where(
                Litter.owner_id == owner_id,
                Litter.litter_id == litter_id
            )
        )
        return result.scalar_one_or_none()

    async def get_litter(self, owner_id: uuid.UUID, litter_id: str) -> Litter:
        """
        Fetch a litter by its public id.

        Raises:
            NotFoundError: If the litter does not exist for this owner
        """
        litter = await self._find(owner_id, litter_id)
        if litter is None:
            raise NotFoundError(f"Litter with ID '{litter_id}' not found.")
        return litter

    async def list_litters_by_mother(self, owner_id: uuid.UUID, mother_id: str) -> List[Litter]:
        """Return a mother's litters in sequence order."""
        await self.mothers.get_mother(owner_id, mother_id)
        result = await self.session.execute(
            select(Litter)
            .where(
                Litter.owner_id == owner_id,
                Litter.mother_id == mother_id
            )
            .order_by(Litter.sequence)
        )
        return list(result.scalars().all())

    async def record_litter(
        self,
        owner_id: uuid.UUID,
        mother_id: str,
        birth_date: date,
        reported_litter_size: int,
        father_id: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Litter:
        """
        Record a new litter for a mother.

        Registers the mother if she is unknown, reserves her next sequence
        number and derives the litter id from it.

        Args:
            owner_id: Owner performing the action
            mother_id: External id of the mother
            birth_date: Date the litter was born
            reported_litter_size: Litter size as reported by the farmer
            father_id: Optional father id; None records the father as unspecified
            notes: Optional notes (stored as "" when omitted)

        Returns:
            The persisted Litter

        Raises:
            InvalidInputError: If the reported litter size is negative
            ConflictError: If the derived litter id is already taken
        """
        if reported_litter_size < 0:
            raise InvalidInputError("Reported litter size cannot be negative.")

        await self.mothers.ensure_exists(owner_id, mother_id)
        sequence = await self.mothers.reserve_next_sequence(owner_id, mother_id)
        litter_id = format_litter_id(mother_id, sequence)

        if await self._find(owner_id, litter_id) is not None:
            logger.error(
                f"Sequence {sequence} for mother {mother_id} produced existing litter id {litter_id}"
            )
            raise ConflictError(
                f"Litter with ID '{litter_id}' already exists; the litter sequence "
                f"for mother '{mother_id}' is out of step with recorded litters."
            )

        litter = Litter(
            owner_id=owner_id,
            litter_id=litter_id,
            mother_id=mother_id,
            sequence=sequence,
            father_id=father_id,
            birth_date=birth_date,
            reported_litter_size=reported_litter_size,
            notes=notes or "",
        )
        self.session.add(litter)
        await self.session.flush()

        logger.info(f"Recorded litter {litter_id} for owner {owner_id}")
        return litter

    async def update_litter(self, owner_id: uuid.UUID, litter_id: str, **changes: Any) -> Litter:
        """
        Apply the supplied changes to a litter.

        Only keys present in ``changes`` are touched. ``father_id=None``
        marks the father as unspecified and ``notes=None`` clears the notes.
        ``mother_id`` is accepted only when it repeats the current mother,
        since the litter id is tied to her sequence.

        Raises:
            NotFoundError: If the litter does not exist
            ConflictError: If the update tries to move the litter to another mother
            InvalidInputError: For unknown fields or null/negative required values
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(f"Unknown litter fields: {', '.join(sorted(unknown))}.")

        litter = await self.get_litter(owner_id, litter_id)

        new_mother = changes.get("mother_id")
        if new_mother is not None and new_mother != litter.mother_id:
            raise ConflictError(
                f"Cannot change 'mother_id' for litter '{litter_id}'. "
                f"Litter IDs are tied to their mother's sequence."
            )

        if "birth_date" in changes and changes["birth_date"] is None:
            raise InvalidInputError("Birth date cannot be cleared.")
        if "reported_litter_size" in changes:
            size = changes["reported_litter_size"]
            if size is None or size < 0:
                raise InvalidInputError("Reported litter size must be a non-negative integer.")

        if "father_id" in changes:
            litter.father_id = changes["father_id"]
        if "birth_date" in changes:
            litter.birth_date = changes["birth_date"]
        if "reported_litter_size" in changes:
            litter.reported_litter_size = changes["reported_litter_size"]
        if "notes" in changes:
            litter.notes = changes["notes"] or ""

        await self.session.flush()
        return litter

    async def delete_litter(self, owner_id: uuid.UUID, litter_id: str) -> int:
        """
        Delete a litter and its offspring.

        Returns:
            Number of offspring deleted with the litter
        """
        litter = await self.get_litter(owner_id, litter_id)
        result = await self.session.execute(
            delete(Offspring).where(
                Offspring.owner_id == owner_id,
                Offspring.litter_pk == litter.id
            )
        )
        await self.session.delete(litter)
        await self.session.flush()

        logger.info(f"Deleted litter {litter_id} and {result.rowcount} offspring for owner {owner_id}")
        return result.rowcount
