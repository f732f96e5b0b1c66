"""Mother registry: mother records and per-mother litter sequence issuance."""
import logging
import uuid
from typing import Dict, List, Optional, Union

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.exceptions import ConflictError, NotFoundError
from reprotrack.models.litter import Litter
from reprotrack.models.mother import Mother
from reprotrack.models.offspring import Offspring


logger = logging.getLogger(__name__)


class MotherRegistry:
    """
    Service owning Mother records.

    Mothers are registered explicitly through ``add_mother`` or implicitly
    the first time a litter is recorded for them. Each mother carries the
    counter from which her litter ids are derived.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _find(self, owner_id: uuid.UUID, mother_id: str) -> Optional[Mother]:
        result = await self.session.execute(
            select(Mother).where(
                Mother.owner_id == owner_id,
                Mother.mother_id == mother_id
            )
        )
        return result.scalar_one_or_none()

    async def get_mother(self, owner_id: uuid.UUID, mother_id: str) -> Mother:
        """
        Fetch a mother by her external id.

        Raises:
            NotFoundError: If the mother is not registered for this owner
        """
        mother = await self._find(owner_id, mother_id)
        if mother is None:
            raise NotFoundError(f"Mother with ID '{mother_id}' not found.")
        return mother

    async def list_mothers(self, owner_id: uuid.UUID) -> List[Mother]:
        """Return all mothers owned by the user, oldest registration first."""
        result = await self.session.execute(
            select(Mother)
            .where(Mother.owner_id == owner_id)
            .order_by(Mother.id)
        )
        return list(result.scalars().all())

    async def add_mother(
        self,
        owner_id: uuid.UUID,
        mother_id: str,
        notes: Optional[str] = None
    ) -> Mother:
        """
        Register a mother explicitly.

        Args:
            owner_id: Owner performing the action
            mother_id: Farmer-supplied identifier of the mother
            notes: Optional free-form notes (stored as "" when omitted)

        Returns:
            The new Mother with ``next_litter_sequence`` set to 1

        Raises:
            ConflictError: If a mother with this id already exists
        """
        if await self._find(owner_id, mother_id) is not None:
            raise ConflictError(f"Mother with ID '{mother_id}' already exists.")

        mother = Mother(
            owner_id=owner_id,
            mother_id=mother_id,
            notes=notes or "",
            next_litter_sequence=1,
        )
        self.session.add(mother)
        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError(f"Mother with ID '{mother_id}' already exists.")

        logger.info(f"Registered mother {mother_id} for owner {owner_id}")
        return mother

    async def ensure_exists(self, owner_id: uuid.UUID, mother_id: str) -> Mother:
        """
        Return the mother, registering her first if she is unknown.

        The insert is issued as ``INSERT ... ON CONFLICT DO NOTHING`` so two
        requests racing to create the same mother both succeed.
        """
        mother = await self._find(owner_id, mother_id)
        if mother is not None:
            return mother

        insert = sqlite_insert if self._dialect_name() == "sqlite" else postgresql_insert
        await self.session.execute(
            insert(Mother)
            .values(
                owner_id=owner_id,
                mother_id=mother_id,
                notes="",
                next_litter_sequence=1,
            )
            .on_conflict_do_nothing(index_elements=["owner_id", "mother_id"])
        )
        logger.info(f"Implicitly registered mother {mother_id} for owner {owner_id}")
        return await self.get_mother(owner_id, mother_id)

    async def reserve_next_sequence(self, owner_id: uuid.UUID, mother_id: str) -> int:
        """
        Reserve the mother's next litter sequence number.

        Increments the stored counter and reads it back in one
        ``UPDATE ... RETURNING`` statement, so concurrent reservations for
        the same mother are serialized by the row lock and never observe the
        same value.

        Returns:
            The sequence number reserved for the caller (the pre-increment value)

        Raises:
            NotFoundError: If the mother does not exist
        """
        result = await self.session.execute(
            update(Mother)
            .where(
                Mother.owner_id == owner_id,
                Mother.mother_id == mother_id
            )
            .values(next_litter_sequence=Mother.next_litter_sequence + 1)
            .returning(Mother.next_litter_sequence)
        )
        next_value = result.scalar_one_or_none()
        if next_value is None:
            raise NotFoundError(f"Mother with ID '{mother_id}' not found.")
        return next_value - 1

    async def remove(self, owner_id: uuid.UUID, mother_id: str) -> Dict[str, Union[str, int]]:
        """
        Remove a mother together with her litters and their offspring.

        Deletion runs child-before-parent: offspring, then litters, then the
        mother. All statements share the caller's transaction.

        Returns:
            Dict containing:
                - mother_id: The removed mother's id
                - litters_removed: Number of litters deleted
                - offspring_removed: Number of offspring deleted

        Raises:
            NotFoundError: If the mother does not exist
        """
        mother = await self.get_mother(owner_id, mother_id)

        litter_result = await self.session.execute(
            select(Litter.id).where(
                Litter.owner_id == owner_id,
                Litter.mother_id == mother_id
            )
        )
        litter_pks = list(litter_result.scalars().all())

        offspring_removed = 0
        if litter_pks:
            offspring_result = await self.session.execute(
                delete(Offspring).where(
                    Offspring.owner_id == owner_id,
                    Offspring.litter_pk.in_(litter_pks)
                )
            )
            offspring_removed = offspring_result.rowcount

            await self.session.execute(
                delete(Litter).where(Litter.id.in_(litter_pks))
            )

        await self.session.delete(mother)
        await self.session.flush()

        logger.info(
            f"Removed mother {mother_id} for owner {owner_id} with "
            f"{len(litter_pks)} litters and {offspring_removed} offspring"
        )
        return {
            "mother_id": mother_id,
            "litters_removed": len(litter_pks),
            "offspring_removed": offspring_removed,
        }

    def _dialect_name(self) -> str:
        return self.session.get_bind().dialect.name
