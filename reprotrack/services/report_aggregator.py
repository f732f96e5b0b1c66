"""Report aggregator: per-mother performance entries merged into named reports."""
import logging
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional, Protocol

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.exceptions import (
    ConflictError,
    DependencyFailureError,
    InvalidInputError,
    NotFoundError,
)
from reprotrack.models.litter import Litter
from reprotrack.models.offspring import Offspring
from reprotrack.models.report import Report
from reprotrack.schemas.report import PerformanceEntry
from reprotrack.services.mother_registry import MotherRegistry


logger = logging.getLogger(__name__)


class ReportSummarizer(Protocol):
    """Anything that can turn a report into a cached narrative summary."""

    async def summarize(self, report: Report) -> str:
        ...


def merge_distinct(values: List[str], value: str) -> List[str]:
    """Return a new list with ``value`` appended unless already present."""
    merged = list(values or [])
    if value not in merged:
        merged.append(value)
    return merged


class ReportAggregator:
    """
    Service generating and maintaining performance reports.

    A report is identified by name and grows by merging one entry per
    (mother, date window) pair. Entries are deduplicated by exact text and
    the set of contributing mothers only ever grows. The cached summary is
    cleared whenever the report content changes.
    """

    def __init__(
        self,
        session: AsyncSession,
        summarizer: Optional[ReportSummarizer] = None,
        mothers: Optional[MotherRegistry] = None
    ):
        self.session = session
        self.summarizer = summarizer
        self.mothers = mothers or MotherRegistry(session)

    async def _find(self, owner_id: uuid.UUID, name: str) -> Optional[Report]:
        result = await self.session.execute(
            select(Report).where(
                Report.owner_id == owner_id,
                Report.name == name
            )
        )
        return result.scalar_one_or_none()

    async def get_report(self, owner_id: uuid.UUID, name: str) -> Report:
        """
        Fetch a report by name.

        Raises:
            NotFoundError: If no report with this name exists
        """
        report = await self._find(owner_id, name)
        if report is None:
            raise NotFoundError(f"Report with name '{name}' not found.")
        return report

    async def list_reports(self, owner_id: uuid.UUID) -> List[Report]:
        """Return all reports owned by the user, most recently generated first."""
        result = await self.session.execute(
            select(Report)
            .where(Report.owner_id == owner_id)
            .order_by(Report.generated_at.desc(), Report.id.desc())
        )
        return list(result.scalars().all())

    async def compute_performance(
        self,
        owner_id: uuid.UUID,
        mother_id: str,
        start_date: date,
        end_date: date
    ) -> PerformanceEntry:
        """
        Compute a mother's performance over an inclusive birth-date window.

        Offspring are counted from the recorded offspring rows, not from the
        litters' reported sizes.
        """
        litter_result = await self.session.execute(
            select(Litter.id).where(
                Litter.owner_id == owner_id,
                Litter.mother_id == mother_id,
                Litter.birth_date >= start_date,
                Litter.birth_date <= end_date
            )
        )
        litter_pks = list(litter_result.scalars().all())

        offspring_count = 0
        weaned_count = 0
        if litter_pks:
            counts = await self.session.execute(
                select(
                    func.count(Offspring.id),
                    func.coalesce(
                        func.sum(case((Offspring.survived_to_weaning.is_(True), 1), else_=0)),
                        0
                    )
                ).where(
                    Offspring.owner_id == owner_id,
                    Offspring.litter_pk.in_(litter_pks)
                )
            )
            offspring_count, weaned_count = counts.one()

        return PerformanceEntry(
            mother_id=mother_id,
            start_date=start_date,
            end_date=end_date,
            litter_count=len(litter_pks),
            offspring_count=int(offspring_count),
            weaned_count=int(weaned_count),
        )

    async def generate_report(
        self,
        owner_id: uuid.UUID,
        target_mother_id: str,
        start_date: date,
        end_date: date,
        report_name: str
    ) -> List[str]:
        """
        Generate a performance entry and merge it into the named report.

        Creates the report if the name is new. Otherwise adds the mother to
        the report's targets, appends the entry if that exact text is not
        already present, and refreshes ``generated_at``.

        Returns:
            The report's full list of entries after the merge

        Raises:
            InvalidInputError: If ``start_date`` is after ``end_date``
            NotFoundError: If the target mother does not exist
        """
        if start_date > end_date:
            raise InvalidInputError("Start date cannot be after end date.")

        await self.mothers.get_mother(owner_id, target_mother_id)
        entry = await self.compute_performance(owner_id, target_mother_id, start_date, end_date)
        rendered = entry.render()
        now = datetime.now(timezone.utc)

        report = await self._find(owner_id, report_name)
        if report is None:
            report = Report(
                owner_id=owner_id,
                name=report_name,
                generated_at=now,
                target_mothers=[target_mother_id],
                results=[rendered],
                summary="",
            )
            self.session.add(report)
            logger.info(f"Created report '{report_name}' for owner {owner_id}")
        else:
            targets = merge_distinct(report.target_mothers, target_mother_id)
            results = merge_distinct(report.results, rendered)
            if targets != list(report.target_mothers) or results != list(report.results):
                report.summary = ""
                logger.info(f"Merged new entry for {target_mother_id} into report '{report_name}'")
            report.target_mothers = targets
            report.results = results
            report.generated_at = now

        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError(f"Report with name '{report_name}' was created concurrently.")
        return list(report.results)

    async def rename_report(self, owner_id: uuid.UUID, old_name: str, new_name: str) -> Report:
        """
        Rename a report, keeping all of its content.

        Raises:
            NotFoundError: If ``old_name`` does not exist
            ConflictError: If ``new_name`` is already taken
        """
        report = await self.get_report(owner_id, old_name)
        if new_name == old_name:
            return report
        if await self._find(owner_id, new_name) is not None:
            raise ConflictError(f"Report with name '{new_name}' already exists.")

        report.name = new_name
        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError(f"Report with name '{new_name}' already exists.")

        logger.info(f"Renamed report '{old_name}' to '{new_name}' for owner {owner_id}")
        return report

    async def delete_report(self, owner_id: uuid.UUID, name: str) -> None:
        """Delete a report by name."""
        report = await self.get_report(owner_id, name)
        await self.session.delete(report)
        await self.session.flush()
        logger.info(f"Deleted report '{name}' for owner {owner_id}")

    async def view_report(self, owner_id: uuid.UUID, name: str) -> List[str]:
        """Return a report's performance entries."""
        report = await self.get_report(owner_id, name)
        return list(report.results)

    async def summarize_report(self, owner_id: uuid.UUID, name: str) -> str:
        """
        Return the report's narrative summary, generating it on first use.

        A non-empty cached summary is returned without calling the
        summarizer again.
        """
        report = await self.get_report(owner_id, name)
        if report.summary:
            return report.summary
        return await self._summarize(report)

    async def regenerate_summary(self, owner_id: uuid.UUID, name: str) -> str:
        """Generate a fresh summary, replacing any cached one."""
        report = await self.get_report(owner_id, name)
        return await self._summarize(report)

    async def _summarize(self, report: Report) -> str:
        if self.summarizer is None:
            raise DependencyFailureError("No report summarizer is configured.")
        try:
            summary = await self.summarizer.summarize(report)
        except DependencyFailureError:
            logger.error(f"Failed to summarize report '{report.name}' for owner {report.owner_id}")
            raise
        report.summary = summary
        await self.session.flush()
        return summary
