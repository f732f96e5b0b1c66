"""Unit tests for the report aggregator."""
from datetime import date
from unittest.mock import AsyncMock

import pytest

from reprotrack.exceptions import (
    ConflictError,
    DependencyFailureError,
    InvalidInputError,
    NotFoundError,
)
from reprotrack.services.report_aggregator import ReportAggregator


START = date(2024, 1, 1)
END = date(2024, 12, 31)


async def seed_litter(litters, offspring, owner_id, mother_id, birth_date, weaned, not_weaned, prefix):
    """Record a litter with the given numbers of weaned and unweaned offspring."""
    litter = await litters.record_litter(owner_id, mother_id, birth_date, weaned + not_weaned)
    for index in range(weaned + not_weaned):
        offspring_id = f"{prefix}-{index}"
        await offspring.record_offspring(owner_id, litter.litter_id, offspring_id, "female")
        if index < weaned:
            await offspring.record_weaning(owner_id, offspring_id)
    return litter


class TestComputePerformance:
    """Test the per-mother performance figures."""

    async def test_counts_litters_offspring_and_weaned(self, reports, litters, offspring, owner_id):
        await seed_litter(litters, offspring, owner_id, "EWE-1", date(2024, 3, 1), 2, 1, "A")
        await seed_litter(litters, offspring, owner_id, "EWE-1", date(2024, 9, 1), 1, 0, "B")

        entry = await reports.compute_performance(owner_id, "EWE-1", START, END)

        assert entry.litter_count == 2
        assert entry.offspring_count == 4
        assert entry.weaned_count == 3
        assert entry.avg_offspring_per_litter == 2.0
        assert entry.weaning_survival_rate == 0.75

    async def test_window_bounds_are_inclusive(self, reports, litters, offspring, owner_id):
        await seed_litter(litters, offspring, owner_id, "EWE-1", START, 1, 0, "A")
        await seed_litter(litters, offspring, owner_id, "EWE-1", END, 1, 0, "B")
        await seed_litter(litters, offspring, owner_id, "EWE-1", date(2025, 1, 1), 1, 0, "C")

        entry = await reports.compute_performance(owner_id, "EWE-1", START, END)

        assert entry.litter_count == 2

    async def test_uses_recorded_offspring_not_reported_size(self, reports, litters, owner_id):
        await litters.record_litter(owner_id, "EWE-1", date(2024, 3, 1), 5)

        entry = await reports.compute_performance(owner_id, "EWE-1", START, END)

        assert entry.litter_count == 1
        assert entry.offspring_count == 0
        assert entry.weaning_survival_rate is None

    async def test_dead_after_weaning_still_counts_as_weaned(self, reports, litters, offspring, owner_id):
        await seed_litter(litters, offspring, owner_id, "EWE-1", date(2024, 3, 1), 1, 0, "A")
        await offspring.record_death(owner_id, "A-0")

        entry = await reports.compute_performance(owner_id, "EWE-1", START, END)

        assert entry.weaned_count == 1


class TestGenerateReport:
    """Test report creation and merging."""

    async def test_scenario_single_mother_report(self, reports, litters, offspring, owner_id):
        await seed_litter(litters, offspring, owner_id, "EWE-1", date(2024, 3, 1), 1, 1, "A")

        results = await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

        assert results == [
            "Performance for EWE-1 (2024-01-01 to 2024-12-31): Litters: 1, Offspring: 2, "
            "Weaned: 1, Avg Offspring/Litter: 2.00, Weaning Survival: 50.00%"
        ]
        report = await reports.get_report(owner_id, "Season")
        assert report.target_mothers == ["EWE-1"]
        assert report.summary == ""

    async def test_mother_without_litters_renders_not_applicable(self, reports, mothers, owner_id):
        await mothers.add_mother(owner_id, "EWE-1")

        results = await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

        assert results[0].endswith(
            "Litters: 0, Offspring: 0, Weaned: 0, Avg Offspring/Litter: N/A, Weaning Survival: N/A"
        )

    async def test_regenerating_same_entry_is_idempotent(self, reports, mothers, owner_id):
        await mothers.add_mother(owner_id, "EWE-1")
        first = await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

        second = await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

        assert second == first
        report = await reports.get_report(owner_id, "Season")
        assert report.target_mothers == ["EWE-1"]

    async def test_merges_second_mother(self, reports, mothers, owner_id):
        await mothers.add_mother(owner_id, "EWE-1")
        await mothers.add_mother(owner_id, "EWE-2")

        await reports.generate_report(owner_id, "EWE-1", START, END, "Season")
        results = await reports.generate_report(owner_id, "EWE-2", START, END, "Season")

        assert len(results) == 2
        assert results[0].startswith("Performance for EWE-1")
        assert results[1].startswith("Performance for EWE-2")
        report = await reports.get_report(owner_id, "Season")
        assert report.target_mothers == ["EWE-1", "EWE-2"]

    async def test_changed_figures_add_a_new_entry(self, reports, litters, owner_id):
        await litters.record_litter(owner_id, "EWE-1", date(2024, 3, 1), 1)
        await reports.generate_report(owner_id, "EWE-1", START, END, "Season")
        await litters.record_litter(owner_id, "EWE-1", date(2024, 8, 1), 1)

        results = await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

        assert len(results) == 2
        assert "Litters: 1" in results[0]
        assert "Litters: 2" in results[1]

    async def test_inverted_window_is_rejected(self, reports, mothers, owner_id):
        await mothers.add_mother(owner_id, "EWE-1")

        with pytest.raises(InvalidInputError):
            await reports.generate_report(owner_id, "EWE-1", END, START, "Season")

    async def test_unknown_mother_raises_not_found(self, reports, owner_id):
        with pytest.raises(NotFoundError):
            await reports.generate_report(owner_id, "GHOST", START, END, "Season")

        with pytest.raises(NotFoundError):
            await reports.get_report(owner_id, "Season")

    async def test_returned_list_is_a_copy(self, reports, mothers, owner_id):
        await mothers.add_mother(owner_id, "EWE-1")
        results = await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

        results.append("tampered")

        assert await reports.view_report(owner_id, "Season") == results[:1]


class TestRenameAndDelete:
    """Test report renaming, deletion and listing."""

    @pytest.fixture
    async def season(self, reports, mothers, owner_id):
        await mothers.add_mother(owner_id, "EWE-1")
        await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

    async def test_rename_keeps_content(self, reports, season, owner_id):
        before = await reports.view_report(owner_id, "Season")

        report = await reports.rename_report(owner_id, "Season", "Season 2024")

        assert report.name == "Season 2024"
        assert await reports.view_report(owner_id, "Season 2024") == before
        with pytest.raises(NotFoundError):
            await reports.view_report(owner_id, "Season")

    async def test_rename_to_taken_name_conflicts(self, reports, mothers, season, owner_id):
        await reports.generate_report(owner_id, "EWE-1", START, END, "Other")

        with pytest.raises(ConflictError):
            await reports.rename_report(owner_id, "Season", "Other")

        assert len(await reports.view_report(owner_id, "Season")) == 1

    async def test_rename_to_same_name_is_a_no_op(self, reports, season, owner_id):
        report = await reports.rename_report(owner_id, "Season", "Season")
        assert report.name == "Season"

    async def test_rename_unknown_report_raises_not_found(self, reports, owner_id):
        with pytest.raises(NotFoundError):
            await reports.rename_report(owner_id, "Nope", "Other")

    async def test_delete_report(self, reports, season, owner_id):
        await reports.delete_report(owner_id, "Season")

        with pytest.raises(NotFoundError):
            await reports.get_report(owner_id, "Season")
        assert await reports.list_reports(owner_id) == []

    async def test_list_reports_is_scoped_to_owner(self, reports, season, owner_id, other_user):
        assert [r.name for r in await reports.list_reports(owner_id)] == ["Season"]
        assert await reports.list_reports(other_user.id) == []


class TestSummaries:
    """Test summary caching and invalidation."""

    @pytest.fixture
    async def season(self, reports, mothers, owner_id):
        await mothers.add_mother(owner_id, "EWE-1")
        await mothers.add_mother(owner_id, "EWE-2")
        await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

    async def test_summary_is_generated_once_and_cached(self, reports, season, fake_summarizer, owner_id):
        first = await reports.summarize_report(owner_id, "Season")
        second = await reports.summarize_report(owner_id, "Season")

        assert first == second
        assert fake_summarizer.summarize.await_count == 1
        assert (await reports.get_report(owner_id, "Season")).summary == first

    async def test_regenerate_always_calls_summarizer(self, reports, season, fake_summarizer, owner_id):
        await reports.summarize_report(owner_id, "Season")
        fake_summarizer.summarize.return_value = '{"fresh": true}'

        summary = await reports.regenerate_summary(owner_id, "Season")

        assert summary == '{"fresh": true}'
        assert fake_summarizer.summarize.await_count == 2

    async def test_new_entry_clears_cached_summary(self, reports, season, fake_summarizer, owner_id):
        await reports.summarize_report(owner_id, "Season")

        await reports.generate_report(owner_id, "EWE-2", START, END, "Season")

        assert (await reports.get_report(owner_id, "Season")).summary == ""
        await reports.summarize_report(owner_id, "Season")
        assert fake_summarizer.summarize.await_count == 2

    async def test_identical_regeneration_keeps_cached_summary(self, reports, season, owner_id):
        summary = await reports.summarize_report(owner_id, "Season")

        await reports.generate_report(owner_id, "EWE-1", START, END, "Season")

        assert (await reports.get_report(owner_id, "Season")).summary == summary

    async def test_rename_keeps_cached_summary(self, reports, season, owner_id):
        summary = await reports.summarize_report(owner_id, "Season")

        await reports.rename_report(owner_id, "Season", "Renamed")

        assert (await reports.get_report(owner_id, "Renamed")).summary == summary

    async def test_summarizer_failure_propagates_and_leaves_cache_empty(
        self, reports, season, fake_summarizer, owner_id
    ):
        fake_summarizer.summarize.side_effect = DependencyFailureError("model unreachable")

        with pytest.raises(DependencyFailureError):
            await reports.summarize_report(owner_id, "Season")

        assert (await reports.get_report(owner_id, "Season")).summary == ""

    async def test_missing_summarizer_is_a_dependency_failure(self, async_session, season, owner_id):
        aggregator = ReportAggregator(async_session)

        with pytest.raises(DependencyFailureError):
            await aggregator.summarize_report(owner_id, "Season")

    async def test_summary_of_unknown_report_raises_not_found(self, reports, owner_id):
        with pytest.raises(NotFoundError):
            await reports.summarize_report(owner_id, "Nope")


async def test_summarizer_receives_the_report(async_session, mothers, owner_id):
    summarizer = AsyncMock()
    summarizer.summarize = AsyncMock(return_value="{}")
    aggregator = ReportAggregator(async_session, summarizer, mothers)
    await mothers.add_mother(owner_id, "EWE-1")
    await aggregator.generate_report(owner_id, "EWE-1", START, END, "Season")

    await aggregator.summarize_report(owner_id, "Season")

    report = summarizer.summarize.await_args.args[0]
    assert report.name == "Season"
    assert report.target_mothers == ["EWE-1"]
