"""
Reports router for reproductive performance reports.

This module provides operations for:
- Generating report entries for a mother over a date window
- Viewing, listing, renaming and deleting reports
- Requesting and regenerating narrative summaries
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from reprotrack.database import get_async_session
from reprotrack.dependencies import current_active_user, get_report_aggregator
from reprotrack.models.user import User
from reprotrack.schemas.report import (
    ReportGenerate,
    ReportRename,
    ReportResults,
    ReportRead,
    ReportSummary,
)
from reprotrack.services.report_aggregator import ReportAggregator


router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    responses={
        404: {"description": "Report not found"},
    }
)


@router.post("/", response_model=ReportResults)
async def generate_report(
    report_data: ReportGenerate,
    session: AsyncSession = Depends(get_async_session),
    reports: ReportAggregator = Depends(get_report_aggregator),
    current_user: User = Depends(current_active_user),
) -> dict:
    """
    Generate a performance entry for a mother and merge it into a report.
    
    Creates the report when the name is new; otherwise adds the entry
    unless the same entry is already present.
    
    **Example:**
    ```json
    {
        "target_mother_id": "EWE-102",
        "start_date": "2024-01-01",
        "end_date": "2024-12-31",
        "report_name": "Season 2024"
    }
    ```
    
    **Errors:** 404 if the mother is not registered, 400 on an inverted date range
    """
    results = await reports.generate_report(
        current_user.id,
        report_data.target_mother_id,
        report_data.start_date,
        report_data.end_date,
        report_data.report_name,
    )
    await session.commit()
    return {"name": report_data.report_name, "results": results}


@router.get("/", response_model=List[ReportRead])
async def list_reports(
    reports: ReportAggregator = Depends(get_report_aggregator),
    current_user: User = Depends(current_active_user),
):
    """List all reports of the current user, most recent first."""
    return await reports.list_reports(current_user.id)


@router.get("/{report_name}", response_model=ReportResults)
async def view_report(
    report_name: str,
    reports: ReportAggregator = Depends(get_report_aggregator),
    current_user: User = Depends(current_active_user),
) -> dict:
    """View the performance entries of a report."""
    results = await reports.view_report(current_user.id, report_name)
    return {"name": report_name, "results": results}


@router.put("/{report_name}/name", response_model=ReportRead)
async def rename_report(
    report_name: str,
    rename_data: ReportRename,
    session: AsyncSession = Depends(get_async_session),
    reports: ReportAggregator = Depends(get_report_aggregator),
    current_user: User = Depends(current_active_user),
):
    """
    Rename a report.
    
    **Errors:** 404 if the report does not exist, 409 if the new name is taken
    """
    report = await reports.rename_report(current_user.id, report_name, rename_data.new_name)
    await session.commit()
    return report


@router.delete("/{report_name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_name: str,
    session: AsyncSession = Depends(get_async_session),
    reports: ReportAggregator = Depends(get_report_aggregator),
    current_user: User = Depends(current_active_user),
) -> None:
    """Delete a report."""
    await reports.delete_report(current_user.id, report_name)
    await session.commit()


@router.get("/{report_name}/summary", response_model=ReportSummary)
async def get_summary(
    report_name: str,
    session: AsyncSession = Depends(get_async_session),
    reports: ReportAggregator = Depends(get_report_aggregator),
    current_user: User = Depends(current_active_user),
) -> dict:
    """
    Get the narrative summary of a report.
    
    The summary is generated on first request and cached until the report
    content changes.
    
    **Errors:** 502 `DEPENDENCY_FAILURE` if the summarizer fails
    """
    summary = await reports.summarize_report(current_user.id, report_name)
    await session.commit()
    return {"name": report_name, "summary": summary}


@router.post("/{report_name}/summary", response_model=ReportSummary)
async def regenerate_summary(
    report_name: str,
    session: AsyncSession = Depends(get_async_session),
    reports: ReportAggregator = Depends(get_report_aggregator),
    current_user: User = Depends(current_active_user),
) -> dict:
    """Regenerate the narrative summary of a report, replacing the cached one."""
    summary = await reports.regenerate_summary(current_user.id, report_name)
    await session.commit()
    return {"name": report_name, "summary": summary}
