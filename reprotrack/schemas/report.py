"""Report schemas for API request/response validation."""
from datetime import datetime, date
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field


class ReportGenerate(BaseModel):
    """Schema for generating (or extending) a named report."""
    target_mother_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    report_name: str = Field(..., min_length=1, max_length=255)


class ReportRename(BaseModel):
    """Schema for renaming a report."""
    new_name: str = Field(..., min_length=1, max_length=255)


class ReportResults(BaseModel):
    """Schema for the performance entries of a report."""
    name: str
    results: List[str]


class ReportRead(BaseModel):
    """Schema for reading a full report."""
    name: str
    generated_at: datetime
    target_mothers: List[str]
    results: List[str]
    summary: str
    
    model_config = ConfigDict(from_attributes=True)


class ReportSummary(BaseModel):
    """Schema for the cached narrative summary of a report."""
    name: str
    summary: str


class PerformanceEntry(BaseModel):
    """
    Reproductive performance of one mother over one date window.
    
    Computed from the litter and offspring records, then rendered to the
    text form stored in ``Report.results``.
    """
    mother_id: str
    start_date: date
    end_date: date
    litter_count: int = Field(..., ge=0)
    offspring_count: int = Field(..., ge=0)
    weaned_count: int = Field(..., ge=0)
    
    model_config = ConfigDict(frozen=True)
    
    @property
    def avg_offspring_per_litter(self) -> Optional[float]:
        """Mean recorded offspring per litter, None without litters."""
        if self.litter_count == 0:
            return None
        return self.offspring_count / self.litter_count
    
    @property
    def weaning_survival_rate(self) -> Optional[float]:
        """Share of offspring that survived to weaning, None without offspring."""
        if self.offspring_count == 0:
            return None
        return self.weaned_count / self.offspring_count
    
    def render(self) -> str:
        """Render the entry as the report line stored in ``results``."""
        avg = self.avg_offspring_per_litter
        rate = self.weaning_survival_rate
        avg_text = f"{avg:.2f}" if avg is not None else "N/A"
        rate_text = f"{rate * 100:.2f}%" if rate is not None else "N/A"
        return (
            f"Performance for {self.mother_id} "
            f"({self.start_date.isoformat()} to {self.end_date.isoformat()}): "
            f"Litters: {self.litter_count}, Offspring: {self.offspring_count}, "
            f"Weaned: {self.weaned_count}, Avg Offspring/Litter: {avg_text}, "
            f"Weaning Survival: {rate_text}"
        )
