"""Schema for the structured findings returned by the report summarizer."""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SummaryFindings(BaseModel):
    """Categorized findings and narrative insights for one report."""
    high_performers: List[str] = Field(..., alias="highPerformers")
    low_performers: List[str] = Field(..., alias="lowPerformers")
    concerning_trends: List[str] = Field(..., alias="concerningTrends")
    average_performers: List[str] = Field(..., alias="averagePerformers")
    potential_record_errors: List[str] = Field(..., alias="potentialRecordErrors")
    insights: str
    
    model_config = ConfigDict(populate_by_name=True, strict=True)
