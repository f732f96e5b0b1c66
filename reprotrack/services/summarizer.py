"""Report summarizer backed by a generative language model."""

import logging

import httpx
from aiolimiter import AsyncLimiter
from pydantic import ValidationError

from reprotrack.config import Settings
from reprotrack.exceptions import DependencyFailureError
from reprotrack.models.report import Report
from reprotrack.schemas.summary import SummaryFindings

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """You are an expert livestock analyst. Given the following report, respond ONLY with valid JSON in this exact format, with no text before or after it:
{{
"highPerformers": [],
"lowPerformers": [],
"concerningTrends": [],
"averagePerformers": [],
"potentialRecordErrors": [],
"insights": "Two or three short paragraphs: the most important findings, likely causes of low performance or concerning trends, and practical management or intervention strategies. Mention whether the overall group performance stands out as particularly good or bad."
}}
Return an empty array for any category you cannot determine. Every mother in the report must appear in at least one category, and only in 'averagePerformers' if she is in no other category.

Be suspicious of questionable or inconsistent records and list any mother whose data may be wrong in 'potentialRecordErrors', explaining why in 'insights'. Examples:
- more offspring weaned than born
- weaning records without a corresponding birth record
- negative or impossible counts
- values that look like typos (an extra zero, swapped digits)
- duplicate or missing records

Here is the report data:
Report Name: {name}
Generated Date: {generated_at}
Target Mothers: {targets}
Report Entries:
{entries}
"""


def build_prompt(report: Report) -> str:
    """Render the analyst prompt for a report."""
    entries = "\n".join(
        f"  {index}. {entry}" for index, entry in enumerate(report.results, start=1)
    )
    return PROMPT_TEMPLATE.format(
        name=report.name,
        generated_at=report.generated_at.isoformat(),
        targets=", ".join(report.target_mothers),
        entries=entries,
    )


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence from a model reply."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):].lstrip()
    elif text.startswith("```"):
        text = text[len("```"):].lstrip()
    if text.endswith("```"):
        text = text[:-len("```")].rstrip()
    return text


def parse_summary(text: str) -> str:
    """
    Validate a model reply and return it as the summary to cache.

    Raises:
        DependencyFailureError: If the reply is not JSON of the expected shape
    """
    cleaned = strip_code_fence(text)
    try:
        SummaryFindings.model_validate_json(cleaned)
    except ValidationError as e:
        logger.error(f"Summarizer reply did not match expected structure: {e}")
        raise DependencyFailureError(
            f"Invalid JSON response from summarizer. Raw response: {cleaned}"
        )
    return cleaned


class SummarizerClient:
    """
    Client for summarizing reports with the Gemini generateContent API.

    Features:
    - Prompt construction from report entries
    - Rate limiting (1 request per second by default)
    - Validation of the categorized JSON findings
    """

    def __init__(self, settings: Settings):
        """
        Initialize summarizer client.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self.api_key = settings.summarizer_api_key
        self.base_url = settings.summarizer_base_url.rstrip("/")
        self.model = settings.summarizer_model
        self.timeout = settings.summarizer_timeout_seconds

        self.rate_limiter = AsyncLimiter(
            max_rate=settings.summarizer_rate_limit,
            time_period=1.0
        )

        logger.info(
            f"SummarizerClient initialized for model {self.model} with rate limit: "
            f"{settings.summarizer_rate_limit} req/s"
        )

    async def summarize(self, report: Report) -> str:
        """
        Summarize a report into categorized findings and narrative insights.

        Args:
            report: Report whose entries should be analysed

        Returns:
            The validated JSON findings as text

        Raises:
            DependencyFailureError: If the model is not configured, unreachable,
                or replies with something unusable
        """
        if not self.api_key:
            raise DependencyFailureError("Report summarizer API key is not configured.")

        prompt = build_prompt(report)

        async with self.rate_limiter:
            logger.info(f"Requesting summary for report: {report.name}")

            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        f"{self.base_url}/models/{self.model}:generateContent",
                        params={"key": self.api_key},
                        json={"contents": [{"parts": [{"text": prompt}]}]},
                    )
                    response.raise_for_status()
                    data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Summarizer HTTP error: {e.response.status_code}")
                raise DependencyFailureError(
                    f"Summarizer returned HTTP {e.response.status_code}."
                )
            except httpx.TimeoutException:
                logger.error("Summarizer request timeout")
                raise DependencyFailureError("Summarizer request timed out.")
            except httpx.RequestError as e:
                logger.error(f"Summarizer request error: {e}")
                raise DependencyFailureError("Summarizer service unavailable.")
            except ValueError:
                logger.error("Summarizer response body was not JSON")
                raise DependencyFailureError("Summarizer returned a non-JSON response.")

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            logger.error(f"Unexpected summarizer response shape: {data}")
            raise DependencyFailureError("Summarizer response contained no text.")

        return parse_summary(text)
