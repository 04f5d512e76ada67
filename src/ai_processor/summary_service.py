"""Gemini service for natural-language spending summaries."""

import logging
from typing import List, Optional

from analytics.models import CategorySpend
from shared.gemini import GeminiClient
from shared.exceptions import AdapterFailure, SummaryFailure

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """
You are a friendly personal finance assistant. Below is a breakdown of one
person's spending over the last {days} days, by category.

{breakdown}

Write a short summary (3 to 5 sentences) of their spending patterns. Mention
the categories that dominate, anything that looks unusual, and one practical
suggestion. Use plain text, no markdown, no lists.
""".strip()

NO_SPENDING = "No spending recorded."


class SpendingSummaryService:
    """Generates spending summaries from category breakdowns."""

    def __init__(self, gemini: Optional[GeminiClient] = None):
        """Initialize summary service."""
        self.gemini = gemini or GeminiClient()

    def generate_summary(self, breakdown: List[CategorySpend], days: int = 30) -> str:
        """
        Summarize a category breakdown in natural language.

        Args:
            breakdown: Category totals and percentages
            days: Length of the window the breakdown covers

        Returns:
            Summary text

        Raises:
            SummaryFailure: If the summary cannot be generated
        """
        prompt = SUMMARY_PROMPT.format(
            days=days,
            breakdown=self.format_breakdown(breakdown)
        )

        try:
            summary = self.gemini.generate([prompt], temperature=0.7)
        except AdapterFailure as e:
            raise SummaryFailure(e.message)

        logger.info(f"Generated spending summary ({len(summary)} chars)")
        return summary

    @staticmethod
    def format_breakdown(breakdown: List[CategorySpend]) -> str:
        if not breakdown:
            return NO_SPENDING

        return "\n".join(
            f"- {entry.name}: {entry.amount:.2f} ({entry.percentage}%)"
            for entry in breakdown
        )
