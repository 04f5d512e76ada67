"""Spending analytics over a trailing window."""

import os
import logging
from typing import List, Optional

from ai_processor.summary_service import SpendingSummaryService
from analytics.aggregator import (
    category_totals,
    compare_to_peers,
    population_totals,
    spending_breakdown,
)
from analytics.models import CategoryComparison, CategorySpend
from receipts.service import ReceiptService
from shared.dates import window_start

logger = logging.getLogger(__name__)


class SpendingAnalyticsService:
    """Service for spending breakdowns, peer comparison and AI summaries."""

    def __init__(
        self,
        receipt_service: Optional[ReceiptService] = None,
        summary_service: Optional[SpendingSummaryService] = None,
        window_days: Optional[int] = None
    ):
        """Initialize analytics service."""
        self.receipt_service = receipt_service or ReceiptService()
        self.summary_service = summary_service or SpendingSummaryService()
        if window_days is None:
            window_days = int(os.environ.get('SUMMARY_WINDOW_DAYS', '30'))
        self.window_days = window_days

    def spending_summary(self, google_id: str) -> List[CategorySpend]:
        """
        Category breakdown of one owner's spending in the window.

        Args:
            google_id: Owner identifier

        Returns:
            Category totals with percentages
        """
        records = self.receipt_service.find_by_owner_since(
            google_id, window_start(self.window_days)
        )
        logger.info(f"Aggregating {len(records)} receipts for {google_id}")
        return spending_breakdown(records)

    def comparison_summary(self, google_id: str) -> List[CategoryComparison]:
        """
        Compare one owner's spending with the average contributing peer.

        The owner's records and the population's records are read by two
        separate queries without a shared snapshot. A receipt stored between
        them can show up in the population side only; the next call sees both.

        Args:
            google_id: Owner identifier

        Returns:
            Per-category comparison
        """
        since = window_start(self.window_days)

        owner_totals = category_totals(
            self.receipt_service.find_by_owner_since(google_id, since)
        )
        totals, contributing_owners = population_totals(
            self.receipt_service.find_all_since(since)
        )

        return compare_to_peers(owner_totals, totals, contributing_owners)

    def ai_summary(self, google_id: str) -> str:
        """
        Natural-language summary of one owner's spending in the window.

        Args:
            google_id: Owner identifier

        Returns:
            Summary text

        Raises:
            SummaryFailure: If the summary cannot be generated
        """
        breakdown = self.spending_summary(google_id)
        return self.summary_service.generate_summary(breakdown, days=self.window_days)
