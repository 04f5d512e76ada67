"""Unit tests for spending analytics service."""

import pytest
from unittest.mock import Mock, patch
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from ai_processor.summary_service import SpendingSummaryService
from analytics.service import SpendingAnalyticsService
from receipts.models import ExpenseRecord
from receipts.service import ReceiptService
from shared.exceptions import SummaryFailure
from shared.dates import window_start


def make_record(google_id, *items):
    """Build a record from (category, price) pairs."""
    return ExpenseRecord(
        google_id=google_id,
        date='2024-01-15T10:00:00Z',
        items=[{'name': 'item', 'category': category, 'price': price} for category, price in items]
    )


class TestSpendingAnalyticsService:
    """Test cases for SpendingAnalyticsService."""

    @pytest.fixture
    def receipt_service(self):
        """Mocked receipt service."""
        return Mock(spec=ReceiptService)

    @pytest.fixture
    def summary_service(self):
        """Mocked summary service."""
        return Mock(spec=SpendingSummaryService)

    @pytest.fixture
    def analytics_service(self, receipt_service, summary_service):
        """Create analytics service with mocked dependencies."""
        return SpendingAnalyticsService(
            receipt_service=receipt_service,
            summary_service=summary_service,
            window_days=30
        )

    def test_spending_summary(self, analytics_service, receipt_service):
        """Test the owner's category breakdown."""
        receipt_service.find_by_owner_since.return_value = [
            make_record('user123', ('Food', 30), ('Food', 10)),
            make_record('user123', ('Transport', 20))
        ]

        summary = analytics_service.spending_summary('user123')

        assert [(e.name, e.amount, e.percentage) for e in summary] == [
            ('Food', 40, 67),
            ('Transport', 20, 33)
        ]
        google_id, since = receipt_service.find_by_owner_since.call_args.args
        assert google_id == 'user123'
        assert since.endswith('Z')

    def test_spending_summary_no_records(self, analytics_service, receipt_service):
        """Test an owner without spending in the window."""
        receipt_service.find_by_owner_since.return_value = []

        assert analytics_service.spending_summary('user123') == []

    def test_comparison_summary(self, analytics_service, receipt_service):
        """Test comparison against peers who spent in a category."""
        receipt_service.find_by_owner_since.return_value = [
            make_record('user123', ('Food', 100))
        ]
        receipt_service.find_all_since.return_value = [
            make_record('user123', ('Food', 100)),
            make_record('user456', ('Food', 100), ('Travel', 50)),
            make_record('user789', ('Food', 100))
        ]

        comparison = analytics_service.comparison_summary('user123')

        by_category = {c.category: c for c in comparison}
        assert by_category['Food'].difference == 0
        assert by_category['Food'].is_higher is False
        assert by_category['Travel'].difference == 50
        assert by_category['Travel'].is_higher is False

    def test_comparison_uses_same_window(self, analytics_service, receipt_service):
        """Test that both reads share the window start."""
        receipt_service.find_by_owner_since.return_value = []
        receipt_service.find_all_since.return_value = []

        assert analytics_service.comparison_summary('user123') == []

        owner_since = receipt_service.find_by_owner_since.call_args.args[1]
        all_since = receipt_service.find_all_since.call_args.args[0]
        assert owner_since == all_since

    def test_ai_summary(self, analytics_service, receipt_service, summary_service):
        """Test that the summary is generated from the breakdown."""
        receipt_service.find_by_owner_since.return_value = [
            make_record('user123', ('Food', 25))
        ]
        summary_service.generate_summary.return_value = 'All food.'

        assert analytics_service.ai_summary('user123') == 'All food.'

        breakdown = summary_service.generate_summary.call_args.args[0]
        assert [(e.name, e.percentage) for e in breakdown] == [('Food', 100)]
        assert summary_service.generate_summary.call_args.kwargs['days'] == 30

    def test_window_days_from_environment(self, receipt_service, summary_service):
        """Test the default window length."""
        with patch.dict(os.environ, {'SUMMARY_WINDOW_DAYS': '14'}):
            service = SpendingAnalyticsService(receipt_service, summary_service)

        assert service.window_days == 14

    def test_explicit_zero_window(self, receipt_service, summary_service):
        """Test that an explicit zero-day window is kept."""
        receipt_service.find_by_owner_since.return_value = []

        with patch.dict(os.environ, {'SUMMARY_WINDOW_DAYS': '30'}):
            service = SpendingAnalyticsService(receipt_service, summary_service, window_days=0)
        service.spending_summary('user123')

        assert service.window_days == 0
        since = receipt_service.find_by_owner_since.call_args.args[1]
        assert since >= window_start(1)

    def test_ai_summary_failure(self, analytics_service, receipt_service, summary_service):
        """Test that summary failures propagate."""
        receipt_service.find_by_owner_since.return_value = []
        summary_service.generate_summary.side_effect = SummaryFailure()

        with pytest.raises(SummaryFailure):
            analytics_service.ai_summary('user123')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
