"""Expense service for manually entered expenses."""

import logging
from typing import Dict, Any, Optional

from shared.dates import format_timestamp, utc_now
from shared.exceptions import ValidationError
from shared.validators import sanitize_string, validate_owner_id
from expenses.models import ExpenseItemInput
from receipts.models import ExpenseRecord, LineItem
from receipts.service import ReceiptService

logger = logging.getLogger(__name__)


class ExpenseService:
    """Service for adding expenses without a receipt image."""

    def __init__(self, receipt_service: Optional[ReceiptService] = None):
        """Initialize expense service."""
        self.receipt_service = receipt_service or ReceiptService()

    def add_expense(self, payload: Dict[str, Any]) -> ExpenseRecord:
        """
        Store a manually entered expense.

        The record is dated now; receipt and item ids are generated.

        Args:
            payload: Request body with vendor, items and googleId

        Returns:
            The stored record

        Raises:
            ValidationError: If vendor, items or googleId is missing or empty
        """
        vendor = payload.get('vendor')
        items = payload.get('items')
        google_id = payload.get('googleId')

        if not google_id or not vendor or not isinstance(items, list) or not items:
            raise ValidationError("Invalid expense data")

        google_id = validate_owner_id(google_id)
        vendor = sanitize_string(vendor)
        if not vendor:
            raise ValidationError("Invalid expense data")

        line_items = []
        for raw in items:
            if not isinstance(raw, dict):
                raise ValidationError("Invalid expense data")
            item = ExpenseItemInput.model_validate(raw)
            line_items.append(
                LineItem(
                    name=item.description,
                    category=item.category,
                    price=item.amount
                )
            )

        record = self.receipt_service.insert(
            ExpenseRecord(
                google_id=google_id,
                vendor=vendor,
                date=format_timestamp(utc_now()),
                items=line_items
            )
        )

        logger.info(f"Added manual expense {record.receipt_id} ({len(line_items)} items)")
        return record
