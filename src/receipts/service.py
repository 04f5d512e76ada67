"""Receipt service: persistence of expense records."""

import os
import uuid
import logging
from typing import List, Optional

from boto3.dynamodb.conditions import Key, Attr

from shared.dynamodb import DynamoDBClient
from shared.dates import format_timestamp, utc_now
from receipts.models import ExpenseRecord

logger = logging.getLogger(__name__)

OWNER_DATE_INDEX = 'owner-date-index'


class ReceiptService:
    """Service for storing and querying expense records."""

    def __init__(self, table_name: Optional[str] = None):
        """Initialize receipt service."""
        self.receipts_table = DynamoDBClient(table_name or os.environ.get('RECEIPTS_TABLE'))

    def insert(self, record: ExpenseRecord) -> ExpenseRecord:
        """
        Insert an expense record.

        Missing receipt and item identifiers are generated.

        Args:
            record: Record to store

        Returns:
            The stored record

        Raises:
            StoreFailure: If the write fails
        """
        stored = record.model_copy(deep=True)
        if not stored.receipt_id:
            stored.receipt_id = str(uuid.uuid4())
        for item in stored.items:
            if not item.item_id:
                item.item_id = str(uuid.uuid4())
        if not stored.created_at:
            stored.created_at = format_timestamp(utc_now())

        self.receipts_table.put_item(stored.to_item())

        logger.info(f"Stored receipt {stored.receipt_id} for {stored.google_id}")
        return stored

    def find_by_owner(self, google_id: str) -> List[ExpenseRecord]:
        """All records of one owner, any date."""
        items = self.receipts_table.query_all(
            Key('google_id').eq(google_id)
        )
        return [ExpenseRecord.model_validate(item) for item in items]

    def find_by_owner_since(self, google_id: str, since: str) -> List[ExpenseRecord]:
        """
        Records of one owner dated on or after ``since``.

        Records without a date are not in the index and never match.

        Args:
            google_id: Owner identifier
            since: Window start timestamp

        Returns:
            Matching records
        """
        items = self.receipts_table.query_all(
            Key('google_id').eq(google_id) & Key('date').gte(since),
            index_name=OWNER_DATE_INDEX
        )
        return [ExpenseRecord.model_validate(item) for item in items]

    def find_all_since(self, since: str) -> List[ExpenseRecord]:
        """Records of every owner dated on or after ``since``."""
        items = self.receipts_table.scan_all(
            filter_expression=Attr('date').gte(since)
        )
        return [ExpenseRecord.model_validate(item) for item in items]
