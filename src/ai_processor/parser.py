"""Parser for AI receipt extraction results."""

import json
import logging
import re
from typing import Any, Dict, Optional
from datetime import timedelta

from receipts.models import LineItem, ParsedReceipt
from shared.dates import format_timestamp, parse_timestamp, utc_now
from shared.exceptions import ParseFailure

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class ReceiptParser:
    """Parser for receipt data extracted by the vision model."""

    @staticmethod
    def decode_response(text: str) -> Dict[str, Any]:
        """
        Decode the model's JSON answer.

        Args:
            text: Raw response text, possibly wrapped in a Markdown fence

        Returns:
            Decoded JSON object

        Raises:
            ParseFailure: If the text is not a JSON object or reports an error
        """
        text = (text or '').strip()
        match = _FENCED_JSON.search(text)
        if match:
            text = match.group(1).strip()

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.warning(f"Model returned invalid JSON: {text[:200]}")
            raise ParseFailure("Invalid JSON in receipt extraction response")

        if not isinstance(data, dict):
            raise ParseFailure("Receipt extraction response is not an object")

        if data.get('error'):
            logger.warning(f"Model could not read receipt: {data['error']}")
            raise ParseFailure(str(data['error']))

        return data

    @staticmethod
    def validate_and_clean(data: Dict[str, Any]) -> ParsedReceipt:
        """
        Validate and clean extracted receipt data.

        Args:
            data: Decoded extraction result

        Returns:
            Cleaned receipt
        """
        vendor = ReceiptParser._clean_vendor_name(data.get('vendor') or data.get('merchant'))
        date = ReceiptParser._validate_date(data.get('date'))

        items = [
            ReceiptParser._clean_item(item)
            for item in data.get('items') or []
            if isinstance(item, dict)
        ]
        items = [item for item in items if item is not None]

        if not items:
            logger.info("No line items extracted from receipt")

        return ParsedReceipt(vendor=vendor, date=date, items=items)

    @staticmethod
    def _validate_date(date_str: Any) -> Optional[str]:
        """Validate and normalize date string."""
        if not date_str:
            return None

        date_obj = parse_timestamp(str(date_str))
        if date_obj is None:
            logger.warning(f"Invalid date format: {date_str}")
            return None

        # Check if date is reasonable (not in future, not too old)
        now = utc_now()
        if date_obj > now:
            logger.warning(f"Future date detected: {date_str}, using today")
            return format_timestamp(now)

        if date_obj < now - timedelta(days=3650):
            logger.warning(f"Very old date detected: {date_str}")

        return format_timestamp(date_obj)

    @staticmethod
    def _clean_vendor_name(vendor: Any) -> Optional[str]:
        """Collapse whitespace in the vendor name."""
        if not vendor or not isinstance(vendor, str):
            return None

        cleaned = ' '.join(vendor.split())
        return cleaned or None

    @staticmethod
    def _clean_item(item: Dict[str, Any]) -> Optional[LineItem]:
        """Clean line item."""
        name = item.get('name') or item.get('description')
        price = item.get('price', item.get('amount'))

        if not name and price is None:
            return None

        return LineItem(
            name=name,
            category=item.get('category'),
            price=price
        )
