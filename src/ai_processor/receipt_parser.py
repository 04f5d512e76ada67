"""Gemini vision service for receipt extraction."""

import logging
from typing import Optional

from shared.gemini import GeminiClient
from shared.exceptions import AdapterFailure, ParseFailure
from shared.validators import validate_mime_type
from ai_processor.parser import ReceiptParser
from receipts.models import ParsedReceipt

logger = logging.getLogger(__name__)

RECEIPT_PROMPT = """
You are reading a photo of a shopping receipt for a personal finance app.
Extract the purchase and return ONLY valid JSON. No markdown. No extra text.

{
  "vendor": "name of the store or business",
  "date": "purchase date as YYYY-MM-DD, or null if not printed",
  "items": [
    {
      "name": "short description of the line item",
      "category": "spending category such as Groceries, Dining, Transport, Household, Health, Entertainment, Clothing, Utilities",
      "price": 0.0
    }
  ]
}

Prices are numbers without currency symbols. Leave out subtotal, tax and total lines.
If the image is not a readable receipt, return:
{"error": "Could not read receipt"}
""".strip()


class ReceiptParsingService:
    """Turns receipt images into structured receipts with Gemini."""

    def __init__(self, gemini: Optional[GeminiClient] = None):
        """Initialize receipt parsing service."""
        self.gemini = gemini or GeminiClient()

    def parse_receipt(self, image_bytes: bytes, mime_type: str) -> ParsedReceipt:
        """
        Extract vendor, date and line items from a receipt image.

        Args:
            image_bytes: Raw image content
            mime_type: Declared image MIME type

        Returns:
            Parsed receipt

        Raises:
            UnsupportedMediaError: If the MIME type is not allowed
            ParseFailure: If the image cannot be parsed
        """
        mime_type = validate_mime_type(mime_type)

        if not image_bytes:
            raise ParseFailure("Empty receipt image")

        logger.info(f"Parsing receipt image ({len(image_bytes)} bytes, {mime_type})")

        try:
            text = self.gemini.generate(
                [RECEIPT_PROMPT, self.gemini.image_part(image_bytes, mime_type)],
                json_output=True,
                temperature=0.1
            )
        except AdapterFailure as e:
            raise ParseFailure(e.message)

        parsed = ReceiptParser.validate_and_clean(ReceiptParser.decode_response(text))

        logger.info(f"Parsed receipt from {parsed.vendor} with {len(parsed.items)} items")
        return parsed
