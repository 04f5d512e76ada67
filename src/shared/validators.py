"""Validation utilities for the receipt tracker application."""

import math
import re
from typing import Any, Dict, List, Optional

from .exceptions import UnsupportedMediaError, ValidationError


# Uploads accepted by the receipt parser
ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/heic",
    "image/heif"
]

# Sentinel category for line items that arrive without one
DEFAULT_CATEGORY = "Other (Type Category)"

DEFAULT_ITEM_NAME = "Unknown"


def validate_owner_id(google_id: Any) -> str:
    """
    Validate the caller-supplied owner identifier.

    Args:
        google_id: Owner identifier from the request

    Returns:
        Validated owner identifier

    Raises:
        ValidationError: If the identifier is missing
    """
    if not google_id or not isinstance(google_id, str) or not google_id.strip():
        raise ValidationError("Missing googleId")

    return google_id.strip()


def validate_email(email: str) -> str:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        Validated email

    Raises:
        ValidationError: If email is invalid
    """
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")

    email = email.strip().lower()
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'

    if not re.match(pattern, email):
        raise ValidationError("Invalid email format")

    return email


def coerce_price(value: Any) -> float:
    """
    Coerce a price to a non-negative float.

    Anything that is not a finite, non-negative number becomes 0.

    Args:
        value: Raw price value (number or numeric string)

    Returns:
        Price as float
    """
    if value is None or isinstance(value, bool):
        return 0.0

    try:
        price = float(str(value).strip())
    except (ValueError, TypeError):
        return 0.0

    if not math.isfinite(price) or price < 0:
        return 0.0

    return price


def validate_mime_type(mime_type: Optional[str]) -> str:
    """
    Validate an upload's declared MIME type against the allow-list.

    Args:
        mime_type: Declared content type of the uploaded file

    Returns:
        Normalized MIME type

    Raises:
        UnsupportedMediaError: If the type is not allowed
    """
    normalized = (mime_type or '').split(';', 1)[0].strip().lower()

    if normalized not in ALLOWED_MIME_TYPES:
        raise UnsupportedMediaError(
            f"Unsupported file type. Allowed types: {', '.join(ALLOWED_MIME_TYPES)}"
        )

    return normalized


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> None:
    """
    Validate that required fields are present in data.

    Args:
        data: Data dictionary to validate
        required_fields: List of required field names

    Raises:
        ValidationError: If any required field is missing
    """
    missing_fields = [
        field for field in required_fields
        if field not in data or data[field] is None or data[field] == ''
    ]

    if missing_fields:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing_fields)}"
        )


def validate_file_size(size_bytes: int, max_size_mb: int = 10) -> int:
    """
    Validate file size.

    Args:
        size_bytes: File size in bytes
        max_size_mb: Maximum allowed size in MB (default: 10MB)

    Returns:
        Validated size

    Raises:
        ValidationError: If file size exceeds limit
    """
    max_size_bytes = max_size_mb * 1024 * 1024

    if size_bytes > max_size_bytes:
        raise ValidationError(f"File size exceeds {max_size_mb}MB limit")

    return size_bytes


def sanitize_string(value: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize string input.

    Args:
        value: String to sanitize
        max_length: Optional maximum length

    Returns:
        Sanitized string

    Raises:
        ValidationError: If string is invalid
    """
    if not isinstance(value, str):
        raise ValidationError("Value must be a string")

    # Remove leading/trailing whitespace
    value = value.strip()

    if max_length and len(value) > max_length:
        raise ValidationError(f"Value exceeds maximum length of {max_length}")

    return value
