"""Response utilities for Lambda functions."""

import json
from typing import Any, Dict, Optional
from datetime import datetime, date
from decimal import Decimal

from pydantic import BaseModel


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder for Decimal, datetime and pydantic objects."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode='json', by_alias=True, exclude_none=True)
        return super().default(obj)


DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "GET,POST,PUT,OPTIONS"
}


def json_response(
    data: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Create a JSON response whose body is exactly ``data``.

    Args:
        data: Response body (dict, list or pydantic model)
        status_code: HTTP status code (default: 200)
        headers: Optional additional headers

    Returns:
        Lambda proxy response dictionary
    """
    response_headers = dict(DEFAULT_HEADERS)
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(data, cls=DecimalEncoder)
    }


def error_response(
    message: str,
    status_code: int = 500,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Create an error response.

    Clients only get the status code and a short message.

    Args:
        message: Error message
        status_code: HTTP status code (default: 500)
        headers: Optional additional headers

    Returns:
        Lambda proxy response dictionary
    """
    return json_response({"error": message}, status_code=status_code, headers=headers)


def validation_error_response(message: str) -> Dict[str, Any]:
    """Create a validation error response."""
    return error_response(message=message, status_code=400)


def not_found_response(message: str = "Resource not found") -> Dict[str, Any]:
    """Create a not found error response."""
    return error_response(message=message, status_code=404)


def unsupported_media_response(message: str = "Unsupported file type") -> Dict[str, Any]:
    """Create an unsupported media type error response."""
    return error_response(message=message, status_code=415)
