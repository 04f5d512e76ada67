"""Helpers for decoding API Gateway proxy request bodies."""

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from requests_toolbelt.multipart.decoder import (
    ImproperBodyPartContentException,
    MultipartDecoder,
    NonMultipartContentTypeException,
)

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

_DISPOSITION_PARAM = re.compile(r';\s*([\w*-]+)=(?:"([^"]*)"|([^;\s]*))')


@dataclass
class UploadedFile:
    """A file part of a multipart form."""

    filename: Optional[str]
    content_type: Optional[str]
    content: bytes


@dataclass
class MultipartForm:
    """Decoded multipart form: plain fields and file parts by field name."""

    fields: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, UploadedFile] = field(default_factory=dict)


def get_header(event: Dict[str, Any], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def get_query_param(event: Dict[str, Any], name: str) -> Optional[str]:
    """Get a single query string parameter."""
    query_params = event.get('queryStringParameters') or {}
    return query_params.get(name)


def get_path_param(event: Dict[str, Any], name: str) -> Optional[str]:
    """Get a single path parameter."""
    path_params = event.get('pathParameters') or {}
    return path_params.get(name)


def get_body_bytes(event: Dict[str, Any]) -> bytes:
    """
    Get the raw request body.

    Args:
        event: Lambda event

    Returns:
        Body bytes, base64-decoded when API Gateway flagged it as binary

    Raises:
        ValidationError: If a base64 body cannot be decoded
    """
    body = event.get('body') or ''

    if event.get('isBase64Encoded'):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Invalid base64 encoding")

    return body.encode('utf-8') if isinstance(body, str) else body


def parse_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Parse a JSON object request body.

    Args:
        event: Lambda event

    Returns:
        Decoded body, empty dict for an empty body

    Raises:
        ValidationError: If the body is not a JSON object
    """
    raw = get_body_bytes(event)
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON body")

    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    return body


def parse_multipart_form(event: Dict[str, Any]) -> MultipartForm:
    """
    Decode a multipart/form-data request body.

    Args:
        event: Lambda event

    Returns:
        The decoded form

    Raises:
        ValidationError: If the body is not a well-formed multipart form
    """
    content_type = get_header(event, 'Content-Type')
    if not content_type or not content_type.lower().startswith('multipart/form-data'):
        raise ValidationError("Expected multipart/form-data body")

    try:
        decoder = MultipartDecoder(get_body_bytes(event), content_type)
    except (ImproperBodyPartContentException, NonMultipartContentTypeException) as e:
        logger.warning(f"Malformed multipart body: {e}")
        raise ValidationError("Malformed multipart body")

    form = MultipartForm()

    for part in decoder.parts:
        disposition = _decode(part.headers.get(b'Content-Disposition'))
        params = _disposition_params(disposition)
        name = params.get('name')
        if not name:
            continue

        if 'filename' in params:
            form.files[name] = UploadedFile(
                filename=params['filename'],
                content_type=_decode(part.headers.get(b'Content-Type')) or None,
                content=part.content
            )
        else:
            form.fields[name] = part.text

    return form


def _decode(value: Optional[bytes]) -> str:
    if value is None:
        return ''
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


def _disposition_params(disposition: str) -> Dict[str, str]:
    params = {}
    for match in _DISPOSITION_PARAM.finditer(disposition):
        key = match.group(1).lower()
        value = match.group(2) if match.group(2) is not None else match.group(3)
        params[key] = value
    return params
