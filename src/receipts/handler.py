"""Lambda handler for receipt operations."""

import os
import logging
from typing import Dict, Any

from shared.response import json_response, error_response, validation_error_response, unsupported_media_response
from shared.request import get_query_param, parse_multipart_form
from shared.validators import validate_file_size, validate_mime_type, validate_owner_id
from shared.exceptions import ReceiptTrackerException, UnsupportedMediaError, ValidationError
from ai_processor.receipt_parser import ReceiptParsingService
from receipts.models import ExpenseRecord
from receipts.service import ReceiptService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Form field names used by the upload form
RECEIPT_FIELD = 'receipt'
OWNER_FIELD = 'googleId'

MAX_UPLOAD_SIZE_MB = int(os.environ.get('MAX_UPLOAD_SIZE_MB', '10'))

# Initialize services
receipt_service = ReceiptService()
parsing_service = ReceiptParsingService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for receipt operations.

    Handles:
    - POST /upload - Parse and store a receipt image
    - GET /api/receipts - List an owner's receipts

    Args:
        event: Lambda event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        # Log request
        logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

        http_method = event.get('httpMethod')
        path = event.get('path')

        # Route request
        if path == '/upload' and http_method == 'POST':
            return handle_upload(event)
        elif path == '/api/receipts' and http_method == 'GET':
            return handle_list(event)
        else:
            return error_response("Route not found", status_code=404)

    except ReceiptTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_upload(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle receipt upload.

    The file type is checked before anything else, so a disallowed upload
    never reaches the parser.

    Args:
        event: Lambda event

    Returns:
        API Gateway response
    """
    try:
        form = parse_multipart_form(event)

        upload = form.files.get(RECEIPT_FIELD)
        if upload is not None:
            validate_mime_type(upload.content_type)

        google_id = validate_owner_id(form.fields.get(OWNER_FIELD))

        if upload is None or not upload.content:
            raise ValidationError("Missing receipt image")

        validate_file_size(len(upload.content), MAX_UPLOAD_SIZE_MB)

        parsed = parsing_service.parse_receipt(upload.content, upload.content_type)

        record = receipt_service.insert(
            ExpenseRecord(
                google_id=google_id,
                vendor=parsed.vendor,
                date=parsed.date,
                items=parsed.items
            )
        )

        logger.info(f"Receipt uploaded successfully: {record.receipt_id}")

        return json_response({'parsed': parsed.to_api(), 'saved': True})

    except UnsupportedMediaError as e:
        return unsupported_media_response(str(e))
    except ValidationError as e:
        return validation_error_response(str(e))
    except Exception as e:
        logger.error(f"Error processing receipt: {str(e)}", exc_info=True)
        return error_response("Error processing receipt", status_code=500)


def handle_list(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle list receipts.

    Args:
        event: Lambda event

    Returns:
        API Gateway response
    """
    try:
        google_id = validate_owner_id(get_query_param(event, 'googleId'))

        receipts = receipt_service.find_by_owner(google_id)

        return json_response([receipt.to_api() for receipt in receipts])

    except ValidationError as e:
        return validation_error_response(str(e))
    except Exception as e:
        logger.error(f"Error fetching receipts: {str(e)}", exc_info=True)
        return error_response("Error fetching receipts", status_code=500)
