"""Lambda handler for expense operations."""

import os
import logging
from typing import Dict, Any

from shared.response import json_response, error_response, validation_error_response
from shared.request import parse_json_body
from shared.exceptions import ReceiptTrackerException, ValidationError
from expenses.service import ExpenseService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize service
expense_service = ExpenseService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for expense operations.

    Handles:
    - POST /api/expenses - Add a manual expense

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
        if path == '/api/expenses' and http_method == 'POST':
            return handle_create(event)
        else:
            return error_response("Route not found", status_code=404)

    except ReceiptTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_create(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle manual expense entry.

    Args:
        event: Lambda event

    Returns:
        API Gateway response
    """
    try:
        body = parse_json_body(event)
        logger.info(f"Incoming expense from {body.get('googleId')} at {body.get('vendor')}")

        receipt = expense_service.add_expense(body)

        return json_response(
            {
                'success': True,
                'message': 'Expense added',
                'receipt': receipt.to_api()
            },
            status_code=201
        )

    except ValidationError as e:
        return validation_error_response(str(e))
    except Exception as e:
        logger.error(f"Error saving manual expense: {str(e)}", exc_info=True)
        return error_response("Failed to save expense", status_code=500)
