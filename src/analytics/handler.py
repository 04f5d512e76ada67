"""Lambda handler for spending analytics."""

import os
import logging
from typing import Dict, Any

from shared.response import json_response, error_response, validation_error_response
from shared.request import get_query_param
from shared.validators import validate_owner_id
from shared.exceptions import ReceiptTrackerException, ValidationError
from analytics.service import SpendingAnalyticsService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize service
analytics_service = SpendingAnalyticsService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for spending analytics.

    Handles:
    - GET /spending-summary - Category breakdown for the last 30 days
    - GET /comparison-summary - Comparison with peer averages
    - GET /api/ai-summary - AI-written spending summary

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
        if path == '/spending-summary' and http_method == 'GET':
            return handle_spending_summary(event)
        elif path == '/comparison-summary' and http_method == 'GET':
            return handle_comparison_summary(event)
        elif path == '/api/ai-summary' and http_method == 'GET':
            return handle_ai_summary(event)
        else:
            return error_response("Route not found", status_code=404)

    except ReceiptTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_spending_summary(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle spending summary request."""
    try:
        google_id = validate_owner_id(get_query_param(event, 'googleId'))

        summary = analytics_service.spending_summary(google_id)

        return json_response([entry.model_dump() for entry in summary])

    except ValidationError as e:
        return validation_error_response(str(e))
    except Exception as e:
        logger.error(f"Error generating spending summary: {str(e)}", exc_info=True)
        return error_response("Error generating summary", status_code=500)


def handle_comparison_summary(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle comparison summary request."""
    try:
        google_id = validate_owner_id(get_query_param(event, 'googleId'))

        comparison = analytics_service.comparison_summary(google_id)

        return json_response([entry.model_dump(by_alias=True) for entry in comparison])

    except ValidationError as e:
        return validation_error_response(str(e))
    except Exception as e:
        logger.error(f"Error generating comparison summary: {str(e)}", exc_info=True)
        return error_response("Error generating comparison", status_code=500)


def handle_ai_summary(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle AI summary request."""
    try:
        google_id = validate_owner_id(get_query_param(event, 'googleId'))

        summary = analytics_service.ai_summary(google_id)

        return json_response({'summary': summary})

    except ValidationError as e:
        return validation_error_response(str(e))
    except Exception as e:
        logger.error(f"Failed to generate AI summary: {str(e)}", exc_info=True)
        return error_response("Failed to generate AI summary", status_code=500)
