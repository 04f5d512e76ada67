"""Lambda handler for user profile operations."""

import os
import logging
from typing import Dict, Any

from pydantic import ValidationError as PydanticValidationError

from shared.response import json_response, error_response, validation_error_response, not_found_response
from shared.request import get_path_param, parse_json_body
from shared.validators import validate_owner_id, validate_required_fields
from shared.exceptions import ReceiptTrackerException, ValidationError, NotFoundError
from users.models import UserCreate, UserUpdate
from users.service import UserService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

# Initialize service
user_service = UserService()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for user profile operations.

    Handles:
    - POST /api/users - Create user (idempotent)
    - GET /api/users/{googleId} - Get user
    - PUT /api/users/{googleId} - Update user

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
        path = event.get('path') or ''

        # Route request
        if path == '/api/users' and http_method == 'POST':
            return handle_create(event)
        elif path.startswith('/api/users/') and http_method == 'GET':
            return handle_get(event)
        elif path.startswith('/api/users/') and http_method == 'PUT':
            return handle_update(event)
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
    Handle user creation.

    Returns the existing profile when the user is already known.

    Args:
        event: Lambda event

    Returns:
        API Gateway response
    """
    try:
        body = parse_json_body(event)
        validate_required_fields(body, ['googleId'])

        try:
            request = UserCreate.model_validate(body)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid user data: {e.errors()[0]['msg']}")

        user = user_service.create_user(request)

        return json_response(user.to_api(), status_code=201)

    except ValidationError as e:
        return validation_error_response(str(e))
    except Exception as e:
        logger.error(f"Error saving user: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_get(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle get user.

    Args:
        event: Lambda event

    Returns:
        API Gateway response
    """
    try:
        google_id = validate_owner_id(_path_owner_id(event))

        user = user_service.get_user(google_id)

        return json_response(user.to_api())

    except ValidationError as e:
        return validation_error_response(str(e))
    except NotFoundError as e:
        return not_found_response(str(e))
    except Exception as e:
        logger.error(f"Error fetching user: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_update(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle update user.

    Args:
        event: Lambda event

    Returns:
        API Gateway response
    """
    try:
        google_id = validate_owner_id(_path_owner_id(event))
        body = parse_json_body(event)

        try:
            updates = UserUpdate.model_validate(body)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid user data: {e.errors()[0]['msg']}")

        updated_user = user_service.update_user(google_id, updates)

        logger.info(f"User updated successfully: {google_id}")

        return json_response(updated_user.to_api())

    except ValidationError as e:
        return validation_error_response(str(e))
    except NotFoundError as e:
        return not_found_response(str(e))
    except Exception as e:
        logger.error(f"Error updating user: {str(e)}", exc_info=True)
        return error_response("Server error", status_code=500)


def _path_owner_id(event: Dict[str, Any]) -> str:
    """Owner id from the path parameters, falling back to the raw path."""
    google_id = get_path_param(event, 'googleId')
    if google_id:
        return google_id

    path = event.get('path') or ''
    return path[len('/api/users/'):].strip('/')
