"""User service for managing user profiles."""

import os
import logging
from typing import Optional

from boto3.dynamodb.conditions import Attr

from shared.dynamodb import DynamoDBClient
from shared.dates import utc_now
from shared.exceptions import ConflictError, NotFoundError, ValidationError
from shared.validators import validate_email
from users.models import UserCreate, UserProfile, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing user profiles."""

    def __init__(self, table_name: Optional[str] = None):
        """Initialize user service."""
        self.users_table = DynamoDBClient(table_name or os.environ.get('USERS_TABLE'))

    def get_user(self, google_id: str) -> UserProfile:
        """
        Get user profile by owner identifier.

        Args:
            google_id: Owner identifier

        Returns:
            User profile

        Raises:
            NotFoundError: If user not found
        """
        user = self.users_table.get_item({'google_id': google_id})

        if not user:
            raise NotFoundError("User not found")

        return UserProfile.model_validate(user)

    def create_user(self, request: UserCreate) -> UserProfile:
        """
        Create a user profile unless one already exists.

        A known owner gets the stored profile back unchanged, whatever fields
        the request carries; the email is only checked for a new profile. The
        write is conditional on the key being absent, so concurrent first
        calls for the same owner store exactly one profile.

        Args:
            request: Profile fields

        Returns:
            The stored profile

        Raises:
            ValidationError: If a new profile has a missing or invalid email
        """
        existing = self.users_table.get_item({'google_id': request.google_id})
        if existing:
            logger.info(f"User {request.google_id} already exists")
            return UserProfile.model_validate(existing)

        if not request.email:
            raise ValidationError("Missing required fields: email")

        now = utc_now().isoformat()
        profile = UserProfile(
            google_id=request.google_id,
            email=validate_email(request.email),
            first_name=request.first_name,
            last_name=request.last_name,
            picture=request.picture,
            created_at=now,
            updated_at=now
        )

        try:
            self.users_table.put_item(
                profile.to_item(),
                condition_expression=Attr('google_id').not_exists()
            )
        except ConflictError:
            logger.info(f"User {request.google_id} already exists")
            return self.get_user(request.google_id)

        logger.info(f"Created user {request.google_id}")
        return profile

    def update_user(self, google_id: str, updates: UserUpdate) -> UserProfile:
        """
        Update profile fields.

        Args:
            google_id: Owner identifier
            updates: Fields to change; unset and null fields are left alone

        Returns:
            Updated profile

        Raises:
            NotFoundError: If user not found
            ValidationError: If the new email is invalid
        """
        # Verify user exists
        self.get_user(google_id)

        changes = updates.model_dump(exclude_none=True)
        if 'email' in changes:
            changes['email'] = validate_email(changes['email'])

        # Build update expression
        update_parts = []
        expr_values = {}
        expr_names = {}

        for key, value in changes.items():
            update_parts.append(f"#{key} = :{key}")
            expr_names[f'#{key}'] = key
            expr_values[f':{key}'] = value

        # Add updated_at timestamp
        update_parts.append("#updated_at = :updated_at")
        expr_names['#updated_at'] = 'updated_at'
        expr_values[':updated_at'] = utc_now().isoformat()

        update_expr = "SET " + ", ".join(update_parts)

        updated_user = self.users_table.update_item(
            key={'google_id': google_id},
            update_expression=update_expr,
            expression_values=expr_values,
            expression_names=expr_names
        )

        logger.info(f"Updated user {google_id}: {', '.join(changes) or 'no fields'}")
        return UserProfile.model_validate(updated_user)
