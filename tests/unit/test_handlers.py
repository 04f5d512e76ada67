"""Unit tests for the Lambda handlers."""

import pytest
import json
import base64
from unittest.mock import Mock, patch
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from analytics import handler as analytics_handler
from analytics.models import CategoryComparison, CategorySpend
from expenses import handler as expenses_handler
from receipts import handler as receipts_handler
from receipts.models import ExpenseRecord, ParsedReceipt
from users import handler as users_handler
from users.models import UserProfile
from shared.exceptions import (
    NotFoundError,
    ParseFailure,
    StoreFailure,
    SummaryFailure,
    ValidationError,
)

BOUNDARY = 'receipt-test-boundary'


def multipart_event(fields=None, files=None):
    """Build a base64-encoded multipart/form-data POST /upload event."""
    chunks = []
    for name, value in (fields or {}).items():
        chunks.append(
            f'--{BOUNDARY}\r\n'
            f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
            f'{value}\r\n'.encode('utf-8')
        )
    for name, (filename, content_type, content) in (files or {}).items():
        chunks.append(
            f'--{BOUNDARY}\r\n'
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
            f'Content-Type: {content_type}\r\n\r\n'.encode('utf-8') + content + b'\r\n'
        )
    chunks.append(f'--{BOUNDARY}--\r\n'.encode('utf-8'))

    return {
        'httpMethod': 'POST',
        'path': '/upload',
        'headers': {'content-type': f'multipart/form-data; boundary={BOUNDARY}'},
        'body': base64.b64encode(b''.join(chunks)).decode('ascii'),
        'isBase64Encoded': True
    }


def get_event(path, google_id=None):
    """Build a GET event with an optional googleId query parameter."""
    return {
        'httpMethod': 'GET',
        'path': path,
        'queryStringParameters': {'googleId': google_id} if google_id else None
    }


def json_event(method, path, body, path_params=None):
    """Build an event with a JSON body."""
    return {
        'httpMethod': method,
        'path': path,
        'headers': {'Content-Type': 'application/json'},
        'pathParameters': path_params,
        'body': json.dumps(body)
    }


def body_of(response):
    return json.loads(response['body'])


class TestReceiptsHandler:
    """Test cases for the receipts handler."""

    @pytest.fixture
    def parsing_service(self):
        with patch.object(receipts_handler, 'parsing_service') as service:
            yield service

    @pytest.fixture
    def receipt_service(self):
        with patch.object(receipts_handler, 'receipt_service') as service:
            service.insert.side_effect = lambda record: record.model_copy(update={'receipt_id': 'rcpt123'})
            yield service

    def test_upload_success(self, parsing_service, receipt_service):
        """Test a successful upload."""
        parsing_service.parse_receipt.return_value = ParsedReceipt(
            vendor='Chipotle',
            date='2024-03-02T00:00:00Z',
            items=[{'name': 'Burrito Bowl', 'category': 'Dining', 'price': 11.25}]
        )
        event = multipart_event(
            fields={'googleId': 'user123'},
            files={'receipt': ('receipt.jpg', 'image/jpeg', b'\xff\xd8\xff\xe0jpeg')}
        )

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 200
        body = body_of(response)
        assert body['saved'] is True
        assert body['parsed']['vendor'] == 'Chipotle'
        assert body['parsed']['items'][0] == {
            'name': 'Burrito Bowl',
            'category': 'Dining',
            'price': 11.25
        }
        parsing_service.parse_receipt.assert_called_once_with(b'\xff\xd8\xff\xe0jpeg', 'image/jpeg')
        stored = receipt_service.insert.call_args.args[0]
        assert isinstance(stored, ExpenseRecord)
        assert stored.google_id == 'user123'
        assert stored.vendor == 'Chipotle'

    def test_upload_pdf_rejected_before_parsing(self, parsing_service, receipt_service):
        """Test that a PDF gets 415 and never reaches the parser."""
        event = multipart_event(
            fields={'googleId': 'user123'},
            files={'receipt': ('receipt.pdf', 'application/pdf', b'%PDF-1.4')}
        )

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 415
        assert 'error' in body_of(response)
        parsing_service.parse_receipt.assert_not_called()
        receipt_service.insert.assert_not_called()

    def test_upload_pdf_without_owner_still_415(self, parsing_service, receipt_service):
        """Test that the file type is checked before the owner id."""
        event = multipart_event(
            files={'receipt': ('receipt.pdf', 'application/pdf', b'%PDF-1.4')}
        )

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 415

    def test_upload_missing_owner(self, parsing_service, receipt_service):
        """Test that an upload without googleId is rejected."""
        event = multipart_event(
            files={'receipt': ('receipt.png', 'image/png', b'\x89PNG')}
        )

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 400
        assert body_of(response) == {'error': 'Missing googleId'}
        parsing_service.parse_receipt.assert_not_called()

    def test_upload_missing_file(self, parsing_service, receipt_service):
        """Test that an upload without an image is rejected."""
        event = multipart_event(fields={'googleId': 'user123'})

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 400
        parsing_service.parse_receipt.assert_not_called()

    def test_upload_not_multipart(self, parsing_service, receipt_service):
        """Test that a JSON body is rejected."""
        event = json_event('POST', '/upload', {'googleId': 'user123'})

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 400

    def test_upload_parse_failure(self, parsing_service, receipt_service):
        """Test that parser failures become a generic 500."""
        parsing_service.parse_receipt.side_effect = ParseFailure("Could not read receipt")
        event = multipart_event(
            fields={'googleId': 'user123'},
            files={'receipt': ('receipt.png', 'image/png', b'\x89PNG')}
        )

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 500
        assert body_of(response) == {'error': 'Error processing receipt'}
        receipt_service.insert.assert_not_called()

    def test_upload_store_failure(self, parsing_service, receipt_service):
        """Test that a failed write is a 500."""
        parsing_service.parse_receipt.return_value = ParsedReceipt(vendor='Shop')
        receipt_service.insert.side_effect = StoreFailure()
        event = multipart_event(
            fields={'googleId': 'user123'},
            files={'receipt': ('receipt.png', 'image/png', b'\x89PNG')}
        )

        response = receipts_handler.lambda_handler(event, None)

        assert response['statusCode'] == 500

    def test_list_receipts(self, receipt_service):
        """Test listing an owner's receipts in camelCase."""
        receipt_service.find_by_owner.return_value = [
            ExpenseRecord(
                google_id='user123',
                receipt_id='rcpt123',
                vendor='Target',
                items=[{'item_id': 'item1', 'name': 'Towels', 'price': 5}]
            )
        ]

        response = receipts_handler.lambda_handler(get_event('/api/receipts', 'user123'), None)

        assert response['statusCode'] == 200
        receipt = body_of(response)[0]
        assert receipt['googleId'] == 'user123'
        assert receipt['receiptId'] == 'rcpt123'
        assert receipt['items'][0]['itemId'] == 'item1'

    def test_unknown_route(self):
        """Test that unknown routes are 404."""
        response = receipts_handler.lambda_handler(get_event('/nowhere'), None)

        assert response['statusCode'] == 404
        assert body_of(response) == {'error': 'Route not found'}


class TestAnalyticsHandler:
    """Test cases for the analytics handler."""

    @pytest.fixture
    def analytics_service(self):
        with patch.object(analytics_handler, 'analytics_service') as service:
            yield service

    def test_spending_summary(self, analytics_service):
        """Test the spending summary shape."""
        analytics_service.spending_summary.return_value = [
            CategorySpend(name='Food', amount=40, percentage=67),
            CategorySpend(name='Transport', amount=20, percentage=33)
        ]

        response = analytics_handler.lambda_handler(get_event('/spending-summary', 'user123'), None)

        assert response['statusCode'] == 200
        assert body_of(response) == [
            {'name': 'Food', 'amount': 40, 'percentage': 67},
            {'name': 'Transport', 'amount': 20, 'percentage': 33}
        ]
        analytics_service.spending_summary.assert_called_once_with('user123')

    def test_spending_summary_missing_owner(self, analytics_service):
        """Test that googleId is required."""
        response = analytics_handler.lambda_handler(get_event('/spending-summary'), None)

        assert response['statusCode'] == 400
        assert body_of(response) == {'error': 'Missing googleId'}
        analytics_service.spending_summary.assert_not_called()

    def test_comparison_summary(self, analytics_service):
        """Test the comparison shape."""
        analytics_service.comparison_summary.return_value = [
            CategoryComparison(category='Food', difference=0, is_higher=False)
        ]

        response = analytics_handler.lambda_handler(get_event('/comparison-summary', 'user123'), None)

        assert response['statusCode'] == 200
        assert body_of(response) == [{'category': 'Food', 'difference': 0, 'isHigher': False}]

    def test_comparison_summary_missing_owner(self, analytics_service):
        """Test that googleId is required."""
        response = analytics_handler.lambda_handler(get_event('/comparison-summary'), None)

        assert response['statusCode'] == 400

    def test_comparison_summary_store_failure(self, analytics_service):
        """Test that store failures are a generic 500."""
        analytics_service.comparison_summary.side_effect = StoreFailure("Failed to scan items: boom")

        response = analytics_handler.lambda_handler(get_event('/comparison-summary', 'user123'), None)

        assert response['statusCode'] == 500
        assert 'boom' not in response['body']

    def test_ai_summary(self, analytics_service):
        """Test the AI summary shape."""
        analytics_service.ai_summary.return_value = 'Mostly groceries.'

        response = analytics_handler.lambda_handler(get_event('/api/ai-summary', 'user123'), None)

        assert response['statusCode'] == 200
        assert body_of(response) == {'summary': 'Mostly groceries.'}

    def test_ai_summary_failure(self, analytics_service):
        """Test that summary failures are a 500."""
        analytics_service.ai_summary.side_effect = SummaryFailure()

        response = analytics_handler.lambda_handler(get_event('/api/ai-summary', 'user123'), None)

        assert response['statusCode'] == 500
        assert body_of(response) == {'error': 'Failed to generate AI summary'}


class TestUsersHandler:
    """Test cases for the users handler."""

    @pytest.fixture
    def user_service(self):
        with patch.object(users_handler, 'user_service') as service:
            yield service

    @pytest.fixture
    def profile(self):
        return UserProfile(
            google_id='user123',
            email='ada@example.com',
            first_name='Ada',
            created_at='2024-01-15T10:00:00+00:00',
            updated_at='2024-01-15T10:00:00+00:00'
        )

    def test_create_user(self, user_service, profile):
        """Test creating a user."""
        user_service.create_user.return_value = profile
        event = json_event('POST', '/api/users', {
            'googleId': 'user123',
            'email': 'ada@example.com',
            'firstName': 'Ada'
        })

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 201
        body = body_of(response)
        assert body['googleId'] == 'user123'
        assert body['firstName'] == 'Ada'
        request = user_service.create_user.call_args.args[0]
        assert request.first_name == 'Ada'

    def test_create_user_missing_google_id(self, user_service):
        """Test that googleId is required."""
        event = json_event('POST', '/api/users', {'email': 'ada@example.com'})

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 400
        user_service.create_user.assert_not_called()

    def test_create_known_user_without_email(self, user_service, profile):
        """Test that a repeat create without an email returns the stored profile."""
        user_service.create_user.return_value = profile
        event = json_event('POST', '/api/users', {'googleId': 'user123'})

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 201
        assert body_of(response)['email'] == 'ada@example.com'

    def test_create_new_user_invalid_email(self, user_service):
        """Test that a rejected email for a new user is 400."""
        user_service.create_user.side_effect = ValidationError("Invalid email format")
        event = json_event('POST', '/api/users', {'googleId': 'user123', 'email': 'nope'})

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 400
        assert body_of(response) == {'error': 'Invalid email format'}

    def test_get_user(self, user_service, profile):
        """Test fetching a user by path parameter."""
        user_service.get_user.return_value = profile
        event = {
            'httpMethod': 'GET',
            'path': '/api/users/user123',
            'pathParameters': {'googleId': 'user123'}
        }

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 200
        assert body_of(response)['email'] == 'ada@example.com'
        user_service.get_user.assert_called_once_with('user123')

    def test_get_unknown_user(self, user_service):
        """Test that an unknown user is 404."""
        user_service.get_user.side_effect = NotFoundError("User not found")
        event = {'httpMethod': 'GET', 'path': '/api/users/nobody'}

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 404
        assert body_of(response) == {'error': 'User not found'}
        user_service.get_user.assert_called_once_with('nobody')

    def test_update_user(self, user_service, profile):
        """Test a partial profile update."""
        user_service.update_user.return_value = profile.model_copy(update={'age': 34})
        event = json_event('PUT', '/api/users/user123', {'age': 34, 'maritalStatus': 'single'},
                           path_params={'googleId': 'user123'})

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 200
        assert body_of(response)['age'] == 34
        google_id, updates = user_service.update_user.call_args.args
        assert google_id == 'user123'
        assert updates.marital_status == 'single'

    def test_update_user_invalid_body(self, user_service):
        """Test that a malformed profile is 400."""
        event = json_event('PUT', '/api/users/user123', {'age': -5},
                           path_params={'googleId': 'user123'})

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 400
        user_service.update_user.assert_not_called()

    def test_update_unknown_user(self, user_service):
        """Test updating an unknown user."""
        user_service.update_user.side_effect = NotFoundError("User not found")
        event = json_event('PUT', '/api/users/nobody', {'age': 30},
                           path_params={'googleId': 'nobody'})

        response = users_handler.lambda_handler(event, None)

        assert response['statusCode'] == 404


class TestExpensesHandler:
    """Test cases for the expenses handler."""

    @pytest.fixture
    def expense_service(self):
        with patch.object(expenses_handler, 'expense_service') as service:
            yield service

    def test_add_expense(self, expense_service):
        """Test adding a manual expense."""
        expense_service.add_expense.return_value = ExpenseRecord(
            google_id='user123',
            receipt_id='rcpt123',
            vendor='Farmers Market',
            date='2024-01-15T10:00:00Z',
            items=[{'name': 'Apples', 'category': 'Groceries', 'price': 4.5}]
        )
        payload = {
            'googleId': 'user123',
            'vendor': 'Farmers Market',
            'items': [{'description': 'Apples', 'category': 'Groceries', 'amount': 4.5}]
        }

        response = expenses_handler.lambda_handler(json_event('POST', '/api/expenses', payload), None)

        assert response['statusCode'] == 201
        body = body_of(response)
        assert body['success'] is True
        assert body['receipt']['receiptId'] == 'rcpt123'
        expense_service.add_expense.assert_called_once_with(payload)

    def test_add_expense_invalid_json(self, expense_service):
        """Test that a malformed body is 400."""
        event = {
            'httpMethod': 'POST',
            'path': '/api/expenses',
            'body': '{not json'
        }

        response = expenses_handler.lambda_handler(event, None)

        assert response['statusCode'] == 400
        expense_service.add_expense.assert_not_called()

    def test_add_expense_store_failure(self, expense_service):
        """Test that a failed write is a 500."""
        expense_service.add_expense.side_effect = StoreFailure()

        response = expenses_handler.lambda_handler(
            json_event('POST', '/api/expenses', {'googleId': 'user123'}), None
        )

        assert response['statusCode'] == 500
        assert body_of(response) == {'error': 'Failed to save expense'}


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
