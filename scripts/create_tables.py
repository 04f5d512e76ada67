#!/usr/bin/env python3
"""
Create the DynamoDB tables used by the receipt tracker.

Creates the receipts table with its owner-date index and the users table.
Point it at LocalStack with USE_LOCALSTACK=true and LOCALSTACK_ENDPOINT, the
same switches the Lambda functions read.
"""

import boto3
import os
import sys
from botocore.exceptions import ClientError

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from receipts.service import OWNER_DATE_INDEX


DEFAULT_RECEIPTS_TABLE = 'receipt-insights-receipts'
DEFAULT_USERS_TABLE = 'receipt-insights-users'


def get_dynamodb_resource():
    """DynamoDB resource, using LocalStack when configured."""
    endpoint_url = os.environ.get('LOCALSTACK_ENDPOINT')
    if endpoint_url and os.environ.get('USE_LOCALSTACK', 'false').lower() == 'true':
        return boto3.resource('dynamodb', endpoint_url=endpoint_url)
    return boto3.resource('dynamodb')


def create_receipts_table(dynamodb, table_name):
    """
    Create the receipts table.

    Records are keyed by owner and receipt id. The owner-date index is sparse:
    records without a date are not indexed and never match a window query.
    """
    return dynamodb.create_table(
        TableName=table_name,
        KeySchema=[
            {'AttributeName': 'google_id', 'KeyType': 'HASH'},
            {'AttributeName': 'receipt_id', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'google_id', 'AttributeType': 'S'},
            {'AttributeName': 'receipt_id', 'AttributeType': 'S'},
            {'AttributeName': 'date', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': OWNER_DATE_INDEX,
                'KeySchema': [
                    {'AttributeName': 'google_id', 'KeyType': 'HASH'},
                    {'AttributeName': 'date', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ],
        BillingMode='PAY_PER_REQUEST'
    )


def create_users_table(dynamodb, table_name):
    """Create the users table, keyed by owner."""
    return dynamodb.create_table(
        TableName=table_name,
        KeySchema=[
            {'AttributeName': 'google_id', 'KeyType': 'HASH'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'google_id', 'AttributeType': 'S'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )


def create_tables(receipts_table=None, users_table=None, dynamodb=None):
    """
    Create both tables, skipping any that already exist.

    Args:
        receipts_table: Receipts table name (default: RECEIPTS_TABLE or DEFAULT_RECEIPTS_TABLE)
        users_table: Users table name (default: USERS_TABLE or DEFAULT_USERS_TABLE)
        dynamodb: Optional DynamoDB resource

    Returns:
        Names of the tables that were created
    """
    dynamodb = dynamodb or get_dynamodb_resource()
    receipts_table = receipts_table or os.environ.get('RECEIPTS_TABLE', DEFAULT_RECEIPTS_TABLE)
    users_table = users_table or os.environ.get('USERS_TABLE', DEFAULT_USERS_TABLE)

    created = []
    for create, table_name in (
        (create_receipts_table, receipts_table),
        (create_users_table, users_table)
    ):
        try:
            table = create(dynamodb, table_name)
            table.wait_until_exists()
            created.append(table_name)
            print(f"Created table {table_name}")
        except ClientError as e:
            if e.response['Error']['Code'] != 'ResourceInUseException':
                raise
            print(f"Table {table_name} already exists, skipping")

    return created


def main():
    """Main function."""
    print("=" * 50)
    print("Receipt Insights - Create Tables")
    print("=" * 50)

    created = create_tables()

    print(f"\nCreated {len(created)} table(s)")


if __name__ == '__main__':
    main()
