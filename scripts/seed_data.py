#!/usr/bin/env python3
"""
Seed data script for testing the receipt tracker application.
Creates sample user profiles and receipts for several owners, so that the
comparison summary has peers to compare against.
"""

import boto3
import os
import sys
from datetime import timedelta
import uuid
import random

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shared.dates import format_timestamp, utc_now
from shared.dynamodb import DynamoDBClient
from create_tables import DEFAULT_RECEIPTS_TABLE, DEFAULT_USERS_TABLE


CATALOG = {
    'Groceries': {
        'vendors': ['Whole Foods', 'Trader Joes', 'Kroger'],
        'items': ['Bananas', 'Milk', 'Bread', 'Eggs', 'Coffee Beans']
    },
    'Dining': {
        'vendors': ['Chipotle', 'Starbucks', 'Local Diner'],
        'items': ['Burrito Bowl', 'Latte', 'Club Sandwich']
    },
    'Transport': {
        'vendors': ['Shell', 'Metro Transit', 'Uber'],
        'items': ['Fuel', 'Monthly Pass', 'Ride']
    },
    'Household': {
        'vendors': ['Target', 'Home Depot'],
        'items': ['Paper Towels', 'Light Bulbs', 'Detergent']
    },
    'Entertainment': {
        'vendors': ['AMC Theatres', 'Steam'],
        'items': ['Movie Ticket', 'Popcorn', 'Game']
    }
}


def get_table_names_from_stack(stack_name='receipt-insights'):
    """Get table names from CloudFormation stack."""
    cf = boto3.client('cloudformation')

    try:
        response = cf.describe_stacks(StackName=stack_name)
        outputs = response['Stacks'][0]['Outputs']

        table_names = {}
        for output in outputs:
            key = output['OutputKey']
            if 'Table' in key:
                table_name = output['OutputValue']
                if 'Users' in key:
                    table_names['users'] = table_name
                elif 'Receipts' in key:
                    table_names['receipts'] = table_name

        return table_names
    except Exception as e:
        print(f"Error getting table names from stack: {e}")
        print("Using default table names...")
        return {
            'users': DEFAULT_USERS_TABLE,
            'receipts': DEFAULT_RECEIPTS_TABLE
        }


def seed_users(table_name, google_ids):
    """Seed sample user profiles."""
    table = DynamoDBClient(table_name)

    print(f"Creating {len(google_ids)} sample users...")

    now = utc_now().isoformat()
    users = [
        {
            'google_id': google_id,
            'email': f'{google_id}@example.com',
            'first_name': f'Test{i}',
            'last_name': 'User',
            'created_at': now,
            'updated_at': now
        }
        for i, google_id in enumerate(google_ids, start=1)
    ]

    table.batch_write(users)

    print(f"Created {len(users)} users")
    return users


def seed_receipts(table_name, google_id, num_receipts=20):
    """Seed sample receipts for one owner."""
    table = DynamoDBClient(table_name)

    receipts = []
    for _ in range(num_receipts):
        # Random date within last 60 days
        days_ago = random.randint(0, 60)
        date = format_timestamp(utc_now() - timedelta(days=days_ago))

        category = random.choice(list(CATALOG))
        entry = CATALOG[category]

        items = [
            {
                'item_id': str(uuid.uuid4()),
                'name': random.choice(entry['items']),
                'category': category,
                'price': round(random.uniform(2.0, 80.0), 2)
            }
            for _ in range(random.randint(1, 4))
        ]

        receipts.append({
            'google_id': google_id,
            'receipt_id': str(uuid.uuid4()),
            'vendor': random.choice(entry['vendors']),
            'date': date,
            'items': items,
            'created_at': format_timestamp(utc_now())
        })

    table.batch_write(receipts)

    print(f"Created {len(receipts)} receipts for {google_id}")
    return receipts


def main():
    """Main function."""
    print("=" * 50)
    print("Receipt Insights - Seed Data Script")
    print("=" * 50)

    # Table names from the environment (as created by create_tables.py),
    # otherwise from a deployed CloudFormation stack
    if os.environ.get('RECEIPTS_TABLE') and os.environ.get('USERS_TABLE'):
        table_names = {
            'users': os.environ['USERS_TABLE'],
            'receipts': os.environ['RECEIPTS_TABLE']
        }
    else:
        stack_name = input("Enter stack name (default: receipt-insights): ").strip()
        if not stack_name:
            stack_name = 'receipt-insights'

        print("\nGetting table names from CloudFormation...")
        table_names = get_table_names_from_stack(stack_name)

    print("\nTable names:")
    for key, value in table_names.items():
        print(f"  {key}: {value}")

    # Get owner IDs
    raw_ids = input("\nEnter comma-separated googleIds to seed (default: 3 generated ids): ").strip()
    if raw_ids:
        google_ids = [value.strip() for value in raw_ids.split(',') if value.strip()]
    else:
        google_ids = [f'seed-user-{uuid.uuid4().hex[:8]}' for _ in range(3)]

    # Get number of receipts
    num_receipts = input("Enter number of receipts per user (default: 20): ").strip()
    num_receipts = int(num_receipts) if num_receipts else 20

    print("\nSeeding users...")
    users = seed_users(table_names['users'], google_ids)

    print("\nSeeding receipts...")
    total = 0
    for google_id in google_ids:
        total += len(seed_receipts(table_names['receipts'], google_id, num_receipts))

    print("\n" + "=" * 50)
    print("Data seeding complete!")
    print("=" * 50)
    print(f"\nCreated:")
    print(f"  - {len(users)} users")
    print(f"  - {total} receipts")
    print(f"\nFor users: {', '.join(google_ids)}")


if __name__ == '__main__':
    main()
