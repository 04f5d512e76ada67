"""Shared test configuration."""

import os
import sys

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# Fake AWS settings so handler modules can build their clients at import time
os.environ.setdefault('AWS_ACCESS_KEY_ID', 'testing')
os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'testing')
os.environ.setdefault('AWS_SECURITY_TOKEN', 'testing')
os.environ.setdefault('AWS_SESSION_TOKEN', 'testing')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('RECEIPTS_TABLE', 'test-receipts')
os.environ.setdefault('USERS_TABLE', 'test-users')
os.environ['USE_LOCALSTACK'] = 'false'
os.environ.pop('GEMINI_API_KEY', None)
