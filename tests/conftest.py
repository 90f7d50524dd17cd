"""
Pytest configuration and shared fixtures for the storefront service.

This module provides common test fixtures and configuration used across
unit, integration, and end-to-end tests.
"""

import copy
import json
import os
import time
from collections import defaultdict
from typing import Any, Dict, Optional
from unittest.mock import Mock

import boto3
import jwt
import pytest
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from moto import mock_aws

from storefront.security.auth import Principal

JWT_TEST_SECRET = "storefront-test-secret-0123456789abcdef"
PRODUCTS_TABLE = "test-products-table"
ORDERS_TABLE = "test-orders-table"


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_REGION": "us-east-1",
        "AWS_ACCESS_KEY_ID": "test",
        "AWS_SECRET_ACCESS_KEY": "test",
        "PRODUCTS_TABLE_NAME": PRODUCTS_TABLE,
        "ORDERS_TABLE_NAME": ORDERS_TABLE,
        "TOKEN_VERIFIER": "jwt",
        "JWT_SECRET": JWT_TEST_SECRET,
        "POWERTOOLS_SERVICE_NAME": "test-storefront",
        "POWERTOOLS_METRICS_NAMESPACE": "TestStorefront",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    })


# In-memory collaborators
class FakeRecordStore:
    """Record store double that keeps collections in memory and records calls."""

    def __init__(self):
        self.collections = defaultdict(list)
        self.put_calls = []
        self.scan_calls = []
        self.fail_with: Optional[Exception] = None

    def put(self, collection: str, record: Dict[str, Any]) -> None:
        self.put_calls.append((collection, record))
        if self.fail_with is not None:
            raise self.fail_with
        self.collections[collection].append(copy.deepcopy(record))

    def scan_all(self, collection: str):
        self.scan_calls.append(collection)
        if self.fail_with is not None:
            raise self.fail_with
        return copy.deepcopy(self.collections[collection])


class FakeTokenVerifier:
    """Token verifier double resolving every token to one username."""

    def __init__(self, username: str = "jane.doe"):
        self.username = username
        self.tokens = []
        self.error: Optional[Exception] = None

    def resolve_principal(self, token: str) -> Principal:
        self.tokens.append(token)
        if self.error is not None:
            raise self.error
        return Principal(username=self.username)


@pytest.fixture
def record_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def token_verifier() -> FakeTokenVerifier:
    return FakeTokenVerifier()


@pytest.fixture
def dispatcher(record_store, token_verifier):
    """Dispatcher wired to the in-memory collaborators."""
    from storefront.handlers.api_handler import Dispatcher

    return Dispatcher(store=record_store, verifier=token_verifier)


# Event fixtures
@pytest.fixture
def api_gateway_event():
    """Build a raw API Gateway REST proxy event."""

    def _build(
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        resource: Optional[str] = None,
        is_base64_encoded: bool = False,
    ) -> Dict[str, Any]:
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            "httpMethod": method,
            "resource": resource or path,
            "path": path,
            "headers": headers,
            "body": body,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "protocol": "HTTP/1.1",
                "identity": {
                    "sourceIp": "127.0.0.1",
                    "userAgent": "test-agent/1.0",
                },
            },
            "pathParameters": None,
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "stageVariables": None,
            "isBase64Encoded": is_base64_encoded,
        }

    return _build


@pytest.fixture
def make_event(api_gateway_event):
    """Build an API Gateway event wrapped in the Powertools data class."""

    def _build(*args, **kwargs) -> APIGatewayProxyEvent:
        return APIGatewayProxyEvent(api_gateway_event(*args, **kwargs))

    return _build


@pytest.fixture
def bearer_headers():
    return {"Authorization": "Bearer test-access-token", "Content-Type": "application/json"}


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-storefront-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-storefront-function"
    context.memory_limit_in_mb = 512
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-storefront-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


@pytest.fixture
def jwt_secret() -> str:
    return JWT_TEST_SECRET


@pytest.fixture
def jwt_token():
    """Sign an HS256 token with the test secret."""

    def _sign(claims: Optional[Dict[str, Any]] = None, secret: str = JWT_TEST_SECRET, expires_in: int = 300) -> str:
        payload = {"exp": int(time.time()) + expires_in}
        payload.update(claims if claims is not None else {"username": "jane.doe"})
        return jwt.encode(payload, secret, algorithm="HS256")

    return _sign


# DynamoDB fixtures
@pytest.fixture
def table_names() -> Dict[str, str]:
    """Collection to table mapping matching the test environment."""
    return {"products": PRODUCTS_TABLE, "orders": ORDERS_TABLE}


@pytest.fixture
def dynamodb_tables():
    """Create mock products and orders tables."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        tables = {}
        for table_name in (PRODUCTS_TABLE, ORDERS_TABLE):
            table = dynamodb.create_table(
                TableName=table_name,
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            tables[table_name] = table
        yield tables


@pytest.fixture(scope="session")
def integration_client():
    """HTTP client for a deployed API; skips when API_BASE_URL is unset."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "e2e" in path:
            item.add_marker(pytest.mark.e2e)


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset the cached dispatcher and pending metrics between tests."""
    from storefront.handlers import api_handler
    from storefront.handlers.utils.observability import metrics

    monkeypatch.setattr(api_handler, "_dispatcher", None)
    metrics.clear_metrics()
    yield
    metrics.clear_metrics()
