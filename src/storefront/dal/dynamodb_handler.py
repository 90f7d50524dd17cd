"""
DynamoDB implementation of the record store.

Each collection maps to its own DynamoDB table keyed by ``id``. Numbers are
converted to ``Decimal`` on the way in (boto3 rejects floats) and back to
``int``/``float`` on the way out, so a scanned record compares equal to the
record that was written.
"""

import time
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from storefront.handlers.utils.errors import ExternalServiceError
from storefront.handlers.utils.observability import count, logger, metrics, tracer


class StoreError(ExternalServiceError):
    """Raised when a record store operation fails."""

    def __init__(self, message: str, operation: str, collection: str):
        super().__init__(service_name="DynamoDB", details=message)
        self.operation = operation
        self.collection = collection

    def log_context(self) -> Dict[str, Any]:
        return {**super().log_context(), "operation": self.operation, "collection": self.collection}


def _to_dynamodb(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamodb(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamodb(v) for v in value]
    return value


def _from_dynamodb(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamodb(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamodb(v) for v in value]
    return value


class DynamoDBRecordStore:
    """Record store backed by one DynamoDB table per collection."""

    def __init__(
        self,
        table_names: Dict[str, str],
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        """
        Initialize the DynamoDB record store.

        Args:
            table_names: Mapping of collection name to DynamoDB table name
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
        """
        self.table_names = dict(table_names)

        resource_kwargs = {}
        if region_name:
            resource_kwargs['region_name'] = region_name
        if endpoint_url:
            resource_kwargs['endpoint_url'] = endpoint_url
        self.dynamodb = boto3.resource('dynamodb', **resource_kwargs)
        self._tables: Dict[str, Any] = {}

        logger.info("DynamoDB record store initialized", extra={
            "table_names": self.table_names,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    def _table(self, collection: str):
        if collection not in self._tables:
            table_name = self.table_names.get(collection)
            if table_name is None:
                raise StoreError(
                    message=f"Unknown collection: {collection}",
                    operation="resolve_table",
                    collection=collection,
                )
            self._tables[collection] = self.dynamodb.Table(table_name)
        return self._tables[collection]

    def _raise_store_error(self, error: Exception, operation: str, collection: str) -> None:
        if isinstance(error, ClientError):
            error_code = error.response['Error']['Code']
            message = error.response['Error'].get('Message') or error_code
            count(f"DynamoDB{error_code}Error")
        else:
            error_code = type(error).__name__
            message = str(error)

        count(f"DynamoDB{operation}Error")
        logger.error(f"DynamoDB {operation} error", extra={
            "error_code": error_code,
            "error_message": message,
            "collection": collection,
            "table_name": self.table_names.get(collection),
        })
        raise StoreError(message=message, operation=operation, collection=collection) from error

    @tracer.capture_method
    def put(self, collection: str, record: Dict[str, Any]) -> None:
        """
        Put a record into the collection's table.

        Args:
            collection: Collection name (products, orders)
            record: Record to store, must carry an ``id``

        Raises:
            StoreError: If the table is unknown or DynamoDB rejects the write
        """
        table = self._table(collection)
        started = time.time()
        try:
            table.put_item(Item=_to_dynamodb(record))
        except (ClientError, BotoCoreError) as e:
            self._raise_store_error(e, "PutItem", collection)

        metrics.add_metric(
            name="DynamoDBPutItemDuration",
            unit=MetricUnit.Milliseconds,
            value=(time.time() - started) * 1000,
        )
        tracer.put_annotation("table_name", table.name)
        logger.info("Record stored successfully", extra={
            "collection": collection,
            "record_id": record.get('id', 'unknown'),
        })

    @tracer.capture_method
    def scan_all(self, collection: str) -> List[Dict[str, Any]]:
        """
        Scan every record of a collection, following pagination to the end.

        Args:
            collection: Collection name (products, orders)

        Returns:
            All records, with numbers converted back to int/float

        Raises:
            StoreError: If the table is unknown or the scan fails
        """
        table = self._table(collection)
        items: List[Dict[str, Any]] = []
        scan_kwargs: Dict[str, Any] = {}
        pages = 0
        try:
            while True:
                response = table.scan(**scan_kwargs)
                items.extend(response.get('Items', []))
                pages += 1
                last_evaluated_key = response.get('LastEvaluatedKey')
                if not last_evaluated_key:
                    break
                scan_kwargs['ExclusiveStartKey'] = last_evaluated_key
        except (ClientError, BotoCoreError) as e:
            self._raise_store_error(e, "Scan", collection)

        logger.debug("Collection scanned", extra={
            "collection": collection,
            "record_count": len(items),
            "pages": pages,
        })
        return [_from_dynamodb(item) for item in items]
