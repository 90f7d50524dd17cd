"""
Data Access Layer (DAL) for the storefront service.

The service persists plain record dictionaries into named collections. Any
object with ``put`` and ``scan_all`` satisfies the ``RecordStore`` protocol,
which lets tests substitute an in-memory store for DynamoDB.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

PRODUCTS_COLLECTION = 'products'
ORDERS_COLLECTION = 'orders'


@runtime_checkable
class RecordStore(Protocol):
    """Protocol defining the record store interface."""

    def put(self, collection: str, record: Dict[str, Any]) -> None:
        """Persist a single record into a collection."""
        ...

    def scan_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return every record of a collection."""
        ...


def get_record_store(
    table_names: Dict[str, str],
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> RecordStore:
    """
    Factory function to get the DynamoDB-backed record store.

    Args:
        table_names: Mapping of collection name to DynamoDB table name
        region_name: AWS region name
        endpoint_url: DynamoDB endpoint URL (for local testing)

    Returns:
        Record store instance
    """
    # Import here to avoid circular imports
    from storefront.dal.dynamodb_handler import DynamoDBRecordStore

    return DynamoDBRecordStore(table_names=table_names, region_name=region_name, endpoint_url=endpoint_url)


__all__ = [
    'ORDERS_COLLECTION',
    'PRODUCTS_COLLECTION',
    'RecordStore',
    'get_record_store',
]
