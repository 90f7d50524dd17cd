"""
Order domain model.

An order is built in one go from the authenticated principal and the
validated line items, persisted once and never mutated afterwards.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Sequence
from uuid import uuid4

from pydantic import BaseModel, Field

from storefront.models.common import RECORD_CONFIG, Number, normalize_number, utc_timestamp
from storefront.models.input import LineItemInput


class OrderStatus(str, Enum):
    """Order status enumeration."""

    PENDING = 'pending'


class LineItem(BaseModel):
    """A normalized order line with its derived total."""

    model_config = RECORD_CONFIG

    id: str
    quantity: int
    price: Number
    total_price: Number

    @classmethod
    def from_input(cls, item: LineItemInput) -> 'LineItem':
        return cls(
            id=item.id,
            quantity=item.quantity,
            price=item.price,
            total_price=normalize_number(item.price * item.quantity),
        )


class Order(BaseModel):
    """Core Order domain model."""

    model_config = RECORD_CONFIG

    id: Annotated[str, Field(
        description='Unique identifier for the order',
        examples=['550e8400-e29b-41d4-a716-446655440000'],
    )]

    user_id: Annotated[str, Field(
        description='Username of the principal that placed the order',
        examples=['jane.doe'],
    )]

    items: Annotated[List[LineItem], Field(
        min_length=1,
        description='Order lines in submission order',
    )]

    created_at: Annotated[str, Field(
        description='ISO timestamp when the order was created',
    )]

    status: Annotated[OrderStatus, Field(
        description='Current status of the order',
    )] = OrderStatus.PENDING

    @classmethod
    def create(cls, user_id: str, items: Sequence[LineItemInput]) -> 'Order':
        """
        Create a new pending order with generated ID and timestamp.

        Args:
            user_id: Username of the authenticated principal
            items: Validated line items, in submission order

        Returns:
            New Order instance
        """
        return cls(
            id=str(uuid4()),
            user_id=user_id,
            items=[LineItem.from_input(item) for item in items],
            created_at=utc_timestamp(),
            status=OrderStatus.PENDING,
        )

    @property
    def total_amount(self) -> Number:
        """Sum of all line totals."""
        return normalize_number(sum(item.total_price for item in self.items))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the order to the record layout used for storage and responses.

        Returns:
            Dictionary with camelCase keys and the status as plain text
        """
        return self.model_dump(by_alias=True, mode='json')
