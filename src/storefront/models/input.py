"""
Input models for request validation using Pydantic.

Raw JSON payloads are validated into these models before any record is built.
Validators run in ``before`` mode so they see the caller's untyped values and
apply the coercion rules (truthiness, numeric strings, price defaults) in one
place.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.common import Number, to_number


class LineItemInput(BaseModel):
    """A single element of the ``items`` list of a create-order request."""

    id: Annotated[str, Field(
        description='Identifier of the ordered product',
        examples=['p1'],
    )]

    quantity: Annotated[int, Field(
        description='Number of units ordered',
        examples=[2],
    )]

    price: Annotated[Number, Field(
        description='Caller-supplied unit price, 0 when absent',
        examples=[5, 19.99],
    )] = 0

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v: Any) -> str:
        if not v:
            raise ValueError('productId is required')
        return str(v)

    @field_validator('quantity', mode='before')
    @classmethod
    def validate_quantity(cls, v: Any) -> int:
        if not v:
            raise ValueError('quantity is required')
        quantity = to_number(v)
        if quantity <= 0:
            raise ValueError('quantity must be greater than 0')
        if not isinstance(quantity, int):
            raise ValueError('quantity must be a whole number')
        return quantity

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v: Any) -> Number:
        if not v:
            return 0
        return to_number(v)


class CreateProductRequest(BaseModel):
    """Request model for creating a product."""

    model_config = ConfigDict(populate_by_name=True)

    name: Annotated[str, Field(description='Product name', examples=['Desk lamp'])]

    price: Annotated[Number, Field(description='Unit price', examples=[10, 24.5])]

    description: Annotated[str, Field(description='Product description')]

    image_url: Annotated[Optional[str], Field(
        alias='imageUrl',
        description='Optional image reference',
    )] = None

    @field_validator('name', 'description', mode='before')
    @classmethod
    def validate_text(cls, v: Any) -> str:
        if not v:
            raise ValueError('field is required')
        return str(v)

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v: Any) -> Number:
        if not v:
            raise ValueError('price is required')
        return to_number(v)

    @field_validator('image_url', mode='before')
    @classmethod
    def validate_image_url(cls, v: Any) -> Optional[str]:
        return str(v) if v else None
