"""Product record model."""

from typing import Annotated, Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from storefront.models.common import RECORD_CONFIG, Number, utc_timestamp
from storefront.models.input import CreateProductRequest


class Product(BaseModel):
    """A catalogue product as stored in the products collection."""

    model_config = RECORD_CONFIG

    id: Annotated[str, Field(description='Unique identifier for the product')]
    name: str
    price: Number
    description: str
    image_url: Optional[str] = None
    created_at: Annotated[str, Field(description='ISO timestamp when the product was created')]

    @classmethod
    def create(cls, request: CreateProductRequest) -> 'Product':
        """Build a new product with a generated ID and creation timestamp."""
        return cls(
            id=str(uuid4()),
            name=request.name,
            price=request.price,
            description=request.description,
            image_url=request.image_url,
            created_at=utc_timestamp(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Record layout persisted and returned by the API."""
        return self.model_dump(by_alias=True)
