"""Business logic for the products collection."""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from storefront.dal import PRODUCTS_COLLECTION, RecordStore
from storefront.handlers.utils.errors import RequestValidationError
from storefront.handlers.utils.observability import count, logger, tracer
from storefront.logic.payload import describe_validation_error, parse_json_body
from storefront.models.input import CreateProductRequest
from storefront.models.product import Product

MISSING_PRODUCT_FIELDS = "Missing name, price, or description"


class ProductService:
    """Creates and lists products."""

    def __init__(self, store: RecordStore):
        self.store = store

    @tracer.capture_method
    def create_product(self, raw_body: Optional[str], is_base64_encoded: bool = False) -> Product:
        """
        Validate a create-product payload and persist the new product.

        Raises:
            RequestValidationError: If the body is malformed or a required field is missing
            StoreError: If the product could not be persisted
        """
        payload = parse_json_body(raw_body, is_base64_encoded)
        try:
            request = CreateProductRequest.model_validate(payload)
        except ValidationError as e:
            raise RequestValidationError(
                message=MISSING_PRODUCT_FIELDS,
                details=describe_validation_error(e),
            ) from e

        product = Product.create(request)
        self.store.put(PRODUCTS_COLLECTION, product.to_dict())

        count("ProductCreated")
        tracer.put_annotation("product_id", product.id)
        logger.info("Product created", extra={"product_id": product.id, "price": product.price})
        return product

    @tracer.capture_method
    def list_products(self) -> List[Dict[str, Any]]:
        products = self.store.scan_all(PRODUCTS_COLLECTION)
        logger.info("Products listed", extra={"product_count": len(products)})
        return products
