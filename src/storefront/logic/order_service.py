"""
Business Logic Layer for Order Management.

Order creation is the only authenticated operation of the API. The workflow
runs in a fixed order and each step can end the request early:

1. extract the bearer credential from the Authorization header
2. resolve it to a principal through the token verifier (fail closed)
3. check the ``items`` list is present and non-empty
4. validate every line item, all-or-nothing
5. build the normalized order record and persist it
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from storefront.dal import ORDERS_COLLECTION, RecordStore
from storefront.handlers.utils.errors import RequestValidationError, UnauthorizedError
from storefront.handlers.utils.observability import count, logger, tracer
from storefront.logic.payload import describe_validation_error, parse_json_body
from storefront.models.input import LineItemInput
from storefront.models.order import Order
from storefront.security.auth import Principal, TokenVerifier, extract_bearer_token

AUTHORIZATION_REQUIRED = "Authorization token required"
ITEMS_REQUIRED = "Items array is required"
INVALID_LINE_ITEM = "Each item must have productId and positive quantity"


class OrderService:
    """Business logic service for order management."""

    def __init__(self, store: RecordStore, verifier: TokenVerifier):
        """
        Initialize order service.

        Args:
            store: Record store holding the orders collection
            verifier: Token verifier used to authenticate order creation
        """
        self.store = store
        self.verifier = verifier

    @tracer.capture_method
    def authenticate(self, headers: Optional[Mapping[str, str]]) -> Principal:
        """
        Resolve the caller of a request to a principal.

        Args:
            headers: Request headers

        Returns:
            The authenticated principal

        Raises:
            UnauthorizedError: If the credential is missing, empty or rejected
        """
        token = extract_bearer_token(headers)
        if token is None:
            count("AuthorizationMissing")
            raise UnauthorizedError(message=AUTHORIZATION_REQUIRED)
        if not token:
            count("AuthenticationFailure")
            raise UnauthorizedError(details="No token provided")

        try:
            principal = self.verifier.resolve_principal(token)
        except Exception as e:
            # Any verifier failure, including network errors, rejects the caller
            count("AuthenticationFailure")
            logger.warning("Token verification failed", extra={"error": str(e)})
            raise UnauthorizedError(details=str(e)) from e

        tracer.put_annotation("username", principal.username)
        return principal

    @staticmethod
    def validate_items(payload: Any) -> List[LineItemInput]:
        """
        Validate the ``items`` list of a create-order payload.

        The first invalid element fails the whole submission.

        Raises:
            RequestValidationError: If the list is missing/empty or an element is invalid
        """
        items = payload.get('items') if isinstance(payload, dict) else None
        if not items or not isinstance(items, list):
            raise RequestValidationError(message=ITEMS_REQUIRED)

        validated: List[LineItemInput] = []
        for index, item in enumerate(items):
            try:
                validated.append(LineItemInput.model_validate(item))
            except ValidationError as e:
                raise RequestValidationError(
                    message=INVALID_LINE_ITEM,
                    details=describe_validation_error(e, root=f"items[{index}]"),
                ) from e
        return validated

    @tracer.capture_method
    def create_order(
        self,
        headers: Optional[Mapping[str, str]],
        raw_body: Optional[str],
        is_base64_encoded: bool = False,
    ) -> Order:
        """
        Run the order creation workflow.

        Args:
            headers: Request headers carrying the bearer credential
            raw_body: JSON request body with an ``items`` list
            is_base64_encoded: Whether API Gateway base64-encoded the body

        Returns:
            The persisted order

        Raises:
            UnauthorizedError: If the caller cannot be authenticated
            RequestValidationError: If the body or any line item is invalid
            StoreError: If the order could not be persisted
        """
        principal = self.authenticate(headers)
        payload = parse_json_body(raw_body, is_base64_encoded)
        items = self.validate_items(payload)

        order = Order.create(user_id=principal.username, items=items)
        self.store.put(ORDERS_COLLECTION, order.to_dict())

        count("OrderCreated")
        count("OrderItemCount", value=len(order.items))
        tracer.put_annotation("order_id", order.id)
        logger.info("Order created", extra={
            "order_id": order.id,
            "user_id": order.user_id,
            "item_count": len(order.items),
            "order_total": order.total_amount,
        })
        return order

    @tracer.capture_method
    def list_orders(self) -> List[Dict[str, Any]]:
        orders = self.store.scan_all(ORDERS_COLLECTION)
        logger.info("Orders listed", extra={"order_count": len(orders)})
        return orders
