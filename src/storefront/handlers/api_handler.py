"""
Storefront API Handler - Lambda function for the products and orders API.

This module implements the handler layer: CORS preflight, routing of
API Gateway REST proxy events to the product and order operations, and the
single top-level failure boundary that turns every error into a response.
"""

from typing import Any, Callable, Dict, Optional, Tuple

from aws_lambda_env_modeler import get_environment_variables
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent, event_source
from aws_lambda_powertools.utilities.typing import LambdaContext

from storefront.dal import ORDERS_COLLECTION, PRODUCTS_COLLECTION, RecordStore, get_record_store
from storefront.handlers.models.env_vars import HandlerEnvVars
from storefront.handlers.utils.errors import BaseServiceError, RouteNotFoundError, log_error_metrics
from storefront.handlers.utils.observability import count, logger, metrics, tracer
from storefront.handlers.utils.responses import (
    create_api_response,
    create_error_response,
    create_internal_error_response,
    create_preflight_response,
)
from storefront.logic import OrderService, ProductService
from storefront.security.auth import CognitoTokenVerifier, JWTTokenVerifier, TokenVerifier

PRODUCTS_PATH = '/products'
ORDERS_PATH = '/orders'

RouteHandler = Callable[[APIGatewayProxyEvent], Dict[str, Any]]


def _route_path(path: Optional[str]) -> str:
    if not path:
        return ''
    return path.rstrip('/') or '/'


class Dispatcher:
    """
    Routes API Gateway REST events to the storefront operations.

    The record store and token verifier are injected so tests can swap in
    fakes; ``build_dispatcher`` wires the production collaborators.
    """

    def __init__(self, store: RecordStore, verifier: TokenVerifier):
        self.product_service = ProductService(store)
        self.order_service = OrderService(store, verifier)
        self.routes: Dict[Tuple[str, str], RouteHandler] = {
            ('POST', PRODUCTS_PATH): self.create_product,
            ('GET', PRODUCTS_PATH): self.list_products,
            ('POST', ORDERS_PATH): self.create_order,
            ('GET', ORDERS_PATH): self.list_orders,
        }

    def match(self, method: str, event: APIGatewayProxyEvent) -> RouteHandler:
        """
        Find the operation for a request.

        The API Gateway resource template is tried first, then the raw path.

        Raises:
            RouteNotFoundError: If no operation matches
        """
        for candidate in (event.get('resource'), event.get('path')):
            handler = self.routes.get((method, _route_path(candidate)))
            if handler is not None:
                return handler

        count("RouteNotFound")
        raise RouteNotFoundError(method=method, path=event.get('path') or '')

    def dispatch(self, event: APIGatewayProxyEvent) -> Dict[str, Any]:
        """
        Handle one request and always produce a response.

        Args:
            event: API Gateway REST proxy event

        Returns:
            API Gateway response dictionary
        """
        try:
            method = (event.get('httpMethod') or '').upper()
            if method == 'OPTIONS':
                count("PreflightRequest")
                return create_preflight_response()

            handler = self.match(method, event)
            tracer.put_annotation("operation", handler.__name__)
            logger.debug("Request routed", extra={"operation": handler.__name__, "http_method": method})
            return handler(event)

        except BaseServiceError as e:
            log_error_metrics(e)
            return create_error_response(e)

        except Exception as e:
            count("UnexpectedError")
            logger.exception("Unexpected error in handler", extra={"error": str(e)})
            return create_internal_error_response(e)

    def create_product(self, event: APIGatewayProxyEvent) -> Dict[str, Any]:
        product = self.product_service.create_product(
            raw_body=event.get('body'),
            is_base64_encoded=bool(event.get('isBase64Encoded')),
        )
        return create_api_response(status_code=201, body=product.to_dict())

    def list_products(self, event: APIGatewayProxyEvent) -> Dict[str, Any]:
        return create_api_response(status_code=200, body=self.product_service.list_products())

    def create_order(self, event: APIGatewayProxyEvent) -> Dict[str, Any]:
        order = self.order_service.create_order(
            headers=event.get('headers') or {},
            raw_body=event.get('body'),
            is_base64_encoded=bool(event.get('isBase64Encoded')),
        )
        return create_api_response(status_code=201, body=order.to_dict())

    def list_orders(self, event: APIGatewayProxyEvent) -> Dict[str, Any]:
        return create_api_response(status_code=200, body=self.order_service.list_orders())


def build_token_verifier(env_vars: HandlerEnvVars) -> TokenVerifier:
    """Create the token verifier selected by TOKEN_VERIFIER."""
    if env_vars.TOKEN_VERIFIER == 'jwt':
        return JWTTokenVerifier(
            secret_key=env_vars.JWT_SECRET,
            jwks_url=env_vars.JWT_JWKS_URL,
            algorithm=env_vars.JWT_ALGORITHM,
            issuer=env_vars.JWT_ISSUER,
            audience=env_vars.JWT_AUDIENCE,
        )
    return CognitoTokenVerifier(region_name=env_vars.COGNITO_REGION or env_vars.AWS_REGION)


def build_dispatcher(env_vars: HandlerEnvVars) -> Dispatcher:
    """Wire the production dispatcher from environment configuration."""
    store = get_record_store(
        table_names={
            PRODUCTS_COLLECTION: env_vars.PRODUCTS_TABLE_NAME,
            ORDERS_COLLECTION: env_vars.ORDERS_TABLE_NAME,
        },
        region_name=env_vars.AWS_REGION,
        endpoint_url=env_vars.DYNAMODB_ENDPOINT,
    )
    return Dispatcher(store=store, verifier=build_token_verifier(env_vars))


# Built on first invocation and reused while the container stays warm
_dispatcher: Optional[Dispatcher] = None


def get_dispatcher() -> Dispatcher:
    """Get or create the container-wide dispatcher."""
    global _dispatcher

    if _dispatcher is None:
        env_vars = get_environment_variables(model=HandlerEnvVars)
        _dispatcher = build_dispatcher(env_vars)
        logger.info("Dispatcher initialized", extra={
            "products_table": env_vars.PRODUCTS_TABLE_NAME,
            "orders_table": env_vars.ORDERS_TABLE_NAME,
            "token_verifier": env_vars.TOKEN_VERIFIER,
        })

    return _dispatcher


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
@event_source(data_class=APIGatewayProxyEvent)
def lambda_handler(event: APIGatewayProxyEvent, context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    count("RequestCount")
    tracer.put_annotation("http_method", event.get('httpMethod') or 'unknown')

    try:
        dispatcher = get_dispatcher()
    except Exception as e:
        logger.exception("Failed to initialize dispatcher", extra={"error": str(e)})
        return create_internal_error_response(e)

    return dispatcher.dispatch(event)
