"""
Environment variable models for type-safe configuration.

The Lambda entry point parses these once per container with
``aws_lambda_env_modeler.get_environment_variables``.
"""

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class HandlerEnvVars(BaseModel):
    """Environment variables for the storefront API handler."""

    # DynamoDB tables backing the two collections
    PRODUCTS_TABLE_NAME: Annotated[str, Field(
        min_length=1,
        description='DynamoDB table name for product storage',
    )] = 'Product'

    ORDERS_TABLE_NAME: Annotated[str, Field(
        min_length=1,
        description='DynamoDB table name for order storage',
    )] = 'Order'

    # For local testing against DynamoDB Local / LocalStack
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        description='DynamoDB endpoint URL override',
    )] = None

    AWS_REGION: Annotated[str, Field(
        description='AWS region for service deployment',
    )] = 'us-east-1'

    # Token verification
    TOKEN_VERIFIER: Annotated[Literal['cognito', 'jwt'], Field(
        description='Which verifier resolves bearer tokens',
    )] = 'cognito'

    COGNITO_REGION: Annotated[Optional[str], Field(
        description='Region of the Cognito user pool, defaults to AWS_REGION',
    )] = None

    JWT_SECRET: Annotated[Optional[str], Field(
        description='Shared secret for HMAC-signed tokens',
    )] = None

    JWT_JWKS_URL: Annotated[Optional[str], Field(
        description='JWKS endpoint for asymmetric tokens',
    )] = None

    JWT_ALGORITHM: Annotated[str, Field(
        description='Expected JWT signing algorithm',
    )] = 'HS256'

    JWT_ISSUER: Annotated[Optional[str], Field(
        description='Expected token issuer',
    )] = None

    JWT_AUDIENCE: Annotated[Optional[str], Field(
        description='Expected token audience',
    )] = None

    @model_validator(mode='after')
    def validate_jwt_settings(self) -> 'HandlerEnvVars':
        if self.TOKEN_VERIFIER == 'jwt' and not (self.JWT_SECRET or self.JWT_JWKS_URL):
            raise ValueError('TOKEN_VERIFIER=jwt requires JWT_SECRET or JWT_JWKS_URL')
        return self
