"""
Unit tests for bearer token extraction and the token verifiers.
"""

from unittest.mock import Mock

import boto3
import pytest
from botocore.exceptions import EndpointConnectionError
from botocore.stub import Stubber

from storefront.security.auth import (
    CognitoTokenVerifier,
    InvalidTokenError,
    JWTTokenVerifier,
    TokenVerifier,
    extract_bearer_token,
    get_header,
)


class TestExtractBearerToken:
    """Test cases for credential extraction."""

    @pytest.mark.parametrize("headers, expected", [
        ({"Authorization": "Bearer abc.def"}, "abc.def"),
        ({"authorization": "Bearer abc.def"}, "abc.def"),
        ({"AUTHORIZATION": "bearer abc.def"}, "abc.def"),
        ({"Authorization": "BEARER   abc.def  "}, "abc.def"),
        ({"Authorization": "Bearer  "}, ""),
    ])
    def test_extracts_credential(self, headers, expected):
        assert extract_bearer_token(headers) == expected

    @pytest.mark.parametrize("headers", [
        None,
        {},
        {"Content-Type": "application/json"},
        {"Authorization": ""},
        {"Authorization": "Basic dXNlcjpwYXNz"},
        {"Authorization": "abc.def"},
        {"Authorization": "Bearerabc"},
    ])
    def test_missing_or_foreign_scheme(self, headers):
        assert extract_bearer_token(headers) is None

    def test_get_header_is_case_insensitive(self):
        headers = {"X-Api-Key": "secret"}
        assert get_header(headers, "x-api-key") == "secret"
        assert get_header(headers, "Authorization") is None


class TestCognitoTokenVerifier:
    """Test cases for the Cognito GetUser verifier."""

    @pytest.fixture
    def cognito_client(self):
        return boto3.client("cognito-idp", region_name="us-east-1")

    def test_resolves_principal(self, cognito_client):
        verifier = CognitoTokenVerifier(client=cognito_client)

        with Stubber(cognito_client) as stubber:
            stubber.add_response(
                "get_user",
                {
                    "Username": "jane.doe",
                    "UserAttributes": [
                        {"Name": "sub", "Value": "1f2e3d4c"},
                        {"Name": "email", "Value": "jane@example.com"},
                    ],
                },
                {"AccessToken": "access-token"},
            )
            principal = verifier.resolve_principal("access-token")
            stubber.assert_no_pending_responses()

        assert principal.username == "jane.doe"
        assert principal.user_id == "1f2e3d4c"
        assert principal.attributes["email"] == "jane@example.com"

    def test_rejected_token(self, cognito_client):
        verifier = CognitoTokenVerifier(client=cognito_client)

        with Stubber(cognito_client) as stubber:
            stubber.add_client_error(
                "get_user",
                service_error_code="NotAuthorizedException",
                service_message="Access Token has expired",
                http_status_code=400,
            )
            with pytest.raises(InvalidTokenError, match="Invalid token: Access Token has expired"):
                verifier.resolve_principal("expired-token")

    def test_empty_token_is_rejected_without_calling_cognito(self):
        client = Mock()
        verifier = CognitoTokenVerifier(client=client)

        with pytest.raises(InvalidTokenError, match="No token provided"):
            verifier.resolve_principal("")
        client.get_user.assert_not_called()

    def test_network_failure_is_rejection(self):
        client = Mock()
        client.get_user.side_effect = EndpointConnectionError(endpoint_url="https://cognito-idp.us-east-1.amazonaws.com")
        verifier = CognitoTokenVerifier(client=client)

        with pytest.raises(InvalidTokenError, match="Could not connect"):
            verifier.resolve_principal("access-token")

    def test_satisfies_protocol(self):
        assert isinstance(CognitoTokenVerifier(client=Mock()), TokenVerifier)


class TestJWTTokenVerifier:
    """Test cases for the local JWT verifier."""

    @pytest.fixture
    def verifier(self, jwt_secret):
        return JWTTokenVerifier(secret_key=jwt_secret)

    def test_resolves_username_claim(self, verifier, jwt_token):
        principal = verifier.resolve_principal(jwt_token({"username": "jane.doe", "sub": "abc"}))

        assert principal.username == "jane.doe"
        assert principal.user_id == "abc"
        assert "exp" not in principal.attributes

    def test_falls_back_to_cognito_username(self, verifier, jwt_token):
        principal = verifier.resolve_principal(jwt_token({"cognito:username": "bob", "sub": "abc"}))
        assert principal.username == "bob"

    def test_falls_back_to_sub(self, verifier, jwt_token):
        principal = verifier.resolve_principal(jwt_token({"sub": "abc"}))
        assert principal.username == "abc"

    def test_expired_token(self, verifier, jwt_token):
        with pytest.raises(InvalidTokenError, match="Token has expired"):
            verifier.resolve_principal(jwt_token(expires_in=-3600))

    def test_wrong_signature(self, verifier, jwt_token):
        token = jwt_token(secret="another-secret-that-is-long-enough-0123")

        with pytest.raises(InvalidTokenError, match="Invalid token"):
            verifier.resolve_principal(token)

    def test_garbage_token(self, verifier):
        with pytest.raises(InvalidTokenError, match="Invalid token"):
            verifier.resolve_principal("not-a-jwt")

    def test_missing_username_claim(self, verifier, jwt_token):
        with pytest.raises(InvalidTokenError, match="no username claim"):
            verifier.resolve_principal(jwt_token({"scope": "orders"}))

    def test_issuer_is_enforced(self, jwt_secret, jwt_token):
        verifier = JWTTokenVerifier(secret_key=jwt_secret, issuer="https://issuer.example.com")

        with pytest.raises(InvalidTokenError):
            verifier.resolve_principal(jwt_token({"username": "jane.doe", "iss": "https://other.example.com"}))

    def test_empty_token(self, verifier):
        with pytest.raises(InvalidTokenError, match="No token provided"):
            verifier.resolve_principal("")

    def test_requires_key_material(self):
        with pytest.raises(ValueError):
            JWTTokenVerifier()
