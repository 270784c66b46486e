import time

import pytest
import requests
from jose import jwt

from ukmla_saq.core.config import ServiceAccountKey
from ukmla_saq.core.errors import UpstreamAuthError
from ukmla_saq.core import token_service
from ukmla_saq.core.token_service import (
    CLOUD_PLATFORM_SCOPE,
    GOOGLE_TOKEN_URI,
    JWT_BEARER_GRANT_TYPE,
    create_signed_assertion,
    get_access_token,
)

from conftest import SERVICE_ACCOUNT_EMAIL, FakeHttpResponse, FakeSession


def test_assertion_claims_are_signed_with_rs256(settings, rsa_key_pair):
    _, public_pem = rsa_key_pair
    now = int(time.time())

    assertion = create_signed_assertion(settings.GOOGLE_SERVICE_ACCOUNT_KEY, now=now)

    header = jwt.get_unverified_header(assertion)
    claims = jwt.decode(assertion, public_pem, algorithms=["RS256"], audience=GOOGLE_TOKEN_URI)
    assert header["alg"] == "RS256"
    assert claims["iss"] == SERVICE_ACCOUNT_EMAIL
    assert claims["scope"] == CLOUD_PLATFORM_SCOPE
    assert claims["iat"] == now
    assert claims["exp"] == now + 3600


def test_unusable_private_key_raises_auth_error():
    service_account = ServiceAccountKey(client_email=SERVICE_ACCOUNT_EMAIL, private_key="not-a-pem-key")
    with pytest.raises(UpstreamAuthError, match="Failed to sign"):
        create_signed_assertion(service_account)


def test_get_access_token_exchanges_jwt_bearer_assertion(settings):
    session = FakeSession(FakeHttpResponse(payload={"access_token": "ya29.fresh", "expires_in": 3599}))

    token = get_access_token(settings, session=session)

    assert token == "ya29.fresh"
    url, kwargs = session.calls[0]
    assert url == GOOGLE_TOKEN_URI
    assert kwargs["data"]["grant_type"] == JWT_BEARER_GRANT_TYPE
    assert kwargs["data"]["assertion"].count(".") == 2
    assert kwargs["timeout"] == settings.HTTP_TIMEOUT_SECONDS


def test_every_call_requests_a_fresh_token(settings):
    session = FakeSession(FakeHttpResponse(payload={"access_token": "ya29.fresh"}))

    get_access_token(settings, session=session)
    get_access_token(settings, session=session)

    assert len(session.calls) == 2


def test_non_2xx_token_response_raises(settings):
    session = FakeSession(FakeHttpResponse(status_code=400, payload={"error": "invalid_grant"}))

    with pytest.raises(UpstreamAuthError) as exc_info:
        get_access_token(settings, session=session)
    assert exc_info.value.details["upstream_status"] == 400


def test_missing_access_token_raises(settings):
    session = FakeSession(FakeHttpResponse(payload={"token_type": "Bearer"}))

    with pytest.raises(UpstreamAuthError, match="access_token"):
        get_access_token(settings, session=session)


def test_non_json_token_response_raises(settings):
    session = FakeSession(FakeHttpResponse(payload=None, text="<html>bad gateway</html>"))

    with pytest.raises(UpstreamAuthError, match="non-JSON"):
        get_access_token(settings, session=session)


def test_network_failure_raises(settings):
    session = FakeSession(error=requests.ConnectionError("connection reset"))

    with pytest.raises(UpstreamAuthError, match="connection reset"):
        get_access_token(settings, session=session)


def test_owned_retry_session_is_closed_after_exchange(settings, monkeypatch):
    session = FakeSession(FakeHttpResponse(payload={"access_token": "ya29.fresh"}))
    monkeypatch.setattr(token_service, "create_retry_session", lambda settings: session)

    assert get_access_token(settings) == "ya29.fresh"
    assert len(session.calls) == 1
    assert session.closed is True


def test_owned_retry_session_is_closed_when_exchange_fails(settings, monkeypatch):
    session = FakeSession(error=requests.ConnectionError("connection reset"))
    monkeypatch.setattr(token_service, "create_retry_session", lambda settings: session)

    with pytest.raises(UpstreamAuthError):
        get_access_token(settings)
    assert session.closed is True


def test_injected_session_is_left_open(settings):
    session = FakeSession(FakeHttpResponse(payload={"access_token": "ya29.fresh"}))

    get_access_token(settings, session=session)

    assert session.closed is False
