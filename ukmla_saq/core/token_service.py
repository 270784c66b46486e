# -*- coding: utf-8 -*-
"""
Vertex AI 호출용 서비스 계정 bearer 토큰 발급

RS256 서명 assertion을 Google OAuth 엔드포인트에서 JWT-bearer grant로 교환함.
캐시 없이 호출할 때마다 새 토큰을 요청함.
"""
import logging
import time

import requests
from jose import jwt
from jose.exceptions import JOSEError

from .errors import UpstreamAuthError
from .http_client import create_retry_session

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 3600


def create_signed_assertion(service_account, now=None):
    """서비스 계정 키로 RS256 서명된 assertion 생성"""
    issued_at = int(now if now is not None else time.time())
    claims = {
        "iss": service_account.client_email,
        "scope": CLOUD_PLATFORM_SCOPE,
        "aud": GOOGLE_TOKEN_URI,
        "iat": issued_at,
        "exp": issued_at + ASSERTION_LIFETIME_SECONDS,
    }

    try:
        return jwt.encode(claims, service_account.private_key, algorithm="RS256")
    except (JOSEError, ValueError, TypeError) as e:
        raise UpstreamAuthError(f"Failed to sign token assertion: {str(e)}") from e


def _post_assertion(settings, session, assertion):
    try:
        return session.post(
            GOOGLE_TOKEN_URI,
            data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        raise UpstreamAuthError(f"Token exchange request failed: {str(e)}") from e


def get_access_token(settings, session=None):
    """assertion을 토큰 엔드포인트에서 교환하여 access token 반환"""
    assertion = create_signed_assertion(settings.GOOGLE_SERVICE_ACCOUNT_KEY)

    if session is None:
        with create_retry_session(settings) as session:
            response = _post_assertion(settings, session, assertion)
    else:
        response = _post_assertion(settings, session, assertion)

    if not response.ok:
        logging.error(f"Token exchange returned {response.status_code}: {response.text[:500]}")
        raise UpstreamAuthError(
            f"Token exchange failed with status {response.status_code}",
            details={"upstream_status": response.status_code}
        )

    try:
        result = response.json()
    except ValueError as e:
        raise UpstreamAuthError("Token endpoint returned a non-JSON body") from e

    access_token = result.get("access_token") if isinstance(result, dict) else None
    if not access_token:
        raise UpstreamAuthError("Token endpoint response did not contain an access_token")

    logging.info("Obtained Vertex AI access token")
    return access_token
