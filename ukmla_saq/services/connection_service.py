# -*- coding: utf-8 -*-
import logging

from ..core.ai_service import test_ai_connection
from ..core.config import get_settings
from ..core.database import get_store_client, test_store_connection
from ..core.debug import print_connection_test_header, print_connection_test_summary
from ..core.errors import ConfigurationError, UpstreamAuthError
from ..core.responses import create_json_response
from ..core.token_service import get_access_token

SUCCESS = "SUCCESS"
FAILED = "FAILED"
SKIPPED = "SKIPPED"


def run_connection_tests(settings_loader=get_settings):
    """설정, 토큰 발급, Vertex AI, Supabase 순서로 연결 확인 (행은 쓰지 않음)"""
    results = {
        "config_status": FAILED,
        "auth_status": SKIPPED,
        "ai_status": SKIPPED,
        "store_status": SKIPPED,
    }

    try:
        settings = settings_loader()
        results["config_status"] = SUCCESS
    except ConfigurationError as e:
        results["config_error"] = e.message
        return results

    print(f"   - Project: {settings.GOOGLE_CLOUD_PROJECT_ID} ({settings.VERTEX_LOCATION}, {settings.VERTEX_MODEL})")
    print(f"   - Store: {settings.SUPABASE_URL}")

    try:
        access_token = get_access_token(settings)
        results["auth_status"] = SUCCESS
    except UpstreamAuthError as e:
        results["auth_status"] = FAILED
        results["auth_error"] = e.message
        access_token = None

    if access_token:
        ai_success, ai_message = test_ai_connection(settings, access_token)
        results["ai_status"] = SUCCESS if ai_success else FAILED
        if not ai_success:
            results["ai_error"] = ai_message

    try:
        store_success, store_message = test_store_connection(get_store_client(settings))
    except ConfigurationError as e:
        store_success, store_message = False, e.message
    results["store_status"] = SUCCESS if store_success else FAILED
    if not store_success:
        results["store_error"] = store_message

    return results


def handle_test_connections(req, settings_loader=get_settings):
    """연결 테스트 요청 처리"""
    logging.info('Connection test API called')
    print_connection_test_header()

    results = run_connection_tests(settings_loader)

    print_connection_test_summary(results)
    return create_json_response(results)
