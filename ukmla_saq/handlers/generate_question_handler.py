# -*- coding: utf-8 -*-
"""
Azure Functions UKMLA SAQ 문제 생성 API 핸들러
"""
import azure.functions as func
import logging
from ..core.config import get_settings
from ..core.errors import ConfigurationError
from ..core.responses import check_request_method, create_internal_error_response, create_service_error_response
from ..services.question_service import handle_question_generation


def handle_generate_question(req: func.HttpRequest, settings_loader=get_settings) -> func.HttpResponse:
    """UKMLA SAQ 문제 생성 API 핸들러 (POST, OPTIONS)"""
    early_response = check_request_method(req)
    if early_response:
        return early_response

    logging.info('generate-question API 호출됨')

    try:
        settings = settings_loader()
        return handle_question_generation(req, settings)

    except ConfigurationError as e:
        logging.error(f"generate-question 설정 오류: {e.message}")
        return create_service_error_response(e)
    except Exception as e:
        logging.exception(f"generate-question API 오류: {str(e)}")
        return create_internal_error_response(e)
