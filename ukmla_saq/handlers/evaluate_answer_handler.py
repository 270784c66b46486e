# -*- coding: utf-8 -*-
"""
Azure Functions UKMLA SAQ 답안 채점 API 핸들러
"""
import azure.functions as func
import logging
from ..core.config import get_settings
from ..core.errors import ConfigurationError
from ..core.responses import check_request_method, create_internal_error_response, create_service_error_response
from ..services.evaluation_service import handle_answer_evaluation


def handle_evaluate_answer(req: func.HttpRequest, settings_loader=get_settings) -> func.HttpResponse:
    """UKMLA SAQ 답안 채점 API 핸들러 (POST, OPTIONS)"""
    early_response = check_request_method(req)
    if early_response:
        return early_response

    logging.info('evaluate-answer API 호출됨')

    try:
        settings = settings_loader()
        return handle_answer_evaluation(req, settings)

    except ConfigurationError as e:
        logging.error(f"evaluate-answer 설정 오류: {e.message}")
        return create_service_error_response(e)
    except Exception as e:
        logging.exception(f"evaluate-answer API 오류: {str(e)}")
        return create_internal_error_response(e)
