import json

import azure.functions as func

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_error_response(error_message, **extra_data):
    """에러 응답 본문 생성 (딕셔너리 반환)"""
    response_data = {"error": error_message}
    response_data.update(extra_data)
    return response_data


def create_success_response(**data):
    """성공 응답 본문 생성 (딕셔너리 반환)"""
    return {"success": True, **data}


def create_json_response(response_data, status_code=200):
    """CORS 헤더가 포함된 JSON HttpResponse 생성"""
    return func.HttpResponse(
        json.dumps(response_data, ensure_ascii=False, default=str),
        status_code=status_code,
        headers={**CORS_HEADERS, "Content-Type": "application/json; charset=utf-8"}
    )


def create_preflight_response():
    """CORS preflight(OPTIONS) 응답: 빈 본문"""
    return func.HttpResponse(status_code=200, headers=dict(CORS_HEADERS))


def create_method_not_allowed_response():
    return create_json_response(create_error_response("Method not allowed"), status_code=405)


def create_service_error_response(error):
    """SAQServiceError를 종류별 상태 코드와 본문으로 변환"""
    response_data = create_error_response(
        error.message,
        error_kind=error.kind.value,
        **error.details
    )
    return create_json_response(response_data, status_code=error.status_code)


def create_internal_error_response(error):
    """예상하지 못한 예외에 대한 마지막 500 응답"""
    return create_json_response(
        create_error_response(f"Internal server error: {str(error)}"),
        status_code=500
    )


def check_request_method(req):
    """OPTIONS/POST 이외 요청 처리. 즉시 반환할 응답이 있으면 돌려주고, POST면 None"""
    method = (req.method or "").upper()
    if method == "OPTIONS":
        return create_preflight_response()
    if method != "POST":
        return create_method_not_allowed_response()
    return None
