# -*- coding: utf-8 -*-
"""
UKMLA SAQ 문제 생성 서비스

토큰 발급 -> 프롬프트 작성 -> Vertex AI 호출 -> JSON 파싱/검증 -> questions 테이블 일괄 저장
"""
import logging

from ..core.ai_service import create_question_prompt, generate_content
from ..core.database import get_store_client, insert_questions
from ..core.debug import print_question_result
from ..core.errors import SAQServiceError, UpstreamAIError
from ..core.params import process_generation_parameters
from ..core.parsing import parse_ai_json
from ..core.responses import create_json_response, create_service_error_response, create_success_response
from ..core.token_service import get_access_token
from ..core.validation import prepare_question_record, validate_question_set


def generate_questions(settings, params):
    """문제 생성 파이프라인. 저장된 행 목록 반환, 실패 시 SAQServiceError"""
    client = get_store_client(settings)
    access_token = get_access_token(settings)

    prompt = create_question_prompt(params['topic'], params['difficulty'], params['ukmla_domain'], params['count'])
    generated_text = generate_content(settings, access_token, prompt)

    question_set, parse_error = parse_ai_json(generated_text)
    if parse_error:
        logging.error(f"Raw AI response: {generated_text[:500]}...")
        raise UpstreamAIError(parse_error)

    validate_question_set(question_set, params['count'])

    question_records = [
        prepare_question_record(params['topic'], params['difficulty'], params['ukmla_domain'], question_data)
        for question_data in question_set
    ]
    saved_questions = insert_questions(client, question_records)

    for i, question_record in enumerate(saved_questions, 1):
        print_question_result(question_record, i, len(saved_questions))

    return saved_questions


def handle_question_generation(req, settings):
    """문제 생성 요청 처리"""
    logging.info('Question generation API called')

    try:
        params = process_generation_parameters(req)
        saved_questions = generate_questions(settings, params)
        return create_json_response(create_success_response(questions=saved_questions))

    except SAQServiceError as e:
        logging.error(f"Error in generate_question [{e.kind.value}]: {e.message}")
        return create_service_error_response(e)
