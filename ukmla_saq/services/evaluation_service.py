# -*- coding: utf-8 -*-
"""
UKMLA SAQ 답안 채점 서비스

문제 조회 -> 토큰 발급 -> 채점 프롬프트 -> Vertex AI 호출 -> JSON 파싱/검증 -> user_answers 저장
"""
import logging

from ..core.ai_service import create_evaluation_prompt, generate_content
from ..core.database import fetch_question, get_store_client, insert_answer_record
from ..core.debug import print_evaluation_result
from ..core.errors import SAQServiceError, UpstreamAIError
from ..core.params import process_evaluation_parameters
from ..core.parsing import parse_ai_json
from ..core.responses import create_json_response, create_service_error_response, create_success_response
from ..core.token_service import get_access_token
from ..core.validation import is_score_in_range, normalize_evaluation, prepare_answer_record


def evaluate_answer(settings, params):
    """채점 파이프라인. (evaluation, answer_record) 반환, 실패 시 SAQServiceError"""
    client = get_store_client(settings)

    # 문제가 없으면 AI 호출 전에 실패
    question = fetch_question(client, params['question_id'])

    access_token = get_access_token(settings)
    prompt = create_evaluation_prompt(question, params['user_answer'])
    evaluation_text = generate_content(settings, access_token, prompt)

    evaluation, parse_error = parse_ai_json(evaluation_text)
    if parse_error:
        logging.error(f"Raw AI response: {evaluation_text[:500]}...")
        raise UpstreamAIError(parse_error)

    evaluation = normalize_evaluation(evaluation)

    # 점수는 보정하지 않고 그대로 저장, 범위 밖이면 표시만 함
    score_in_range = is_score_in_range(evaluation['score'], question.get('total_marks'))
    if not score_in_range:
        logging.warning(
            f"AI score {evaluation['score']} outside [0, {question.get('total_marks')}] "
            f"for question {params['question_id']}"
        )

    answer_record = insert_answer_record(client, prepare_answer_record(
        params['session_id'], params['question_id'], params['user_answer'], evaluation
    ))
    print_evaluation_result(answer_record, question.get('total_marks'))

    if not score_in_range:
        evaluation = {**evaluation, "score_out_of_range": True}
    return evaluation, answer_record


def handle_answer_evaluation(req, settings):
    """채점 요청 처리"""
    logging.info('Answer evaluation API called')

    try:
        params = process_evaluation_parameters(req)
        evaluation, answer_record = evaluate_answer(settings, params)
        return create_json_response(create_success_response(evaluation=evaluation, answer_record=answer_record))

    except SAQServiceError as e:
        logging.error(f"Error in evaluate_answer [{e.kind.value}]: {e.message}")
        return create_service_error_response(e)
