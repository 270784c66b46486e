import logging

import httpx
from postgrest.exceptions import APIError
from supabase import create_client

from .errors import ConfigurationError, UpstreamStoreError

QUESTIONS_TABLE = "questions"
USER_ANSWERS_TABLE = "user_answers"


def get_store_client(settings):
    """Supabase 클라이언트 생성 (service-role 키, 호출마다 새로 생성)"""
    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        # create_client는 요청 전에 잘못된 URL/키를 거부함
        raise ConfigurationError(f"Invalid store configuration: {str(e)}") from e


def _execute(query, action):
    try:
        return query.execute()
    except APIError as e:
        logging.error(f"Store error while {action}: {e.message}")
        raise UpstreamStoreError(
            f"Store error while {action}: {e.message}",
            details={"store_code": e.code}
        ) from e
    except httpx.HTTPError as e:
        logging.error(f"Store request failed while {action}: {str(e)}")
        raise UpstreamStoreError(f"Store request failed while {action}: {str(e)}") from e


def fetch_question(client, question_id):
    """id로 문제 한 개 조회. 없으면 UpstreamStoreError"""
    response = _execute(
        client.table(QUESTIONS_TABLE).select("*").eq("id", question_id).limit(1),
        f"fetching question {question_id}"
    )
    if not response.data:
        raise UpstreamStoreError(f"Question not found: {question_id}", details={"question_id": question_id})
    return response.data[0]


def insert_questions(client, question_records):
    """문제 일괄 저장 후 저장된 행(id 포함) 반환"""
    response = _execute(
        client.table(QUESTIONS_TABLE).insert(question_records),
        "inserting questions"
    )
    if len(response.data or []) != len(question_records):
        raise UpstreamStoreError(
            f"Store returned {len(response.data or [])} row(s) for {len(question_records)} inserted question(s)"
        )
    logging.info(f"Successfully saved {len(response.data)} question(s) to store")
    return response.data


def insert_answer_record(client, answer_record):
    """채점 결과 저장 후 저장된 행 반환"""
    response = _execute(
        client.table(USER_ANSWERS_TABLE).insert(answer_record),
        "inserting answer record"
    )
    if not response.data:
        raise UpstreamStoreError("Store returned no row for the inserted answer record")
    logging.info(f"Successfully saved answer record for question {answer_record['question_id']}")
    return response.data[0]


def test_store_connection(client):
    """스토어 연결 테스트 (읽기만 수행)"""
    try:
        _execute(client.table(QUESTIONS_TABLE).select("id").limit(1), "testing connection")
        return True, "Store connection successful"
    except UpstreamStoreError as e:
        return False, e.message
