# -*- coding: utf-8 -*-
import logging

from .errors import ValidationError


def read_json_body(req):
    """요청 본문을 JSON 객체로 읽기"""
    try:
        body = req.get_json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")

    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _is_non_empty_string(value):
    return isinstance(value, str) and value.strip() != ""


def _is_identifier(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return _is_non_empty_string(value)


def process_generation_parameters(req):
    """문제 생성 요청 파라미터 처리 및 검증"""
    body = read_json_body(req)

    missing = [name for name in ("topic", "difficulty", "ukmla_domain") if not _is_non_empty_string(body.get(name))]
    if missing:
        raise ValidationError(
            "Required parameters missing",
            details={"missing": missing, "required": ["topic", "difficulty", "ukmla_domain"]}
        )

    count = body.get("count", 1)
    if count is None:
        count = 1
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValidationError("count must be a positive integer", details={"count": count})

    params = {
        "topic": body["topic"].strip(),
        "difficulty": body["difficulty"].strip(),
        "ukmla_domain": body["ukmla_domain"].strip(),
        "count": count,
    }
    logging.info(f"[파라미터] {params['topic']} ({params['difficulty']}, {params['ukmla_domain']}) x{count}")
    return params


def process_evaluation_parameters(req):
    """채점 요청 파라미터 처리 및 검증"""
    body = read_json_body(req)

    missing = [name for name in ("question_id", "session_id") if not _is_identifier(body.get(name))]
    if not isinstance(body.get("user_answer"), str):
        missing.append("user_answer")
    if missing:
        raise ValidationError(
            "Required parameters missing",
            details={"missing": missing, "required": ["question_id", "user_answer", "session_id"]}
        )

    return {
        "question_id": body["question_id"],
        "user_answer": body["user_answer"],
        "session_id": body["session_id"],
    }
