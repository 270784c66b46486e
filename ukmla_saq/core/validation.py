import logging

from .errors import UpstreamAIError

EVALUATION_LIST_FIELDS = ("missing_points", "strengths", "improvements")


def _is_string_list(value):
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_question_format(question_data):
    """생성된 문제 하나의 형식 검증 -> 문제점 목록 (비어 있으면 통과)"""
    if not isinstance(question_data, dict):
        return ["question entry is not an object"]

    problems = []
    for field in ("question", "model_answer"):
        value = question_data.get(field)
        if not isinstance(value, str) or not value.strip():
            problems.append(f"{field} must be a non-empty string")

    criteria = question_data.get("marking_criteria")
    if not _is_string_list(criteria) or not criteria:
        problems.append("marking_criteria must be a non-empty list of strings")

    if not _is_string_list(question_data.get("keywords")):
        problems.append("keywords must be a list of strings")

    total_marks = question_data.get("total_marks")
    if not _is_number(total_marks) or total_marks <= 0 or int(total_marks) != total_marks:
        problems.append("total_marks must be a positive integer")

    return problems


def validate_question_set(data, expected_count):
    """AI가 돌려준 문제 배열 전체 검증. 하나라도 잘못되면 UpstreamAIError"""
    if not isinstance(data, list):
        raise UpstreamAIError("AI response is not a JSON array of questions")

    if len(data) != expected_count:
        raise UpstreamAIError(
            f"AI returned {len(data)} question(s), expected {expected_count}",
            details={"expected_count": expected_count, "received_count": len(data)}
        )

    invalid = {}
    for index, question_data in enumerate(data):
        problems = validate_question_format(question_data)
        if problems:
            invalid[index] = problems

    if invalid:
        logging.error(f"Question validation failed: {invalid}")
        raise UpstreamAIError(
            "AI returned malformed question(s)",
            details={"invalid_questions": {str(index): problems for index, problems in invalid.items()}}
        )

    return data


def validate_evaluation_format(evaluation):
    """채점 결과 형식 검증 -> 문제점 목록"""
    if not isinstance(evaluation, dict):
        return ["evaluation is not an object"]

    problems = []
    if not _is_number(evaluation.get("score")):
        problems.append("score must be a number")
    if not isinstance(evaluation.get("feedback"), str):
        problems.append("feedback must be a string")
    for field in EVALUATION_LIST_FIELDS:
        if field in evaluation and not _is_string_list(evaluation[field]):
            problems.append(f"{field} must be a list of strings")
    return problems


def normalize_evaluation(evaluation):
    """검증 후 채점 결과 정리 (누락된 목록 필드는 빈 목록)"""
    problems = validate_evaluation_format(evaluation)
    if problems:
        logging.error(f"Evaluation validation failed: {problems}")
        raise UpstreamAIError("AI returned a malformed evaluation", details={"invalid_evaluation": problems})

    normalized = dict(evaluation)
    for field in EVALUATION_LIST_FIELDS:
        normalized.setdefault(field, [])
    return normalized


def is_score_in_range(score, total_marks):
    if not _is_number(total_marks):
        return True
    return 0 <= score <= total_marks


def prepare_question_record(topic, difficulty, ukmla_domain, question_data):
    """questions 테이블용 레코드 준비"""
    return {
        "topic": topic,
        "difficulty": difficulty,
        "ukmla_domain": ukmla_domain,
        "question_text": question_data["question"],
        "model_answer": question_data["model_answer"],
        "marking_criteria": question_data["marking_criteria"],
        "keywords": question_data["keywords"],
        "total_marks": int(question_data["total_marks"]),
    }


def prepare_answer_record(session_id, question_id, user_answer, evaluation):
    """user_answers 테이블용 레코드 준비"""
    return {
        "session_id": session_id,
        "question_id": question_id,
        "user_answer": user_answer,
        "ai_feedback": evaluation,
        "score": evaluation["score"],
    }
