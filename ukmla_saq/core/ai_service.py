import logging

import requests

from .errors import UpstreamAIError
from .http_client import create_retry_session


def build_generate_content_url(settings):
    """Vertex AI generateContent 엔드포인트 URL"""
    location = settings.VERTEX_LOCATION
    return (
        f"https://{location}-aiplatform.googleapis.com/v1/projects/{settings.GOOGLE_CLOUD_PROJECT_ID}"
        f"/locations/{location}/publishers/google/models/{settings.VERTEX_MODEL}:generateContent"
    )


def create_question_prompt(topic, difficulty, ukmla_domain, count=1):
    """문제 생성용 프롬프트 작성"""
    return f"""Generate {count} UKMLA SAQ question(s) for:
Topic: {topic}
Difficulty: {difficulty}
UKMLA Domain: {ukmla_domain}

Requirements:
- Clinical scenario-based question
- 3-5 mark question structure
- Clear marking criteria with specific points
- Realistic patient presentation
- UK medical practice context

Return a JSON array with exactly {count} element(s) in this format:
[{{
  "question": "Clinical scenario and question text",
  "model_answer": "Comprehensive model answer",
  "marking_criteria": ["1 mark: specific point", "1 mark: another point"],
  "keywords": ["keyword1", "keyword2"],
  "total_marks": 5
}}]"""


def create_evaluation_prompt(question, user_answer):
    """채점용 프롬프트 작성 (저장된 문제 + 학생 답안)"""
    marking_criteria = ", ".join(question.get("marking_criteria") or [])
    return f"""Evaluate this UKMLA SAQ answer:

Question: {question.get('question_text')}
Model Answer: {question.get('model_answer')}
Student Answer: {user_answer}
Marking Criteria: {marking_criteria}
Total Marks: {question.get('total_marks')}

The score must be a number between 0 and the total marks.
Provide detailed feedback in JSON format:
{{
  "score": 3,
  "feedback": "Detailed feedback on what was correct/incorrect",
  "missing_points": ["What key points were missed"],
  "strengths": ["What the student did well"],
  "improvements": ["Specific suggestions for improvement"]
}}"""


def extract_candidate_text(ai_result):
    """응답의 candidates[0].content.parts[0].text 추출 (없으면 None)"""
    try:
        return ai_result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


def _post_prompt(settings, session, access_token, prompt):
    payload = {
        "contents": [{
            "role": "user",
            "parts": [{"text": prompt}]
        }]
    }

    try:
        return session.post(
            build_generate_content_url(settings),
            json=payload,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        raise UpstreamAIError(f"AI request failed: {str(e)}") from e


def generate_content(settings, access_token, prompt, session=None):
    """단일 user 메시지로 Vertex AI 호출 후 생성 텍스트 반환"""
    if session is None:
        with create_retry_session(settings) as session:
            response = _post_prompt(settings, session, access_token, prompt)
    else:
        response = _post_prompt(settings, session, access_token, prompt)

    if not response.ok:
        logging.error(f"AI endpoint returned {response.status_code}: {response.text[:500]}")
        raise UpstreamAIError(
            f"AI endpoint returned status {response.status_code}",
            details={"upstream_status": response.status_code}
        )

    try:
        ai_result = response.json()
    except ValueError as e:
        raise UpstreamAIError("AI endpoint returned a non-JSON body") from e

    generated_text = extract_candidate_text(ai_result)
    if not generated_text or not str(generated_text).strip():
        raise UpstreamAIError("No content generated from AI")

    return generated_text


def test_ai_connection(settings, access_token):
    """AI 연결 테스트"""
    try:
        generate_content(settings, access_token, "Reply with the single word: ok")
        return True, "AI connection successful"
    except UpstreamAIError as e:
        return False, e.message
