# -*- coding: utf-8 -*-
"""
AI 응답 텍스트에서 JSON 추출

모델은 JSON을 ```json ``` 코드 블록으로 감싸거나 앞뒤에 설명 문장을 붙이는 경우가 있음.
parse_ai_json은 예외를 던지지 않고 (data, error_message) 튜플을 돌려줌.
"""
import json
import re

FENCE_PATTERN = re.compile(r"```[ \t]*(?:json)?[ \t]*\r?\n?|\r?\n?```", re.IGNORECASE)
FENCED_BLOCK_PATTERN = re.compile(r"```[ \t]*(?:json)?[ \t]*\r?\n?(.*?)```", re.IGNORECASE | re.DOTALL)


def strip_code_fences(text):
    """```json / ``` 구분자 제거"""
    return FENCE_PATTERN.sub("", text).strip()


def _parse_fenced_blocks(text):
    """닫힌 코드 블록 안의 JSON을 순서대로 시도"""
    for match in FENCED_BLOCK_PATTERN.finditer(text):
        try:
            return json.loads(match.group(1).strip())
        except json.JSONDecodeError:
            continue
    return None


def _find_embedded_json(text):
    """설명 문장 사이에 끼어 있는 JSON 배열/객체 중 가장 긴 것 디코딩

    텍스트 끝까지 닫히지 않은 괄호를 만나면 중단함. 잘린 JSON 안쪽의 작은 배열이
    결과로 잘못 채택되지 않도록 하기 위함.
    """
    decoder = json.JSONDecoder()
    end_of_text = len(text.rstrip())
    best, best_length = None, 0
    position = 0

    for match in re.finditer(r"[\[{]", text):
        start = match.start()
        if start < position:
            continue
        try:
            data, end = decoder.raw_decode(text, start)
        except json.JSONDecodeError as e:
            if e.pos >= end_of_text:
                break
            continue
        if end - start > best_length:
            best, best_length = data, end - start
        position = end

    return best


def parse_ai_json(text):
    """AI 응답 텍스트 -> (파싱된 JSON, None) 또는 (None, 에러 메시지)"""
    if not text or not text.strip():
        return None, "AI response text is empty"

    fenced = _parse_fenced_blocks(text)
    if isinstance(fenced, (list, dict)):
        return fenced, None

    cleaned = strip_code_fences(text)

    try:
        return json.loads(cleaned), None
    except json.JSONDecodeError as e:
        first_error = e

    embedded = _find_embedded_json(cleaned)
    if isinstance(embedded, (list, dict)):
        return embedded, None

    return None, f"AI response is not valid JSON: {first_error.msg} (line {first_error.lineno}, column {first_error.colno})"
