# -*- coding: utf-8 -*-
def print_question_result(question_record, question_number, total):
    """저장된 문제 결과 출력"""
    print("=" * 50)
    print(f"[문제 #{question_number}/{total}] 생성 완료 (id: {question_record.get('id')})")
    print("=" * 50)
    print(f"내용: {str(question_record.get('question_text', ''))[:50]}...")
    print(f"배점: {question_record.get('total_marks')} | 채점 기준: {len(question_record.get('marking_criteria') or [])}개")
    print(f"주제: {question_record.get('topic')} ({question_record.get('difficulty')}) - {question_record.get('ukmla_domain')}")
    print("=" * 50)


def print_evaluation_result(answer_record, total_marks):
    """채점 결과 출력"""
    feedback = answer_record.get("ai_feedback") or {}
    print("=" * 50)
    print(f"[채점 완료] question: {answer_record.get('question_id')} | session: {answer_record.get('session_id')}")
    print(f"점수: {answer_record.get('score')}/{total_marks}")
    print(f"누락 항목: {len(feedback.get('missing_points') or [])}개 | 강점: {len(feedback.get('strengths') or [])}개")
    print("=" * 50)


def print_connection_test_header():
    """연결 테스트 헤더 출력"""
    print("=" * 50)
    print("[연결 테스트] 시작")
    print("=" * 50)


def print_connection_test_summary(results):
    """연결 테스트 요약 출력"""
    print("\n" + "=" * 50)
    print("[테스트 요약]")
    print("=" * 50)
    print(f"Configuration: {results['config_status']}")
    print(f"Vertex token:  {results['auth_status']}")
    print(f"Vertex AI:     {results['ai_status']}")
    print(f"Supabase:      {results['store_status']}")
    print("=" * 50)
