# -*- coding: utf-8 -*-
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

RETRY_STATUS_CODES = [429, 500, 502, 503, 504]


def create_retry_session(settings) -> requests.Session:
    """토큰 교환과 AI 호출용 세션 (횟수 제한 재시도, 지터가 들어간 지수 백오프)"""
    session = requests.Session()
    retry_strategy = Retry(
        total=settings.RETRY_TOTAL,
        backoff_factor=settings.RETRY_BACKOFF_FACTOR,
        backoff_jitter=settings.RETRY_BACKOFF_JITTER,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=["POST"],
        respect_retry_after_header=True,
        # 재시도 소진 시 예외 대신 마지막 응답을 돌려줌 (호출 측에서 실제 상태 코드 보고)
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session
