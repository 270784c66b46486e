# -*- coding: utf-8 -*-
"""
SAQ 서비스 에러 종류 (핸들러 경계에서 HTTP 응답으로 변환)
"""
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UPSTREAM_STORE = "upstream_store"
    UPSTREAM_AI = "upstream_ai"
    UPSTREAM_AUTH = "upstream_auth"


class SAQServiceError(Exception):
    """에러 종류, HTTP 상태 코드, 응답 부가 정보를 가진 기본 에러"""

    kind = None
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(SAQServiceError):
    kind = ErrorKind.VALIDATION
    status_code = 400


class ConfigurationError(SAQServiceError):
    kind = ErrorKind.CONFIGURATION


class UpstreamStoreError(SAQServiceError):
    kind = ErrorKind.UPSTREAM_STORE


class UpstreamAIError(SAQServiceError):
    kind = ErrorKind.UPSTREAM_AI


class UpstreamAuthError(SAQServiceError):
    kind = ErrorKind.UPSTREAM_AUTH
