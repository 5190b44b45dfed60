"""도메인 예외. 각 예외는 응답으로 그대로 나갈 ProblemDetails를 들고 다닌다."""
# src/cursor_rules_manager/errors.py
from typing import Any, Dict, Optional

from .problem_details import (
    PROBLEM_BASE_URI,
    ErrorClass,
    MachineReadableError,
    ProblemDetails,
)
from .tracing import get_span_id, get_trace_id


class ProblemException(Exception):
    """ProblemDetails를 감싼 예외. API 전역 핸들러가 JSON으로 변환한다."""

    status: int = 500
    slug: str = "internal-error"
    title: str = "Unexpected error"
    code: str = "UNHANDLED_EXCEPTION"
    error_class: ErrorClass = "system_bug"

    def __init__(
        self,
        detail: str,
        *,
        target: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(detail)
        self.problem = ProblemDetails(
            type=f"{PROBLEM_BASE_URI}/{self.slug}",
            title=self.title,
            status=self.status,
            detail=detail,
            errors=[
                MachineReadableError(
                    code=self.code,
                    target=target,
                    detail=detail,
                    meta={**(meta or {}), "errorClass": self.error_class},
                )
            ],
            trace_id=get_trace_id(),
            span_id=get_span_id(),
            error_class=self.error_class,
        )


class InvalidProjectPath(ProblemException):
    status = 400
    slug = "invalid-project-path"
    title = "Project path could not be decoded"
    code = "INVALID_PROJECT_PATH"
    error_class = "user_input"


class InvalidRuleFilename(ProblemException):
    status = 400
    slug = "invalid-rule-filename"
    title = "Rule filename is not allowed"
    code = "INVALID_RULE_FILENAME"
    error_class = "user_input"


class RuleNotFound(ProblemException):
    status = 404
    slug = "rule-not-found"
    title = "Rule file not found"
    code = "RULE_NOT_FOUND"
    error_class = "user_input"


class PostmortemNotFound(ProblemException):
    status = 404
    slug = "postmortem-not-found"
    title = "Postmortem not found"
    code = "POSTMORTEM_NOT_FOUND"
    error_class = "user_input"


class ApiKeyMissing(ProblemException):
    status = 409
    slug = "api-key-missing"
    title = "No LLM API key configured"
    code = "API_KEY_MISSING"
    error_class = "user_input"


class LLMServiceError(ProblemException):
    status = 502
    slug = "llm-service-error"
    title = "LLM request failed"
    code = "LLM_REQUEST_FAILED"
    error_class = "dependency"
