# src/cursor_rules_manager/problem_details.py
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PROBLEM_BASE_URI = "https://cursor-rules-manager.local/problems"

# user_input: 잘못된 경로/파일명/요청 본문, system_bug: 서버 결함, dependency: Gemini 등 외부 API
ErrorClass = Literal["user_input", "system_bug", "dependency"]


class MachineReadableError(BaseModel):
    code: str = Field(
        ..., description="오류 코드 (예: 'RULE_NOT_FOUND', 'API_KEY_MISSING')"
    )
    target: Optional[str] = Field(
        None,
        description="문제가 된 요청 요소 (예: 'projectPath', 'filename', 'apiKey', Gemini 모델명)",
    )
    detail: Optional[str] = Field(None, description="사용자에게 보여줄 설명")
    meta: Optional[dict] = Field(
        default_factory=dict,
        description="부가 정보 (errorClass, exceptionType, 시도한 모델 목록 등)",
    )


class ProblemDetails(BaseModel):
    """
    RFC 7807 스타일 에러 응답.
    type은 PROBLEM_BASE_URI/<slug> (예: .../invalid-rule-filename, .../llm-service-error).
    """

    type: str = Field("about:blank", description="문제 유형 URI")
    title: str = Field(..., description="유형별 고정 제목 (예: 'Rule file not found')")
    status: int = Field(..., description="HTTP 상태 코드 (400/404/409/500/502)")
    detail: Optional[str] = Field(None, description="이번 요청에 대한 구체적 설명")
    instance: Optional[str] = Field(
        None, description="문제가 발생한 요청 경로 (예: '/api/sanity-check')"
    )

    errors: List[MachineReadableError] = Field(default_factory=list)

    trace_id: Optional[str] = Field(None, description="요청 trace_id (X-Trace-Id 헤더와 동일)")
    span_id: Optional[str] = Field(None, description="에러 생성 시점의 span ID")

    error_class: Optional[ErrorClass] = Field(
        default=None,
        description="원인 분류: 요청 오류 / 서버 결함 / 외부 LLM API",
    )
