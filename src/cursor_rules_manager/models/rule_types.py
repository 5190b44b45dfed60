"""
규칙 파일 / 프로젝트 관련 API 모델.

JSON 필드는 camelCase (프런트엔드 호환), 파이썬 속성은 snake_case로 둔다.
populate_by_name=True 이므로 두 이름 모두 입력으로 허용된다.
"""
# src/cursor_rules_manager/models/rule_types.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase alias를 쓰는 공통 베이스."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GlobalRulesPayload(CamelModel):
    content: str


class ScanPathsPayload(CamelModel):
    scan_paths: List[str] = Field(default_factory=list)


class ProjectInfo(CamelModel):
    name: str
    path: str
    has_cursor_rules: bool = False
    encoded_path: str


class RuleFile(CamelModel):
    filename: str
    frontmatter: Dict[str, Any] = Field(default_factory=dict)
    content: str
    raw: str


class RuleFilePayload(CamelModel):
    filename: str
    content: str


class GenerateRuleRequest(CamelModel):
    """MDC 규칙 생성 요청. 모든 필드는 선택 사항."""

    name: Optional[str] = None
    description: Optional[str] = None
    globs: List[str] = Field(default_factory=list)
    always_apply: bool = False
    must_read_files: List[str] = Field(default_factory=list)
    instructions: Optional[str] = None
    sanity_check: bool = False

    @field_validator("globs", "must_read_files", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value


class GeneratedRule(CamelModel):
    content: str
    filename: str


class ApiKeyPayload(CamelModel):
    api_key: str

    @field_validator("api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("apiKey must not be blank")
        return value


class ApiKeyStatus(CamelModel):
    configured: bool
    source: Optional[str] = None
    masked_key: Optional[str] = None
