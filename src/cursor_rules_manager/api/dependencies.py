"""FastAPI 의존성 (경로 디코딩, LLM 조언기 생성)."""
# src/cursor_rules_manager/api/dependencies.py
from pathlib import Path
from typing import Callable

from ..errors import ApiKeyMissing
from ..llm.rule_advisor import RuleAdvisor
from ..scanning.project_paths import decode_project_path
from ..storage.secret_store import resolve_api_key

AdvisorFactory = Callable[[], RuleAdvisor]


def project_path_param(project_path: str) -> Path:
    """URL의 base64 project_path 세그먼트 → 실제 경로."""
    return decode_project_path(project_path)


def build_rule_advisor() -> RuleAdvisor:
    api_key, _source = resolve_api_key()
    if not api_key:
        raise ApiKeyMissing(
            "Store a Gemini API key via POST /api/settings/api-key "
            "or set GEMINI_API_KEY",
            target="apiKey",
        )
    return RuleAdvisor(api_key=api_key)


def get_advisor_factory() -> AdvisorFactory:
    """
    LLM 호출이 필요할 때만 조언기를 만들도록 팩토리를 주입한다.
    (postmortem이 없으면 키 없이도 패턴 분석이 빈 결과를 돌려줄 수 있어야 함)
    """
    return build_rule_advisor
