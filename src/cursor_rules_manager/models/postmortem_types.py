"""
Postmortem 기록과 LLM 구조화 출력 모델.

LLM 응답 모델(RuleSuggestion, PostmortemAnalysis, PatternReport, SanityReview)은
instructor의 response_model로 그대로 전달되므로 Field description이 곧 프롬프트의 일부다.
"""
# src/cursor_rules_manager/models/postmortem_types.py
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .rule_types import CamelModel


class Severity(str, Enum):
    """실수의 심각도. str 상속으로 JSON 직렬화 시 값(문자열)이 그대로 출력된다."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PostmortemStatus(str, Enum):
    OPEN = "open"
    ANALYZED = "analyzed"


class SanityVerdict(str, Enum):
    OK = "ok"
    NEEDS_CHANGES = "needs_changes"


# ── LLM 구조화 출력 ─────────────────────────────────────────────────────────

class RuleSuggestion(CamelModel):
    """LLM이 제안하는 규칙 1개. /api/generate-rule 요청과 같은 모양."""

    name: str = Field(description="kebab-case rule file name without extension")
    description: str = Field(description="One-line description for the front-matter")
    globs: List[str] = Field(
        default_factory=list, description="File globs the rule applies to"
    )
    always_apply: bool = Field(
        default=False, description="True only for rules relevant to every task"
    )
    instructions: str = Field(description="Markdown body: short, imperative bullets")
    rationale: str = Field(default="", description="Which mistake this rule prevents")


class PostmortemAnalysis(CamelModel):
    title: str = Field(description="Short title of the incident")
    what_happened: str = Field(description="What the assistant actually did")
    expected_behavior: str = Field(default="", description="What it should have done")
    root_cause: str = Field(default="", description="Most likely reason for the mistake")
    severity: Severity = Field(default=Severity.MEDIUM)
    tags: List[str] = Field(default_factory=list)
    suggested_rules: List[RuleSuggestion] = Field(default_factory=list)
    reasoning: str = Field(default="", description="Chain of Thought 추론 과정")


class PatternOccurrence(CamelModel):
    pattern: str = Field(description="Recurring mistake, one sentence")
    occurrences: int = Field(default=1, ge=1)
    postmortem_ids: List[str] = Field(default_factory=list)


class PatternReport(CamelModel):
    patterns: List[PatternOccurrence] = Field(default_factory=list)
    suggested_rules: List[RuleSuggestion] = Field(default_factory=list)
    reasoning: str = Field(default="")


class SanityReview(CamelModel):
    verdict: SanityVerdict
    issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    revised_content: Optional[str] = Field(
        default=None, description="Full corrected rule file, only when changes are needed"
    )


# ── 저장 레코드 / 요청 ──────────────────────────────────────────────────────

class PostmortemCreate(CamelModel):
    project_path: Optional[str] = None
    title: str = Field(min_length=1)
    what_happened: str = ""
    expected_behavior: str = ""
    severity: Severity = Severity.MEDIUM
    tags: List[str] = Field(default_factory=list)
    notes: str = ""


class Postmortem(PostmortemCreate):
    id: str
    project_name: Optional[str] = None
    status: PostmortemStatus = PostmortemStatus.OPEN
    created_at: str
    analysis: Optional[PostmortemAnalysis] = None


class AnalyzeNotesRequest(CamelModel):
    notes: str = Field(min_length=1)
    project_path: Optional[str] = None
    save: bool = False


class PatternRequest(CamelModel):
    project_path: Optional[str] = None


class SanityCheckRequest(CamelModel):
    content: str = Field(min_length=1)
    project_path: Optional[str] = None
