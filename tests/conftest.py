# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from cursor_rules_manager.api.dependencies import get_advisor_factory
from cursor_rules_manager.api.main import app
from cursor_rules_manager.models.postmortem_types import (
    PatternOccurrence,
    PatternReport,
    PostmortemAnalysis,
    RuleSuggestion,
    SanityReview,
    SanityVerdict,
    Severity,
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """모든 테스트는 tmp_path 아래의 설정 디렉토리를 사용하고 환경 키는 비운다."""
    home = tmp_path / "crm-home"
    monkeypatch.setenv("CRM_HOME", str(home))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    return home


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class FakeAdvisor:
    """RuleAdvisor 대역. 호출 인자를 기록하고 고정 응답을 돌려준다."""

    def __init__(self):
        self.calls = []

    def analyze_notes(self, notes, rules=(), project_name=None):
        self.calls.append(("analyze_notes", notes, [r.filename for r in rules], project_name))
        return PostmortemAnalysis(
            title="Ignored API client",
            what_happened="Called fetch directly.",
            expected_behavior="Use src/api/client.ts.",
            root_cause="No rule about the API client.",
            severity=Severity.HIGH,
            tags=["api"],
            suggested_rules=[
                RuleSuggestion(
                    name="use-api-client",
                    description="Use the shared API client",
                    globs=["src/**/*.ts"],
                    instructions="- Never call fetch directly.",
                )
            ],
        )

    def analyze_postmortem(self, pm, rules=()):
        self.calls.append(("analyze_postmortem", pm.id, [r.filename for r in rules]))
        return PostmortemAnalysis(
            title=pm.title,
            what_happened=pm.what_happened,
            root_cause="Missing rule.",
        )

    def find_patterns(self, postmortems, rules=()):
        self.calls.append(("find_patterns", [pm.id for pm in postmortems]))
        return PatternReport(
            patterns=[
                PatternOccurrence(
                    pattern="Skips tests",
                    occurrences=len(postmortems),
                    postmortem_ids=[pm.id for pm in postmortems],
                )
            ]
        )

    def sanity_check(self, content, other_rules=(), postmortems=()):
        self.calls.append(
            ("sanity_check", content, [r.filename for r in other_rules], len(postmortems))
        )
        return SanityReview(verdict=SanityVerdict.NEEDS_CHANGES, issues=["Vague wording"])


@pytest.fixture
def fake_advisor():
    advisor = FakeAdvisor()
    app.dependency_overrides[get_advisor_factory] = lambda: (lambda: advisor)
    yield advisor
    app.dependency_overrides.clear()
