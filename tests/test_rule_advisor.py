# tests/test_rule_advisor.py
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from cursor_rules_manager.errors import LLMServiceError
from cursor_rules_manager.llm import prompts
from cursor_rules_manager.llm.rule_advisor import RuleAdvisor
from cursor_rules_manager.models.postmortem_types import (
    Postmortem,
    PostmortemAnalysis,
    SanityReview,
)
from cursor_rules_manager.models.rule_types import RuleFile


def _models(*names):
    return [SimpleNamespace(name=f"models/{n}") for n in names]


@pytest.fixture
def mocked_llm():
    """genai / instructor 모듈을 통째로 mock."""
    with patch("cursor_rules_manager.llm.rule_advisor.genai") as mock_genai, patch(
        "cursor_rules_manager.llm.rule_advisor.instructor"
    ) as mock_instructor:
        mock_genai.list_models.return_value = _models("gemini-2.0-flash", "gemini-2.5-flash")
        yield mock_genai, mock_instructor


def _create(mock_instructor):
    return mock_instructor.from_gemini.return_value.chat.completions.create


class TestModelCandidates:
    def test_preference_order_filtered_by_availability(self, mocked_llm):
        advisor = RuleAdvisor(api_key="k")
        assert advisor.model_candidates == ["gemini-2.5-flash", "gemini-2.0-flash"]
        assert advisor.model_name == "gemini-2.5-flash"
        mocked_llm[0].configure.assert_called_once_with(api_key="k")

    def test_env_model_first(self, mocked_llm, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-exp")
        advisor = RuleAdvisor(api_key="k")
        assert advisor.model_candidates[0] == "gemini-exp"

    def test_list_models_failure_uses_defaults(self, mocked_llm):
        mocked_llm[0].list_models.side_effect = RuntimeError("network down")
        advisor = RuleAdvisor(api_key="k")
        assert advisor.model_name == "gemini-2.5-flash"
        assert len(advisor.model_candidates) > 2


class TestCompletion:
    def test_returns_structured_result(self, mocked_llm):
        expected = PostmortemAnalysis(title="t", what_happened="w")
        _create(mocked_llm[1]).return_value = expected

        result = RuleAdvisor(api_key="k").analyze_notes("notes")

        assert result is expected
        kwargs = _create(mocked_llm[1]).call_args.kwargs
        assert kwargs["response_model"] is PostmortemAnalysis
        assert "notes" in kwargs["messages"][0]["content"]

    def test_quota_error_switches_model(self, mocked_llm):
        review = SanityReview(verdict="ok")
        _create(mocked_llm[1]).side_effect = [Exception("429 Quota exceeded"), review]

        advisor = RuleAdvisor(api_key="k")
        assert advisor.sanity_check("rule") is review
        assert advisor.model_name == "gemini-2.0-flash"

    def test_all_models_exhausted(self, mocked_llm):
        _create(mocked_llm[1]).side_effect = Exception("ResourceExhausted")
        with pytest.raises(LLMServiceError) as exc_info:
            RuleAdvisor(api_key="k").sanity_check("rule")
        assert exc_info.value.problem.status == 502

    def test_other_error_is_dependency_problem(self, mocked_llm):
        _create(mocked_llm[1]).side_effect = ValueError("bad json")
        with pytest.raises(LLMServiceError) as exc_info:
            RuleAdvisor(api_key="k").analyze_notes("notes")
        problem = exc_info.value.problem
        assert problem.error_class == "dependency"
        assert problem.errors[0].meta["exceptionType"] == "ValueError"


class TestPrompts:
    def test_rules_context_truncates_long_files(self):
        rule = RuleFile(filename="big.mdc", content="", raw="x" * (prompts.MAX_RULE_CHARS + 10))
        text = prompts.format_rules_context([rule])
        assert text.startswith("### big.mdc\n")
        assert text.endswith("[...truncated]")

    def test_sanity_prompt_includes_rule_and_postmortems(self):
        pm = Postmortem(id="a" * 32, title="Skipped tests", created_at="2026-01-01T00:00:00+00:00")
        text = prompts.build_sanity_check_prompt("Always run pytest.", [], [pm])
        assert "Always run pytest." in text
        assert "Skipped tests" in text
        assert "(no existing rules)" in text
