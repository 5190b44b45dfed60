# src/cursor_rules_manager/llm/rule_advisor.py
import logging
import os
from typing import List, Optional, Sequence, Type, TypeVar

import google.generativeai as genai
import instructor
from pydantic import BaseModel

from ..errors import LLMServiceError
from ..models.postmortem_types import (
    PatternReport,
    Postmortem,
    PostmortemAnalysis,
    SanityReview,
)
from ..models.rule_types import RuleFile
from . import prompts

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

# 429 에러 발생 시 순차적으로 다음 모델을 시도함
PREFERRED_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash",
    "gemini-1.5-flash",
]


def _is_quota_error(exc: Exception) -> bool:
    text = str(exc)
    return "429" in text or "Quota exceeded" in text or "ResourceExhausted" in text


class RuleAdvisor:
    """
    LLM 기반 규칙 조언기 (instructor + Gemini 구조화 출력).

    - 비정형 메모 → PostmortemAnalysis
    - 저장된 postmortem 분석 / 반복 패턴 분석
    - 규칙 파일 sanity check
    """

    def __init__(self, api_key: str):
        genai.configure(api_key=api_key)

        # 사용 가능한 모델 후보군 (Fallback을 위해 리스트로 관리)
        self.model_candidates = self._get_model_candidates()
        self.current_model_idx = 0
        self.model_name = self.model_candidates[0]

        logger.info("Initializing Gemini with model: %s", self.model_name)
        self._init_client()

    def _init_client(self):
        self.client = instructor.from_gemini(
            client=genai.GenerativeModel(model_name=self.model_name),
            mode=instructor.Mode.GEMINI_JSON,
        )

    def _get_model_candidates(self) -> List[str]:
        """환경변수 모델 최우선, 그 다음 선호 순서. API 키로 볼 수 있는 모델만 남긴다."""
        candidates: List[str] = []
        target_model = os.getenv("GEMINI_MODEL")
        if target_model:
            candidates.append(target_model)

        try:
            available = {m.name.replace("models/", "") for m in genai.list_models()}
            logger.debug("Available Gemini models: %s", sorted(available))
            for pref in PREFERRED_MODELS:
                if pref in available and pref not in candidates:
                    candidates.append(pref)
        except Exception as e:  # pylint: disable=broad-exception-caught
            # 목록 조회 실패 시 기본 리스트 사용
            logger.warning("Failed to list Gemini models: %s", e)
            for pref in PREFERRED_MODELS:
                if pref not in candidates:
                    candidates.append(pref)

        if not candidates:
            candidates = list(PREFERRED_MODELS)
        return candidates

    def _complete(self, prompt: str, response_model: Type[ResponseT]) -> ResponseT:
        # 모델 Fallback 루프
        while True:
            try:
                return self.client.chat.completions.create(
                    messages=[{"role": "user", "content": prompt}],
                    response_model=response_model,
                    max_retries=2,
                )
            except Exception as e:  # pylint: disable=broad-exception-caught
                if _is_quota_error(e):
                    logger.warning("Quota exceeded for model %s.", self.model_name)
                    self.current_model_idx += 1
                    if self.current_model_idx < len(self.model_candidates):
                        self.model_name = self.model_candidates[self.current_model_idx]
                        logger.info("Switching to fallback model: %s", self.model_name)
                        self._init_client()
                        continue
                    logger.error("All fallback models exhausted.")
                    raise LLMServiceError(
                        "All Gemini models are over quota",
                        target=self.model_name,
                        meta={"models": self.model_candidates},
                    ) from e

                logger.error("LLM request failed: %s", e, exc_info=True)
                raise LLMServiceError(
                    str(e),
                    target=self.model_name,
                    meta={"exceptionType": type(e).__name__},
                ) from e

    def analyze_notes(
        self,
        notes: str,
        rules: Sequence[RuleFile] = (),
        project_name: Optional[str] = None,
    ) -> PostmortemAnalysis:
        logger.info("Analyzing postmortem notes (len=%d)", len(notes))
        result = self._complete(
            prompts.build_notes_prompt(notes, rules, project_name), PostmortemAnalysis
        )
        logger.debug("CoT reasoning: %s", result.reasoning)
        return result

    def analyze_postmortem(
        self, pm: Postmortem, rules: Sequence[RuleFile] = ()
    ) -> PostmortemAnalysis:
        logger.info("Analyzing postmortem %s", pm.id)
        return self._complete(prompts.build_postmortem_prompt(pm, rules), PostmortemAnalysis)

    def find_patterns(
        self, postmortems: Sequence[Postmortem], rules: Sequence[RuleFile] = ()
    ) -> PatternReport:
        logger.info("Looking for patterns across %d postmortems", len(postmortems))
        return self._complete(prompts.build_pattern_prompt(postmortems, rules), PatternReport)

    def sanity_check(
        self,
        content: str,
        other_rules: Sequence[RuleFile] = (),
        postmortems: Sequence[Postmortem] = (),
    ) -> SanityReview:
        logger.info("Running sanity check on rule (len=%d)", len(content))
        return self._complete(
            prompts.build_sanity_check_prompt(content, other_rules, postmortems),
            SanityReview,
        )
