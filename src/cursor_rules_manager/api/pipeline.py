# src/cursor_rules_manager/api/pipeline.py
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.postmortem_types import (
    AnalyzeNotesRequest,
    PatternReport,
    Postmortem,
    PostmortemCreate,
    SanityCheckRequest,
    SanityReview,
)
from ..models.rule_types import RuleFile
from ..rules.rule_repository import list_rules
from ..storage import postmortem_repository
from .dependencies import AdvisorFactory

logger = logging.getLogger(__name__)

# sanity check 프롬프트에 넣는 최근 postmortem 수
RECENT_POSTMORTEMS = 10


def load_rules_context(project_path: Optional[str]) -> List[RuleFile]:
    """프로젝트가 지정되어 있고 존재하면 그 규칙들을 LLM 컨텍스트로 사용."""
    if not project_path:
        return []
    path = Path(project_path).expanduser()
    if not path.is_dir():
        logger.warning("Project %s does not exist, analyzing without rules", path)
        return []
    return list_rules(path)


def analyze_notes(req: AnalyzeNotesRequest, advisor_factory: AdvisorFactory) -> Dict[str, Any]:
    """
    비정형 메모 → 구조화된 postmortem 초안:
      1) 프로젝트 규칙 컨텍스트 로드
      2) LLM 분석
      3) save=True면 postmortem으로 저장 (status=analyzed)
    """
    rules = load_rules_context(req.project_path)
    project_name = Path(req.project_path).name if req.project_path else None

    analysis = advisor_factory().analyze_notes(req.notes, rules, project_name)

    saved: Optional[Postmortem] = None
    if req.save:
        saved = postmortem_repository.create_postmortem(
            PostmortemCreate(
                project_path=req.project_path,
                title=analysis.title or "Untitled postmortem",
                what_happened=analysis.what_happened,
                expected_behavior=analysis.expected_behavior,
                severity=analysis.severity,
                tags=analysis.tags,
                notes=req.notes,
            ),
            analysis=analysis,
        )

    return {"analysis": analysis, "postmortem": saved}


def analyze_stored_postmortem(postmortem_id: str, advisor_factory: AdvisorFactory) -> Postmortem:
    pm = postmortem_repository.get_postmortem(postmortem_id)
    rules = load_rules_context(pm.project_path)
    analysis = advisor_factory().analyze_postmortem(pm, rules)
    return postmortem_repository.save_analysis(pm.id, analysis)


def find_patterns(project_path: Optional[str], advisor_factory: AdvisorFactory) -> PatternReport:
    postmortems = postmortem_repository.list_postmortems(project_path)
    if not postmortems:
        logger.info("No postmortems to analyze for %s", project_path or "all projects")
        return PatternReport(reasoning="No postmortems recorded.")

    rules = load_rules_context(project_path)
    return advisor_factory().find_patterns(postmortems, rules)


def sanity_check(req: SanityCheckRequest, advisor_factory: AdvisorFactory) -> SanityReview:
    rules = load_rules_context(req.project_path)
    recent = (
        postmortem_repository.list_postmortems(req.project_path)[:RECENT_POSTMORTEMS]
        if req.project_path
        else []
    )
    return advisor_factory().sanity_check(req.content, rules, recent)
