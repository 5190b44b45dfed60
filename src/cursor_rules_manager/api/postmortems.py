"""Postmortem 기록 / LLM 분석 / sanity check 엔드포인트."""
# src/cursor_rules_manager/api/postmortems.py
from typing import Optional

from fastapi import APIRouter, Depends

from ..models.postmortem_types import (
    AnalyzeNotesRequest,
    PatternRequest,
    PostmortemCreate,
    SanityCheckRequest,
)
from ..scanning.project_paths import decode_project_path
from ..storage import postmortem_repository
from . import pipeline
from .dependencies import AdvisorFactory, get_advisor_factory

router = APIRouter(prefix="/api", tags=["postmortems"])


def _dump(model):
    return model.model_dump(mode="json", by_alias=True) if model is not None else None


@router.get("/postmortems")
def list_postmortems(project: Optional[str] = None):
    """project: base64 인코딩된 프로젝트 경로 (선택)."""
    project_path = str(decode_project_path(project)) if project else None
    records = postmortem_repository.list_postmortems(project_path)
    return {"postmortems": [_dump(pm) for pm in records]}


@router.post("/postmortems")
def create_postmortem(payload: PostmortemCreate):
    return {"postmortem": _dump(postmortem_repository.create_postmortem(payload))}


@router.post("/postmortems/analyze")
def analyze_notes(
    req: AnalyzeNotesRequest,
    advisor_factory: AdvisorFactory = Depends(get_advisor_factory),
):
    """비정형 메모를 구조화된 postmortem + 규칙 제안으로 변환."""
    result = pipeline.analyze_notes(req, advisor_factory)
    return {"analysis": _dump(result["analysis"]), "postmortem": _dump(result["postmortem"])}


@router.post("/postmortems/patterns")
def find_patterns(
    req: PatternRequest,
    advisor_factory: AdvisorFactory = Depends(get_advisor_factory),
):
    return {"report": _dump(pipeline.find_patterns(req.project_path, advisor_factory))}


@router.get("/postmortems/{postmortem_id}")
def get_postmortem(postmortem_id: str):
    return {"postmortem": _dump(postmortem_repository.get_postmortem(postmortem_id))}


@router.delete("/postmortems/{postmortem_id}")
def delete_postmortem(postmortem_id: str):
    postmortem_repository.delete_postmortem(postmortem_id)
    return {"success": True}


@router.post("/postmortems/{postmortem_id}/analyze")
def analyze_postmortem(
    postmortem_id: str,
    advisor_factory: AdvisorFactory = Depends(get_advisor_factory),
):
    pm = pipeline.analyze_stored_postmortem(postmortem_id, advisor_factory)
    return {"postmortem": _dump(pm)}


@router.post("/sanity-check")
def sanity_check(
    req: SanityCheckRequest,
    advisor_factory: AdvisorFactory = Depends(get_advisor_factory),
):
    """규칙 파일 저장 전 LLM 리뷰."""
    return {"review": _dump(pipeline.sanity_check(req, advisor_factory))}
