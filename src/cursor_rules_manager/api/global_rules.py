"""전역 규칙 / scan path / 규칙 생성 엔드포인트."""
# src/cursor_rules_manager/api/global_rules.py
from fastapi import APIRouter

from ..models.rule_types import GenerateRuleRequest, GlobalRulesPayload, ScanPathsPayload
from ..rules.rule_builder import generate_rule
from ..storage import config_repository

router = APIRouter(prefix="/api", tags=["rules"])


@router.get("/global-rules")
def get_global_rules():
    return {"content": config_repository.read_global_rules()}


@router.post("/global-rules")
def save_global_rules(payload: GlobalRulesPayload):
    config_repository.write_global_rules(payload.content)
    return {"success": True}


@router.get("/scan-paths")
def get_scan_paths():
    return {"scanPaths": config_repository.get_scan_paths()}


@router.post("/scan-paths")
def update_scan_paths(payload: ScanPathsPayload):
    config_repository.set_scan_paths(payload.scan_paths)
    return {"success": True}


@router.post("/generate-rule")
def generate_rule_content(req: GenerateRuleRequest):
    """MDC 규칙 내용 생성 (저장하지 않음)."""
    return generate_rule(req).model_dump(by_alias=True)
