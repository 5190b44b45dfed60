"""프로젝트 스캔 / 프로젝트 규칙 CRUD / 파일 목록 엔드포인트."""
# src/cursor_rules_manager/api/projects.py
from pathlib import Path

from fastapi import APIRouter, Depends

from ..models.rule_types import RuleFilePayload
from ..rules import rule_repository
from ..scanning.file_lister import list_project_files
from ..scanning.project_scanner import scan_for_projects
from ..storage import config_repository
from .dependencies import project_path_param

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
def list_projects():
    projects = scan_for_projects(config_repository.get_scan_paths())
    return {"projects": [p.model_dump(by_alias=True) for p in projects]}


@router.get("/{project_path}/rules")
def get_project_rules(project: Path = Depends(project_path_param)):
    rules = rule_repository.list_rules(project)
    return {"rules": [r.model_dump(mode="json", by_alias=True) for r in rules]}


@router.get("/{project_path}/rules/{filename}")
def get_project_rule(filename: str, project: Path = Depends(project_path_param)):
    rule = rule_repository.get_rule(project, filename)
    return {"rule": rule.model_dump(mode="json", by_alias=True)}


@router.post("/{project_path}/rules")
def save_project_rule(payload: RuleFilePayload, project: Path = Depends(project_path_param)):
    rule_repository.save_rule(project, payload.filename, payload.content)
    return {"success": True}


@router.delete("/{project_path}/rules/{filename}")
def delete_project_rule(filename: str, project: Path = Depends(project_path_param)):
    rule_repository.delete_rule(project, filename)
    return {"success": True}


@router.get("/{project_path}/files")
def get_project_files(project: Path = Depends(project_path_param)):
    """파일 선택기용 목록 (최대 200개)."""
    return {"files": list_project_files(project)}
