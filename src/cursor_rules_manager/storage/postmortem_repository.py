"""
Postmortem 저장소.

레코드 1개 = JSON 파일 1개:
  <CRM_HOME>/postmortems/{id}.json
"""
# src/cursor_rules_manager/storage/postmortem_repository.py
import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ..config import get_postmortem_dir
from ..errors import PostmortemNotFound
from ..models.postmortem_types import (
    Postmortem,
    PostmortemAnalysis,
    PostmortemCreate,
    PostmortemStatus,
)

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def _record_path(postmortem_id: str) -> Path:
    # id는 파일명으로 쓰이므로 uuid hex 형식만 허용
    if not _ID_RE.match(postmortem_id or ""):
        raise PostmortemNotFound(
            f"'{postmortem_id}' is not a valid postmortem id", target="id"
        )
    return get_postmortem_dir() / f"{postmortem_id}.json"


def _write(pm: Postmortem) -> None:
    directory = get_postmortem_dir()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{pm.id}.json"
    path.write_text(
        json.dumps(pm.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_postmortem(
    data: PostmortemCreate,
    analysis: Optional[PostmortemAnalysis] = None,
) -> Postmortem:
    project_name = Path(data.project_path).name if data.project_path else None
    pm = Postmortem(
        **data.model_dump(),
        id=uuid.uuid4().hex,
        project_name=project_name,
        status=PostmortemStatus.ANALYZED if analysis else PostmortemStatus.OPEN,
        created_at=_now_iso(),
        analysis=analysis,
    )
    _write(pm)
    logger.info("Created postmortem %s (%s)", pm.id, pm.title)
    return pm


def get_postmortem(postmortem_id: str) -> Postmortem:
    path = _record_path(postmortem_id)
    if not path.is_file():
        raise PostmortemNotFound(f"No postmortem with id '{postmortem_id}'", target="id")
    return Postmortem.model_validate_json(path.read_text(encoding="utf-8"))


def list_postmortems(project_path: Optional[str] = None) -> List[Postmortem]:
    """최신순. project_path가 주어지면 해당 프로젝트 것만. 깨진 파일은 건너뛴다."""
    directory = get_postmortem_dir()
    if not directory.is_dir():
        return []

    wanted = str(Path(project_path)) if project_path else None
    records: List[Postmortem] = []
    for path in directory.glob("*.json"):
        try:
            pm = Postmortem.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("Skipping unreadable postmortem %s: %s", path.name, exc)
            continue
        if wanted and (not pm.project_path or str(Path(pm.project_path)) != wanted):
            continue
        records.append(pm)

    records.sort(key=lambda pm: (pm.created_at, pm.id), reverse=True)
    return records


def save_analysis(postmortem_id: str, analysis: PostmortemAnalysis) -> Postmortem:
    pm = get_postmortem(postmortem_id)
    pm.analysis = analysis
    pm.status = PostmortemStatus.ANALYZED
    _write(pm)
    logger.info("Stored analysis for postmortem %s", pm.id)
    return pm


def delete_postmortem(postmortem_id: str) -> None:
    path = _record_path(postmortem_id)
    if not path.is_file():
        raise PostmortemNotFound(f"No postmortem with id '{postmortem_id}'", target="id")
    path.unlink()
    logger.info("Deleted postmortem %s", postmortem_id)
