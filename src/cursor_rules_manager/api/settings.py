# src/cursor_rules_manager/api/settings.py
from fastapi import APIRouter

from ..models.rule_types import ApiKeyPayload, ApiKeyStatus
from ..storage import secret_store

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/api-key")
def get_api_key_status():
    """키 자체는 돌려주지 않는다. 마지막 4글자만 노출."""
    api_key, source = secret_store.resolve_api_key()
    status = ApiKeyStatus(
        configured=api_key is not None,
        source=source,
        masked_key=secret_store.mask_key(api_key) if api_key else None,
    )
    return status.model_dump(by_alias=True)


@router.post("/api-key")
def store_api_key(payload: ApiKeyPayload):
    secret_store.store_api_key(payload.api_key)
    return {"success": True}


@router.delete("/api-key")
def delete_api_key():
    secret_store.delete_api_key()
    return {"success": True}
