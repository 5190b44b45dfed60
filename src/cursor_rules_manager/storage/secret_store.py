"""
LLM API 키 저장소.

키는 settings.json에 Fernet 토큰으로 저장된다. 암호화 키는 머신 + OS 사용자에서
유도하므로 다른 머신/사용자로 옮긴 settings.json은 복호화되지 않는다
(이 경우 "키 없음"으로 취급).
"""
# src/cursor_rules_manager/storage/secret_store.py
import base64
import getpass
import hashlib
import json
import logging
import os
import platform
import uuid
from typing import Any, Dict, Optional, Tuple

from cryptography.fernet import Fernet, InvalidToken

from ..config import get_settings_path

logger = logging.getLogger(__name__)

ENV_KEY_NAMES = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
_SALT = b"cursor-rules-manager/api-key/v1"
# uuid.getnode()가 MAC을 못 찾으면 이 비트가 켜진 난수를 돌려준다 (프로세스마다 다름)
_RANDOM_NODE_BIT = 0x010000000000


def _machine_fingerprint() -> str:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = os.getenv("USER") or os.getenv("USERNAME") or "unknown"
    node = uuid.getnode()
    if node & _RANDOM_NODE_BIT:
        logger.warning(
            "No hardware address found; the API key encryption key changes on "
            "every restart, so a stored key will not decrypt after restarting"
        )
    return f"{platform.node()}:{user}:{node:012x}"


def derive_key(fingerprint: Optional[str] = None) -> bytes:
    """SHA-256(salt + fingerprint) → Fernet 키 (URL-safe base64 32바이트)."""
    material = (fingerprint or _machine_fingerprint()).encode("utf-8")
    digest = hashlib.sha256(_SALT + material).digest()
    return base64.urlsafe_b64encode(digest)


def _fernet() -> Fernet:
    return Fernet(derive_key())


def _load_settings() -> Dict[str, Any]:
    path = get_settings_path()
    if not path.exists():
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("settings.json is not valid JSON, ignoring it: %s", exc)
        return {}


def _save_settings(settings: Dict[str, Any]) -> None:
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    try:
        os.chmod(path, 0o600)
    except OSError:
        logger.debug("Could not restrict permissions on %s", path)


def store_api_key(api_key: str) -> None:
    settings = _load_settings()
    token = _fernet().encrypt(api_key.encode("utf-8")).decode("ascii")
    settings["apiKey"] = {"ciphertext": token}
    _save_settings(settings)
    logger.info("Stored encrypted API key")


def load_stored_api_key() -> Optional[str]:
    entry = _load_settings().get("apiKey")
    if not isinstance(entry, dict) or not entry.get("ciphertext"):
        return None
    try:
        return _fernet().decrypt(entry["ciphertext"].encode("ascii")).decode("utf-8")
    except InvalidToken:
        logger.warning(
            "Stored API key cannot be decrypted on this machine/user; treating as unset"
        )
        return None


def delete_api_key() -> bool:
    settings = _load_settings()
    if "apiKey" not in settings:
        return False
    del settings["apiKey"]
    _save_settings(settings)
    logger.info("Removed stored API key")
    return True


def resolve_api_key() -> Tuple[Optional[str], Optional[str]]:
    """
    LLM 호출용 키 결정.
    우선순위: 저장된 키 > GEMINI_API_KEY > GOOGLE_API_KEY

    Returns: (key, source) — source는 "stored" | "environment" | None
    """
    stored = load_stored_api_key()
    if stored:
        return stored, "stored"
    for name in ENV_KEY_NAMES:
        value = os.getenv(name)
        if value:
            return value, "environment"
    return None, None


def mask_key(api_key: str) -> str:
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return "*" * 8 + api_key[-4:]
