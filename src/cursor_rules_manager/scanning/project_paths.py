"""URL 세그먼트용 프로젝트 경로 인코딩 (base64)."""
# src/cursor_rules_manager/scanning/project_paths.py
import base64
import binascii
from pathlib import Path

from ..errors import InvalidProjectPath


def encode_project_path(path: str | Path) -> str:
    """URL-safe base64, 패딩 제거."""
    raw = str(path).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_project_path(encoded: str) -> Path:
    """
    표준/URL-safe 알파벳 모두 허용하고 패딩은 없어도 된다.
    디코딩 실패 또는 빈 결과면 InvalidProjectPath.
    """
    value = (encoded or "").strip()
    normalized = value.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        decoded = base64.b64decode(normalized, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidProjectPath(
            f"'{encoded}' is not a base64-encoded UTF-8 path",
            target="projectPath",
            meta={"reason": str(exc)},
        ) from exc

    if not decoded or "\x00" in decoded:
        raise InvalidProjectPath(
            "Decoded project path is empty or contains NUL bytes",
            target="projectPath",
        )
    return Path(decoded)
