"""요청 단위 trace/span 식별자 관리 (W3C Trace Context 형식)."""
# src/cursor_rules_manager/tracing.py
import re
import secrets
from contextvars import ContextVar
from typing import Optional, Tuple

_TRACEPARENT_RE = re.compile(
    r"^[0-9a-f]{2}-(?P<trace>[0-9a-f]{32})-(?P<span>[0-9a-f]{16})-[0-9a-f]{2}$"
)

_trace_id: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
_span_id: ContextVar[Optional[str]] = ContextVar("span_id", default=None)


def _new_trace_id() -> str:
    return secrets.token_hex(16)


def _new_span_id() -> str:
    return secrets.token_hex(8)


def parse_traceparent(header: Optional[str]) -> Optional[Tuple[str, str]]:
    """traceparent 헤더에서 (trace_id, parent span_id) 추출. 형식이 틀리면 None."""
    if not header:
        return None
    match = _TRACEPARENT_RE.match(header.strip().lower())
    if not match:
        return None
    return match.group("trace"), match.group("span")


def start_trace(traceparent: Optional[str] = None) -> str:
    """요청 시작 시 호출. 상위 trace가 있으면 이어받고, 없으면 새로 만든다."""
    parsed = parse_traceparent(traceparent)
    trace_id = parsed[0] if parsed else _new_trace_id()
    _trace_id.set(trace_id)
    _span_id.set(_new_span_id())
    return trace_id


def get_trace_id() -> str:
    trace_id = _trace_id.get()
    if trace_id is None:
        trace_id = _new_trace_id()
        _trace_id.set(trace_id)
    return trace_id


def get_span_id() -> Optional[str]:
    return _span_id.get()


def new_child_span() -> str:
    span_id = _new_span_id()
    _span_id.set(span_id)
    return span_id
