"""로깅 초기화."""
# src/cursor_rules_manager/logging_setup.py
import logging
import os

from .tracing import get_span_id, get_trace_id

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [trace=%(trace_id)s] %(message)s"


class TraceContextFilter(logging.Filter):
    """모든 레코드에 trace_id/span_id 필드를 주입한다."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        record.span_id = get_span_id() or "-"
        return True


def configure_logging(level: str | None = None) -> None:
    """루트 로거에 단일 스트림 핸들러를 설치한다. 여러 번 호출해도 핸들러는 하나."""
    level_name = (level or os.getenv("CRM_LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    root.setLevel(level_name)

    for handler in root.handlers:
        if getattr(handler, "_crm_handler", False):
            return

    handler = logging.StreamHandler()
    handler._crm_handler = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(TraceContextFilter())
    root.addHandler(handler)
