"""Cursor Rules Manager: 여러 프로젝트의 Cursor 규칙 파일과 postmortem 관리."""

__version__ = "0.4.0"
