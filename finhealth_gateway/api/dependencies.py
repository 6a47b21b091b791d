"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from finhealth_gateway.config import settings

SUPPORTED_LANGUAGES = ("en", "zh", "es")


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_language(request: Request) -> str:
    """Primary language of Accept-Language (e.g. 'zh-CN,zh;q=0.9' -> 'zh'), else the default"""
    header = request.headers.get("accept-language") or settings.default_language
    primary = header.split(",")[0].split(";")[0].split("-")[0].strip().lower()
    return primary if primary in SUPPORTED_LANGUAGES else "en"
