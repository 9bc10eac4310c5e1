"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache
from typing import Optional

from fastapi import Request

from dhanrakshak.config import settings
from dhanrakshak.domain.extraction import TransactionTextExtractor
from dhanrakshak.domain.patterns import default_pattern_library
from dhanrakshak.infrastructure.clients.ai import AiCollaboratorClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache(maxsize=1)
def get_extractor() -> TransactionTextExtractor:
    """Shared extractor over the process-wide pattern library"""
    return TransactionTextExtractor(default_pattern_library())


def get_ai_client() -> Optional[AiCollaboratorClient]:
    """Provide AI collaborator client, or None when it is not configured"""
    if not settings.ai_enabled or not settings.ai_api_key:
        return None
    return AiCollaboratorClient()
