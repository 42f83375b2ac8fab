"""FastAPI dependency injection functions."""

from functools import lru_cache

from fastapi import Depends, Request

from supportdesk.chat.history import ChatLog
from supportdesk.chat.policy import DecisionPolicy, profiles_from_config
from supportdesk.chat.service import ChatService
from supportdesk.config import Config, load_settings
from supportdesk.kb.loader import load_faq_entries
from supportdesk.kb.service import KnowledgeBaseService
from supportdesk.kb.store import InMemoryKnowledgeBase, KnowledgeBase
from supportdesk.llm.client import LLMClient
from supportdesk.llm.support import SupportResponder
from supportdesk.quota.store import QuotaStore


@lru_cache
def get_settings() -> Config:
    """Get cached application settings."""
    return load_settings()


_kb_instance: KnowledgeBase | None = None
_quota_instance: QuotaStore | None = None
_llm_instance: LLMClient | None = None
_chat_log_instance: ChatLog | None = None


def get_knowledge_base() -> KnowledgeBase:
    """Get the knowledge base, loading the FAQ dataset on first use."""
    global _kb_instance
    if _kb_instance is None:
        settings = get_settings()
        _kb_instance = InMemoryKnowledgeBase(load_faq_entries(settings.faq_data_path))
    return _kb_instance


def get_quota_store() -> QuotaStore:
    """Get the process-wide quota store."""
    global _quota_instance
    if _quota_instance is None:
        settings = get_settings()
        _quota_instance = QuotaStore(
            limit=settings.quota.limit,
            window_seconds=settings.quota.window_seconds,
        )
    return _quota_instance


def get_llm() -> LLMClient:
    """Get LLM client instance."""
    global _llm_instance
    if _llm_instance is None:
        settings = get_settings()
        _llm_instance = LLMClient(
            provider=settings.active_provider,
            model=settings.active_model,
            api_key=settings.llm_api_key,
            endpoint=settings.llm_endpoint,
            log_path=settings.llm_log_path,
        )
    return _llm_instance


def get_chat_log() -> ChatLog:
    """Get the process-wide chat log."""
    global _chat_log_instance
    if _chat_log_instance is None:
        _chat_log_instance = ChatLog()
    return _chat_log_instance


def _reset_instances() -> None:
    """Reset cached singletons (for testing only)."""
    global _kb_instance, _quota_instance, _llm_instance, _chat_log_instance
    _kb_instance = None
    _quota_instance = None
    _llm_instance = None
    _chat_log_instance = None
    get_settings.cache_clear()


def get_chat_service(
    kb: KnowledgeBase = Depends(get_knowledge_base),
    quota: QuotaStore = Depends(get_quota_store),
    llm: LLMClient = Depends(get_llm),
    chat_log: ChatLog = Depends(get_chat_log),
    settings: Config = Depends(get_settings),
) -> ChatService:
    """Get chat service instance."""
    profiles = profiles_from_config(settings.ranking)
    policy = DecisionPolicy(
        kb,
        quota,
        SupportResponder(llm),
        max_query_length=settings.query.max_length,
    )
    return ChatService(
        policy,
        kb,
        quota,
        chat_log=chat_log,
        server_profile=profiles["server"],
        client_profile=profiles["client"],
    )


def get_kb_service(kb: KnowledgeBase = Depends(get_knowledge_base)) -> KnowledgeBaseService:
    """Get knowledge-base browsing service."""
    return KnowledgeBaseService(kb)


def get_client_key(request: Request) -> str:
    """Quota key for callers without a session: their address.

    Uses the first X-Forwarded-For hop, then X-Real-IP, then the peer address.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    if request.client is not None:
        return request.client.host
    return "unknown"
