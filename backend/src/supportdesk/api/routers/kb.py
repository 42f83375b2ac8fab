"""Knowledge-base statistics endpoint."""

from fastapi import APIRouter, Depends

from supportdesk.api.deps import get_kb_service
from supportdesk.kb.schemas import KnowledgeBaseStats
from supportdesk.kb.service import KnowledgeBaseService

router = APIRouter(prefix="/api/kb", tags=["kb"])


@router.get("/stats", response_model=KnowledgeBaseStats)
async def kb_stats(
    service: KnowledgeBaseService = Depends(get_kb_service),
) -> KnowledgeBaseStats:
    """Get entry, category and usage statistics."""
    return service.get_stats()
