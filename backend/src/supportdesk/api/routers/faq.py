"""FAQ browsing and selection endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from supportdesk.api.deps import get_chat_service, get_kb_service
from supportdesk.chat.policy import MalformedQueryError
from supportdesk.chat.schemas import ChatResponse, FaqSelectRequest
from supportdesk.chat.service import ChatService
from supportdesk.kb.schemas import FaqCategorySummary, FaqMatch, FaqQuestion
from supportdesk.kb.service import KnowledgeBaseService
from supportdesk.kb.store import EntryNotFoundError

router = APIRouter(prefix="/api/faq", tags=["faq"])


@router.get("/categories", response_model=list[FaqCategorySummary])
async def list_categories(
    service: KnowledgeBaseService = Depends(get_kb_service),
) -> list[FaqCategorySummary]:
    """List FAQ categories with counts and their first questions."""
    return service.get_all_categories()


@router.get("/category/{category_name}", response_model=list[FaqQuestion])
async def category_questions(
    category_name: str,
    service: KnowledgeBaseService = Depends(get_kb_service),
) -> list[FaqQuestion]:
    """List every question of a category."""
    return service.get_category_questions(category_name)


@router.post("/select", response_model=ChatResponse)
async def select_faq(
    request: FaqSelectRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Serve a selected FAQ answer directly. Does not count against the quota."""
    try:
        return service.select_faq(request.question_id, request.session_id)
    except EntryNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="FAQ not found") from e


@router.get("/search", response_model=list[FaqMatch])
async def search_faq(
    q: str = Query(..., min_length=1, description="Search query"),
    service: ChatService = Depends(get_chat_service),
) -> list[FaqMatch]:
    """Search the knowledge base without consuming quota."""
    try:
        return service.search(q)
    except MalformedQueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
