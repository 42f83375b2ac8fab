"""Chat API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from supportdesk.api.deps import get_chat_service, get_client_key
from supportdesk.chat.policy import MalformedQueryError
from supportdesk.chat.schemas import ChatMessage, ChatQuery, ChatResponse, DirectChatQuery
from supportdesk.chat.service import ChatService

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/query", response_model=ChatResponse)
async def chat_query(
    request: ChatQuery,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a customer query.

    Searches the FAQ knowledge base and answers directly on a confident match,
    otherwise asks the LLM with related entries as context. Once the session's
    daily quota is used up, returns a limit message with source "system".
    """
    try:
        return await service.ask(request.message, request.session_id)
    except MalformedQueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.post("/direct", response_model=ChatResponse)
async def chat_direct(
    request: DirectChatQuery,
    client_key: str = Depends(get_client_key),
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a query from the chat widget, with quota tracked by client address.

    Uses hybrid embedding/keyword matching and only counts LLM calls against
    the quota.
    """
    try:
        return await service.ask_direct(request.message, client_key)
    except MalformedQueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get("/history/{session_id}", response_model=list[ChatMessage])
async def chat_history(
    session_id: str,
    service: ChatService = Depends(get_chat_service),
) -> list[ChatMessage]:
    """Get the logged exchanges of a session."""
    return service.history(session_id)
