"""Session quota status endpoint."""

from fastapi import APIRouter, Depends

from supportdesk.api.deps import get_chat_service
from supportdesk.chat.schemas import SessionStatus
from supportdesk.chat.service import ChatService

router = APIRouter(prefix="/api/session", tags=["session"])


@router.get("/{session_id}/status", response_model=SessionStatus)
async def session_status(
    session_id: str,
    service: ChatService = Depends(get_chat_service),
) -> SessionStatus:
    """Get the remaining quota of a session without consuming any."""
    return service.session_status(session_id)
