"""Page state router."""

from fastapi import APIRouter, HTTPException, status

from ....models import PageState
from ..dependencies import PageServiceDep
from ..models.responses import PageStateResponse
from ..services.page_service import SessionNotFoundError
from .languages import language_info

router = APIRouter(prefix="/pages", tags=["pages"])


def page_state_response(session_id: str, state: PageState) -> PageStateResponse:
    return PageStateResponse(
        session_id=session_id,
        status=state.status.value,
        request_id=state.request_id,
        url=state.url,
        language=language_info(state.language),
        title=state.title,
        message=state.message,
        original_html=state.original_html,
        translated_html=state.translated_html,
        truncated=state.truncated,
    )


@router.get("", response_model=list[str])
def list_sessions(service: PageServiceDep) -> list[str]:
    """List sessions that have submitted a page."""
    return service.list_sessions()


@router.get("/{session_id}", response_model=PageStateResponse)
def get_page(session_id: str, service: PageServiceDep) -> PageStateResponse:
    """Get the current page state of a session."""
    try:
        state = service.get_state(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    return page_state_response(session_id, state)


@router.delete("/{session_id}", response_model=PageStateResponse)
def reset_page(session_id: str, service: PageServiceDep) -> PageStateResponse:
    """Return a session to Idle, discarding any running cycle."""
    try:
        state = service.reset(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    return page_state_response(session_id, state)
