"""Translation submission router."""

from fastapi import APIRouter, HTTPException, status

from ....models import UnknownLanguageError, get_language
from ..dependencies import PageServiceDep
from ..models.requests import TranslateRequest
from ..models.responses import JobStartedResponse

router = APIRouter(prefix="/translations", tags=["translations"])


@router.post(
    "",
    response_model=JobStartedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def start_translation(
    request: TranslateRequest,
    service: PageServiceDep,
) -> JobStartedResponse:
    """Start a translation cycle for a session.

    The page state moves to Fetching immediately; follow it with
    GET /pages/{session_id} or the /ws socket.
    """
    try:
        language = get_language(request.language)
    except UnknownLanguageError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.args[0],
        )

    try:
        job_id, request_id = service.submit(request.session_id, request.url, language)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return JobStartedResponse(
        job_id=job_id,
        session_id=request.session_id,
        request_id=request_id,
        status="pending",
        message=f"Translating {request.url.strip()} into {language.name}",
    )
