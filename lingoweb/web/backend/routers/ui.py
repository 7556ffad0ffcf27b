"""Server-rendered interface: the form, the status area and the result panes."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Cookie, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ....models import LANGUAGES, UnknownLanguageError, ViewMode, get_language
from ....render import render_page
from ..dependencies import PageServiceDep

router = APIRouter(tags=["ui"])

SESSION_COOKIE = "lingoweb_session"


def _new_session_id() -> str:
    return uuid.uuid4().hex[:16]


@router.get("/", response_class=HTMLResponse)
def index(
    service: PageServiceDep,
    view: ViewMode = ViewMode.SPLIT,
    lingoweb_session: Annotated[str | None, Cookie()] = None,
) -> HTMLResponse:
    """Render the page for the browser's session."""
    session_id = lingoweb_session or _new_session_id()
    state = service.peek_state(session_id)
    html = render_page(
        state,
        view_mode=view,
        languages=LANGUAGES,
        action="/translate",
        session_id=session_id,
        base_href="/",
    )
    response = HTMLResponse(html)
    if lingoweb_session != session_id:
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


@router.post("/translate")
def submit(
    service: PageServiceDep,
    url: Annotated[str, Form()],
    language: Annotated[str, Form()] = "te",
    session_id: Annotated[str | None, Form()] = None,
    lingoweb_session: Annotated[str | None, Cookie()] = None,
) -> RedirectResponse:
    """Start a translation cycle from the form and go back to the page."""
    session_id = session_id or lingoweb_session or _new_session_id()
    try:
        target = get_language(language)
    except UnknownLanguageError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.args[0],
        )

    try:
        service.submit(session_id, url, target)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response
