"""HTML rendering of the page state.

Pane fragments are embedded verbatim: they have already been through the
sanitizer. Every other interpolated string is escaped.
"""

from html import escape

from ..models import LANGUAGES, Language, PageState, PageStatus, ViewMode

APP_TITLE = "LingoWeb"

# Seconds between automatic reloads while a cycle is in flight.
BUSY_REFRESH_SECONDS = 2

STYLESHEET = """
body { margin: 0; font-family: system-ui, sans-serif; color: #0f172a; background: #f8fafc; }
header { display: flex; gap: 1rem; align-items: center; padding: 1rem 1.5rem; background: #fff; border-bottom: 1px solid #e2e8f0; }
header h1 { font-size: 1.25rem; margin: 0; }
form { display: flex; gap: .5rem; flex: 1; }
form input[type=url] { flex: 1; padding: .5rem; }
.views a { margin-left: .5rem; }
.views a.active { font-weight: bold; }
.status, .welcome, .error { padding: 3rem; text-align: center; }
.error { color: #b91c1c; }
.panes { display: flex; }
.panes.full { flex-direction: column; }
.pane { flex: 1; overflow: auto; background: #fff; border-right: 1px solid #e2e8f0; }
.pane-header { display: flex; justify-content: space-between; padding: .5rem 1rem; font-size: .75rem; text-transform: uppercase; color: #94a3b8; border-bottom: 1px solid #e2e8f0; }
.pane-body { padding: 2rem; }
.notice { padding: .5rem 1.5rem; background: #fef3c7; font-size: .85rem; }
footer { padding: .75rem 1.5rem; background: #0f172a; color: #94a3b8; font-size: .75rem; }
"""


def _language_options(languages: tuple[Language, ...] | list[Language], selected: Language) -> str:
    options = []
    for language in languages:
        chosen = " selected" if language.code == selected.code else ""
        options.append(
            f'<option value="{escape(language.code)}"{chosen}>{escape(language.label)}</option>'
        )
    return "".join(options)


def render_form(
    state: PageState,
    languages: tuple[Language, ...] | list[Language] = LANGUAGES,
    action: str = "/translate",
    session_id: str | None = None,
) -> str:
    """Render the URL and language submission form."""
    disabled = " disabled" if state.status.is_busy else ""
    session_field = (
        f'<input type="hidden" name="session_id" value="{escape(session_id)}">'
        if session_id
        else ""
    )
    return (
        f'<form method="post" action="{escape(action)}">'
        f"{session_field}"
        f'<input type="url" name="url" required '
        f'placeholder="Paste any website URL (e.g. https://example.com)" '
        f'value="{escape(state.url or "")}">'
        f'<select name="language">{_language_options(languages, state.language)}</select>'
        f'<button type="submit"{disabled}>Translate</button>'
        f"</form>"
    )


def _pane(label: str, badge: str, fragment: str) -> str:
    return (
        '<section class="pane">'
        f'<div class="pane-header"><span>{escape(label)}</span><span>{escape(badge)}</span></div>'
        f'<div class="pane-body">{fragment}</div>'
        "</section>"
    )


def render_panes(state: PageState, view_mode: ViewMode = ViewMode.SPLIT) -> str:
    """Render the original/translated panes of a Ready state.

    Returns an empty string for any other state.
    """
    if state.status != PageStatus.READY or state.translated_html is None:
        return ""

    panes = []
    if view_mode == ViewMode.SPLIT:
        panes.append(_pane("Original Content", state.title or "", state.original_html or ""))
    panes.append(_pane("Translated Content", state.language.name, state.translated_html))
    return f'<div class="panes {view_mode.value}">{"".join(panes)}</div>'


def render_body(state: PageState, view_mode: ViewMode = ViewMode.SPLIT) -> str:
    """Render the main area for the current state."""
    if state.status.is_busy:
        return f'<div class="status"><h3>Patience is a Virtue</h3><p>{escape(state.message)}</p></div>'
    if state.status == PageStatus.FAILED:
        return f'<div class="error"><p>{escape(state.message)}</p></div>'
    if state.status == PageStatus.READY:
        notice = ""
        if state.truncated:
            notice = (
                '<div class="notice">This page was longer than the translation limit; '
                "only the beginning was translated.</div>"
            )
        return notice + render_panes(state, view_mode)
    return (
        '<div class="welcome"><h2>Transform the Web</h2>'
        f"<p>Enter any URL above to translate the entire webpage content into "
        f"{escape(state.language.name)}.</p></div>"
    )


def _view_links(view_mode: ViewMode, base_href: str) -> str:
    links = []
    for mode, label in ((ViewMode.SPLIT, "Split View"), (ViewMode.FULL, "Full Translation View")):
        active = ' class="active"' if mode == view_mode else ""
        separator = "&" if "?" in base_href else "?"
        links.append(f'<a href="{escape(base_href)}{separator}view={mode.value}"{active}>{label}</a>')
    return f'<nav class="views">{"".join(links)}</nav>'


def render_page(
    state: PageState,
    view_mode: ViewMode = ViewMode.SPLIT,
    languages: tuple[Language, ...] | list[Language] = LANGUAGES,
    action: str = "/translate",
    session_id: str | None = None,
    base_href: str = "/",
) -> str:
    """Render the full interactive page for a session."""
    refresh = (
        f'<meta http-equiv="refresh" content="{BUSY_REFRESH_SECONDS}">'
        if state.status.is_busy
        else ""
    )
    footer = ""
    if state.status == PageStatus.READY:
        footer = f"<footer>Translation Ready &middot; {escape(state.url or '')}</footer>"

    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"{refresh}<title>{APP_TITLE}</title><style>{STYLESHEET}</style></head>"
        "<body>"
        f"<header><h1>{APP_TITLE}</h1>"
        f"{render_form(state, languages, action, session_id)}"
        f"{_view_links(view_mode, base_href)}</header>"
        f"<main>{render_body(state, view_mode)}</main>"
        f"{footer}"
        "</body></html>"
    )


def render_document(state: PageState, view_mode: ViewMode = ViewMode.SPLIT) -> str:
    """Render a standalone document with just the result panes, for saving to disk."""
    title = escape(state.title or APP_TITLE)
    return (
        "<!DOCTYPE html>"
        f'<html><head><meta charset="utf-8"><title>{title}</title>'
        f"<style>{STYLESHEET}</style></head>"
        f"<body>{render_body(state, view_mode)}</body></html>"
    )
