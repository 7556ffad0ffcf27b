"""HTML presentation of page state."""

from .renderer import render_body, render_document, render_form, render_page, render_panes

__all__ = ["render_body", "render_document", "render_form", "render_page", "render_panes"]
