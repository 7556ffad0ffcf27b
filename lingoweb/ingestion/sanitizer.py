"""HTML sanitization using BeautifulSoup.

Everything rendered by the application passes through ``sanitize_html``:
the fetched page before it is shown or translated, and the model's output
before it is shown.
"""

import re

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

# Elements removed wherever they appear, at any depth.
EXCLUDED_TAGS = ("script", "style", "iframe", "noscript")

# Attributes whose value is a URL that the browser may navigate to or load.
URL_ATTRIBUTES = ("href", "src", "action", "formaction", "xlink:href")

_URL_NOISE = re.compile(r"[\s\x00-\x1f]+")

# Markup nodes that html.parser and browsers may delimit differently. They are
# serialized verbatim, so anything hidden in them could become live markup.
OPAQUE_NODES = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


def _parse(html: str) -> BeautifulSoup:
    # html.parser tolerates unclosed and invalid tags without raising
    return BeautifulSoup(html or "", "html.parser")


def _is_script_url(value: str) -> bool:
    return _URL_NOISE.sub("", value).lower().startswith(("javascript:", "vbscript:"))


def remove_excluded_elements(soup: BeautifulSoup) -> int:
    """Remove every excluded element from a parsed document.

    Args:
        soup: BeautifulSoup parsed HTML, modified in place

    Returns:
        Number of elements removed
    """
    removed = 0
    # Re-query after each removal; decomposing a parent destroys its children.
    element = soup.find(EXCLUDED_TAGS)
    while element is not None:
        element.decompose()
        removed += 1
        element = soup.find(EXCLUDED_TAGS)
    return removed


def remove_opaque_nodes(soup: BeautifulSoup) -> int:
    """Remove comments, CDATA sections, declarations and processing instructions.

    Returns:
        Number of nodes removed
    """
    nodes = soup.find_all(string=lambda s: isinstance(s, OPAQUE_NODES))
    for node in nodes:
        node.extract()
    return len(nodes)


def strip_active_attributes(soup: BeautifulSoup) -> int:
    """Drop inline event handlers and script URLs from all elements.

    Args:
        soup: BeautifulSoup parsed HTML, modified in place

    Returns:
        Number of attributes removed
    """
    removed = 0
    for tag in soup.find_all(True):
        for name in list(tag.attrs):
            value = tag.attrs[name]
            if name.lower().startswith("on"):
                del tag.attrs[name]
                removed += 1
            elif name.lower() in URL_ATTRIBUTES and isinstance(value, str) and _is_script_url(value):
                del tag.attrs[name]
                removed += 1
    return removed


def sanitize_html(raw_html: str) -> str:
    """Remove executable and non-visual markup and return the body content.

    Args:
        raw_html: Full document or fragment, possibly malformed

    Returns:
        Serialized inner HTML of <body>, or of the whole fragment when the
        input has no <body>
    """
    soup = _parse(raw_html)
    remove_opaque_nodes(soup)
    remove_excluded_elements(soup)
    strip_active_attributes(soup)

    body = soup.find("body")
    if body is not None:
        return body.decode_contents().strip()
    # Fragments may still carry <head>/<title>; only visible content is kept.
    for head in soup.find_all("head"):
        head.decompose()
    html = soup.find("html")
    if html is not None:
        return html.decode_contents().strip()
    return soup.decode_contents().strip()


def extract_title(raw_html: str) -> str:
    """Extract a page title.

    Args:
        raw_html: Full document or fragment

    Returns:
        Extracted title string
    """
    soup = _parse(raw_html)

    # Try <title> tag first
    title_tag = soup.find("title")
    if title_tag and title_tag.string and title_tag.string.strip():
        return title_tag.string.strip()

    # Try <h1> tag
    h1_tag = soup.find("h1")
    if h1_tag and h1_tag.get_text(strip=True):
        return h1_tag.get_text(strip=True)

    # Try og:title meta tag
    og_title = soup.find("meta", property="og:title")
    if og_title and og_title.get("content"):
        return og_title["content"].strip()

    return "Untitled Page"
