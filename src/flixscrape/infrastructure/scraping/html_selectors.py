"""CSS-selector-based HTML extraction with fallback chains.

Every extraction function accepts a primary selector and optional
*fallback_selectors*; the first selector that yields a non-empty value
wins.  Nothing here raises on partial markup: a missing element or
attribute degrades to the *default* (``""`` unless given).
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain.

    Returns results from the **first** selector that matches at least
    one element.
    """
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_text(
    element: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
    strip: bool = True,
) -> str:
    """Extract text from the first matching child element.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        text = element.get_text(strip=strip)
        return text if text else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            text = match.get_text(strip=strip)
            if text:
                return text
    return default


def extract_attr(
    element: BeautifulSoup | Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Extract an HTML attribute from the first matching child element.

    With ``selector=""`` the attribute is read from *element* itself.
    """
    if selector == "":
        val = element.get(attr) if isinstance(element, Tag) else None
        return str(val) if val else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            val = match.get(attr)
            if val:
                return str(val)
    return default


def extract_all_texts(
    element: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
    strip: bool = True,
) -> list[str]:
    """Extract the text of **all** matching elements."""
    for sel in (selector, *fallback_selectors):
        matches = element.select(sel)
        if matches:
            return [m.get_text(strip=strip) for m in matches]
    return []


def first_non_empty(*values: str, default: str = "") -> str:
    """Return the first truthy value (attribute fallback across selectors)."""
    for value in values:
        if value:
            return value
    return default


def last_path_segment(href: str) -> str:
    """Identifier of a site URL: the last hyphen-delimited segment.

    ``/movie/watch-the-matrix-19724`` -> ``19724``; ``""`` stays ``""``.
    """
    if not href:
        return ""
    return href.split("-")[-1]
