"""Remove page chrome from article markup and pull out the infobox table."""

import logging

logger = logging.getLogger("wikiterm.sanitizer")

INFOBOX_KEYWORD = "infobox"

# (element, class keywords) applied in order
RULES = (
    ("table", ("infobox", "sidebar", "vertical-navbox", "ambox", "metadata")),
    ("div", ("hatnote", "shortdescription", "toc", "siteSub", "mw-empty-elt")),
)


def _element_end(html, start, open_tag, close_tag):
    """Index just past the close tag matching the element opened at ``start``.

    Only elements with the same name count towards nesting. Returns None when
    the element is never closed.
    """
    depth = 1
    pos = start + 1
    while depth > 0:
        next_close = html.find(close_tag, pos)
        if next_close == -1:
            return None
        next_open = html.find(open_tag, pos, next_close)
        if next_open != -1:
            depth += 1
            pos = next_open + 1
        else:
            depth -= 1
            pos = next_close + len(close_tag)
    return pos


def strip_elements(html, tag, keywords, capture=None):
    """Drop every ``tag`` element whose opening tag mentions a keyword.

    Retained spans are copied into a new buffer, the input is never modified.
    When ``capture`` is a keyword, the first matching element carrying it is
    returned alongside the cleaned text.
    """
    open_tag = "<" + tag
    close_tag = "</" + tag + ">"
    kept = []
    captured = None
    retained_from = 0
    cursor = 0

    while True:
        start = html.find(open_tag, cursor)
        if start == -1:
            break
        tag_end = html.find(">", start)
        if tag_end == -1:
            break
        end = _element_end(html, start, open_tag, close_tag)
        if end is None:
            logger.debug("unclosed <%s> at offset %d, rule skipped", tag, start)
            break

        attrs = html[start:tag_end]
        if any(k in attrs for k in keywords):
            if capture and captured is None and capture in attrs:
                captured = html[start:end]
            kept.append(html[retained_from:start])
            retained_from = end
            cursor = end
        else:
            cursor = start + 1

    kept.append(html[retained_from:])
    return captured, "".join(kept)


def sanitize(html):
    """Return ``(infobox_markup or None, cleaned_markup)``."""
    infobox = None
    for tag, keywords in RULES:
        capture = INFOBOX_KEYWORD if tag == "table" and infobox is None else None
        found, html = strip_elements(html, tag, keywords, capture=capture)
        if found is not None:
            infobox = found
    return infobox, html
