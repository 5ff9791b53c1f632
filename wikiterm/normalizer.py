"""Line-level cleanup shared by infobox and body text."""

import re

from .models import HEADER_MARKER

# infobox citations are short, so only look a few characters ahead
INFOBOX_WINDOW = 5

SEPARATOR_CHARS = set("_-─| ")


def _is_marker(content):
    return content.isdigit() or content == "edit" or len(content) == 1


def strip_citations(line, window=None):
    """Delete reference/edit markers like ``[12]`` and unwrap other brackets.

    ``window`` bounds how far past ``[`` the closing ``]`` may be.
    """
    out = []
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == "[":
            limit = n if window is None else min(n, i + window + 1)
            j = line.find("]", i + 1, limit)
            if j != -1:
                if _is_marker(line[i + 1:j]):
                    i = j + 1
                else:
                    # keep the content, the closing bracket is dropped below
                    i += 1
                continue
        elif ch == "]":
            i += 1
            continue
        out.append(ch)
        i += 1
    return "".join(out).strip()


def is_boilerplate(line):
    """True for lines that carry navigation chrome rather than article text."""
    if line.startswith("[") and "]:" in line:
        return True
    if line.startswith("*") and ("Jump to search" in line or "Jump to navigation" in line):
        return True
    if line and all(c in "=-" for c in line):
        return True
    if line.startswith("* [") and "][" in line:
        return True
    if "redirects here" in line and ("For other uses" in line or "disambiguation" in line):
        return True
    if line.startswith("This article is part of a series"):
        return True
    return False


def header_title(line):
    """Return the display title if ``line`` is a heading, else None."""
    if line.startswith("#"):
        return line.lstrip("#").strip()
    if line.startswith("==") and line.endswith("=="):
        return line.strip("=").strip()
    return None


def header_line(title):
    return HEADER_MARKER + title


def clean_infobox_text(raw):
    lines = []
    last_blank = False
    for line in raw.splitlines():
        trimmed = line.strip()
        if not trimmed:
            if not last_blank:
                lines.append("")
                last_blank = True
            continue
        if all(c in SEPARATOR_CHARS for c in trimmed):
            continue
        if trimmed.startswith("[[") or "File:" in trimmed:
            continue
        if trimmed.startswith("[") and "]:" in trimmed:
            continue
        cleaned = strip_citations(trimmed, window=INFOBOX_WINDOW)
        if not cleaned:
            continue
        lines.append(cleaned)
        last_blank = False
    return "\n".join(lines).strip()
