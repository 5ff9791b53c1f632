"""Split sanitized article markup into ordered text and image blocks."""

import re

from .markup_text import markup_to_text
from .models import Chapter, ImageBlock, TextBlock
from .normalizer import header_line, header_title, is_boilerplate, strip_citations

IMAGE_MARKER = "<img"
MEDIA_HOST = "upload.wikimedia.org"
VECTOR_EXTENSIONS = (".svg",)
MIN_IMAGE_WIDTH = 100
# body text is never wrapped here, the renderer wraps to the terminal
BODY_WIDTH = 10000

SRC_RE = re.compile(r'(?:^|\s)src="([^"]*)"')
WIDTH_RE = re.compile(r'(?:^|\s)width="(\d*)')


def image_url(tag, min_width=MIN_IMAGE_WIDTH):
    """Return the absolute URL of a content image, or None for icons and the like."""
    m = SRC_RE.search(tag)
    if not m:
        return None
    src = m.group(1)
    if MEDIA_HOST not in src or src.lower().endswith(VECTOR_EXTENSIONS):
        return None

    w = WIDTH_RE.search(tag)
    width = int(w.group(1)) if w and w.group(1) else 0
    if width <= min_width:
        return None

    if src.startswith("//"):
        return "https:" + src
    return src


class _Extraction:
    def __init__(self, width):
        self.width = width
        self.blocks = []
        self.image_urls = []
        self.chapters = []

    def add_text(self, fragment):
        text = markup_to_text(fragment, self.width)
        kept = []
        for line in text.splitlines():
            trimmed = line.strip()
            if is_boilerplate(trimmed):
                continue

            title = header_title(trimmed)
            if title is not None:
                if title and title != "Contents":
                    self.chapters.append(
                        Chapter(len(self.chapters) + 1, title, len(self.blocks))
                    )
                    kept.append(header_line(title))
                continue

            cleaned = strip_citations(trimmed)
            if cleaned:
                kept.append(cleaned)

        if kept:
            self.blocks.append(TextBlock("\n".join(kept)))

    def add_image(self, url):
        self.image_urls.append(url)
        self.blocks.append(ImageBlock(url))


def extract(html, width=BODY_WIDTH, min_image_width=MIN_IMAGE_WIDTH):
    """Return ``(blocks, image_urls, chapters)`` in document order."""
    parts = html.split(IMAGE_MARKER)
    ex = _Extraction(width)
    ex.add_text(parts[0])

    for part in parts[1:]:
        tag_end = part.find(">")
        if tag_end == -1:
            continue
        url = image_url(part[:tag_end], min_image_width)
        if url:
            ex.add_image(url)
        ex.add_text(part[tag_end + 1:])

    return ex.blocks, ex.image_urls, ex.chapters
