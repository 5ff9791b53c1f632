import re

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag

SKIP_TAGS = {"script", "style", "noscript", "link", "meta"}
HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
BLOCK_TAGS = {
    "p", "div", "section", "article", "blockquote", "ul", "ol", "dl",
    "table", "tbody", "thead", "caption", "figure", "figcaption", "center",
}
CELL_TAGS = ["td", "th"]


def clean_paragraph(text):
    text = text.replace("\n", " ")
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def wrap(text, width):
    words = text.split()
    lines = []
    current = ""

    for w in words:
        if len(current) + len(w) + (1 if current else 0) > width:
            if current:
                lines.append(current)
            current = w
        else:
            current = w if current == "" else current + " " + w

    if current:
        lines.append(current)

    return lines


class _LineWriter:
    def __init__(self, width):
        self.width = width
        self.lines = []
        self.inline = []
        self.prefix = ""

    def text(self, s):
        self.inline.append(s)

    def flush(self, blank=True):
        para = clean_paragraph("".join(self.inline))
        self.inline = []
        if para:
            wrapped = wrap(para, max(1, self.width - len(self.prefix)))
            first, rest = wrapped[0], wrapped[1:]
            self.lines.append(self.prefix + first)
            self.lines.extend(" " * len(self.prefix) + w for w in rest)
            self.prefix = ""
            if blank:
                self.lines.append("")

    def raw(self, line):
        self.flush()
        self.lines.append(line)

    def result(self):
        self.flush()
        while self.lines and not self.lines[-1]:
            self.lines.pop()
        return "\n".join(self.lines)


def _walk(node, out):
    for child in node.children:
        if isinstance(child, (Comment, Doctype)):
            continue
        if isinstance(child, NavigableString):
            out.text(str(child))
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name
        if name in SKIP_TAGS:
            continue
        if name in HEADING_TAGS:
            out.flush()
            title = clean_paragraph(child.get_text(" "))
            if title:
                out.raw("#" * HEADING_TAGS[name] + " " + title)
                out.lines.append("")
            continue
        if name == "br":
            out.flush(blank=False)
            continue
        if name == "hr":
            out.raw("-" * min(out.width, 40))
            continue
        if name == "li":
            out.flush(blank=False)
            out.prefix = "* "
            _walk(child, out)
            out.flush(blank=False)
            out.prefix = ""
            continue
        if name == "tr":
            out.flush(blank=False)
            cells = [clean_paragraph(c.get_text(" ")) for c in child.find_all(CELL_TAGS, recursive=False)]
            row = "  ".join(c for c in cells if c)
            if len(row) <= out.width:
                if row:
                    out.lines.append(row)
            else:
                out.text(row)
                out.flush(blank=False)
            continue
        if name == "pre":
            out.flush()
            for line in child.get_text().splitlines():
                out.lines.append(line.rstrip())
            out.lines.append("")
            continue
        if name in BLOCK_TAGS or name in CELL_TAGS:
            out.flush()
            _walk(child, out)
            out.flush()
            continue
        _walk(child, out)


def markup_to_text(html, width):
    """Render a markup fragment as plain text lines wrapped to ``width``.

    Headings come out as ``#``-prefixed lines and list items as ``* `` lines.
    Fragments may be truncated mid-element; the parser tolerates that.
    """
    soup = BeautifulSoup(html, "html.parser")
    out = _LineWriter(width)
    _walk(soup, out)
    return out.result()
