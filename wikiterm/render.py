from .config import DEFAULT_THEME
from .markup_text import wrap
from .models import HEADER_MARKER, ImageBlock, State, TextBlock

# ========= COLORS =========
C_RESET = "\033[0m"
C_BOLD = "\033[1m"
C_DIM = "\033[90m"
C_ERR = "\033[91m"
C_CMD = "\033[92m"
C_SEL = "\033[7m"

# rows reserved for every image, loaded or not
IMAGE_ROWS = 12


def shorten_middle(text, max_len):
    if len(text) <= max_len:
        return text
    if max_len < 10:
        return text[:max_len]
    keep = (max_len - 3) // 2
    return text[:keep] + "..." + text[-keep:]


def render_image_halfblocks(img, max_width, max_rows=None):
    img = img.convert("RGB")
    new_width = max(1, max_width)
    new_height = max(1, int((img.height / img.width) * new_width * 0.5))
    if max_rows and new_height > max_rows:
        new_width = max(1, int(new_width * max_rows / new_height))
        new_height = max_rows
    img = img.resize((new_width, new_height * 2))

    pixels = img.load()
    lines = []

    for y in range(0, img.height, 2):
        line = ""
        for x in range(img.width):
            top = pixels[x, y]
            bottom = pixels[x, y+1] if y+1 < img.height else top
            line += (
                f"\033[38;2;{top[0]};{top[1]};{top[2]}m"
                f"\033[48;2;{bottom[0]};{bottom[1]};{bottom[2]}m▀"
            )
        line += C_RESET
        lines.append(line)

    return lines


# ========= ARTICLE LAYOUT =========
def layout_article(article, width, images, theme=DEFAULT_THEME):
    """Lay the article out as screen rows.

    Returns ``(rows, chapter_rows)`` where ``chapter_rows`` maps each chapter
    index to the row its header lands on.
    """
    rows = []
    chapter_rows = {}
    headers = iter(article.chapters)

    if article.infobox:
        for line in article.infobox.splitlines():
            rows.extend(f"{C_DIM}{w}{C_RESET}" for w in wrap(line, width) or [""])
        rows.append("")

    for block in article.blocks:
        if isinstance(block, ImageBlock):
            img = images.get(block.url)
            if img is not None:
                pic = render_image_halfblocks(img, width, IMAGE_ROWS)
            else:
                pic = [f"{C_DIM}[Loading image...]{C_RESET}"]
            rows.extend(pic + [""] * (IMAGE_ROWS - len(pic)))
            continue

        if not isinstance(block, TextBlock):
            continue
        for line in block.text.splitlines():
            if line.startswith(HEADER_MARKER):
                chapter = next(headers, None)
                if chapter is not None:
                    chapter_rows[chapter.index] = len(rows)
                title = line[len(HEADER_MARKER):]
                rows.append(f"{theme}{C_BOLD}{shorten_middle(title, width)}{C_RESET}")
                rows.append("")
                continue
            rows.extend(wrap(line, width))

    return rows, chapter_rows


# ========= SCREENS =========
def _home(session, width, height):
    t = session.theme or DEFAULT_THEME
    return [
        f"{t}{C_BOLD}Welcome to wikiterm{C_RESET}",
        "",
        "Controls",
        "────────",
        "  /      : Search",
        "  Enter  : Select Article",
        "  j / k  : Scroll",
        "  :      : Jump to Chapter",
        "  c      : Chapters Mode",
        "  q      : Quit",
    ]


def _results(session, width, height):
    t = session.theme or DEFAULT_THEME
    lines = [f"{t}=== SEARCH RESULTS ==={C_RESET}", ""]
    if not session.results:
        return lines + ["No results."]

    per_row = 2
    visible = max(1, (height - len(lines)) // per_row)
    first = max(0, session.selected - visible + 1)
    for i, r in enumerate(session.results[first:first + visible], first):
        label = f" {i + 1}. {shorten_middle(r.title, width - 6)} "
        lines.append(f"{C_SEL}{label}{C_RESET}" if i == session.selected else label)
        lines.append(f"    {C_DIM}{shorten_middle(r.snippet, width - 6)}{C_RESET}")
    return lines


def _chapters(session, width, height):
    t = session.theme or DEFAULT_THEME
    lines = [f"{t}=== CHAPTERS ==={C_RESET}", ""]
    chapters = session.article.chapters
    if not chapters:
        return lines + ["No chapters."]

    selected = session.chapter_selected or 0
    visible = max(1, height - len(lines))
    first = max(0, selected - visible + 1)
    for i, ch in enumerate(chapters[first:first + visible], first):
        label = shorten_middle(f"{ch.index}. {ch.title}", width - 2)
        lines.append(f"{C_SEL}{label}{C_RESET}" if i == selected else label)
    return lines


def _reading(session, width, height, rows):
    t = session.theme or DEFAULT_THEME
    title = shorten_middle(session.article.title, width)
    body_height = max(1, height - 1)
    # scrolling has no ceiling, clip it here
    start = min(session.scroll, max(0, len(rows) - body_height))
    return [f"{t}{C_BOLD}{title}{C_RESET}"] + rows[start:start + body_height]


def _status(session):
    state = session.state
    if state is State.SEARCHING:
        return f"{C_CMD}Search:{C_RESET} {session.input}"
    if state is State.COMMAND:
        return f"{C_CMD}:{C_RESET}{session.input}"
    if state is State.READING:
        return f"{C_CMD}j/k=scroll  c=chapters  :=jump  /=search  Esc=results  q=quit{C_RESET}"
    if state is State.CHAPTERS:
        return f"{C_CMD}j/k=move  Enter=jump  c/Esc=back  q=quit{C_RESET}"
    return f"{C_CMD}[ /: Search ] [ q: Quit ] [ Enter: Select ]{C_RESET}"


def draw(session, width, height):
    """Build the whole screen for the session.

    Returns ``(text, chapter_rows)``; ``chapter_rows`` is None outside the
    reading views.
    """
    body_height = max(1, height - 1)
    chapter_rows = None
    state = session.state

    if state in (State.READING, State.COMMAND, State.CHAPTERS):
        rows, chapter_rows = layout_article(
            session.article, max(10, width - 1), session.images,
            session.theme or DEFAULT_THEME,
        )
        if state is State.CHAPTERS:
            lines = _chapters(session, width, body_height)
        else:
            lines = _reading(session, width, body_height, rows)
    elif state is State.RESULTS:
        lines = _results(session, width, body_height)
    elif state is State.LOADING:
        lines = ["", f"{session.theme or DEFAULT_THEME}Fetching...{C_RESET}"]
    elif state is State.ERROR:
        lines = [f"{C_ERR}Error: {session.error}{C_RESET}"]
    else:
        lines = _home(session, width, body_height)

    lines = lines[:body_height]
    lines += [""] * (body_height - len(lines))
    lines.append(_status(session))
    return "\r\n".join(lines), chapter_rows
