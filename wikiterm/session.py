"""Session state machine.

``step`` and ``apply_event`` never touch the network or the terminal: they
take the current session and an input, and return the next session plus the
effects (actions to submit, or ``QUIT``) the caller must carry out.
"""

from dataclasses import replace

from .models import (
    KEY_BACKSPACE, KEY_DOWN, KEY_ENTER, KEY_ESC, KEY_UP,
    ArticleLoaded, DownloadImage, Failure, FetchArticle, ImageDownloaded,
    Search, SearchResults, State, ThemeChanged,
)

QUIT = "quit"

# rendered rows assumed per block when the exact layout is unknown
ROWS_PER_BLOCK = 10


def _is_char(key):
    return key is not None and len(key) == 1 and key.isprintable()


def chapter_row(session, chapter):
    return session.chapter_rows.get(chapter.index, chapter.block_position * ROWS_PER_BLOCK)


# ========= KEY HANDLERS =========
def _navigate(session, key):
    """Home, loading, result list and error screens."""
    abandoning = session.state is State.LOADING
    gen = session.generation + 1 if abandoning else session.generation

    if key == "q":
        return session, [QUIT]
    if key == KEY_ESC:
        return replace(session, state=State.HOME, generation=gen), []
    if key == "/":
        return replace(session, state=State.SEARCHING, input="", generation=gen), []

    if session.state is not State.RESULTS:
        return session, []

    if key == KEY_ENTER:
        if 0 <= session.selected < len(session.results):
            title = session.results[session.selected].title
            gen = session.generation + 1
            return (
                replace(session, state=State.LOADING, generation=gen),
                [FetchArticle(title, gen)],
            )
        return session, []
    if key in ("j", KEY_DOWN):
        if session.selected < len(session.results) - 1:
            return replace(session, selected=session.selected + 1), []
        return session, []
    if key in ("k", KEY_UP):
        if session.selected > 0:
            return replace(session, selected=session.selected - 1), []
        return session, []
    return session, []


def _searching(session, key):
    if key == KEY_ESC:
        return replace(session, state=State.HOME, input=""), []
    if key == KEY_ENTER:
        if not session.input:
            return session, []
        gen = session.generation + 1
        return (
            replace(session, state=State.LOADING, generation=gen),
            [Search(session.input, gen)],
        )
    if key == KEY_BACKSPACE:
        return replace(session, input=session.input[:-1]), []
    if _is_char(key):
        return replace(session, input=session.input + key), []
    return session, []


def _command(session, key):
    if key == KEY_ESC:
        return replace(session, state=State.READING, input=""), []
    if key == KEY_ENTER:
        scroll = session.scroll
        try:
            wanted = int(session.input)
        except ValueError:
            wanted = None
        for chapter in session.article.chapters:
            if chapter.index == wanted:
                scroll = chapter_row(session, chapter)
                break
        return replace(session, state=State.READING, input="", scroll=scroll), []
    if key == KEY_BACKSPACE:
        return replace(session, input=session.input[:-1]), []
    if _is_char(key):
        return replace(session, input=session.input + key), []
    return session, []


def _reading(session, key):
    if key == "q":
        return session, [QUIT]
    if key == KEY_ESC:
        return replace(session, state=State.RESULTS), []
    if key == "/":
        return replace(session, state=State.SEARCHING, input=""), []
    if key == ":":
        return replace(session, state=State.COMMAND, input=""), []
    if key == "c":
        selected = session.chapter_selected
        if selected is None and session.article.chapters:
            selected = 0
        return replace(session, state=State.CHAPTERS, chapter_selected=selected), []
    if key in ("j", KEY_DOWN):
        return replace(session, scroll=session.scroll + 1), []
    if key in ("k", KEY_UP):
        return replace(session, scroll=max(0, session.scroll - 1)), []
    return session, []


def _chapters(session, key):
    chapters = session.article.chapters
    current = session.chapter_selected or 0

    if key == "q":
        return session, [QUIT]
    if key in (KEY_ESC, "c"):
        return replace(session, state=State.READING), []
    if key in ("j", KEY_DOWN):
        if current < len(chapters) - 1:
            return replace(session, chapter_selected=current + 1), []
        return session, []
    if key in ("k", KEY_UP):
        if current > 0:
            return replace(session, chapter_selected=current - 1), []
        return session, []
    if key == KEY_ENTER:
        scroll = session.scroll
        if session.chapter_selected is not None and session.chapter_selected < len(chapters):
            scroll = chapter_row(session, chapters[session.chapter_selected])
        return replace(session, state=State.READING, scroll=scroll), []
    return session, []


HANDLERS = {
    State.SEARCHING: _searching,
    State.COMMAND: _command,
    State.READING: _reading,
    State.CHAPTERS: _chapters,
}


def step(session, key):
    """Apply one key press. Returns ``(session, effects)``."""
    handler = HANDLERS.get(session.state, _navigate)
    return handler(session, key)


# ========= EVENTS =========
def apply_event(session, event):
    """Apply one background event. Returns ``(session, effects)``."""
    if isinstance(event, ThemeChanged):
        return replace(session, theme=event.color), []

    # results of requests the user has since walked away from
    if getattr(event, "generation", session.generation) != session.generation:
        return session, []

    if isinstance(event, SearchResults):
        if session.state is not State.LOADING:
            return session, []
        return replace(session, state=State.RESULTS, results=list(event.results), selected=0), []

    if isinstance(event, ArticleLoaded):
        article = event.article
        nxt = replace(
            session,
            state=State.READING,
            article=article,
            scroll=0,
            images={},
            chapter_rows={},
            chapter_selected=0 if article.chapters else None,
        )
        return nxt, [DownloadImage(url, session.generation) for url in article.image_urls]

    if isinstance(event, ImageDownloaded):
        if event.url in session.images:
            return session, []
        images = dict(session.images)
        images[event.url] = event.image
        return replace(session, images=images), []

    if isinstance(event, Failure):
        return replace(session, state=State.ERROR, error=event.message), []

    return session, []
