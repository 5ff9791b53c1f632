from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Text lines carrying this prefix are section headers, styled on render.
HEADER_MARKER = "###HEADER###"

# ========= KEYS =========
KEY_UP = "UP"
KEY_DOWN = "DOWN"
KEY_LEFT = "LEFT"
KEY_RIGHT = "RIGHT"
KEY_ENTER = "ENTER"
KEY_ESC = "ESC"
KEY_BACKSPACE = "BACKSPACE"


# ========= CONTENT =========
@dataclass(frozen=True)
class SearchResult:
    title: str
    snippet: str  # article URL, as returned by opensearch


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ImageBlock:
    url: str


@dataclass(frozen=True)
class Chapter:
    index: int
    title: str
    block_position: int


@dataclass(frozen=True)
class Article:
    title: str = ""
    infobox: str = ""
    blocks: tuple = ()
    chapters: tuple = ()

    @property
    def image_urls(self):
        return [b.url for b in self.blocks if isinstance(b, ImageBlock)]


# ========= ACTIONS =========
@dataclass(frozen=True)
class Search:
    query: str
    generation: int = 0


@dataclass(frozen=True)
class FetchArticle:
    title: str
    generation: int = 0


@dataclass(frozen=True)
class DownloadImage:
    url: str
    generation: int = 0


# ========= EVENTS =========
@dataclass(frozen=True)
class SearchResults:
    results: tuple
    generation: int = 0


@dataclass(frozen=True)
class ArticleLoaded:
    article: Article
    generation: int = 0


@dataclass(frozen=True)
class ImageDownloaded:
    url: str
    image: Any
    generation: int = 0


@dataclass(frozen=True)
class ThemeChanged:
    color: str


@dataclass(frozen=True)
class Failure:
    message: str
    generation: int = 0


# ========= SESSION =========
class State(Enum):
    HOME = "home"
    SEARCHING = "searching"
    COMMAND = "command"
    CHAPTERS = "chapters"
    LOADING = "loading"
    RESULTS = "results"
    READING = "reading"
    ERROR = "error"


@dataclass
class Session:
    state: State = State.HOME
    input: str = ""
    results: List[SearchResult] = field(default_factory=list)
    selected: int = 0
    article: Article = field(default_factory=Article)
    scroll: int = 0
    chapter_selected: Optional[int] = None
    images: Dict[str, Any] = field(default_factory=dict)
    theme: Optional[str] = None
    error: str = ""
    generation: int = 0
    # exact rendered row of each chapter index, filled in by the renderer
    chapter_rows: Dict[int, int] = field(default_factory=dict)
