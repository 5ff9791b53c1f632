"""Background execution of session actions.

Actions go in on one queue, events come out on another. Every action runs on
its own thread so a slow download never holds up a search.
"""

import logging
import queue
import threading
from io import BytesIO

from PIL import Image

from .client import WikiClientError, load_article
from .models import (
    ArticleLoaded, DownloadImage, Failure, FetchArticle, ImageDownloaded,
    Search, SearchResults,
)

logger = logging.getLogger("wikiterm.orchestrator")

_STOP = object()


def decode_image(data):
    img = Image.open(BytesIO(data))
    img.load()
    return img


class TaskOrchestrator:
    def __init__(self, client, search_limit=10):
        self.client = client
        self.search_limit = search_limit
        self.actions = queue.Queue()
        self.events = queue.Queue()
        self._dispatcher = None

    def start(self):
        self._dispatcher = threading.Thread(
            target=self._run, name="wikiterm-dispatch", daemon=True
        )
        self._dispatcher.start()

    def submit(self, action):
        self.actions.put(action)

    def publish(self, event):
        self.events.put(event)

    def drain(self):
        """Return every event available right now, without waiting."""
        out = []
        while True:
            try:
                out.append(self.events.get_nowait())
            except queue.Empty:
                return out

    def shutdown(self, timeout=1.0):
        self.actions.put(_STOP)
        if self._dispatcher is not None:
            self._dispatcher.join(timeout)

    def _run(self):
        while True:
            action = self.actions.get()
            if action is _STOP:
                return
            logger.debug("dispatch %s", action)
            self._spawn(self.execute, action)

    def _spawn(self, target, *args):
        threading.Thread(target=target, args=args, daemon=True).start()

    # ========= WORK UNITS =========
    def execute(self, action):
        if isinstance(action, Search):
            self._search(action)
        elif isinstance(action, FetchArticle):
            # parsing runs apart from the dispatching unit
            self._spawn(self._fetch_article, action)
        elif isinstance(action, DownloadImage):
            self._download_image(action)
        else:
            logger.warning("unknown action %r", action)

    def _search(self, action):
        try:
            results = self.client.search(action.query, self.search_limit)
        except WikiClientError as e:
            logger.warning("search failed query=%s error=%s", action.query, e)
            self.publish(Failure(f"Search failed: {e}", action.generation))
            return
        except Exception as e:
            logger.exception("search crashed query=%s", action.query)
            self.publish(Failure(f"Search failed: {e}", action.generation))
            return
        self.publish(SearchResults(tuple(results), action.generation))

    def _fetch_article(self, action):
        try:
            article = load_article(self.client, action.title)
        except WikiClientError as e:
            logger.warning("article fetch failed title=%s error=%s", action.title, e)
            self.publish(Failure(f"Could not load {action.title}: {e}", action.generation))
            return
        except Exception as e:
            logger.exception("article parse crashed title=%s", action.title)
            self.publish(Failure(f"Could not load {action.title}: {e}", action.generation))
            return
        self.publish(ArticleLoaded(article, action.generation))

    def _download_image(self, action):
        try:
            image = decode_image(self.client.fetch_bytes(action.url))
        except (WikiClientError, OSError, Image.DecompressionBombError) as e:
            logger.warning("image download failed url=%s error=%s", action.url, e)
            return
        self.publish(ImageDownloaded(action.url, image, action.generation))
