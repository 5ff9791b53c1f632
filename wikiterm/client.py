import logging

import requests

from .extractor import extract
from .markup_text import markup_to_text
from .models import Article, SearchResult
from .normalizer import clean_infobox_text
from .sanitizer import sanitize

logger = logging.getLogger("wikiterm.client")

API_URL = "https://en.wikipedia.org/w/api.php"
USER_AGENT = "wikiterm/0.1.0"
TIMEOUT = 15
INFOBOX_WIDTH = 50


class WikiClientError(Exception):
    pass


class WikiClient:
    def __init__(self, api_url=API_URL, user_agent=USER_AGENT, timeout=TIMEOUT):
        self.api_url = api_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def _get(self, url, params=None):
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise WikiClientError(f"request failed: {e}") from e
        return r

    def _get_json(self, params):
        r = self._get(self.api_url, params)
        try:
            return r.json()
        except ValueError as e:
            raise WikiClientError(f"invalid response: {e}") from e

    def search(self, query, limit=10):
        data = self._get_json({
            "action": "opensearch",
            "search": query,
            "limit": str(limit),
            "namespace": "0",
            "format": "json",
        })
        if not isinstance(data, list) or len(data) < 4:
            raise WikiClientError("unexpected search response")

        titles, urls = data[1], data[3]
        if not isinstance(titles, list) or not isinstance(urls, list):
            raise WikiClientError("unexpected search response")
        return [SearchResult(str(t), str(u)) for t, u in zip(titles, urls)]

    def fetch_markup(self, title):
        data = self._get_json({
            "action": "parse",
            "format": "json",
            "prop": "text",
            "page": title,
            "redirects": "1",
        })
        if isinstance(data, dict) and "error" in data:
            err = data["error"]
            info = err.get("info") if isinstance(err, dict) else None
            raise WikiClientError(info or "unknown error")
        try:
            html = data["parse"]["text"]["*"]
        except (KeyError, TypeError) as e:
            raise WikiClientError(f"no article markup for {title!r}") from e
        if not isinstance(html, str):
            raise WikiClientError(f"no article markup for {title!r}")
        return html

    def fetch_bytes(self, url):
        return self._get(url).content


def parse_article(title, html):
    infobox_html, body = sanitize(html)
    infobox = ""
    if infobox_html:
        infobox = clean_infobox_text(markup_to_text(infobox_html, INFOBOX_WIDTH))

    blocks, images, chapters = extract(body)
    logger.debug(
        "parsed article title=%s blocks=%d images=%d chapters=%d",
        title, len(blocks), len(images), len(chapters),
    )
    return Article(title, infobox, tuple(blocks), tuple(chapters))


def load_article(client, title):
    return parse_article(title, client.fetch_markup(title))
