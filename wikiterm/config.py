import logging
import os
import string
import threading
from pathlib import Path

from .models import ThemeChanged

logger = logging.getLogger("wikiterm.config")

# ========= PERSISTENT CONFIG =========
DEFAULT_THEME = "\033[93m"

DEFAULT_CONFIG = {
    "theme_color": DEFAULT_THEME,
    "search_limit": 10,
    "log_level": "INFO",
}

POLL_INTERVAL = 1.0


def config_path():
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(base) / "wikiterm" / "wikiterm.conf"


def state_dir():
    base = os.environ.get("XDG_STATE_HOME") or os.path.expanduser("~/.local/state")
    return Path(base) / "wikiterm"


def parse_theme_color(value):
    """``#RRGGBB`` to a 24-bit ANSI foreground escape, or None."""
    if len(value) != 7 or not value.startswith("#"):
        return None
    if not all(c in string.hexdigits for c in value[1:]):
        return None
    r, g, b = (int(value[i:i + 2], 16) for i in (1, 3, 5))
    return f"\033[38;2;{r};{g};{b}m"


def read_settings(path):
    """Raw ``key = value`` pairs from the config file, empty when unreadable."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return {}

    settings = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        settings[key.strip()] = val.strip().strip('"').strip("'")
    return settings


def load_config(path=None):
    cfg = DEFAULT_CONFIG.copy()
    data = read_settings(path or config_path())

    color = parse_theme_color(data.get("theme_color", ""))
    if color:
        cfg["theme_color"] = color

    limit = data.get("search_limit", "")
    if limit.isdigit():
        cfg["search_limit"] = min(50, max(1, int(limit)))

    if data.get("log_level"):
        cfg["log_level"] = data["log_level"]
    return cfg


def load_theme(path=None):
    return load_config(path)["theme_color"]


# ========= THEME WATCHER =========
class ThemeWatcher:
    """Polls the config file and reports theme colour changes."""

    def __init__(self, publish, path=None, interval=POLL_INTERVAL):
        self.publish = publish
        self.path = path or config_path()
        self.interval = interval
        self.last = load_theme(self.path)
        self._stop = threading.Event()
        self._thread = None

    def poll_once(self):
        color = load_theme(self.path)
        if color == self.last:
            return None
        self.last = color
        logger.info("theme changed path=%s", self.path)
        return ThemeChanged(color)

    def run(self):
        while not self._stop.wait(self.interval):
            event = self.poll_once()
            if event is not None:
                self.publish(event)

    def start(self):
        self._thread = threading.Thread(target=self.run, name="wikiterm-config", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(self.interval + 1)
