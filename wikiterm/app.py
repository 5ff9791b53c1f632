import argparse
import logging
import time
from dataclasses import replace

from . import __version__
from .client import USER_AGENT, WikiClient
from .config import ThemeWatcher, config_path, load_config, state_dir
from .logging_config import configure_logging
from .models import Search, Session, State
from .orchestrator import TaskOrchestrator
from .render import draw
from .session import QUIT, apply_event, step
from .terminal import raw_terminal, read_key, terminal_size, write_screen

logger = logging.getLogger("wikiterm.app")

TICK = 0.1


class Reader:
    """Owns the session and ties the state machine to the outside world."""

    def __init__(self, orchestrator, session):
        self.orchestrator = orchestrator
        self.session = session
        self.running = True

    def _carry_out(self, effects):
        for effect in effects:
            if effect == QUIT:
                self.running = False
            else:
                self.orchestrator.submit(effect)

    def on_key(self, key):
        self.session, effects = step(self.session, key)
        self._carry_out(effects)

    def on_events(self):
        events = self.orchestrator.drain()
        for event in events:
            self.session, effects = apply_event(self.session, event)
            self._carry_out(effects)
        return bool(events)

    def render(self, width, height):
        screen, chapter_rows = draw(self.session, width, height)
        if chapter_rows is not None and chapter_rows != self.session.chapter_rows:
            self.session = replace(self.session, chapter_rows=chapter_rows)
        return screen


def run(reader, fd):
    last_size = None
    dirty = True
    last_tick = time.monotonic()

    while reader.running:
        size = terminal_size()
        if dirty or size != last_size:
            write_screen(reader.render(*size))
            last_size = size
            dirty = False

        wait = max(0.0, TICK - (time.monotonic() - last_tick))
        key = read_key(fd, wait)
        if key is not None:
            reader.on_key(key)
            dirty = True
        if reader.on_events():
            dirty = True
        if time.monotonic() - last_tick >= TICK:
            last_tick = time.monotonic()


def build_parser():
    parser = argparse.ArgumentParser(prog="wikiterm", description="Read Wikipedia in the terminal.")
    parser.add_argument("query", nargs="*", help="search right away for this")
    parser.add_argument("--log-level", help="override the configured log level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    cfg = load_config()
    log_file = configure_logging(args.log_level or cfg["log_level"], state_dir())
    logger.info("session start config=%s log=%s", config_path(), log_file)

    orchestrator = TaskOrchestrator(WikiClient(user_agent=USER_AGENT), cfg["search_limit"])
    watcher = ThemeWatcher(orchestrator.publish)
    session = Session(theme=cfg["theme_color"])
    reader = Reader(orchestrator, session)

    query = " ".join(args.query).strip()
    if query:
        reader.session = replace(session, state=State.LOADING, input=query, generation=1)
        orchestrator.submit(Search(query, 1))

    orchestrator.start()
    watcher.start()
    try:
        with raw_terminal() as fd:
            run(reader, fd)
    finally:
        watcher.stop()
        orchestrator.shutdown()
        logger.info("session stop")
    return 0
