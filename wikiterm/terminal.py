import os
import select
import shutil
import sys
import termios
import tty
from contextlib import contextmanager

from .models import (
    KEY_BACKSPACE, KEY_DOWN, KEY_ENTER, KEY_ESC, KEY_LEFT, KEY_RIGHT, KEY_UP,
)

ARROWS = {"[A": KEY_UP, "[B": KEY_DOWN, "[C": KEY_RIGHT, "[D": KEY_LEFT}

ENTER_ALT_SCREEN = "\033[?1049h\033[?25l"
LEAVE_ALT_SCREEN = "\033[?25h\033[?1049l"


@contextmanager
def raw_terminal(stream=None):
    """Raw mode on the alternate screen; the old mode comes back on any exit."""
    stream = stream or sys.stdin
    fd = stream.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        sys.stdout.write(ENTER_ALT_SCREEN)
        sys.stdout.flush()
        yield fd
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
        sys.stdout.write(LEAVE_ALT_SCREEN)
        sys.stdout.flush()


def _ready(fd, timeout):
    readable, _, _ = select.select([fd], [], [], timeout)
    return bool(readable)


def _read_char(fd):
    return os.read(fd, 1).decode("utf-8", errors="ignore")


def read_key(fd, timeout):
    """Wait up to ``timeout`` seconds for a key. None when nothing arrived."""
    if not _ready(fd, timeout):
        return None
    ch = _read_char(fd)

    # Arrow keys start with ESC
    if ch == "\x1b":
        if not _ready(fd, 0.01):
            return KEY_ESC
        seq = _read_char(fd)
        if _ready(fd, 0.01):
            seq += _read_char(fd)
        return ARROWS.get(seq, KEY_ESC)

    if ch in ("\r", "\n"):
        return KEY_ENTER

    # Backspace normalization
    if ch in ("\x7f", "\x08"):
        return KEY_BACKSPACE

    return ch


def terminal_size():
    size = shutil.get_terminal_size()
    return size.columns, size.lines


def write_screen(text):
    sys.stdout.write("\033[H\033[2J" + text)
    sys.stdout.flush()
