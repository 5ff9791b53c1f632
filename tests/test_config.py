from pathlib import Path

import pytest

from wikiterm.config import (
    DEFAULT_THEME,
    ThemeWatcher,
    config_path,
    load_config,
    load_theme,
    parse_theme_color,
)
from wikiterm.models import ThemeChanged


@pytest.fixture
def conf(tmp_path: Path) -> Path:
    return tmp_path / "wikiterm.conf"


def test_parse_theme_color() -> None:
    assert parse_theme_color("#ff8000") == "\033[38;2;255;128;0m"
    assert parse_theme_color("ff8000") is None
    assert parse_theme_color("#ff80") is None
    assert parse_theme_color("#gg0000") is None
    assert parse_theme_color("") is None


def test_missing_file_uses_defaults(conf: Path) -> None:
    cfg = load_config(conf)
    assert cfg == {"theme_color": DEFAULT_THEME, "search_limit": 10, "log_level": "INFO"}


def test_reads_quoted_values_and_ignores_noise(conf: Path) -> None:
    conf.write_text(
        "# my settings\n"
        "not a setting\n"
        "theme_color = \"#00ff00\"\n"
        "search_limit='25'\n"
        "unknown = 1\n",
        encoding="utf-8",
    )
    cfg = load_config(conf)
    assert cfg["theme_color"] == "\033[38;2;0;255;0m"
    assert cfg["search_limit"] == 25


def test_malformed_values_fall_back(conf: Path) -> None:
    conf.write_text("theme_color = #12345\nsearch_limit = lots\n", encoding="utf-8")
    cfg = load_config(conf)
    assert cfg["theme_color"] == DEFAULT_THEME
    assert cfg["search_limit"] == 10


@pytest.mark.parametrize("value", ["#-1-1-1", "#+f+f+f", "# 1 2 3", "#0x1234"])
def test_signed_or_spaced_hex_falls_back(conf: Path, value: str) -> None:
    conf.write_text(f"theme_color = {value}\n", encoding="utf-8")
    assert parse_theme_color(value) is None
    assert load_config(conf)["theme_color"] == DEFAULT_THEME


def test_search_limit_is_clamped(conf: Path) -> None:
    conf.write_text("search_limit = 500\n", encoding="utf-8")
    assert load_config(conf)["search_limit"] == 50


def test_config_path_honours_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert config_path() == tmp_path / "wikiterm" / "wikiterm.conf"


def test_watcher_reports_only_changes(conf: Path) -> None:
    published = []
    watcher = ThemeWatcher(published.append, path=conf)
    assert watcher.last == DEFAULT_THEME
    assert watcher.poll_once() is None

    conf.write_text("theme_color = #0000ff\n", encoding="utf-8")
    assert watcher.poll_once() == ThemeChanged("\033[38;2;0;0;255m")
    assert watcher.poll_once() is None

    conf.write_text("theme_color = broken\n", encoding="utf-8")
    assert watcher.poll_once() == ThemeChanged(DEFAULT_THEME)
    assert load_theme(conf) == DEFAULT_THEME


def test_watcher_thread_publishes(conf: Path) -> None:
    published = []
    watcher = ThemeWatcher(published.append, path=conf, interval=0.01)
    conf.write_text("theme_color = #010203\n", encoding="utf-8")
    watcher.start()
    try:
        for _ in range(200):
            if published:
                break
            watcher._stop.wait(0.01)
    finally:
        watcher.stop()
    assert published == [ThemeChanged("\033[38;2;1;2;3m")]
