"""Entry point tests."""

from pathlib import Path

import pytest

from newsgate.core.config import Settings, settings
from newsgate.main import build_server, main, parse_args


def test_parse_args_defaults():
    args = parse_args([])

    assert args.port == settings.LISTEN_PORT
    assert args.feeds == settings.FEED_URL_FILE


def test_parse_args_single_dash_flags():
    args = parse_args(["-port", "8023", "-feeds", "feeds.txt", "-host", "127.0.0.1"])

    assert args.port == 8023
    assert args.feeds == "feeds.txt"
    assert args.host == "127.0.0.1"


def test_default_settings():
    defaults = Settings(_env_file=None)

    assert defaults.LISTEN_PORT == 7300
    assert defaults.FEED_URL_FILE == "rssfeed.url"
    assert defaults.HTTP_TIMEOUT_SEC == 10.0
    assert defaults.MAX_HEADLINES == 18


def test_build_server_loads_feeds(tmp_path: Path):
    feeds = tmp_path / "rssfeed.url"
    feeds.write_text("http://a\nhttp://b\n", encoding="utf-8")

    server = build_server(parse_args(["-feeds", str(feeds), "-port", "7301"]))

    assert server.port == 7301
    assert server.registry.urls == ("http://a", "http://b")
    assert server.registry.current() == "http://a"


def test_main_fails_fast_on_missing_feed_list(tmp_path: Path):
    assert main(["-feeds", str(tmp_path / "missing.url")]) == 1


@pytest.mark.parametrize("port", ["0", "70000", "99999999999999999999", "telnet"])
def test_parse_args_rejects_invalid_port(port, capsys):
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["-port", port])

    assert exc_info.value.code == 2
    assert "port" in capsys.readouterr().err


def test_parse_args_accepts_port_bounds():
    assert parse_args(["-port", "1"]).port == 1
    assert parse_args(["-port", "65535"]).port == 65535


def test_main_rejects_out_of_range_port_before_binding(tmp_path: Path):
    feeds = tmp_path / "rssfeed.url"
    feeds.write_text("http://a\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        main(["-port", "70000", "-feeds", str(feeds)])

    assert exc_info.value.code == 2
