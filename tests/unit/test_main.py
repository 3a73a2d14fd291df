"""Tests for the todo-server command line."""

from __future__ import annotations

import logging
import socket
from collections.abc import Iterator

import pytest

from todo_server.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("PORT", "HOST", "SENTRY_DSN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_parser_options() -> None:
    args = build_parser().parse_args(["--host", "127.0.0.1", "--port", "8080"])
    assert args.host == "127.0.0.1"
    assert args.port == 8080


def test_parser_defaults_to_settings() -> None:
    args = build_parser().parse_args([])
    assert args.host is None
    assert args.port is None


def test_exit_code_on_bind_failure() -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen()
        port = sock.getsockname()[1]
        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 1


def test_exit_code_on_invalid_settings(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("PORT", "not-a-port")
    assert main([]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


@pytest.mark.parametrize("port", ["70000", "-1"])
def test_exit_code_on_port_out_of_range(
    port: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["--host", "127.0.0.1", "--port", port]) == 1
    out = capsys.readouterr().out
    assert "CRITICAL" in out
    assert "Server failed to start" in out
    assert "🚀" not in out
