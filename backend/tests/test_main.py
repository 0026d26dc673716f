import logging

import main


def test_resolve_port_keeps_configured_port():
    assert main.resolve_port(8765) == 8765


def test_resolve_port_zero_picks_free_port():
    port = main.resolve_port(0)
    assert 0 < port < 65536


def test_configure_logging_accepts_lowercase_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    main.configure_logging("info")
    assert calls["level"] == "INFO"
