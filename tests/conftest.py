"""Pytest configuration and shared fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep IRC_HOOK_* variables and stray .env files out of every test."""
    for key in list(os.environ):
        if key.startswith("IRC_HOOK_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def base_settings():
    """Minimal valid settings kwargs."""
    return {
        "nick": "hookbot",
        "server": "irc.example.net",
        "search_pattern": r"\d(.+?)\d",
        "webhook_url": "https://hooks.example.com/notify",
        "body_template": '{"text": "${1}"}',
    }


@pytest.fixture
def config_file(tmp_path):
    """Write a TOML config file and return its path."""
    path = tmp_path / "irc-hook.toml"
    path.write_text(
        'nick = "hookbot"\n'
        'server = "irc.example.net"\n'
        'channels = ["#builds"]\n'
        'search_pattern = "\\\\d(.+?)\\\\d"\n'
        'webhook_url = "https://hooks.example.com/notify"\n'
        "body_template = '{\"text\": \"${1}\"}'\n"
        "\n"
        "[headers]\n"
        '"Content-Type" = "application/json"\n'
        '"X-Match" = "${0}"\n'
    )
    return str(path)
