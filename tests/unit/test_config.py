from __future__ import annotations

import sys

import pytest
from dotenv import dotenv_values
from pydantic import ValidationError

from core.config import DEFAULT_SERVICE_URL, ConversationSettings


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("CONVERSATION_USERNAME", "alice")
    monkeypatch.setenv("CONVERSATION_PASSWORD", "secret")
    monkeypatch.setenv("CONVERSATION_VERSION", "2018-02-16")
    monkeypatch.delenv("CONVERSATION_SERVICE_URL", raising=False)

    settings = ConversationSettings(_env_file=None)

    assert settings.has_credentials
    assert settings.version == "2018-02-16"
    assert settings.service_url == DEFAULT_SERVICE_URL


def test_settings_reject_bad_version(monkeypatch):
    monkeypatch.setenv("CONVERSATION_VERSION", "May 2017")

    with pytest.raises(ValidationError):
        ConversationSettings(_env_file=None)


def test_saved_values_are_read_back(tmp_path, monkeypatch):
    monkeypatch.delenv("CONVERSATION_USERNAME", raising=False)
    monkeypatch.delenv("CONVERSATION_PASSWORD", raising=False)
    env_file = ConversationSettings.save_user_values(
        {"CONVERSATION_USERNAME": "bob", "CONVERSATION_PASSWORD": "p#ss word"},
        env_path=tmp_path / "conf" / ".env",
    )

    settings = ConversationSettings(_env_file=env_file)

    assert (settings.username, settings.password) == ("bob", "p#ss word")


def test_save_user_values_merges_and_skips_none(tmp_path):
    env_path = tmp_path / ".env"
    ConversationSettings.save_user_values({"B": "2", "A": "1"}, env_path=env_path)
    ConversationSettings.save_user_values({"A": "3", "C": None}, env_path=env_path)

    assert dotenv_values(env_path) == {"B": "2", "A": "3"}


@pytest.mark.skipif(sys.platform != "linux", reason="XDG config dir is Linux only")
def test_user_env_file_follows_xdg_config_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert ConversationSettings.user_env_file() == tmp_path / "conversation-client" / ".env"
