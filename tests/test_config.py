import os
from pathlib import Path

import pytest

from chat_relay.config import DEFAULT_MODEL, Settings

_VARS = (
    "GROQ_API_KEY", "GROQ_MODEL", "GROQ_BASE_URL", "GROQ_TIMEOUT", "GROQ_MAX_RETRIES",
    "PRICE_API_URL", "PRICE_TIMEOUT", "HOST", "PORT", "PORT_ATTEMPTS", "STATIC_DIR", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a stray .env in the working tree from leaking in
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = Settings.from_env()
    assert settings.groq_api_key is None
    assert not settings.groq_configured
    assert settings.groq_model == DEFAULT_MODEL == "llama-3.1-8b-instant"
    assert settings.port == 3000
    assert settings.static_dir == Path("public")


def test_overrides(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk_test")
    monkeypatch.setenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.groq_configured
    assert settings.groq_model == "llama-3.3-70b-versatile"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


def test_blank_key_means_offline(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "   ")
    assert not Settings.from_env().groq_configured


def test_env_file_does_not_override_environment(monkeypatch, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("GROQ_MODEL=from-file\nPORT=4000\n")
    monkeypatch.setenv("GROQ_MODEL", "from-env")

    try:
        settings = Settings.from_env(env_file)
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("PORT", None)

    assert settings.groq_model == "from-env"
    assert settings.port == 4000


def test_bad_number(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ValueError, match="PORT"):
        Settings.from_env()
