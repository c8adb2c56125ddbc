"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from shared.config import GOOGLE_CERTS_URL, get_config, missing_settings
from service_identity.app.main import main

REQUIRED_ENV = {
    "PORT": "8080",
    "FIREBASE_PROJECT_ID": "test-project-123",
    "FIREBASE_API_KEY": "AIzaSyTestKey",
    "FIREBASE_AUTH_DOMAIN": "test-project-123.firebaseapp.com",
}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Environment without any identity settings and no .env file."""
    monkeypatch.chdir(tmp_path)
    for name in list(REQUIRED_ENV) + ["FIREBASE_AUTH_EMULATOR_HOST", "GOOGLE_CERTS_URL", "LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_loads_from_environment(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)

    config = get_config()

    assert config.port == 8080
    assert config.expected_audience == "test-project-123"
    assert config.google_certs_url == GOOGLE_CERTS_URL
    assert config.certs_http_timeout == 10.0
    assert config.emulator_enabled is False


def test_emulator_host_enables_emulator(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    clean_env.setenv("FIREBASE_AUTH_EMULATOR_HOST", "firebase-emulator:9099")

    config = get_config()

    assert config.emulator_enabled is True
    assert config.firebase_auth_emulator_host == "firebase-emulator:9099"


def test_missing_required_settings(clean_env):
    clean_env.setenv("PORT", "8080")

    with pytest.raises(ValidationError) as exc_info:
        get_config()

    assert missing_settings(exc_info.value) == [
        "FIREBASE_PROJECT_ID",
        "FIREBASE_API_KEY",
        "FIREBASE_AUTH_DOMAIN",
    ]


def test_empty_project_id_is_rejected(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    clean_env.setenv("FIREBASE_PROJECT_ID", "")

    with pytest.raises(ValidationError) as exc_info:
        get_config()

    assert missing_settings(exc_info.value) == ["FIREBASE_PROJECT_ID"]


def test_config_is_immutable(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    config = get_config()

    with pytest.raises(ValidationError):
        config.firebase_project_id = "someone-else"


def test_main_refuses_to_start_without_config(clean_env):
    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1
