from __future__ import annotations

from pathlib import Path

import pytest
import voluptuous as vol

from veeam_job_sensor.config import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    Settings,
    load_settings,
    resolve_private_key_path,
)


def test_defaults_without_environment() -> None:
    assert load_settings(environ={}) == Settings(port=DEFAULT_PORT, timeout=DEFAULT_TIMEOUT)


def test_reads_environment() -> None:
    settings = load_settings(
        environ={
            "VEEAM_SSH_USER": "svc-prtg",
            "VEEAM_SSH_PASSWORD": "secret",
            "VEEAM_SSH_PORT": "2222",
            "VEEAM_SSH_TIMEOUT": "45",
            "VEEAM_SENSOR_DEBUG": "yes",
        }
    )

    assert settings.username == "svc-prtg"
    assert settings.password == "secret"
    assert settings.port == 2222
    assert settings.timeout == 45
    assert settings.debug is True


def test_overrides_win_over_environment() -> None:
    settings = load_settings(
        {"username": "cli-user", "port": "2200", "password": None},
        environ={"VEEAM_SSH_USER": "env-user", "VEEAM_SSH_PASSWORD": "env-secret"},
    )

    assert settings.username == "cli-user"
    assert settings.password == "env-secret"
    assert settings.port == 2200


def test_empty_environment_values_are_ignored() -> None:
    settings = load_settings(environ={"VEEAM_SSH_PORT": "", "VEEAM_SSH_USER": ""})

    assert settings.port == DEFAULT_PORT
    assert settings.username is None


@pytest.mark.parametrize(
    "overrides",
    [{"port": "0"}, {"port": "70000"}, {"port": "ssh"}, {"timeout": "0"}, {"timeout": "soon"}],
)
def test_rejects_invalid_values(overrides) -> None:
    with pytest.raises(vol.Invalid):
        load_settings(overrides, environ={})


def test_key_path_is_made_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = load_settings({"key": "keys/id_ed25519"}, environ={})

    assert settings.key == str(tmp_path / "keys" / "id_ed25519")


def test_resolve_private_key_path() -> None:
    assert resolve_private_key_path(None) is None
    assert resolve_private_key_path("") is None
    assert resolve_private_key_path("/etc/ssh/key") == "/etc/ssh/key"
    assert resolve_private_key_path("key", base=Path("/opt/prtg")) == "/opt/prtg/key"
    assert resolve_private_key_path("~/key") == str(Path("~/key").expanduser())
