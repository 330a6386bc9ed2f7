from __future__ import annotations

from pathlib import Path

import pytest

from shortcut_input.config import DEFAULT_SHELL, get_settings


def test_shell_defaults_to_bash_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHELL", raising=False)
    monkeypatch.delenv("SHORTCUT_INPUT_SHELL", raising=False)

    assert get_settings().shell == DEFAULT_SHELL == "/bin/bash"


def test_shell_follows_login_shell_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHORTCUT_INPUT_SHELL", raising=False)
    monkeypatch.setenv("SHELL", "/bin/zsh")

    assert get_settings().shell == "/bin/zsh"


def test_prefixed_variable_overrides_login_shell(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHELL", "/bin/zsh")
    monkeypatch.setenv("SHORTCUT_INPUT_SHELL", "/opt/homebrew/bin/bash")

    assert get_settings().shell == "/opt/homebrew/bin/bash"


def test_defaults() -> None:
    settings = get_settings()

    assert settings.runner_executable == "shortcuts"
    assert settings.working_directory == Path("/")
    assert settings.keep_files is False
    assert settings.log_profile == "default"
    assert settings.temp_root.is_dir()


def test_explicit_overrides_win(tmp_path: Path) -> None:
    settings = get_settings(temp_root=tmp_path, settle_attempts=0)

    assert settings.temp_root == tmp_path
    assert settings.settle_attempts == 0


def test_negative_values_are_rejected() -> None:
    with pytest.raises(ValueError):
        get_settings(settle_attempts=-1)


def test_log_profile_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHORTCUT_INPUT_LOG_PROFILE", "chat")

    assert get_settings().log_profile == "chat"


def test_unknown_log_profile_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHORTCUT_INPUT_LOG_PROFILE", "json")

    with pytest.raises(ValueError):
        get_settings()
