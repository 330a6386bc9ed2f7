from __future__ import annotations

from pathlib import Path

import pytest

from shortcut_input.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        shell="/bin/zsh",
        temp_root=tmp_path / "exchange",
        settle_attempts=0,
        settle_interval=0.0,
        terminate_grace=1.0,
    )


@pytest.fixture
def exchange_root(settings: Settings) -> Path:
    settings.temp_root.mkdir(parents=True, exist_ok=True)
    return settings.temp_root
