from __future__ import annotations

import os

import pytest


_SETTINGS_ENV_PREFIXES = ("DETECTION__", "RETENTION__", "STORAGE__", "MONITORING__")


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables from leaking into Settings."""
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    for key in list(os.environ):
        if key.upper().startswith(_SETTINGS_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
