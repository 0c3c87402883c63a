"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from site_env.config import load

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from site_env.config.schema import Config

_SITE_ENV_VARS = ("SITE_ENV_API_URL", "SITE_ENV_TOKEN", "SITE_ENV_TIMEOUT", "SITE_ENV_LOG")


@pytest.fixture(autouse=True)
def _clean_site_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SITE_ENV_* env vars so unit tests don't leak host config."""
    for var in _SITE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def mock_client() -> MagicMock:
    """Variable service client answering with no variables."""
    client = MagicMock()
    client.get_env_vars = AsyncMock(return_value=[])
    client.get_env_var = AsyncMock(return_value={})
    return client


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make
