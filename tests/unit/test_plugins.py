"""Tests for plugin list lookups and install selection."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import httpx

from site_env.plugins import (
    BUNDLED_PLUGINS,
    PLUGINS_LIST_TIMEOUT,
    PLUGINS_LIST_URL,
    get_plugin_info,
    get_plugins_list,
    get_plugins_to_install,
    get_recommended_plugins,
    get_ui_plugins,
)

_REMOTE = [
    {"package": "netlify-plugin-a", "name": "A"},
    {"package": "netlify-plugin-b", "name": "B"},
]


class TestGetPluginsList:
    def test_returns_fetched_list(self) -> None:
        fetch = AsyncMock(return_value=_REMOTE)
        assert asyncio.run(get_plugins_list(fetch)) == _REMOTE
        fetch.assert_awaited_once_with(PLUGINS_LIST_URL, PLUGINS_LIST_TIMEOUT)

    def test_timeout_is_one_minute(self) -> None:
        assert PLUGINS_LIST_TIMEOUT == 60.0

    def test_falls_back_on_error(self) -> None:
        fetch = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        result = asyncio.run(get_plugins_list(fetch))
        assert result == [dict(p) for p in BUNDLED_PLUGINS]

    def test_falls_back_on_unexpected_payload(self) -> None:
        fetch = AsyncMock(return_value={"error": "nope"})
        result = asyncio.run(get_plugins_list(fetch, fallback=[{"package": "x"}]))
        assert result == [{"package": "x"}]

    def test_fallback_is_copied(self) -> None:
        fallback = [{"package": "x"}]
        result = asyncio.run(get_plugins_list(AsyncMock(side_effect=OSError), fallback=fallback))
        result[0]["package"] = "changed"
        assert fallback == [{"package": "x"}]

    def test_no_caching_between_calls(self) -> None:
        fetch = AsyncMock(return_value=_REMOTE)
        asyncio.run(get_plugins_list(fetch))
        asyncio.run(get_plugins_list(fetch))
        assert fetch.await_count == 2

    def test_custom_url(self) -> None:
        fetch = AsyncMock(return_value=[])
        asyncio.run(get_plugins_list(fetch, url="https://plugins.test/list.json", timeout=5))
        fetch.assert_awaited_once_with("https://plugins.test/list.json", 5)


class TestLookups:
    def test_plugin_info(self) -> None:
        assert get_plugin_info(_REMOTE, "netlify-plugin-b") == _REMOTE[1]

    def test_plugin_info_missing(self) -> None:
        assert get_plugin_info(_REMOTE, "nope") is None

    def test_recommended_excludes_installed(self) -> None:
        config_plugins: list[dict[str, Any]] = [{"package": "netlify-plugin-a"}]
        result = get_recommended_plugins(["netlify-plugin-a", "netlify-plugin-b"], config_plugins)
        assert result == ["netlify-plugin-b"]

    def test_ui_plugins(self) -> None:
        config_plugins = [
            {"package": "from-ui", "origin": "ui"},
            {"package": "from-config", "origin": "config"},
            {"package": "no-origin"},
        ]
        assert get_ui_plugins(config_plugins) == [{"package": "from-ui"}]


class TestPluginsToInstall:
    def test_explicit_list_wins(self) -> None:
        result = get_plugins_to_install(
            plugins=["a", "b"], install_single_plugin=True, recommended_plugins=["c"]
        )
        assert result == [{"package": "a"}, {"package": "b"}]

    def test_explicit_empty_list(self) -> None:
        assert get_plugins_to_install(plugins=[], recommended_plugins=["c"]) == []

    def test_single_recommended(self) -> None:
        result = get_plugins_to_install(install_single_plugin=True, recommended_plugins=["c", "d"])
        assert result == [{"package": "c"}]

    def test_flag_off(self) -> None:
        assert get_plugins_to_install(recommended_plugins=["c"]) == []

    def test_nothing_recommended(self) -> None:
        assert get_plugins_to_install(install_single_plugin=True) == []
