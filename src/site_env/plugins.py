"""Build plugin list lookups and install selection."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any

import httpx

logger = logging.getLogger(__name__)

PluginInfo = Mapping[str, Any]
FetchJson = Callable[[str, float], Awaitable[Any]]

PLUGINS_LIST_URL = "https://list-v2--netlify-plugins.netlify.app/plugins.json"

# 1 minute
PLUGINS_LIST_TIMEOUT = 60.0

# Shipped copy, used when the published list cannot be fetched.
BUNDLED_PLUGINS: tuple[dict[str, str], ...] = (
    {
        "author": "netlify-labs",
        "description": "Automatically optimize images during the build",
        "name": "Image Optim",
        "package": "netlify-plugin-image-optim",
    },
    {
        "author": "netlify",
        "description": "Run Lighthouse audits on deployed pages",
        "name": "Lighthouse",
        "package": "@netlify/plugin-lighthouse",
    },
    {
        "author": "netlify",
        "description": "Generate a sitemap for the site",
        "name": "Sitemap",
        "package": "@netlify/plugin-sitemap",
    },
    {
        "author": "netlify",
        "description": "Persist the Next.js build cache between builds",
        "name": "Next.js Cache",
        "package": "netlify-plugin-cache-nextjs",
    },
)


async def fetch_json(url: str, timeout: float) -> Any:
    """Default fetch: GET *url* and decode the JSON body."""
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as http:
        r = await http.get(url)
        r.raise_for_status()
        return r.json()


async def get_plugins_list(
    fetch: FetchJson | None = None,
    *,
    url: str = PLUGINS_LIST_URL,
    timeout: float = PLUGINS_LIST_TIMEOUT,
    fallback: Iterable[PluginInfo] = BUNDLED_PLUGINS,
) -> list[dict[str, Any]]:
    """Fetch the published plugin list, falling back to *fallback* on any failure."""
    fetch = fetch or fetch_json
    try:
        plugins = await fetch(url, timeout)
        if not isinstance(plugins, list):
            raise TypeError(f"Expected a JSON list from {url}, got {type(plugins).__name__}")
    except Exception:
        logger.info("Could not fetch plugin list from %s; using bundled list", url, exc_info=True)
        return [dict(p) for p in fallback]
    return plugins


def get_plugin_info(plugins: Iterable[PluginInfo], package_name: str) -> PluginInfo | None:
    """Return the first plugin published under *package_name*."""
    return next((p for p in plugins if p.get("package") == package_name), None)


def is_plugin_installed(config_plugins: Iterable[PluginInfo], plugin: str) -> bool:
    return any(p.get("package") == plugin for p in config_plugins)


def get_recommended_plugins(
    framework_plugins: Iterable[str], config_plugins: Sequence[PluginInfo]
) -> list[str]:
    """Framework plugins that the site config does not install yet."""
    return [p for p in framework_plugins if not is_plugin_installed(config_plugins, p)]


def get_plugins_to_install(
    *,
    plugins: Sequence[str] | None = None,
    install_single_plugin: bool = False,
    recommended_plugins: Sequence[str] = (),
) -> list[dict[str, str]]:
    """Pick the plugins to install.

    An explicit *plugins* list always wins. Otherwise only the first
    recommendation is installed, and only when *install_single_plugin* is set.
    """
    if plugins is not None:
        return [{"package": p} for p in plugins]
    if install_single_plugin and recommended_plugins:
        return [{"package": recommended_plugins[0]}]
    return []


def get_ui_plugins(config_plugins: Iterable[PluginInfo]) -> list[dict[str, str]]:
    """Plugins that were installed from the web UI."""
    return [{"package": p["package"]} for p in config_plugins if p.get("origin") == "ui"]
