"""YAML configuration loading and convenience resolve API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from site_env.config.loader import ConfigError, load_config
from site_env.config.schema import Config, PluginConfig, ProviderConfig
from site_env.core.client import EnvelopeClient
from site_env.env.resolver import get_envelope_env
from site_env.plugins import get_ui_plugins
from site_env.types import ANY_SCOPE, Context

if TYPE_CHECKING:
    from pathlib import Path

    from site_env.core.client import VariableServiceClient
    from site_env.types import EnvEntry, ScopeFilter

__all__ = [
    "Config",
    "ConfigError",
    "PluginConfig",
    "ProviderConfig",
    "load",
    "load_config",
    "resolve",
    "ui_plugins",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


async def resolve(
    config: Config,
    client: VariableServiceClient | None = None,
    *,
    context: Context | str = Context.DEV,
    scope: ScopeFilter | str = ANY_SCOPE,
    key: str = "",
) -> dict[str, EnvEntry]:
    """Resolve the site's effective variables.

    Without an injected *client*, one is built from ``config.provider`` and
    closed once the variables are fetched.
    """
    kwargs = {
        "site_info": config.site,
        "context": context,
        "env": config.legacy_env(),
        "key": key,
        "scope": scope,
    }
    if client is not None:
        return await get_envelope_env(client, **kwargs)
    async with EnvelopeClient.from_config(config.provider) as owned:
        return await get_envelope_env(owned, **kwargs)


def ui_plugins(config: Config) -> list[dict[str, str]]:
    """Plugins of *config* that were installed from the web UI."""
    return get_ui_plugins(p.model_dump() for p in config.plugins)
