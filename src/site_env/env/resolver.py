"""Collect variables from every source and merge them by precedence."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import TYPE_CHECKING, Any

from site_env.env.context import filter_env_by_source
from site_env.env.fetch import fetch_envelope_items
from site_env.env.format import format_envelope_data
from site_env.types import (
    ANY_SCOPE,
    Context,
    Scope,
    SiteInfo,
    Source,
    as_env,
    parse_context,
    parse_scope,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from site_env.core.client import VariableServiceClient
    from site_env.types import EnvEntry, ScopeFilter

logger = logging.getLogger(__name__)

# Ascending order of precedence: a higher rank replaces a lower one.
SOURCE_PRECEDENCE: dict[Source, int] = {
    Source.GENERAL: 0,
    Source.ACCOUNT: 1,
    Source.ADDONS: 2,
    Source.UI: 3,
    Source.CONFIG_FILE: 4,
}

# Addon and config file variables are not exposed to functions or runtime.
_CONFIG_FILE_SCOPES: frozenset[ScopeFilter] = frozenset(
    {ANY_SCOPE, Scope.BUILDS, Scope.POST_PROCESSING}
)


def merge_by_precedence(
    layers: Iterable[tuple[int, Mapping[str, EnvEntry]]],
) -> dict[str, EnvEntry]:
    """Merge ``(priority, env)`` layers from lowest to highest priority.

    Entries are replaced whole: a key present in a higher layer takes that
    layer's entry, nothing is merged field by field. Layers with the same
    priority apply in the given order. The result holds copies, so changing
    it leaves the layers untouched.
    """
    merged: dict[str, EnvEntry] = {}
    for _, layer in sorted(layers, key=lambda item: item[0]):
        merged.update((key, entry.model_copy(deep=True)) for key, entry in layer.items())
    return merged


def includes_config_file_vars(scope: ScopeFilter | str) -> bool:
    """Whether addon and config file variables apply to *scope*."""
    return parse_scope(scope) in _CONFIG_FILE_SCOPES


async def get_envelope_env(
    client: VariableServiceClient,
    *,
    site_info: SiteInfo | Mapping[str, str | None],
    context: Context | str = Context.DEV,
    env: Mapping[str, EnvEntry | Mapping[str, Any]] | None = None,
    key: str = "",
    scope: ScopeFilter | str = ANY_SCOPE,
) -> dict[str, EnvEntry]:
    """Resolve the effective variables of a site for a deploy context and scope.

    *env* is the site's flat env as known locally (general, addons and config
    file variables). Account and site variables are fetched from the
    variable service; with *key* set only that variable is fetched.
    """
    context = parse_context(context)
    scope = parse_scope(scope)
    site = site_info if isinstance(site_info, SiteInfo) else SiteInfo.model_validate(site_info)
    env = as_env(env)

    account_items, site_items = await asyncio.gather(
        fetch_envelope_items(client, account_id=site.account_slug, key=key),
        fetch_envelope_items(client, account_id=site.account_slug, key=key, site_id=site.id),
    )

    account_env = format_envelope_data(
        context=context, envelope_items=account_items, scope=scope, source=Source.ACCOUNT
    )
    site_env = format_envelope_data(
        context=context, envelope_items=site_items, scope=scope, source=Source.UI
    )
    layers: dict[Source, Mapping[str, EnvEntry]] = {
        Source.GENERAL: filter_env_by_source(env, Source.GENERAL),
        Source.ACCOUNT: account_env,
        Source.UI: site_env,
    }
    if includes_config_file_vars(scope):
        layers[Source.ADDONS] = filter_env_by_source(env, Source.ADDONS)
        layers[Source.CONFIG_FILE] = filter_env_by_source(env, Source.CONFIG_FILE)

    logger.debug(
        "Resolved env for site %s (context=%s, scope=%s): %s",
        site.id,
        context.value,
        getattr(scope, "value", scope),
        ", ".join(f"{s.value}={len(v)}" for s, v in layers.items()),
    )
    return merge_by_precedence((SOURCE_PRECEDENCE[s], v) for s, v in layers.items())


async def get_env_value(
    client: VariableServiceClient,
    key: str,
    *,
    site_info: SiteInfo | Mapping[str, str | None],
    context: Context | str = Context.DEV,
    env: Mapping[str, EnvEntry | Mapping[str, Any]] | None = None,
    scope: ScopeFilter | str = ANY_SCOPE,
) -> str | None:
    """Resolve a single variable; ``None`` when it is not set for *context*/*scope*."""
    resolved = await get_envelope_env(
        client, site_info=site_info, context=context, env=env, key=key, scope=scope
    )
    entry = resolved.get(key)
    return entry.value if entry is not None else None


def build_process_env(
    resolved: Mapping[str, EnvEntry], environ: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Build the environment of a child process from resolved variables.

    Variables already set in *environ* (``os.environ`` by default) keep
    their process value.
    """
    environ = os.environ if environ is None else environ
    process_env = dict(environ)
    for key, entry in resolved.items():
        if key in environ:
            logger.debug(
                "Ignored %s env var %s (already set in process env)", entry.source.value, key
            )
            continue
        logger.debug("Injected %s env var %s", entry.source.value, key)
        process_env[key] = entry.value
    return process_env
