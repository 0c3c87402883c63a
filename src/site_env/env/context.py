"""Context matching, source filtering and scope labels."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from site_env.errors import InvalidScopeError
from site_env.types import (
    ALL_SCOPES,
    ANY_SCOPE,
    Context,
    Scope,
    Source,
    ValueEntry,
    as_env,
    parse_context,
    parse_scope,
    parse_source,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from site_env.types import EnvEntry

_SCOPE_LABELS: dict[Scope, str] = {
    Scope.BUILDS: "Builds",
    Scope.FUNCTIONS: "Functions",
    Scope.POST_PROCESSING: "Post processing",
    Scope.RUNTIME: "Runtime",
}

# Config file variables are only exposed to builds and post processing.
_IMPLICIT_SCOPES_LABEL = "Builds, Post processing"


def find_value_from_context(
    values: Sequence[ValueEntry | Mapping[str, Any]], context: Context | str
) -> ValueEntry | None:
    """Return the first value whose context is *context* or ``all``.

    Order of *values* decides: an ``all`` entry listed before a concrete
    match shadows it.
    """
    context = parse_context(context)
    for v in values:
        entry = v if isinstance(v, ValueEntry) else ValueEntry.model_validate(v)
        if entry.context in (context, Context.ALL):
            return entry
    return None


def filter_env_by_source(
    env: Mapping[str, EnvEntry | Mapping[str, Any]], source: Source | str
) -> dict[str, EnvEntry]:
    """Return the entries of *env* whose first listed source is *source*."""
    source = parse_source(source)
    return {key: entry for key, entry in as_env(env).items() if entry.sources[0] == source}


def _scope_tag(value: Any) -> Scope:
    scope = parse_scope(value)
    if scope == ANY_SCOPE:
        raise InvalidScopeError(value)
    return scope


def get_human_readable_scopes(scopes: Iterable[Scope | str] | None) -> str:
    """Render scopes as a comma-separated label, e.g. ``"Builds, Functions"``."""
    if scopes is None:
        return _IMPLICIT_SCOPES_LABEL
    tags = [_scope_tag(s) for s in scopes]
    if len(tags) == len(ALL_SCOPES):
        return "All"
    return ", ".join(_SCOPE_LABELS[s] for s in tags)
