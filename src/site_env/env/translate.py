"""Convert between the legacy flat env and multi-context variable records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from site_env.env.format import sort_by_key
from site_env.types import ALL_SCOPES, Context, ValueEntry, VariableRecord, as_records

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_FLAT_CONTEXTS = (Context.DEV, Context.ALL)


def translate_from_mongo_to_envelope(env: Mapping[str, str] | None = None) -> list[VariableRecord]:
    """Turn a flat ``{key: value}`` env into records valid in every scope and context."""
    return [
        VariableRecord(
            key=key,
            scopes=list(ALL_SCOPES),
            values=[ValueEntry(context=Context.ALL, value=value)],
        )
        for key, value in (env or {}).items()
    ]


def translate_from_envelope_to_mongo(
    env_vars: Iterable[VariableRecord | Mapping[str, Any]] = (),
) -> dict[str, str]:
    """Flatten records to ``{key: value}`` using their ``dev`` (or ``all``) value.

    Values for other contexts are dropped, and so are records whose dev
    value is missing or empty.
    """
    env: dict[str, str] = {}
    for record in sort_by_key(as_records(env_vars)):
        match = next((v for v in record.values if v.context in _FLAT_CONTEXTS), None)
        if match is not None and match.value:
            env[record.key] = match.value
    return env
