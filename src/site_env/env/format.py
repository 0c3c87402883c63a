"""Filter and reshape variable records into env entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from site_env.env.context import find_value_from_context
from site_env.types import (
    ANY_SCOPE,
    Context,
    EnvEntry,
    as_records,
    parse_context,
    parse_scope,
    parse_source,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from site_env.types import ScopeFilter, Source, ValueEntry, VariableRecord


def sort_by_key(records: Iterable[VariableRecord]) -> list[VariableRecord]:
    """Sort records alphabetically by key, case-insensitive; ties keep input order."""
    return sorted(records, key=lambda r: r.key.lower())


def format_envelope_data(
    *,
    context: Context | str = Context.DEV,
    envelope_items: Iterable[VariableRecord | Mapping[str, Any]] = (),
    scope: ScopeFilter | str = ANY_SCOPE,
    source: Source | str,
) -> dict[str, EnvEntry]:
    """Keep the records that apply to *context* and *scope*, keyed by variable name.

    Returns e.g.::

        {
            "BAZ": EnvEntry(context="dev", scopes=["runtime"], sources=["account"], value="bang"),
            "FOO": EnvEntry(context="all", scopes=["builds"], sources=["account"], value="bar"),
        }

    Keys are inserted in case-insensitive alphabetical order. The entry's
    ``context`` is the context of the value that matched, which is ``all``
    when the record only carries a catch-all value.
    """
    context = parse_context(context)
    scope = parse_scope(scope)
    source = parse_source(source)

    matched: list[tuple[VariableRecord, ValueEntry]] = []
    for record in as_records(envelope_items):
        match = find_value_from_context(record.values, context)
        if match is None:
            continue
        if scope != ANY_SCOPE and scope not in record.scopes:
            continue
        matched.append((record, match))

    # stable: records sharing a key keep their input order
    matched.sort(key=lambda pair: pair[0].key.lower())

    return {
        record.key: EnvEntry(
            context=match.context,
            scopes=list(record.scopes),
            sources=[source],
            value=match.value,
        )
        for record, match in matched
    }
