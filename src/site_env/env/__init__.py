"""Variable resolution across account, site, addon and config file sources."""

from site_env.env.context import (
    filter_env_by_source,
    find_value_from_context,
    get_human_readable_scopes,
)
from site_env.env.fetch import fetch_envelope_items
from site_env.env.format import format_envelope_data
from site_env.env.resolver import (
    SOURCE_PRECEDENCE,
    build_process_env,
    get_env_value,
    get_envelope_env,
    merge_by_precedence,
)
from site_env.env.translate import (
    translate_from_envelope_to_mongo,
    translate_from_mongo_to_envelope,
)

__all__ = [
    "SOURCE_PRECEDENCE",
    "build_process_env",
    "fetch_envelope_items",
    "filter_env_by_source",
    "find_value_from_context",
    "format_envelope_data",
    "get_env_value",
    "get_envelope_env",
    "get_human_readable_scopes",
    "merge_by_precedence",
    "translate_from_envelope_to_mongo",
    "translate_from_mongo_to_envelope",
]
