"""Variable tags and data models (remote records, resolved entries, site info)."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from site_env.errors import InvalidContextError, InvalidScopeError, InvalidSourceError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class Context(str, Enum):
    DEV = "dev"
    BRANCH_DEPLOY = "branch-deploy"
    DEPLOY_PREVIEW = "deploy-preview"
    PRODUCTION = "production"
    ALL = "all"


class Scope(str, Enum):
    BUILDS = "builds"
    FUNCTIONS = "functions"
    RUNTIME = "runtime"
    POST_PROCESSING = "post_processing"


class Source(str, Enum):
    GENERAL = "general"
    ACCOUNT = "account"
    ADDONS = "addons"
    UI = "ui"
    CONFIG_FILE = "configFile"


ALL_SCOPES: tuple[Scope, ...] = (
    Scope.BUILDS,
    Scope.FUNCTIONS,
    Scope.RUNTIME,
    Scope.POST_PROCESSING,
)

ANY_SCOPE: Literal["any"] = "any"

ScopeFilter = Scope | Literal["any"]


class ValueEntry(BaseModel):
    """One value of a variable, bound to a deploy context (``all`` = every context)."""

    context: Context
    value: str


class VariableRecord(BaseModel):
    """A variable as returned by the variable service."""

    key: str
    scopes: list[Scope] = Field(default_factory=list)
    values: list[ValueEntry]


class EnvEntry(BaseModel):
    """Metadata of one variable in a flat env mapping.

    ``scopes`` is ``None`` for variables declared in the config file, which
    implicitly apply to builds and post processing only.
    """

    value: str
    sources: list[Source] = Field(min_length=1)
    context: Context | None = None
    scopes: list[Scope] | None = None

    @property
    def source(self) -> Source:
        return self.sources[0]


class SiteInfo(BaseModel):
    """The subset of site metadata needed to look up variables."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    account_slug: str | None = None
    name: str | None = None
    url: str | None = None


# ---------------------------------------------------------------------------
# Boundary parsers
# ---------------------------------------------------------------------------


def parse_context(value: Any) -> Context:
    """Validate a deploy context tag."""
    try:
        return Context(value)
    except ValueError as e:
        raise InvalidContextError(value) from e


def parse_scope(value: Any) -> ScopeFilter:
    """Validate a scope filter: a ``Scope`` tag or ``"any"``."""
    if value == ANY_SCOPE:
        return ANY_SCOPE
    try:
        return Scope(value)
    except ValueError as e:
        raise InvalidScopeError(value) from e


def parse_source(value: Any) -> Source:
    """Validate a variable source tag."""
    try:
        return Source(value)
    except ValueError as e:
        raise InvalidSourceError(value) from e


def as_env(env: Mapping[str, EnvEntry | Mapping[str, Any]] | None) -> dict[str, EnvEntry]:
    """Validate a flat env given as models or JSON-shaped mappings."""
    return {
        key: entry if isinstance(entry, EnvEntry) else EnvEntry.model_validate(entry)
        for key, entry in (env or {}).items()
    }


def as_records(records: Iterable[VariableRecord | Mapping[str, Any]]) -> list[VariableRecord]:
    """Validate variable records given as models or JSON-shaped mappings."""
    return [
        r if isinstance(r, VariableRecord) else VariableRecord.model_validate(r) for r in records
    ]
