"""Configuration models for YAML-based site settings."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from site_env.types import EnvEntry, SiteInfo, Source


class ProviderConfig(BaseSettings):
    """Variable service connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``SITE_ENV_`` prefix.  Constructor kwargs take precedence.

    ``token`` is typically provided via the ``SITE_ENV_TOKEN`` environment
    variable rather than YAML to avoid committing secrets to version control.
    """

    model_config = SettingsConfigDict(env_prefix="SITE_ENV_")

    api_url: str = "https://api.netlify.com/api/v1"
    token: str | None = None
    timeout: float = 30.0


class PluginConfig(BaseModel):
    """A build plugin declared for the site."""

    model_config = ConfigDict(extra="forbid")

    package: str
    origin: Literal["config", "ui", "default"] = "config"


def _none_to_empty(v: Any) -> Any:
    return v if v is not None else {}


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


def _env_value(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


def _stringify(v: Any) -> Any:
    """YAML scalars like ``1`` or ``true`` are env values, so keep them as text."""
    if v is None:
        return {}
    if isinstance(v, dict):
        return {k: _env_value(val) for k, val in v.items()}
    return v


_EnvMap = Annotated[dict[str, str], BeforeValidator(_stringify)]


class Config(BaseModel):
    """Site configuration, validated directly from YAML."""

    provider: ProviderConfig
    site: SiteInfo
    env: _EnvMap = {}
    addons: Annotated[dict[str, _EnvMap], BeforeValidator(_none_to_empty)] = {}
    plugins: Annotated[list[PluginConfig], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    def general_env(self) -> dict[str, str]:
        """Built-in variables describing the site itself."""
        builtins = {"SITE_ID": self.site.id, "SITE_NAME": self.site.name, "URL": self.site.url}
        return {k: v for k, v in builtins.items() if v is not None}

    def legacy_env(self) -> dict[str, EnvEntry]:
        """The site's flat env: general, addon and config file variables, tagged by source.

        When two addons set the same variable the one declared last wins.
        """
        env: dict[str, EnvEntry] = {}

        def _set(key: str, value: str, source: Source) -> None:
            shadowed = env[key].sources if key in env else []
            env[key] = EnvEntry(value=value, sources=[source, *shadowed])

        for key, value in self.general_env().items():
            _set(key, value, Source.GENERAL)
        for addon_env in self.addons.values():
            for key, value in addon_env.items():
                _set(key, value, Source.ADDONS)
        for key, value in self.env.items():
            _set(key, value, Source.CONFIG_FILE)
        return env
