"""irchook configuration management."""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

logger = logging.getLogger("irchook.config")

_LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


class HookSettings(BaseSettings):
    """Settings loaded from a TOML config file, environment variables or .env file."""

    # IRC connection
    nick: str = Field(description="IRC nickname")
    password: Optional[str] = Field(default=None, description="NickServ password")
    server: str = Field(description="IRC server hostname")
    port: int = Field(default=6697, description="IRC server port")
    use_tls: bool = Field(default=True, description="Connect with TLS")
    channels: list[str] = Field(default_factory=list, description="Channels to join")

    # Matching
    search_pattern: str = Field(description="Regex defining a match")
    multi_line: bool = Field(default=False, description="Buffer lines between init/conclude triggers")
    line_init_pattern: Optional[str] = Field(default=None, description="Regex that opens a buffer")
    line_conclude_pattern: Optional[str] = Field(default=None, description="Regex that closes a buffer")
    line_limit: int = Field(default=10, ge=1, description="Max buffered lines before forced conclusion")

    # Webhook
    webhook_url: str = Field(description="Destination URI for POST requests")
    body_template: str = Field(default="", description="POST body with ${i} placeholders")
    headers: dict[str, str] = Field(
        default_factory=lambda: {"Content-Type": "application/json"},
        description="Header name -> value template with ${i} placeholders",
    )
    webhook_timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-request timeout in seconds (unset = no timeout)"
    )

    model_config = SettingsConfigDict(env_prefix="IRC_HOOK_", env_file=".env", extra="ignore")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings, dotenv_settings]
        toml_file = settings_cls.model_config.get("toml_file")
        if toml_file:
            sources.append(TomlConfigSettingsSource(settings_cls))
        return tuple(sources)

    @field_validator("webhook_url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"webhook_url must be an absolute http(s) URI, got {v!r}")
        return v

    @field_validator("search_pattern", "line_init_pattern", "line_conclude_pattern")
    @classmethod
    def _check_regex(cls, v: Optional[str]) -> Optional[str]:
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid regular expression {v!r}: {e}") from e
        return v

    @model_validator(mode="after")
    def _check_multi_line(self) -> "HookSettings":
        if self.multi_line and not self.line_init_pattern:
            raise ValueError("line_init_pattern is required when multi_line is enabled")
        return self


def load_settings(config_file: Optional[str] = None, **overrides) -> HookSettings:
    """Load settings, layering environment over an optional TOML config file.

    Raises pydantic.ValidationError if the configuration is incomplete or invalid.
    """
    if config_file:
        # Subclass so the TOML path doesn't leak into the shared model config
        settings_cls = type(
            "FileHookSettings",
            (HookSettings,),
            {"__module__": __name__, "model_config": SettingsConfigDict(toml_file=config_file)},
        )
    else:
        settings_cls = HookSettings
    settings = settings_cls(**overrides)

    host = urlparse(settings.webhook_url).hostname or ""
    if settings.webhook_url.startswith("http://") and host not in _LOCAL_HOSTS:
        logger.warning(
            f"Webhook URL {settings.webhook_url} is not HTTPS — matched chat text "
            "and header values will be sent unencrypted."
        )
    return settings
