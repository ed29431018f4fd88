"""Configuration management for the Nexus Store bot."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

DEFAULT_HEALTH_PORT = 8000
DEFAULT_SHOP_URL = "https://myweb-psi-three.vercel.app"


@dataclass(frozen=True)
class AdminPolicy:
    """Who may run administrative actions.

    ``enforced_by(role_id)`` restricts actions to members holding the role.
    ``disabled()`` lets every member through; this is the behaviour when no
    administrator role is configured.
    """

    role_id: Optional[int] = None

    @classmethod
    def enforced_by(cls, role_id: int) -> AdminPolicy:
        return cls(role_id=role_id)

    @classmethod
    def disabled(cls) -> AdminPolicy:
        return cls(role_id=None)

    @property
    def enforced(self) -> bool:
        return self.role_id is not None


@dataclass(frozen=True)
class StoreSettings:
    url: str
    service_key: str


@dataclass(frozen=True)
class ChannelIDs:
    verification: Optional[int] = None
    announcements: Optional[int] = None
    rules: Optional[int] = None
    links: Optional[int] = None
    shop_info: Optional[int] = None
    entry: Optional[int] = None
    exit: Optional[int] = None
    error_log: Optional[int] = None


@dataclass(frozen=True)
class PaymentSettings:
    blik_phone_number: Optional[str] = None


@dataclass
class Config:
    token: str
    store: StoreSettings
    admin: AdminPolicy = field(default_factory=AdminPolicy.disabled)
    ticket_category_id: Optional[int] = None
    channel_ids: ChannelIDs = field(default_factory=ChannelIDs)
    payment: PaymentSettings = field(default_factory=PaymentSettings)
    shop_url: str = DEFAULT_SHOP_URL
    health_port: int = DEFAULT_HEALTH_PORT
    log_level: int = logging.INFO
    bot_prefix: str = "!"


def _get(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require(environ: Mapping[str, str], name: str) -> str:
    value = _get(environ, name)
    if value is None:
        raise ValueError(f"{name} is required but was not set")
    return value


def _parse_snowflake(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = _get(environ, name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a numeric Discord ID (got {raw!r})") from exc
    if value <= 0:
        raise ValueError(f"{name} must be a positive Discord ID (got {value})")
    return value


def _parse_port(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_HEALTH_PORT
    try:
        port = int(raw)
    except ValueError as exc:
        raise ValueError(f"PORT must be an integer (got {raw!r})") from exc
    if not 0 < port < 65536:
        raise ValueError(f"PORT must be between 1 and 65535 (got {port})")
    return port


def _parse_log_level(raw: Optional[str]) -> int:
    if raw is None:
        return logging.INFO
    level: Any = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ValueError(f"LOG_LEVEL must be a logging level name (got {raw!r})")
    return level


def _parse_store_settings(environ: Mapping[str, str]) -> StoreSettings:
    url = _require(environ, "SUPABASE_URL").rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"SUPABASE_URL must be an http(s) URL (got {url!r})")
    return StoreSettings(url=url, service_key=_require(environ, "SUPABASE_SERVICE_ROLE_KEY"))


def _parse_admin_policy(environ: Mapping[str, str]) -> AdminPolicy:
    role_id = _parse_snowflake(environ, "ADMIN_ROLE_ID")
    if role_id is None:
        return AdminPolicy.disabled()
    return AdminPolicy.enforced_by(role_id)


def _parse_channel_ids(environ: Mapping[str, str]) -> ChannelIDs:
    return ChannelIDs(
        verification=_parse_snowflake(environ, "VERIFICATION_CHANNEL_ID"),
        announcements=_parse_snowflake(environ, "ANN_CHANNEL_ID"),
        rules=_parse_snowflake(environ, "RULES_CHANNEL_ID"),
        links=_parse_snowflake(environ, "LINKS_CHANNEL_ID"),
        shop_info=_parse_snowflake(environ, "SHOP_INFO_CHANNEL_ID"),
        entry=_parse_snowflake(environ, "ENTRY_CHANNEL_ID"),
        exit=_parse_snowflake(environ, "EXIT_CHANNEL_ID"),
        error_log=_parse_snowflake(environ, "LOG_CHANNEL_ID"),
    )


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Build the bot configuration from environment variables."""
    if environ is None:
        environ = os.environ

    return Config(
        token=_require(environ, "DISCORD_TOKEN"),
        store=_parse_store_settings(environ),
        admin=_parse_admin_policy(environ),
        ticket_category_id=_parse_snowflake(environ, "TICKET_CATEGORY_ID"),
        channel_ids=_parse_channel_ids(environ),
        payment=PaymentSettings(blik_phone_number=_get(environ, "BLIK_PHONE_NUMBER")),
        shop_url=_get(environ, "SHOP_URL") or DEFAULT_SHOP_URL,
        health_port=_parse_port(_get(environ, "PORT")),
        log_level=_parse_log_level(_get(environ, "LOG_LEVEL")),
    )
