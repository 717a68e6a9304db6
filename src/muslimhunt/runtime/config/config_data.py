"""Typed view of the ``config`` section of ``config.yaml``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field
from sqlalchemy.engine import make_url

EnvironmentName = Literal["development", "production", "test"]


class CORSConfig(BaseModel):
    origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"])
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    allow_headers: list[str] = Field(default_factory=lambda: ["*"])


class RateLimiterConfig(BaseModel):
    """``requests`` per ``window_ms`` for ordinary endpoints, ``magic_link_requests`` for sign-in emails."""

    enabled: bool = True
    requests: int = 100
    window_ms: int = 60_000
    per_endpoint: bool = True
    per_method: bool = True
    magic_link_requests: int = 5


class RedisConfig(BaseModel):
    enabled: bool = False
    url: str = ""
    password: str | None = None
    decode_responses: bool = True

    @computed_field
    @property
    def connection_string(self) -> str:
        scheme, sep, rest = self.url.partition("://")
        if not self.password or not sep or "@" in rest:
            return self.url
        return f"{scheme}://:{self.password}@{rest}"


class OAuthProviderConfig(BaseModel):
    """An authorization-code provider. PKCE (S256) is always used."""

    authorization_endpoint: str
    token_endpoint: str
    userinfo_endpoint: str
    client_id: str
    redirect_uri: str
    client_secret: str = ""
    scopes: list[str] = Field(default_factory=lambda: ["openid", "profile", "email"])
    enabled: bool = True


class OAuthConfig(BaseModel):
    providers: dict[str, OAuthProviderConfig] = Field(default_factory=dict)
    # Hosts allowed as absolute return_to targets. Empty means same-site paths only.
    allowed_redirect_hosts: list[str] = Field(default_factory=list)


class JWTConfig(BaseModel):
    allowed_algorithms: list[str] = Field(default_factory=lambda: ["HS256"])
    gen_issuer: str = "muslimhunt"
    audiences: list[str] = Field(default_factory=lambda: ["muslimhunt-web"])
    clock_skew: int = 60


class MagicLinkConfig(BaseModel):
    """Passwordless sign-in.

    With ``delivery: log`` the link is written to the application log. With
    ``delivery: http`` it is POSTed to ``email_api_url``.
    """

    token_ttl_seconds: int = 900
    verify_url: str = "http://localhost:8000/auth/magic-link/verify"
    delivery: Literal["log", "http"] = "log"
    email_api_url: str | None = None
    email_api_key: str | None = None
    sender: str = "Muslim Hunt <hello@muslimhunt.com>"


class StorageConfig(BaseModel):
    root: str = "storage"
    public_base_url: str = "http://localhost:8000/storage"
    buckets: list[str] = Field(default_factory=lambda: ["avatars"])
    max_upload_bytes: int = 2 * 1024 * 1024
    allowed_extensions: list[str] = Field(default_factory=lambda: ["png", "jpg", "jpeg", "gif", "webp"])


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["json", "plain"] = "json"
    file: str | None = None
    max_size_mb: int = 10
    backup_count: int = 5


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///./muslimhunt.db"
    environment_mode: str = "development"
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800
    # Production only: where the password comes from, the file winning over the variable.
    password_file: str | None = None
    password_env_var: str | None = None

    @computed_field
    @property
    def password(self) -> str | None:
        if self.environment_mode != "production":
            return make_url(self.url).password or None
        if self.password_file:
            try:
                return Path(self.password_file).read_text().strip()
            except OSError as e:
                raise ValueError(f"Cannot read database password file {self.password_file}") from e
        if self.password_env_var:
            secret = os.getenv(self.password_env_var)
            if not secret:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return secret
        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        if self.url.startswith("sqlite"):
            return self.url
        url = make_url(self.url)
        if url.password and self.environment_mode == "production":
            logger.warning("Database URL carries an inline password in production")
        secret = self.password
        if secret and secret != url.password:
            url = url.set(password=secret)
        return url.render_as_string(hide_password=False)


class AppConfig(BaseModel):
    environment: EnvironmentName = "development"
    host: str = "localhost"
    port: int = 8000
    session_max_age: int = 60 * 60 * 24 * 7
    session_signing_secret: str | None = None
    csrf_signing_secret: str | None = None
    # Profiles with these emails are created as admins.
    admin_emails: list[str] = Field(default_factory=list)
    cors: CORSConfig = Field(default_factory=CORSConfig)


class SecurityConfig(BaseModel):
    secure_cookies: bool = True
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    csrf_header_name: str = "X-CSRF-Token"
    csrf_token_max_age_hours: int = 24
    auth_session_ttl_seconds: int = 600


class ConfigData(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    rate_limiter: RateLimiterConfig = Field(default_factory=RateLimiterConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    oauth: OAuthConfig = Field(default_factory=OAuthConfig)
    jwt: JWTConfig = Field(default_factory=JWTConfig)
    magic_link: MagicLinkConfig = Field(default_factory=MagicLinkConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
