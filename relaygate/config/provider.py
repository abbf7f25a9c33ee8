"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from ..modules.core.exceptions import ConfigurationError

CREDENTIALS_SOURCES = ("header", "parameter", "basic", "form")
AUTHENTICATORS = ("test_token", "test_username_password", "jwt")


@dataclass
class ClientSettings:
    """Indirect client configuration."""
    name: str = "IndirectClient"
    credentials_source: str = "parameter"
    authenticator: str = "test_token"
    login_url: Optional[str] = None
    callback_url: Optional[str] = None
    token_header: str = "Authorization"
    token_prefix: str = "Bearer "
    token_parameter: str = "token"
    realm: Optional[str] = None

    def __post_init__(self):
        if self.credentials_source not in CREDENTIALS_SOURCES:
            raise ConfigurationError(
                f"Unknown credentials source: {self.credentials_source} "
                f"(expected one of {', '.join(CREDENTIALS_SOURCES)})",
                field="credentials_source"
            )
        if self.authenticator not in AUTHENTICATORS:
            raise ConfigurationError(
                f"Unknown authenticator: {self.authenticator} "
                f"(expected one of {', '.join(AUTHENTICATORS)})",
                field="authenticator"
            )


@dataclass
class JWTConfig:
    """JWT validation configuration."""
    secret: Optional[str] = None
    algorithms: List[str] = field(default_factory=lambda: ["HS256"])
    audience: Optional[str] = None
    issuer: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.secret)


@dataclass
class OIDCConfig:
    """OIDC configuration."""
    enabled: bool = False
    issuer: Optional[str] = None
    client_id: str = "relaygate"
    authorization_endpoint: Optional[str] = None
    scopes: List[str] = field(default_factory=lambda: ["openid", "email", "profile"])

    @property
    def is_configured(self) -> bool:
        """Check if OIDC is properly configured."""
        return self.enabled and bool(self.issuer)


@dataclass
class CacheConfig:
    """Authenticator cache configuration. A TTL of 0 disables caching."""
    ttl_seconds: int = 0
    max_size: int = 10000

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_client_config(self) -> ClientSettings:
        """Get indirect client configuration."""
        ...

    def get_jwt_config(self) -> JWTConfig:
        """Get JWT configuration."""
        ...

    def get_oidc_config(self) -> OIDCConfig:
        """Get OIDC configuration."""
        ...

    def get_cache_config(self) -> CacheConfig:
        """Get authenticator cache configuration."""
        ...


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", field=name) from e


def _list_env(name: str, default: str, separator: Optional[str] = ",") -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(separator) if item.strip()]


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_client_config(self) -> ClientSettings:
        """Get indirect client configuration from environment variables."""
        return ClientSettings(
            name=os.getenv("RELAYGATE_CLIENT_NAME", "IndirectClient"),
            credentials_source=os.getenv("RELAYGATE_CREDENTIALS_SOURCE", "parameter").lower(),
            authenticator=os.getenv("RELAYGATE_AUTHENTICATOR", "test_token").lower(),
            login_url=os.getenv("RELAYGATE_LOGIN_URL"),
            callback_url=os.getenv("RELAYGATE_CALLBACK_URL"),
            token_header=os.getenv("RELAYGATE_TOKEN_HEADER", "Authorization"),
            token_prefix=os.getenv("RELAYGATE_TOKEN_PREFIX", "Bearer "),
            token_parameter=os.getenv("RELAYGATE_TOKEN_PARAMETER", "token"),
            realm=os.getenv("RELAYGATE_REALM")
        )

    def get_jwt_config(self) -> JWTConfig:
        """Get JWT configuration from environment variables."""
        return JWTConfig(
            secret=os.getenv("RELAYGATE_JWT_SECRET"),
            algorithms=_list_env("RELAYGATE_JWT_ALGORITHMS", "HS256"),
            audience=os.getenv("RELAYGATE_JWT_AUDIENCE"),
            issuer=os.getenv("RELAYGATE_JWT_ISSUER")
        )

    def get_oidc_config(self) -> OIDCConfig:
        """Get OIDC configuration from environment variables."""
        return OIDCConfig(
            enabled=os.getenv("OIDC_ENABLED", "false").lower() == "true",
            issuer=os.getenv("OIDC_ISSUER"),
            client_id=os.getenv("OIDC_CLIENT_ID", "relaygate"),
            authorization_endpoint=os.getenv("OIDC_AUTHORIZATION_ENDPOINT"),
            scopes=_list_env("OIDC_SCOPES", "openid email profile", separator=None)
        )

    def get_cache_config(self) -> CacheConfig:
        """Get authenticator cache configuration from environment variables."""
        return CacheConfig(
            ttl_seconds=_int_env("RELAYGATE_CACHE_TTL", "0"),
            max_size=_int_env("RELAYGATE_CACHE_MAX_SIZE", "10000")
        )
