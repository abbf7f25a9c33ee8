"""Data entities flowing through the authentication pipeline."""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from .exceptions import HttpAction


@dataclass(frozen=True)
class Profile:
    """Normalized authenticated identity."""
    id: str
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Freeze the attribute map as well as the dataclass fields
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def typed_id(self) -> str:
        return f"{type(self).__name__}#{self.id}"

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)


@dataclass(eq=False)
class Credentials:
    """
    One authentication attempt.

    Created by an extractor, mutated in place by an authenticator
    (which attaches user_profile), read-only afterwards.
    """
    user_profile: Optional[Profile] = field(default=None, kw_only=True)

    def cache_key(self) -> Optional[Tuple[Any, ...]]:
        """Key identifying equivalent credentials, or None when they cannot be cached."""
        return None


@dataclass(eq=False)
class TokenCredentials(Credentials):
    """Bearer-style credentials holding a single token."""
    token: Optional[str] = field(default=None, repr=False)

    def cache_key(self) -> Tuple[Any, ...]:
        return ("token", self.token)


@dataclass(eq=False)
class UsernamePasswordCredentials(Credentials):
    """Username and password pair."""
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    def cache_key(self) -> Tuple[Any, ...]:
        # Never keep clear-text passwords in cache keys
        digest = hashlib.sha256((self.password or "").encode("utf-8")).hexdigest()
        return ("username_password", self.username, digest)


class RedirectKind(str, Enum):
    """How the user is sent to the credential source."""
    REDIRECT = "redirect"
    RENDER = "render"


@dataclass(frozen=True)
class RedirectAction:
    """Instruction telling the web layer where or how to start authentication."""
    kind: RedirectKind
    location: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def redirect(cls, location: str) -> "RedirectAction":
        return cls(kind=RedirectKind.REDIRECT, location=location)

    @classmethod
    def render(cls, content: str) -> "RedirectAction":
        return cls(kind=RedirectKind.RENDER, content=content)

    def perform(self, context) -> HttpAction:
        """
        Write this action to the web context.

        Args:
            context: Web context receiving the response

        Returns:
            The HttpAction the web layer should act on
        """
        if self.kind == RedirectKind.REDIRECT:
            return HttpAction.redirect(self.location, context)
        return HttpAction.ok(self.content or "", context)
