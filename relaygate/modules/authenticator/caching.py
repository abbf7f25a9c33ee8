"""
Caching authenticator decorator.

Wraps another authenticator and remembers the profiles it produced so
repeated requests with the same credentials skip the backing source.
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Optional, Tuple

from ..core import (
    Authenticator,
    Credentials,
    DelegatingAuthenticator,
    InitializableWebObject,
    Profile,
    WebContext,
)

logger = logging.getLogger(__name__)


class CachingAuthenticator(DelegatingAuthenticator, InitializableWebObject):
    """
    In-memory TTL cache in front of a delegate authenticator.

    Only successful validations are cached, and only for credentials
    with a cache key. Eviction is least recently used first. The cache is
    shared by every request using this instance, so all access goes
    through a lock.
    """

    def __init__(self, delegate: Authenticator, ttl_seconds: int = 300, max_size: int = 10000):
        """
        Initialize caching authenticator.

        Args:
            delegate: Authenticator doing the real validation
            ttl_seconds: How long a cached profile stays valid
            max_size: Maximum number of cached entries (least recently used dropped first)
        """
        InitializableWebObject.__init__(self)
        self._delegate = delegate
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size

        self._cache: "OrderedDict[Tuple[Any, ...], Tuple[Profile, float]]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def delegate(self) -> Authenticator:
        return self._delegate

    def internal_init(self, context: WebContext) -> None:
        if isinstance(self._delegate, InitializableWebObject):
            self._delegate.init(context)

    def validate(self, credentials: Credentials, context: WebContext) -> None:
        key = credentials.cache_key() if credentials is not None else None

        if key is not None:
            cached = self._get(key)
            if cached is not None:
                logger.debug(f"Cache hit for {type(credentials).__name__}")
                credentials.user_profile = cached
                return

        self._delegate.validate(credentials, context)

        if key is not None and credentials.user_profile is not None:
            self._put(key, credentials.user_profile)

    def invalidate(self, credentials: Credentials) -> None:
        key = credentials.cache_key()
        if key is None:
            return
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def size(self) -> int:
        return len(self._cache)

    def _get(self, key: Tuple[Any, ...]) -> Optional[Profile]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            profile, expires_at = entry
            if time.monotonic() >= expires_at:
                del self._cache[key]
                return None
            self._cache.move_to_end(key)
            return profile

    def _lifetime(self, profile: Profile) -> float:
        """
        Seconds a profile may stay cached.

        Never longer than the TTL, nor past an "exp" claim (epoch seconds)
        carried by the profile, such as the one a JWT profile keeps.
        """
        lifetime = float(self.ttl_seconds)
        exp = profile.get_attribute("exp")
        if isinstance(exp, (int, float)) and not isinstance(exp, bool):
            lifetime = min(lifetime, exp - time.time())
        return lifetime

    def _put(self, key: Tuple[Any, ...], profile: Profile) -> None:
        lifetime = self._lifetime(profile)
        if lifetime <= 0:
            return
        with self._lock:
            self._cache[key] = (profile, time.monotonic() + lifetime)
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def __repr__(self) -> str:
        return f"CachingAuthenticator(delegate={self._delegate!r}, ttl_seconds={self.ttl_seconds})"
