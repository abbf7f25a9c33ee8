"""
Authenticator Module - Black Box Interface

Purpose: Validate credentials against a backing source
Interface: validate(credentials, context), attaching a profile on success
Hidden: Token formats, password stores, caching

Any Authenticator implementation can replace these.
"""

from .caching import CachingAuthenticator
from .jwt_authenticator import JwtAuthenticator
from .stub import SimpleTestTokenAuthenticator, SimpleTestUsernamePasswordAuthenticator

__all__ = [
    "CachingAuthenticator",
    "JwtAuthenticator",
    "SimpleTestTokenAuthenticator",
    "SimpleTestUsernamePasswordAuthenticator",
]
