"""
Profile Module - Black Box Interface

Purpose: Turn validated credentials into a user profile
Interface: create(credentials, context) -> Profile | None
"""

from .creator import INSTANCE, AuthenticatorProfileCreator

__all__ = ["AuthenticatorProfileCreator", "INSTANCE"]
