"""
Redirect Module - Black Box Interface

Purpose: Tell the web layer where to send the user to log in
Interface: redirect(context) -> RedirectAction, verify_state(context)
Hidden: URL construction, provider discovery, form markup
"""

from .builders import FormRedirectActionBuilder, UrlRedirectActionBuilder
from .oidc import OIDC_STATE_ATTRIBUTE, OidcRedirectActionBuilder, verify_state

__all__ = [
    "FormRedirectActionBuilder",
    "OIDC_STATE_ATTRIBUTE",
    "OidcRedirectActionBuilder",
    "UrlRedirectActionBuilder",
    "verify_state",
]
