"""
OIDC authorization redirect builder.

Sends the user to the provider's authorization endpoint. The endpoint is
discovered once, on first use, from the issuer's discovery document.
"""

import logging
import secrets
from typing import Optional
from urllib.parse import urljoin

import httpx

from ..core import ConfigurationError, InitializableWebObject, RedirectAction, RedirectActionBuilder, WebContext
from ...config.provider import OIDCConfig
from .builders import add_query_parameters

logger = logging.getLogger(__name__)

OIDC_STATE_ATTRIBUTE = "relaygate.oidc.state"


class OidcRedirectActionBuilder(RedirectActionBuilder, InitializableWebObject):
    """
    Builds authorization-code redirects for an OIDC provider.

    This class is a black box that:
    - Discovers the authorization endpoint (once)
    - Generates and stores the state value in the session (checked on the
      callback by verify_state)
    - Builds the authorization URL
    """

    def __init__(
        self,
        config: OIDCConfig,
        callback_url: str,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 5.0
    ):
        """
        Initialize OIDC redirect builder with injected config.

        Args:
            config: OIDC configuration object
            callback_url: Where the provider sends the user back to
            http_client: Optional HTTP client (tests inject a mock transport)
            timeout: Discovery request timeout in seconds
        """
        InitializableWebObject.__init__(self)
        self.config = config
        self.callback_url = callback_url
        self.http_client = http_client
        self.timeout = timeout
        self.authorization_endpoint = config.authorization_endpoint

    def internal_init(self, context: WebContext) -> None:
        if self.authorization_endpoint:
            return
        if not self.config.issuer:
            raise ConfigurationError.missing("issuer")

        document = self.discover_configuration()
        endpoint = document.get("authorization_endpoint")
        if not endpoint:
            raise ConfigurationError(
                f"Discovery document of {self.config.issuer} has no authorization_endpoint",
                field="authorization_endpoint"
            )
        self.authorization_endpoint = endpoint
        logger.info(f"Discovered OIDC authorization endpoint: {endpoint}")

    def discover_configuration(self) -> dict:
        """
        Discover OIDC configuration from provider.

        Returns:
            OpenID Connect discovery document

        Raises:
            ConfigurationError: Provider unreachable or answered with an error
        """
        discovery_url = urljoin(self.config.issuer.rstrip("/") + "/", ".well-known/openid-configuration")

        client = self.http_client or httpx.Client(timeout=self.timeout)
        try:
            response = client.get(discovery_url)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ConfigurationError(f"OIDC discovery failed for {discovery_url}: {e}") from e
        finally:
            if self.http_client is None:
                client.close()

    def redirect(self, context: WebContext) -> RedirectAction:
        state = secrets.token_urlsafe(16)
        context.set_session_attribute(OIDC_STATE_ATTRIBUTE, state)

        return RedirectAction.redirect(add_query_parameters(
            self.authorization_endpoint,
            response_type="code",
            client_id=self.config.client_id,
            redirect_uri=self.callback_url,
            scope=" ".join(self.config.scopes),
            state=state
        ))

    def __repr__(self) -> str:
        return f"OidcRedirectActionBuilder(issuer={self.config.issuer!r}, client_id={self.config.client_id!r})"


def verify_state(context: WebContext) -> bool:
    """
    Check the callback's state parameter against the one stored by redirect().

    Call this from the callback handler before authenticating. The stored
    state is single use: it is cleared whatever the outcome.

    Args:
        context: Context of the callback request

    Returns:
        True when both values are present and equal
    """
    expected = context.get_session_attribute(OIDC_STATE_ATTRIBUTE)
    received = context.get_request_parameter("state")
    context.set_session_attribute(OIDC_STATE_ATTRIBUTE, None)
    if not expected or not received:
        logger.warning("OIDC callback without a stored or received state")
        return False
    return secrets.compare_digest(expected, received)
