"""Username/password credentials extractors (HTTP Basic and login forms)."""

import base64
import binascii
import logging
from typing import Optional

from ..core import (
    CredentialsError,
    HttpAction,
    UsernamePasswordCredentials,
    UsernamePasswordExtractor,
    WebContext,
)

logger = logging.getLogger(__name__)


class BasicAuthExtractor(UsernamePasswordExtractor):
    """
    Extracts credentials from an HTTP Basic Authorization header.

    When a realm is configured, a request without the header is answered
    with a 401 challenge instead of yielding no credentials, which makes
    the browser prompt for a login.
    """

    PREFIX = "Basic "

    def __init__(self, header_name: str = "Authorization", realm: Optional[str] = None):
        self.header_name = header_name
        self.realm = realm

    def extract(self, context: WebContext) -> Optional[UsernamePasswordCredentials]:
        header = context.get_request_header(self.header_name)
        if header is None or not header.startswith(self.PREFIX):
            if self.realm:
                logger.debug(f"No basic auth header - challenging for realm {self.realm}")
                raise HttpAction.unauthorized(self.realm, context)
            return None

        encoded = header[len(self.PREFIX):].strip()
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise CredentialsError("Bad format of the basic auth header") from e

        if ":" not in decoded:
            raise CredentialsError("Bad format of the basic auth header")

        username, password = decoded.split(":", 1)
        return UsernamePasswordCredentials(username, password)


class FormExtractor(UsernamePasswordExtractor):
    """Extracts credentials posted by a login form."""

    def __init__(self, username_parameter: str = "username", password_parameter: str = "password"):
        self.username_parameter = username_parameter
        self.password_parameter = password_parameter

    def extract(self, context: WebContext) -> Optional[UsernamePasswordCredentials]:
        username = context.get_request_parameter(self.username_parameter)
        password = context.get_request_parameter(self.password_parameter)
        if username is None or password is None:
            return None

        return UsernamePasswordCredentials(username, password)
