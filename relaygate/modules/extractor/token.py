"""Token credentials extractors (headers and request parameters)."""

import logging
from typing import Iterable, Optional

from ..core import CredentialsError, TokenCredentials, TokenExtractor, WebContext

logger = logging.getLogger(__name__)


class HeaderExtractor(TokenExtractor):
    """
    Extracts a token from a request header.

    With the defaults this reads "Authorization: Bearer <token>".
    """

    def __init__(self, header_name: str = "Authorization", prefix: str = "Bearer "):
        self.header_name = header_name
        self.prefix = prefix or ""

    def extract(self, context: WebContext) -> Optional[TokenCredentials]:
        header = context.get_request_header(self.header_name)
        if header is None:
            return None

        if not header.startswith(self.prefix):
            logger.debug(f"Header {self.header_name} does not start with {self.prefix.strip()!r}")
            return None

        return TokenCredentials(header[len(self.prefix):].strip())

    def __repr__(self) -> str:
        return f"HeaderExtractor(header_name={self.header_name!r}, prefix={self.prefix!r})"


class ParameterExtractor(TokenExtractor):
    """Extracts a token from a request parameter."""

    def __init__(
        self,
        parameter_name: str = "token",
        supported_methods: Iterable[str] = ("GET", "POST")
    ):
        self.parameter_name = parameter_name
        self.supported_methods = {method.upper() for method in supported_methods}

    def extract(self, context: WebContext) -> Optional[TokenCredentials]:
        method = context.get_request_method().upper()
        if method not in self.supported_methods:
            raise CredentialsError(f"{method} requests not supported for parameter extraction")

        value = context.get_request_parameter(self.parameter_name)
        if value is None:
            return None

        return TokenCredentials(value)

    def __repr__(self) -> str:
        return f"ParameterExtractor(parameter_name={self.parameter_name!r})"
