"""
Extractor Module - Black Box Interface

Purpose: Read credentials from inbound requests
Interface: extract(context) -> Credentials | None
Hidden: Header formats, parameter names, encoding

Any CredentialsExtractor implementation can replace these.
"""

from .token import HeaderExtractor, ParameterExtractor
from .username_password import BasicAuthExtractor, FormExtractor

__all__ = ["BasicAuthExtractor", "FormExtractor", "HeaderExtractor", "ParameterExtractor"]
