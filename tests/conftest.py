"""
Shared pytest fixtures for Relaygate tests.

This module provides common fixtures including:
- Recording collaborators that count calls and return canned results
- Mock web contexts for callback and login requests
- A client wired with the recording collaborators
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Any, List, Optional

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from relaygate.modules.client import IndirectClient
from relaygate.modules.core import (
    Authenticator,
    Credentials,
    CredentialsExtractor,
    InitializableWebObject,
    Profile,
    ProfileCreator,
    RedirectAction,
    RedirectActionBuilder,
    TokenCredentials,
)
from relaygate.modules.web import MockWebContext


# =============================================================================
# Recording Collaborators
# =============================================================================

@dataclass
class CallLog:
    """Calls received by a recording collaborator."""
    contexts: List[Any] = field(default_factory=list)
    credentials: List[Any] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.contexts)


class RecordingRedirectBuilder(RedirectActionBuilder):
    """Redirects to a fixed URL, or raises a configured exception."""

    def __init__(self, location: str = "https://idp.example.com/login", raises: Optional[Exception] = None):
        self.location = location
        self.raises = raises
        self.calls = CallLog()

    def redirect(self, context):
        self.calls.contexts.append(context)
        if self.raises is not None:
            raise self.raises
        return RedirectAction.redirect(self.location)


class RecordingExtractor(CredentialsExtractor):
    """Returns canned credentials (None by default), or raises."""

    def __init__(self, credentials: Optional[Credentials] = None, raises: Optional[Exception] = None):
        self.credentials = credentials
        self.raises = raises
        self.calls = CallLog()

    def extract(self, context):
        self.calls.contexts.append(context)
        if self.raises is not None:
            raise self.raises
        return self.credentials


class RecordingAuthenticator(Authenticator):
    """Attaches a profile with the given id, or raises."""

    def __init__(self, profile_id: str = "user-1", raises: Optional[Exception] = None):
        self.profile_id = profile_id
        self.raises = raises
        self.calls = CallLog()

    def validate(self, credentials, context):
        self.calls.contexts.append(context)
        self.calls.credentials.append(credentials)
        if self.raises is not None:
            raise self.raises
        credentials.user_profile = Profile(id=self.profile_id)


class RecordingProfileCreator(ProfileCreator):
    """Returns a fixed profile (which may be None)."""

    def __init__(self, profile: Optional[Profile] = None):
        self.profile = profile
        self.calls = CallLog()

    def create(self, credentials, context):
        self.calls.contexts.append(context)
        self.calls.credentials.append(credentials)
        return self.profile


class InitializableExtractor(RecordingExtractor, InitializableWebObject):
    """Extractor that records one-time initialization."""

    def __init__(self, credentials: Optional[Credentials] = None):
        RecordingExtractor.__init__(self, credentials)
        InitializableWebObject.__init__(self)
        self.init_contexts: List[Any] = []

    def internal_init(self, context):
        self.init_contexts.append(context)


class InitializableAuthenticator(RecordingAuthenticator, InitializableWebObject):
    """Authenticator that records one-time initialization."""

    def __init__(self, profile_id: str = "user-1"):
        RecordingAuthenticator.__init__(self, profile_id)
        InitializableWebObject.__init__(self)
        self.init_contexts: List[Any] = []

    def internal_init(self, context):
        self.init_contexts.append(context)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def context():
    """Empty GET request context."""
    return MockWebContext()


@pytest.fixture
def callback_context():
    """Callback request carrying token=abc123."""
    return MockWebContext(url="http://localhost/callback").add_request_parameters(token="abc123")


@pytest.fixture
def redirect_builder():
    return RecordingRedirectBuilder()


@pytest.fixture
def extractor():
    return RecordingExtractor(TokenCredentials("abc123"))


@pytest.fixture
def authenticator():
    return RecordingAuthenticator()


@pytest.fixture
def recording_client(redirect_builder, extractor, authenticator):
    """Client wired with recording collaborators and the default profile creator."""
    return IndirectClient(
        name="RecordingClient",
        redirect_action_builder=redirect_builder,
        credentials_extractor=extractor,
        authenticator=authenticator
    )


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests running the pipeline behind a FastAPI app"
    )
