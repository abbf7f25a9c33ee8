"""
Tests for the indirect client pipeline.

Covers initialization, first-write-wins configuration, error-to-outcome
mapping of each stage, and the capability guards.
"""

import logging
import threading

import pytest

from conftest import (
    InitializableAuthenticator,
    InitializableExtractor,
    RecordingAuthenticator,
    RecordingExtractor,
    RecordingProfileCreator,
    RecordingRedirectBuilder,
)
from relaygate.modules.authenticator import (
    CachingAuthenticator,
    SimpleTestTokenAuthenticator,
    SimpleTestUsernamePasswordAuthenticator,
)
from relaygate.modules.client import (
    ClientConfig,
    ClientFactory,
    FailureKind,
    IndirectClient,
    IndirectTokenClient,
    IndirectUsernamePasswordClient,
    Outcome,
)
from relaygate.modules.core import (
    ConfigurationError,
    CredentialsError,
    HttpAction,
    Profile,
    RedirectAction,
    TokenAuthenticator,
    TokenCredentials,
    TokenExtractor,
)
from relaygate.modules.extractor import FormExtractor, ParameterExtractor
from relaygate.modules.profile import INSTANCE as DEFAULT_PROFILE_CREATOR
from relaygate.modules.web import MockWebContext

COLLABORATOR_NAMES = [
    "redirect_action_builder",
    "credentials_extractor",
    "authenticator",
    "profile_creator",
]


def make_collaborators():
    return {
        "redirect_action_builder": RecordingRedirectBuilder(),
        "credentials_extractor": RecordingExtractor(TokenCredentials("abc123")),
        "authenticator": RecordingAuthenticator(),
        "profile_creator": RecordingProfileCreator(Profile(id="p")),
    }


# =============================================================================
# Initialization
# =============================================================================

def test_initialize_succeeds_once(recording_client, context):
    """Test initialize marks the client initialized and a second call is a no-op."""
    recording_client.initialize(context)
    assert recording_client.initialized is True

    recording_client.initialize(MockWebContext())
    assert recording_client.initialized is True


@pytest.mark.parametrize("missing", COLLABORATOR_NAMES)
def test_initialize_fails_naming_missing_collaborator(missing, context):
    """Test a missing collaborator fails initialization with its name."""
    collaborators = make_collaborators()
    client = IndirectClient(name="Broken", **{k: v for k, v in collaborators.items() if k != missing})
    if missing == "profile_creator":
        # The default creator is always present unless removed explicitly
        client.config.profile_creator = None

    with pytest.raises(ConfigurationError) as exc_info:
        client.initialize(context)

    assert exc_info.value.field == missing
    assert missing in str(exc_info.value)
    assert client.initialized is False


def test_initialize_retry_after_fixing_configuration(context):
    """Test a failed initialization can be retried once the client is complete."""
    client = IndirectClient(
        redirect_action_builder=RecordingRedirectBuilder(),
        credentials_extractor=RecordingExtractor()
    )
    with pytest.raises(ConfigurationError):
        client.initialize(context)

    client.set_authenticator(RecordingAuthenticator())
    client.initialize(context)

    assert client.initialized is True


def test_initialize_runs_initializable_collaborators_with_same_context(context):
    """Test initializable collaborators get init() with the triggering context."""
    extractor = InitializableExtractor()
    authenticator = InitializableAuthenticator()
    client = IndirectClient(
        redirect_action_builder=RecordingRedirectBuilder(),
        credentials_extractor=extractor,
        authenticator=authenticator
    )

    client.initialize(context)
    client.initialize(MockWebContext())

    assert extractor.init_contexts == [context]
    assert authenticator.init_contexts == [context]
    assert extractor.initialized and authenticator.initialized


def test_shared_initializable_collaborator_initialized_once(context):
    """Test a collaborator shared by two clients is initialized only once."""
    authenticator = InitializableAuthenticator()
    first = ClientFactory.build_for_testing(authenticator=authenticator, name="first")
    second = ClientFactory.build_for_testing(authenticator=authenticator, name="second")

    first.initialize(context)
    second.initialize(MockWebContext())

    assert authenticator.init_contexts == [context]


def test_concurrent_initialize_runs_once(context):
    """Test racing first requests initialize collaborators exactly once."""
    extractor = InitializableExtractor()
    client = ClientFactory.build_for_testing(credentials_extractor=extractor)
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        client.initialize(context)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(extractor.init_contexts) == 1


def test_pipeline_methods_initialize_lazily(context):
    """Test the first pipeline call initializes the client."""
    extractor = InitializableExtractor()
    client = ClientFactory.build_for_testing(credentials_extractor=extractor)

    assert client.retrieve_credentials(context) is None

    assert client.initialized is True
    assert extractor.init_contexts == [context]


def test_pipeline_on_incomplete_client_raises_configuration_error(context):
    """Test using an incomplete client is a configuration error, not an auth failure."""
    client = IndirectClient(credentials_extractor=RecordingExtractor())

    with pytest.raises(ConfigurationError):
        client.retrieve_credentials(context)


# =============================================================================
# First-write-wins configuration
# =============================================================================

def test_setters_keep_first_value():
    """Test calling a setter twice leaves the first value in effect."""
    first, second = make_collaborators(), make_collaborators()
    client = IndirectClient()

    for name in COLLABORATOR_NAMES:
        getattr(client, f"set_{name}")(first[name])
        getattr(client, f"set_{name}")(second[name])

    for name in COLLABORATOR_NAMES:
        assert getattr(client, name) is first[name]


def test_default_profile_creator_replaced_once():
    """Test the default profile creator is a placeholder replaced by the first set."""
    client = IndirectClient()
    assert client.profile_creator is DEFAULT_PROFILE_CREATOR

    creator = RecordingProfileCreator()
    client.set_profile_creator(creator)
    client.set_profile_creator(RecordingProfileCreator())

    assert client.profile_creator is creator


def test_setter_with_none_does_not_block_later_value():
    """Test setting None leaves the slot open."""
    client = IndirectClient()
    authenticator = RecordingAuthenticator()

    client.set_authenticator(None)
    client.set_authenticator(authenticator)

    assert client.authenticator is authenticator


def test_from_config():
    """Test building a client from a configuration struct."""
    collaborators = make_collaborators()
    config = ClientConfig(name="FromConfig", **collaborators)

    client = IndirectTokenClient.from_config(config)

    assert isinstance(client, IndirectTokenClient)
    assert client.name == "FromConfig"
    assert client.authenticator is collaborators["authenticator"]


def test_name_defaults_to_class_name():
    assert IndirectTokenClient().name == "IndirectTokenClient"


# =============================================================================
# Redirect
# =============================================================================

def test_build_redirect_action_delegates(recording_client, redirect_builder, context):
    """Test the redirect action comes from the builder."""
    action = recording_client.build_redirect_action(context)

    assert action == RedirectAction.redirect("https://idp.example.com/login")
    assert redirect_builder.calls.contexts == [context]


def test_build_redirect_action_propagates_http_action(context):
    """Test control-flow signals from the builder propagate unchanged."""
    signal = HttpAction.forbidden()
    client = ClientFactory.build_for_testing(redirect_action_builder=RecordingRedirectBuilder(raises=signal))

    with pytest.raises(HttpAction) as exc_info:
        client.build_redirect_action(context)

    assert exc_info.value is signal


def test_redirect_result_writes_context(recording_client, context):
    """Test redirect() returns REDIRECT_NOW and writes the 302 to the context."""
    result = recording_client.redirect(context)

    assert result.outcome == Outcome.REDIRECT_NOW
    assert result.action.code == 302
    assert result.action.location == "https://idp.example.com/login"
    assert context.response_status == 302
    assert context.response_headers["Location"] == "https://idp.example.com/login"


def test_redirect_result_from_builder_signal(context):
    """Test a builder signal becomes a REDIRECT_NOW result."""
    signal = HttpAction.ok("already logged in")
    client = ClientFactory.build_for_testing(redirect_action_builder=RecordingRedirectBuilder(raises=signal))

    result = client.redirect(context)

    assert result.outcome == Outcome.REDIRECT_NOW
    assert result.action is signal


# =============================================================================
# Credentials retrieval
# =============================================================================

def test_no_credentials_skips_authenticator(context):
    """Test extractor returning None means the authenticator is never called."""
    authenticator = RecordingAuthenticator()
    client = ClientFactory.build_for_testing(
        credentials_extractor=RecordingExtractor(None),
        authenticator=authenticator
    )

    assert client.retrieve_credentials(context) is None
    assert authenticator.calls.count == 0


def test_credentials_error_becomes_none(context, caplog):
    """Test a CredentialsError from the authenticator is logged and converted to None."""
    client = ClientFactory.build_for_testing(
        credentials_extractor=RecordingExtractor(TokenCredentials("bad")),
        authenticator=RecordingAuthenticator(raises=CredentialsError("bad password"))
    )

    with caplog.at_level(logging.ERROR, logger="relaygate"):
        assert client.retrieve_credentials(context) is None

    assert "bad password" in caplog.text


def test_extractor_credentials_error_becomes_none(context):
    """Test a CredentialsError from the extractor is converted to None too."""
    client = ClientFactory.build_for_testing(
        credentials_extractor=RecordingExtractor(raises=CredentialsError("malformed"))
    )

    assert client.retrieve_credentials(context) is None


def test_valid_credentials_returned_same_object(context):
    """Test successful validation returns the extracted object, now carrying the profile."""
    credentials = TokenCredentials("abc123")
    client = ClientFactory.build_for_testing(
        credentials_extractor=RecordingExtractor(credentials),
        authenticator=RecordingAuthenticator("user-42")
    )

    result = client.retrieve_credentials(context)

    assert result is credentials
    assert result.user_profile.id == "user-42"


def test_http_action_from_authenticator_propagates(context):
    """Test a control-flow signal raised during validation is not swallowed."""
    signal = HttpAction.redirect("https://idp.example.com/step-up")
    client = ClientFactory.build_for_testing(
        credentials_extractor=RecordingExtractor(TokenCredentials("abc123")),
        authenticator=RecordingAuthenticator(raises=signal)
    )

    with pytest.raises(HttpAction) as exc_info:
        client.retrieve_credentials(context)

    assert exc_info.value is signal


def test_unexpected_error_propagates(context):
    """Test errors outside the taxonomy reach the caller."""
    client = ClientFactory.build_for_testing(
        credentials_extractor=RecordingExtractor(TokenCredentials("abc123")),
        authenticator=RecordingAuthenticator(raises=RuntimeError("password store down"))
    )

    with pytest.raises(RuntimeError, match="password store down"):
        client.retrieve_credentials(context)


# =============================================================================
# Scenarios with the stub token authenticator
# =============================================================================

def test_scenario_extractor_returns_none():
    client = ClientFactory.build_for_testing()

    assert client.retrieve_credentials(MockWebContext()) is None


def test_scenario_blank_token(caplog):
    """Test a blank token is rejected and logged."""
    client = ClientFactory.build_for_testing()
    context = MockWebContext().add_request_parameters(token="   ")

    with caplog.at_level(logging.ERROR, logger="relaygate"):
        assert client.retrieve_credentials(context) is None

    assert "token must not be blank" in caplog.text


def test_scenario_valid_token(callback_context):
    """Test token abc123 yields a profile with id abc123."""
    client = ClientFactory.build_for_testing()

    credentials = client.retrieve_credentials(callback_context)

    assert credentials.user_profile.id == "abc123"
    profile = client.retrieve_profile(credentials, callback_context)
    assert profile.id == "abc123"


def test_retrieve_profile_returns_creator_result(context):
    """Test retrieve_profile does not re-validate and returns whatever the creator gives."""
    authenticator = RecordingAuthenticator()
    creator = RecordingProfileCreator(None)
    client = ClientFactory.build_for_testing(authenticator=authenticator, profile_creator=creator)
    credentials = TokenCredentials("abc123")

    assert client.retrieve_profile(credentials, context) is None
    assert creator.calls.credentials == [credentials]
    assert authenticator.calls.count == 0


# =============================================================================
# authenticate() results
# =============================================================================

def test_authenticate_value(callback_context):
    result = ClientFactory.build_for_testing().authenticate(callback_context)

    assert result.ok
    assert result.outcome == Outcome.VALUE
    assert result.value.id == "abc123"


def test_authenticate_no_credentials(context):
    result = ClientFactory.build_for_testing().authenticate(context)

    assert result.outcome == Outcome.FAILED
    assert result.failure == FailureKind.NO_CREDENTIALS


def test_authenticate_invalid_looks_like_absent():
    """Test invalid credentials produce the same result as absent ones."""
    client = ClientFactory.build_for_testing()

    invalid = client.authenticate(MockWebContext().add_request_parameters(token=""))
    absent = client.authenticate(MockWebContext())

    assert invalid == absent


def test_authenticate_no_profile(callback_context):
    client = ClientFactory.build_for_testing(profile_creator=RecordingProfileCreator(None))

    result = client.authenticate(callback_context)

    assert result.failure == FailureKind.NO_PROFILE


def test_authenticate_redirect_now(callback_context):
    """Test a mid-pipeline signal becomes REDIRECT_NOW."""
    signal = HttpAction.unauthorized("relaygate")
    client = ClientFactory.build_for_testing(credentials_extractor=RecordingExtractor(raises=signal))

    result = client.authenticate(callback_context)

    assert result.outcome == Outcome.REDIRECT_NOW
    assert result.action is signal


# =============================================================================
# Capability guards
# =============================================================================

def test_token_authenticator_compatible():
    """Test the stub token authenticator satisfies TokenAuthenticator."""
    client = ClientFactory.build_for_testing(authenticator=SimpleTestTokenAuthenticator())

    client.assert_authenticator_compatible(TokenAuthenticator)


def test_non_token_authenticator_rejected():
    """Test a username/password authenticator fails the TokenAuthenticator guard."""
    client = ClientFactory.build_for_testing(authenticator=SimpleTestUsernamePasswordAuthenticator())

    with pytest.raises(ConfigurationError, match="SimpleTestUsernamePasswordAuthenticator"):
        client.assert_authenticator_compatible(TokenAuthenticator)


def test_guard_unwraps_caching_delegates():
    """Test the guard inspects the innermost delegate of nested wrappers."""
    wrapped = CachingAuthenticator(CachingAuthenticator(SimpleTestTokenAuthenticator()))
    client = ClientFactory.build_for_testing(authenticator=wrapped)

    client.assert_authenticator_compatible(TokenAuthenticator)

    rejected = ClientFactory.build_for_testing(
        authenticator=CachingAuthenticator(SimpleTestUsernamePasswordAuthenticator())
    )
    with pytest.raises(ConfigurationError):
        rejected.assert_authenticator_compatible(TokenAuthenticator)


def test_guard_with_missing_authenticator_fails():
    """Test the guard fails for a missing authenticator instead of passing silently."""
    client = IndirectClient(credentials_extractor=ParameterExtractor())

    with pytest.raises(ConfigurationError) as exc_info:
        client.assert_authenticator_compatible(TokenAuthenticator)

    assert exc_info.value.field == "authenticator"


def test_extractor_guard():
    """Test the extractor guard checks the extractor, not the authenticator."""
    client = IndirectClient(credentials_extractor=FormExtractor())

    with pytest.raises(ConfigurationError, match="Unsupported credentials extractor type: FormExtractor"):
        client.assert_extractor_compatible(TokenExtractor)

    IndirectClient(credentials_extractor=ParameterExtractor()).assert_extractor_compatible(TokenExtractor)


def test_guard_without_requirement_accepts_anything():
    IndirectClient().assert_authenticator_compatible(None)
    IndirectClient().assert_extractor_compatible(None)


def test_typed_client_rejects_mismatch_at_initialize(context):
    """Test a token client paired with a username/password authenticator fails setup."""
    client = IndirectTokenClient(
        redirect_action_builder=RecordingRedirectBuilder(),
        credentials_extractor=ParameterExtractor(),
        authenticator=SimpleTestUsernamePasswordAuthenticator()
    )

    with pytest.raises(ConfigurationError, match="Unsupported authenticator type"):
        client.initialize(context)


def test_username_password_client_rejects_token_extractor(context):
    client = IndirectUsernamePasswordClient(
        redirect_action_builder=RecordingRedirectBuilder(),
        credentials_extractor=ParameterExtractor(),
        authenticator=SimpleTestUsernamePasswordAuthenticator()
    )

    with pytest.raises(ConfigurationError, match="Unsupported credentials extractor type: ParameterExtractor"):
        client.initialize(context)


def test_username_password_client_flow():
    """Test the form client end to end with the stub username/password authenticator."""
    client = IndirectUsernamePasswordClient(
        redirect_action_builder=RecordingRedirectBuilder(),
        credentials_extractor=FormExtractor(),
        authenticator=SimpleTestUsernamePasswordAuthenticator()
    )
    context = MockWebContext(method="POST").add_request_parameters(username="alice", password="alice")

    result = client.authenticate(context)

    assert result.value.id == "alice"
    assert result.value.get_attribute("username") == "alice"
