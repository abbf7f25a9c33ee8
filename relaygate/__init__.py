"""
Relaygate - Indirect Authentication Pipeline

Authenticates users through a browser redirect to a credential source and
back, then turns the returned credentials into a profile.

Architecture:
- Each module is self-contained with clear interfaces
- Collaborators are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- core: Credentials, profiles, redirect actions, errors and interfaces
- client: Indirect client orchestrator and composition root
- extractor: Credentials extraction from requests
- authenticator: Credentials validation
- redirect: Redirect action builders
- profile: Profile creation from validated credentials
- web: Web context implementations
"""

__version__ = "1.0.0"
