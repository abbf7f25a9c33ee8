"""
Client Module - Black Box Interface

Purpose: Orchestrate redirect, extraction, validation and profile creation
Interface: initialize(), redirect(), authenticate() and the stage methods
Hidden: Collaborator wiring, initialization locking, error mapping

Collaborators are plugged in through ClientConfig or ClientFactory.
"""

from .client import (
    ClientConfig,
    IndirectClient,
    IndirectTokenClient,
    IndirectUsernamePasswordClient,
)
from .factory import ClientFactory
from .result import FailureKind, Outcome, PipelineResult

__all__ = [
    "ClientConfig",
    "ClientFactory",
    "FailureKind",
    "IndirectClient",
    "IndirectTokenClient",
    "IndirectUsernamePasswordClient",
    "Outcome",
    "PipelineResult",
]
