"""Standardized pipeline outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from ..core import HttpAction

T = TypeVar("T")


class Outcome(str, Enum):
    VALUE = "value"
    REDIRECT_NOW = "redirect_now"
    FAILED = "failed"


class FailureKind(str, Enum):
    # Absent and invalid credentials are deliberately indistinguishable
    NO_CREDENTIALS = "no_credentials"
    NO_PROFILE = "no_profile"


@dataclass(frozen=True)
class PipelineResult(Generic[T]):
    """
    Result of running the pipeline for one request.

    Exactly one of value, action or failure is set, matching outcome.
    """
    outcome: Outcome
    value: Optional[T] = None
    action: Optional[HttpAction] = None
    failure: Optional[FailureKind] = None

    @classmethod
    def of(cls, value: T) -> "PipelineResult[T]":
        return cls(outcome=Outcome.VALUE, value=value)

    @classmethod
    def redirect_now(cls, action: HttpAction) -> "PipelineResult[T]":
        return cls(outcome=Outcome.REDIRECT_NOW, action=action)

    @classmethod
    def failed(cls, failure: FailureKind) -> "PipelineResult[T]":
        return cls(outcome=Outcome.FAILED, failure=failure)

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.VALUE
