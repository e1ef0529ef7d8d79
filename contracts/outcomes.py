"""Tagged results passed between pipeline stages.

A stage returns ``Ok(value)`` or ``Err(PipelineFailure)`` instead of raising,
so invocation fallback and cascade exhaustion are explicit states the
orchestrator branches on. Callers that prefer exceptions use ``unwrap()``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from errors import DocumentUnreadable, MalformedOutput, ModelInvocationFailure, ScheduleForgeError

T = TypeVar("T")


class FailureKind(str, Enum):
    """Why a stage could not produce its value."""
    DOCUMENT_UNREADABLE = "document_unreadable"
    MODEL_INVOCATION_FAILURE = "model_invocation_failure"
    MALFORMED_OUTPUT = "malformed_output"


@dataclass(frozen=True)
class PipelineFailure:
    kind: FailureKind
    message: str
    # Document path for DOCUMENT_UNREADABLE, cause for the other kinds
    detail: Optional[str] = None

    def to_exception(self) -> ScheduleForgeError:
        if self.kind == FailureKind.DOCUMENT_UNREADABLE:
            return DocumentUnreadable(self.detail or "<unknown>", self.message)
        if self.kind == FailureKind.MODEL_INVOCATION_FAILURE:
            return ModelInvocationFailure(self.message)
        return MalformedOutput(self.message)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    failure: PipelineFailure

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def kind(self) -> FailureKind:
        return self.failure.kind

    def unwrap(self):
        """Raise the ScheduleForgeError matching the failure kind."""
        raise self.failure.to_exception()


Result = Union[Ok[T], Err]
