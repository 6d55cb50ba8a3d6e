"""
Error taxonomy for Decree transcripts.

Every failure raised by this package derives from `DecreeError`, which carries
a machine-stable `code`, a human `message` and an optional `data` dict of
small contextual fields (labels, lengths). None of these errors are
retryable: they signal a mismatch between the calling protocol and the
stage specification it declared, so the caller should stop building the
transcript for that stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class DecreeErrorCode(str, Enum):
    """Stable error codes."""

    # Stage specification
    SPEC = "DECREE/SPEC"

    # Inputs
    UNSPECIFIED_INPUT = "DECREE/UNSPECIFIED_INPUT"
    DUPLICATE_INPUT = "DECREE/DUPLICATE_INPUT"
    STAGE_CLOSED = "DECREE/STAGE_CLOSED"

    # Challenges
    INCOMPLETE_INPUTS = "DECREE/INCOMPLETE_INPUTS"
    UNSPECIFIED_CHALLENGE = "DECREE/UNSPECIFIED_CHALLENGE"
    STAGE_COMPLETE = "DECREE/STAGE_COMPLETE"
    CHALLENGE_LENGTH = "DECREE/CHALLENGE_LENGTH"

    # Continuation
    STAGE_INCOMPLETE = "DECREE/STAGE_INCOMPLETE"

    # Canonicalization
    CONTEXT = "DECREE/CONTEXT"
    SERIALIZATION = "DECREE/SERIALIZATION"

    # Environment
    CONFIG = "DECREE/CONFIG"


@dataclass(eq=False)
class DecreeError(Exception):
    """
    Root error for Decree transcripts.

    Attributes:
        code: Machine-stable error code (see DecreeErrorCode)
        message: Human hint suitable for logs
        data: Small JSON-friendly dict of contextual fields
    """

    message: str = "decree error"
    data: Dict[str, Any] = field(default_factory=dict)
    code: str = DecreeErrorCode.SPEC.value

    retryable = False

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe shape for logs."""
        return {
            "code": self.code,
            "message": self.message,
            "data": dict(self.data),
            "retryable": self.retryable,
        }


@dataclass(eq=False)
class SpecError(DecreeError):
    """Stage specification is malformed (duplicate, empty or non-string labels)."""

    code: str = DecreeErrorCode.SPEC.value


@dataclass(eq=False)
class UnspecifiedInput(DecreeError):
    """Input label is not part of the current stage."""

    code: str = DecreeErrorCode.UNSPECIFIED_INPUT.value


@dataclass(eq=False)
class DuplicateInput(DecreeError):
    """Input label was already supplied in the current stage."""

    code: str = DecreeErrorCode.DUPLICATE_INPUT.value


@dataclass(eq=False)
class StageClosed(DecreeError):
    """Inputs were already committed to the transcript for this stage."""

    code: str = DecreeErrorCode.STAGE_CLOSED.value


@dataclass(eq=False)
class IncompleteInputs(DecreeError):
    """Challenge requested before every input of the stage was supplied."""

    code: str = DecreeErrorCode.INCOMPLETE_INPUTS.value


@dataclass(eq=False)
class UnspecifiedChallenge(DecreeError):
    """Challenge label is not the next challenge of the stage."""

    code: str = DecreeErrorCode.UNSPECIFIED_CHALLENGE.value


@dataclass(eq=False)
class StageComplete(DecreeError):
    """Every challenge of the stage was already drawn."""

    code: str = DecreeErrorCode.STAGE_COMPLETE.value


@dataclass(eq=False)
class ChallengeLengthError(DecreeError):
    code: str = DecreeErrorCode.CHALLENGE_LENGTH.value


@dataclass(eq=False)
class StageIncomplete(DecreeError):
    """Cannot continue until every challenge of the stage is drawn."""

    code: str = DecreeErrorCode.STAGE_INCOMPLETE.value


@dataclass(eq=False)
class ContextError(DecreeError):
    """An additional-context function failed or returned something other than bytes."""

    code: str = DecreeErrorCode.CONTEXT.value


@dataclass(eq=False)
class SerializationError(DecreeError):
    code: str = DecreeErrorCode.SERIALIZATION.value


@dataclass(eq=False)
class ConfigError(DecreeError):
    code: str = DecreeErrorCode.CONFIG.value


__all__ = [
    "DecreeErrorCode",
    "DecreeError",
    "SpecError",
    "UnspecifiedInput",
    "DuplicateInput",
    "StageClosed",
    "IncompleteInputs",
    "UnspecifiedChallenge",
    "StageComplete",
    "ChallengeLengthError",
    "StageIncomplete",
    "ContextError",
    "SerializationError",
    "ConfigError",
]
